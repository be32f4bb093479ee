"""
Command-line front end: python -m getoptions <settings-file> [option]... [parameter]...

Parses the remaining arguments against the options described by the JSON
settings file and prints the result as JSON. Faults are rendered to stderr and
the process exits with status 1.
"""
import sys

from rich.console import Console

from . import __title__
from .config import read_settings
from .events import OptionOccurrence
from .faults import GetoptException, trigger
from .options import Settings
from .parser import getopt
from .usage import render_usage

console = Console()


def _serialize_option(option):
    return {
        "name": option.name,
        "short": option.short,
        "long": option.long,
        "argument": str(option.argument),
        "description": option.description,
    }


def _serialize(occurrence):
    if isinstance(occurrence, OptionOccurrence):
        serialized = {
            "option": _serialize_option(occurrence.option),
            "value": occurrence.value,
            "index": occurrence.index,
        }
        if occurrence.subindex is not None:
            serialized |= {"subindex": occurrence.subindex, "sublength": occurrence.sublength}
        return serialized
    return {
        "position": occurrence.position,
        "value": occurrence.value,
        "index": occurrence.index,
    }


def serialize(result, /):
    """
    Turn a ParseResult into JSON-compatible data.
    """
    return {
        "sequence": list(map(_serialize, result.sequence)),
        "options": {key: _serialize(occurrence) for key, occurrence in result.options.items()},
        "parameters": list(map(_serialize, result.parameters)),
    }


def main(argv=None, /):
    args = list(sys.argv[1:] if argv is None else argv)

    if not args:
        console.print(render_usage(Settings(
            usage={"program": "python -m %s" % __title__, "spec": "<settings-file> [option]... [parameter]..."},
        )))
        sys.exit(0)

    try:
        settings = read_settings(args.pop(0))
        result = getopt(args, settings)
    except GetoptException as fault:
        return trigger(fault, shell=True, prog=__title__)

    console.print_json(data=serialize(result))


if __name__ == "__main__":
    main()
