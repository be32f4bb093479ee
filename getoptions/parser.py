"""
getoptions parser: the public entry points and the two stages that follow the scanner.

What this module provides
- getopt(tokens, settings): parse everything and return a ParseResult.
- parse(tokens, settings): the lazy form; returns a Dispatcher to pull
  occurrences from one at a time.
- Dispatcher: wraps a Scanner, invokes per-option callbacks in emission order
  and routes any raised error through settings.error before it propagates.
- aggregate(occurrences): the Result Aggregator building a ParseResult.
- ParseResult: sequence, options and parameters views of one parse.

Flow
    tokens -> Scanner (Registry) -> Dispatcher (callbacks) -> aggregate -> ParseResult
                                                                 -> settings.callback(result)

Quick start
    from getoptions import getopt

    result = getopt(["-v", "--output=report.txt", "input.txt"], {
        "options": [
            {"short": "v", "long": "verbose"},
            {"short": "o", "long": "output", "argument": "required"},
        ]
    })
    result.options["output"].value   # "report.txt"
    result.parameters[0].value       # "input.txt"
"""
import copy
from collections.abc import Iterable
from types import MappingProxyType

from .events import OptionOccurrence, PositionalOccurrence
from .options import normalize
from .registry import Registry
from .scanner import Scanner
from .utils import *


def _sanitize_tokens(tokens, /):
    """
    Validate the argument list and freeze it into a tuple of strings.

    Raises
    - TypeError: when tokens is not an iterable of strings (a lone string is
      rejected as well, it would otherwise be split into characters).
    """
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError("getopt() argument must be an iterable of strings")
    tokens = tuple(tokens)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("getopt() argument must be an iterable of strings")
    return tokens


class Dispatcher:
    """
    Occurrence Callback Dispatcher.

    Iterates over the scanner's events and, for every OptionOccurrence whose
    option declares a callback, calls callback(occurrence, tokens, settings)
    before handing the occurrence on. Exceptions are not contained: the error
    hook (settings.error) observes them, then they propagate unchanged. A
    StopIteration escaping a callback is turned into a RuntimeError, so it
    cannot end the parse early.

    - tokens: the original tokens, as a tuple.
    - settings: the normalized Settings.
    - registry: the Registry built for this parse.
    """

    def __init__(self, tokens, settings, registry, /):
        self.tokens = tokens
        self.settings = settings
        self.registry = registry
        self._scanner = Scanner(tokens, registry)

    def __iter__(self):
        return self

    def __next__(self):
        try:
            occurrence = next(self._scanner)
        except StopIteration:
            raise
        except Exception as error:
            self._report(error)
            raise

        if isinstance(occurrence, OptionOccurrence) and occurrence.option.callback is not None:
            try:
                try:
                    occurrence.option.callback(occurrence, self.tokens, self.settings)
                except StopIteration as error:
                    # would otherwise read as the end of the occurrences
                    raise RuntimeError("option callback raised StopIteration") from error
            except Exception as error:
                self._report(error)
                raise

        return occurrence

    def _report(self, error):
        if self.settings.error is not None:
            self.settings.error(error)


class ParseResult(metaclass=IntrospectableType):
    """
    Structured result of one parse.

    - sequence: every occurrence (options and positionals interleaved) in the
      order they were produced.
    - options: mapping from every key of every matched option (its name, short
      and long forms) to its occurrence. When an option matched several times,
      the stored occurrence carries the list of all its values, in order.
    - parameters: positional occurrences, in order.
    """
    __introspectable__ = (
        "sequence",
        "options",
        "parameters",
    )

    def __init__(self, sequence=(), options=MappingProxyType({}), parameters=()):
        self._sequence = tuple(sequence)
        self._options = MappingProxyType(dict(options))
        self._parameters = tuple(parameters)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._sequence == other._sequence and
            dict(self._options) == dict(other._options) and
            self._parameters == other._parameters
        )

    __hash__ = None


def aggregate(occurrences, /):
    """
    Result Aggregator: drain an occurrence iterable into a ParseResult.

    Occurrences of one option are merged per option instance: the first value
    is stored as-is, a second occurrence turns it into a list, and every key of
    the option points at that same merged entry. The occurrences listed in
    sequence are never modified.
    """
    sequence = []
    parameters = []
    matches = {}

    for occurrence in occurrences:
        sequence.append(occurrence)
        if isinstance(occurrence, PositionalOccurrence):
            parameters.append(occurrence)
        else:
            matches.setdefault(id(occurrence.option), []).append(occurrence)

    options = {}
    for group in matches.values():
        first = group[0]
        if len(group) > 1:
            first = copy.replace(first, value=[occurrence.value for occurrence in group])
        for key in first.option.keys:
            options[key] = first

    return ParseResult(sequence, options, parameters)


def parse(tokens, settings=Unset, /):
    """
    Lazily parse command-line tokens.

    Settings are normalized and the registry is built right away, so
    configuration errors raise here; parse errors surface when the failing
    occurrence is pulled from the returned Dispatcher.

    Parameters
    - tokens: Iterable[str]
    - settings: Unset | None | Settings | Mapping

    Returns
    - Dispatcher: a single-pass iterator of OptionOccurrence/PositionalOccurrence.

    Raises
    - TypeError: malformed tokens or settings type.
    - ConfigurationError / DuplicateOptionError: malformed settings.
    """
    tokens = _sanitize_tokens(tokens)
    settings = normalize(settings)
    return Dispatcher(tokens, settings, Registry(settings.options))


def getopt(tokens, settings=Unset, /):
    """
    Parse command-line tokens to completion.

    Runs the scanner, the per-option callbacks and the aggregator, then calls
    settings.callback once with the result.

    Parameters
    - tokens: Iterable[str]
    - settings: Unset | None | Settings | Mapping

    Returns
    - ParseResult

    Raises
    - TypeError, ConfigurationError: see parse().
    - UnrecognizedOptionError, ArgumentNotAllowedError, MissingArgumentError:
      on the first malformed token; no partial result is returned.
    - Whatever a callback raises, unchanged.
    """
    dispatcher = parse(tokens, settings)
    settings = dispatcher.settings

    result = aggregate(dispatcher)

    if settings.callback is not None:
        try:
            settings.callback(result)
        except Exception as error:
            if settings.error is not None:
                settings.error(error)
            raise

    return result


__all__ = (
    "Dispatcher",
    "ParseResult",
    "aggregate",
    "parse",
    "getopt",
)
