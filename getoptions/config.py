"""
Settings files.

read_settings(path) loads the JSON form of the settings, e.g.

    {
        "usage": {"program": "report", "spec": "[option]... <input>"},
        "options": [
            {"short": "v", "long": "verbose", "description": "be chatty"},
            {"short": "o", "long": "output", "argument": "required"}
        ]
    }

and returns normalized Settings. Callbacks cannot be expressed in JSON; add them
programmatically when needed.
"""
import json

from .faults import ConfigurationError
from .options import normalize


def read_settings(path, /):
    """
    Read and normalize the settings stored in a JSON file.

    Raises
    - ConfigurationError: when the file cannot be read, is not valid JSON, or
      does not describe valid settings.
    """
    try:
        with open(path, encoding="utf-8") as file:
            document = json.load(file)
    except (OSError, ValueError) as error:
        raise ConfigurationError(
            "failed to read the configuration file %r" % str(path),
            hint="check that the file exists and contains a JSON object",
            path=str(path),
            reason=str(error),
        ) from error

    if not isinstance(document, dict):
        raise ConfigurationError(
            "the configuration file %r must contain a JSON object" % str(path),
            hint='start from {"options": []}',
            path=str(path),
        )

    return normalize(document)


__all__ = (
    "read_settings",
)
