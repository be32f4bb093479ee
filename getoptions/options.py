r"""
getoptions option specifications, settings and their normalization.

Overview
- Specs
  • OptionSpec: a named option with one or more short forms (matched inside
    bundles such as -abc), long forms (--name[=value]) and indexing aliases.
  • ArgumentMode: whether an option takes no argument, an optional one, or a
    required one.
  • Settings: the full parser configuration (options plus the callback and
    error hooks, plus usage-rendering hints).

- Decorator
  • @option(...): build an OptionSpec bound to an occurrence callback.

- Normalization
  • normalize(settings): accepts None/Unset, a Settings instance, or the
    JSON-shaped mapping form and returns a Settings instance. Every field is
    sanitized exactly once, here; the scanner never re-inspects value shapes.

Metadata (sanitized on construction)
- name/short/long: a string or an iterable of strings, normalized to a tuple.
  Elements must be non-empty strings; duplicates inside a field are rejected;
  long forms cannot contain '='.
- at least one short or long form is required.
- argument: bool | None | "none" | "optional" | "required" | ArgumentMode.
  optional=True turns a boolean argument=True into "optional".
- description: Unset | str (usage text), becomes None when Unset.
- metavar: Unset | str (usage label), defaults to "ARG".
- callback: Unset | None | callable, becomes None when not provided.

Quick example:
    >>> from getoptions import OptionSpec, Settings, option
    >>> verbose = OptionSpec(short="v", long="verbose")
    >>> @option(short="o", long="output", argument="required")
    ... def on_output(occurrence, tokens, settings): ...
    >>> settings = Settings(options=[verbose, on_output])
"""
from collections.abc import Iterable, Mapping
from enum import StrEnum
from types import MappingProxyType

from .faults import ConfigurationError
from .utils import *


class ArgumentMode(StrEnum):
    """
    argument arity of an option.

    - NONE: the option never takes a value (-v, --verbose).
    - OPTIONAL: a value may be attached (-ofile, --output=file) or follow as the
      next token when that token does not look like an option.
    - REQUIRED: a value must be attached or, for short options, follow as the
      next token.
    """
    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"


def _sanitize_forms(cls, metadata, key, /):
    """
    Internal: normalize one of the name/short/long fields into a tuple of strings.

    Raises
    - ConfigurationError: when the field is neither a string nor an iterable of
      strings, when it is empty, or when an element is empty or repeated.
    """
    object = metadata[key]
    try:
        forms = listify(object)
    except TypeError:
        raise ConfigurationError(
            f"{cls.__typename__} {key!r} must be a string or a list of strings",
            hint=f"use {key}='x' or {key}=['x', 'y']",
        ) from None

    if object is not Unset and object is not None and not forms:
        raise ConfigurationError(f"{cls.__typename__} {key!r} must not be an empty list")

    seen = []
    for form in forms:
        if not isinstance(form, str):
            raise ConfigurationError(f"{cls.__typename__} {key!r} entries must be strings")
        elif not form:
            raise ConfigurationError(f"{cls.__typename__} {key!r} entries must not be empty strings")
        elif form in seen:
            raise ConfigurationError(f"{cls.__typename__} {key!r} cannot contain duplicates ({form!r})")
        seen.append(form)

    metadata[key] = tuple(seen)


def _sanitize_argument(cls, metadata, /):
    """
    Internal: resolve argument/optional into a single ArgumentMode.
    """
    argument = metadata["argument"]
    match argument:
        case ArgumentMode():
            mode = argument
        case True:
            mode = ArgumentMode.OPTIONAL if metadata["optional"] else ArgumentMode.REQUIRED
        case False | None:
            mode = ArgumentMode.NONE
        case str() if argument in ArgumentMode:
            mode = ArgumentMode(argument)
        case _:
            raise ConfigurationError(
                f"{cls.__typename__} 'argument' must be a boolean or one of 'none', 'optional', or 'required'",
                hint="for example: argument='required'",
            )
    metadata["argument"] = mode
    del metadata["optional"]


class OptionSpec(metaclass=IntrospectableType):
    """
    Named option specification.

    Highlights
    - Several short forms ("v", "MF"), long forms ("verbose") and extra indexing
      aliases (name) may be declared; every one of them becomes a key of
      ParseResult.options.
    - Short forms may span several characters; the scanner picks the longest
      registered form at each offset of a bundle.
    - Instances are immutable and compare structurally.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "name",
        "short",
        "long",
        "argument",
        "description",
        "metavar",
        "callback",
    )
    __displayable__ = (
        "name",
        "short",
        "long",
        "argument",
    )

    def __init__(
            self,
            name=Unset,
            short=Unset,
            long=Unset,
            argument=False,
            *,
            optional=False,
            description=Unset,
            metavar=Unset,
            callback=Unset
    ):
        """
        Construct an OptionSpec with the provided metadata.

        Parameters
        - name: Unset | str | Iterable[str]
          Extra keys under which the option is indexed in the result.
        - short: Unset | str | Iterable[str]
          Short forms without the leading '-'.
        - long: Unset | str | Iterable[str]
          Long forms without the leading '--'.
        - argument: bool | None | str | ArgumentMode
          Argument arity (see ArgumentMode).
        - optional: bool
          With argument=True, makes the argument optional.
        - description, metavar: usage text only.
        - callback: Unset | None | Callable[[OptionOccurrence, tuple[str, ...], Settings], object]
          Invoked for every occurrence of the option, in parse order.

        Raises
        - ConfigurationError: on any malformed field.
        """
        cls = type(self)
        metadata = {
            "name": name,
            "short": short,
            "long": long,
            "argument": argument,
            "optional": bool(optional),
            "description": description,
            "metavar": metavar,
            "callback": callback,
        }

        for key in ("name", "short", "long"):
            _sanitize_forms(cls, metadata, key)

        if not metadata["short"] and not metadata["long"]:
            raise ConfigurationError(
                f"{cls.__typename__} must have a short or long form",
                hint="add short='x' or long='name'",
            )

        for form in metadata["long"]:
            if "=" in form:
                raise ConfigurationError(f"{cls.__typename__} long form {form!r} cannot contain '='")

        _sanitize_argument(cls, metadata)

        if not isinstance(description := metadata["description"], str | Unset):
            raise ConfigurationError(f"{cls.__typename__} 'description' must be a string")
        metadata["description"] = coalesce(description)

        if not isinstance(metavar := metadata["metavar"], str | Unset):
            raise ConfigurationError(f"{cls.__typename__} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ConfigurationError(f"{cls.__typename__} 'metavar' cannot be empty")
        metadata["metavar"] = coalesce(metavar, "ARG")

        if (callback := coalesce(metadata["callback"])) is not None and not callable(callback):
            raise ConfigurationError(f"{cls.__typename__} 'callback' must be callable")
        metadata["callback"] = callback

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def keys(self):
        """
        Every key under which an occurrence is indexed: name, short and long
        forms, in that order, without repetitions.
        """
        return tuple(dict.fromkeys(self._name + self._short + self._long))

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self):
        return hash(self._fields())

    def _fields(self):
        return tuple(getattr(self, "_" + name) for name in type(self).__introspectable__)


def option(*args, **kwargs):
    """
    Decorator/factory for defining an option bound to an occurrence callback.

    Usage
        @option(short="o", long="output", argument="required")
        def on_output(occurrence, tokens, settings): ...

    The decorated name is bound to the resulting OptionSpec, ready to be listed
    in Settings(options=[...]).

    Parameters
    - *args, **kwargs: forwarded to OptionSpec(...) (everything but callback).
    """
    if "callback" in kwargs:
        raise TypeError("@option() cannot take a 'callback' argument")

    OptionSpec(*args, **kwargs)

    @rename("option")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@option() must be applied to a callable")
        return OptionSpec(*args, **kwargs, callback=callback)

    return wrapper


_OPTION_KEYS = frozenset(("name", "short", "long", "argument", "optional", "description", "metavar", "callback"))
_SETTINGS_KEYS = frozenset(("options", "callback", "error", "first", "usage", "wrap", "version"))


def _build_option(object, index, /):
    """
    Internal: turn one settings.options entry into an OptionSpec, relabeling
    configuration errors with the entry's position.
    """
    if isinstance(object, OptionSpec):
        return object
    try:
        if not isinstance(object, Mapping):
            raise ConfigurationError("entry must be an option-spec or a mapping")
        if unknown := sorted(set(object) - _OPTION_KEYS):
            raise ConfigurationError("unknown keys %s" % ", ".join(map(repr, unknown)))
        return OptionSpec(**object)
    except ConfigurationError as error:
        raise type(error)(
            "settings.options[%d]: %s" % (index, error.message),
            **{**error.options, "index": index}
        ) from None


class Settings(metaclass=IntrospectableType):
    """
    Parser configuration.

    Only options, callback and error affect parsing; first, usage, wrap and
    version are read by the usage renderer.

    - options: tuple of OptionSpec
    - callback: None | Callable[[ParseResult], object]
      Invoked once with the final result of getopt().
    - error: None | Callable[[Exception], object]
      Observes any error raised while parsing; the error propagates afterwards.
    - first: bool
      Usage hint: show only the first form of each option.
    - usage: read-only mapping with "program" (None means the script name) and
      "spec" (the synopsis after the program name).
    - wrap: None | int
      Usage hint: maximum rendered width.
    - version: None | str
      Version of the calling program, printed by show_version.
    """

    __introspectable__ = (
        "options",
        "callback",
        "error",
        "first",
        "usage",
        "wrap",
        "version",
    )

    def __init__(self, options=(), callback=Unset, error=Unset, *, first=False, usage=Unset, wrap=Unset, version=Unset):
        cls = type(self)

        if isinstance(options, str | Mapping) or not isinstance(options, Iterable):
            raise ConfigurationError(f"{cls.__typename__} 'options' must be a list")
        self._options = tuple(_build_option(object, index) for index, object in enumerate(options))

        for key, object in (("callback", callback), ("error", error)):
            if (object := coalesce(object)) is not None and not callable(object):
                raise ConfigurationError(f"{cls.__typename__} {key!r} must be callable")
            setattr(self, "_" + key, object)

        self._first = bool(first)

        match usage:
            case UnsetType() | None:
                usage = {}
            case str():
                usage = {"spec": usage}
            case Mapping():
                if unknown := sorted(set(usage) - {"program", "spec"}):
                    raise ConfigurationError(f"{cls.__typename__} 'usage' has unknown keys %s" % ", ".join(map(repr, unknown)))
            case _:
                raise ConfigurationError(f"{cls.__typename__} 'usage' must be a string or a mapping")
        for key in ("program", "spec"):
            if not isinstance(usage.get(key), str | None):
                raise ConfigurationError(f"{cls.__typename__} 'usage.{key}' must be a string")
        self._usage = MappingProxyType({
            "program": usage.get("program"),
            "spec": usage.get("spec") or "[option]... [parameter]...",
        })

        match wrap := coalesce(wrap):
            case None:
                pass
            case bool():
                raise ConfigurationError(f"{cls.__typename__} 'wrap' must be a positive integer")
            case int() if wrap > 0:
                pass
            case _:
                raise ConfigurationError(f"{cls.__typename__} 'wrap' must be a positive integer")
        self._wrap = wrap

        if not isinstance(version := coalesce(version), str | None):
            raise ConfigurationError(f"{cls.__typename__} 'version' must be a string")
        self._version = version


def normalize(settings=Unset, /):
    """
    Settings Normalizer: fill the structural defaults before the registry is built.

    Accepts
    - Unset or None: empty settings.
    - Settings: returned unchanged (already normalized).
    - Mapping: the JSON-shaped form, e.g. {"options": [{"short": "v"}]}.

    Raises
    - TypeError: when settings is none of the above.
    - ConfigurationError: when the content is malformed.
    """
    if settings is Unset or settings is None:
        return Settings()
    if isinstance(settings, Settings):
        return settings
    if not isinstance(settings, Mapping):
        raise TypeError("normalize() argument must be a settings object or a mapping")
    if unknown := sorted(set(settings) - _SETTINGS_KEYS):
        raise ConfigurationError("settings has unknown keys %s" % ", ".join(map(repr, unknown)))
    return Settings(**settings)


__all__ = (
    "ArgumentMode",
    "OptionSpec",
    "Settings",
    "option",
    "normalize",
)
