"""
Parse events: what the scanner emits for every recognized piece of input.

- OptionOccurrence: one appearance of an option, with its value (str or None)
  and its location (token index, plus the offset and width inside a short
  bundle).
- PositionalOccurrence: one positional parameter, numbered among positionals only.

Occurrences are immutable value objects: they compare structurally, render
through rich, and support copy.replace(occurrence, value=...).
"""
from .utils import *


class Occurrence(metaclass=IntrospectableType):
    """
    Common behavior of parse events.
    """
    __introspectable__ = ()

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(
            getattr(self, "_" + name) == getattr(other, "_" + name)
            for name in type(self).__introspectable__
        )

    __hash__ = None

    def __replace__(self, /, **overrides):
        return type(self)(**{
            name: getattr(self, "_" + name) for name in type(self).__introspectable__
        } | overrides)


class OptionOccurrence(Occurrence):
    """
    One occurrence of an option.

    - option: the matched OptionSpec.
    - value: the argument (str), or None when the option carries none.
    - index: index of the token that produced the occurrence.
    - subindex: offset of the matched short form inside its bundle, counted
      after the leading '-' (None for long options).
    - sublength: width of the matched short form (None for long options).
    """
    __introspectable__ = (
        "option",
        "value",
        "index",
        "subindex",
        "sublength",
    )

    def __init__(self, option, value=None, index=0, subindex=None, sublength=None):
        self._option = option
        self._value = value
        self._index = index
        self._subindex = subindex
        self._sublength = sublength


class PositionalOccurrence(Occurrence):
    """
    One positional parameter.

    - position: 0-based rank among positional parameters only.
    - value: the token.
    - index: index of the token in the argument list.
    """
    __introspectable__ = (
        "position",
        "value",
        "index",
    )

    def __init__(self, position, value, index=0):
        self._position = position
        self._value = value
        self._index = index


__all__ = (
    "Occurrence",
    "OptionOccurrence",
    "PositionalOccurrence",
)
