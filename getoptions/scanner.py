"""
Token scanner: the state machine at the heart of the parser.

A Scanner walks the argument tokens once, left to right, and yields
OptionOccurrence/PositionalOccurrence events. It is an explicit iterator: all
state lives on the instance, so callers may pull events one at a time and stop
whenever they like.

State carried between tokens
- awaiting: an option occurrence whose argument is expected in the next token.
- ended: whether the end-of-options marker '--' was seen.
- position: number of positional parameters emitted so far.

Per-token rules (in order)
1. awaiting is set: the token is its argument. For an optional argument, a
   token that looks like an option ('-' followed by something) is not consumed;
   the pending option is emitted without value and the token is scanned anew.
2. '--': end of options, nothing is emitted.
3. '--name[=value]': long option, split at the first '='. Never takes the
   next token.
4. '-bundle': one or more short forms, longest registered form first at each
   offset. An argument-taking form swallows the rest of the bundle, or the
   next token when it ends the bundle.
5. anything else, or any token after '--': positional.

Faults
- UnrecognizedOptionError, ArgumentNotAllowedError, MissingArgumentError.
  A fault ends the scan; events produced before it (including earlier forms of
  the same bundle) are delivered first, then the fault is raised.
"""
import copy
from collections import deque

from .events import OptionOccurrence, PositionalOccurrence
from .faults import *
from .options import ArgumentMode


def _ordinal(number):
    """
    return an english ordinal for a 1-based position (1 -> "1st", 12 -> "12th").
    """
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return "%d%s" % (number, suffix)


def _looks_like_option(token):
    return token.startswith("-") and len(token) > 1


class Scanner:
    """
    Single-pass, non-restartable iterator over the parse events of a token list.

    Parameters
    - tokens: sequence of str (copied on construction).
    - registry: Registry used to resolve short and long forms.
    """

    def __init__(self, tokens, registry, /):
        self._tokens = tuple(tokens)
        self._registry = registry
        self._index = 0
        self._awaiting = None
        self._ended = False
        self._position = 0
        self._pending = deque()
        self._fault = None
        self._exhausted = False

    @property
    def tokens(self):
        return self._tokens

    def __iter__(self):
        return self

    def __next__(self):
        while not self._pending:
            if self._fault is not None:
                fault, self._fault = self._fault, None
                raise fault
            if self._exhausted:
                raise StopIteration
            try:
                self._advance()
            except GetoptException as fault:
                self._exhausted = True
                self._fault = fault
        return self._pending.popleft()

    def _advance(self):
        """
        Process one unit of input: a whole token, or the end of input.
        """
        if self._index >= len(self._tokens):
            self._exhausted = True
            if (awaiting := self._awaiting) is not None:
                self._awaiting = None
                if awaiting.option.argument is ArgumentMode.REQUIRED:
                    raise self._missing(awaiting)
                self._pending.append(awaiting)
            return

        token = self._tokens[self._index]

        if (awaiting := self._awaiting) is not None:
            self._awaiting = None
            if awaiting.option.argument is ArgumentMode.OPTIONAL and _looks_like_option(token):
                # the token is left in place and scanned on the next call
                self._pending.append(awaiting)
                return
            self._pending.append(copy.replace(awaiting, value=token))
        elif self._ended:
            self._positional(token)
        elif token == "--":
            self._ended = True
        elif token.startswith("--"):
            self._long(token)
        elif _looks_like_option(token):
            self._bundle(token)
        else:
            self._positional(token)

        self._index += 1

    def _positional(self, token):
        self._pending.append(PositionalOccurrence(self._position, token, self._index))
        self._position += 1

    def _long(self, token):
        name, separator, value = token[2:].partition("=")
        value = value if separator else None

        if (option := self._registry.long.get(name)) is None:
            raise UnrecognizedOptionError(
                "unrecognized option '--%s' in the %s argument" % (name, _ordinal(self._index + 1)),
                hint="check the spelling of the long option",
                token=token,
                index=self._index,
                input="--" + name,
            )

        match option.argument:
            case ArgumentMode.NONE if value is not None:
                raise ArgumentNotAllowedError(
                    "option '--%s' in the %s argument doesn't take an argument" % (name, _ordinal(self._index + 1)),
                    hint="remove everything from '=' (for example: --%s)" % name,
                    token=token,
                    index=self._index,
                    input="--" + name,
                    option=option,
                )
            case ArgumentMode.REQUIRED if not value:
                raise MissingArgumentError(
                    "option '--%s' in the %s argument requires an argument" % (name, _ordinal(self._index + 1)),
                    hint="use the inline form: --%s=<%s>" % (name, option.metavar),
                    token=token,
                    index=self._index,
                    input="--" + name,
                    option=option,
                )

        self._pending.append(OptionOccurrence(option, value, self._index))

    def _bundle(self, token):
        start = 1
        end = len(token)
        short = self._registry.short

        while start < end:
            for stop in range(end, start, -1):
                if (option := short.get(token[start:stop])) is not None:
                    break
            else:
                raise UnrecognizedOptionError(
                    "unrecognized option '-%s' in the %s argument" % (token[start], _ordinal(self._index + 1)),
                    hint="check the spelling of the short option",
                    token=token,
                    index=self._index,
                    subindex=start - 1,
                    input="-" + token[start],
                )

            occurrence = OptionOccurrence(option, None, self._index, start - 1, stop - start)

            if option.argument is ArgumentMode.NONE:
                self._pending.append(occurrence)
            elif stop < end:
                self._pending.append(copy.replace(occurrence, value=token[stop:]))
                stop = end
            else:
                self._awaiting = occurrence

            start = stop

    def _missing(self, occurrence):
        start = occurrence.subindex + 1
        form = self._tokens[occurrence.index][start:start + occurrence.sublength]
        return MissingArgumentError(
            "option '-%s' in the %s argument requires an argument but none is left" % (form, _ordinal(occurrence.index + 1)),
            hint="pass the value right after the option (for example: -%s <%s>)" % (form, occurrence.option.metavar),
            token=self._tokens[occurrence.index],
            index=occurrence.index,
            subindex=occurrence.subindex,
            input="-" + form,
            option=occurrence.option,
        )


__all__ = (
    "Scanner",
)
