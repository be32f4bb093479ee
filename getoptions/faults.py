"""
getoptions faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse and
  configuration failure. Codes are grouped by domain to keep messages consistent
  and make logs/searches predictable.
- GetoptException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- report(): ready-made error sink that renders a fault to stderr and lets it propagate.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Token-first messages: every parse message names the offending token and its
  ordinal position in the argument list.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.

Integration
- The scanner raises faults directly; nothing is collected or deferred.
- A caller-supplied error sink (settings.error) may observe a fault before it
  propagates, e.g. report() to print it.
- Process entry points call trigger(fault, shell=True) to render and exit.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - settings (2110x)
      • MALFORMED_SETTINGS, DUPLICATE_OPTION
    - tokens (2111x)
      • UNRECOGNIZED_OPTION, ARGUMENT_NOT_ALLOWED, MISSING_ARGUMENT

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- settings errors (211xx) ---
    MALFORMED_SETTINGS      = 21101
    DUPLICATE_OPTION        = 21102

    # --- token errors (211xx) ---
    UNRECOGNIZED_OPTION     = 21111
    ARGUMENT_NOT_ALLOWED    = 21112
    MISSING_ARGUMENT        = 21113

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(sys.modules["__main__"], "__codes__", {}).get(self, self.value))


class GetoptException(Exception):
    """
    base of every fault raised by getoptions.

    - message: one-sentence, lowercased description (also str(fault)).
    - options: read-only mapping with the context of the fault (code, title,
      hint, token, index, subindex, ...) and the rendering switches
      (prog, shell, fancy, colorful).
    """
    code = None
    title = "error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).code,
            "title": type(self).title,
        } | options)

    def __rich__(self):
        main = sys.modules["__main__"]

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "getopt")), styler("prog-name"))
        code = self.options["code"]

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else code, styler("code")),
            " | ",
            text(str(self.options["title"]).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConfigurationError(GetoptException):
    code = FaultCode.MALFORMED_SETTINGS
    title = "malformed settings"


class DuplicateOptionError(ConfigurationError):
    code = FaultCode.DUPLICATE_OPTION
    title = "duplicate option"


class UnrecognizedOptionError(GetoptException):
    code = FaultCode.UNRECOGNIZED_OPTION
    title = "unrecognized option"


class ArgumentNotAllowedError(GetoptException):
    code = FaultCode.ARGUMENT_NOT_ALLOWED
    title = "argument not allowed"


class MissingArgumentError(GetoptException):
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see GetoptException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the rich console and the process exits
      with status 1; otherwise the fault is raised.

    typical options
    - prog, shell, fancy, colorful, and any other context the reporter may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def report(fault, /):
    """
    error sink that renders a fault to stderr without interrupting it.

    suitable as settings.error: the parser calls it with the raised error and
    re-raises afterwards. errors that are not faults (e.g. raised by an option
    callback) are printed as plain text.
    """
    if isinstance(fault, GetoptException):
        console.print(fault)
    else:
        console.print(Text("%s: %s" % (type(fault).__name__, fault), style="bold red"))


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(sys.modules["__main__"], "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "GetoptException",
    "ConfigurationError",
    "DuplicateOptionError",
    "UnrecognizedOptionError",
    "ArgumentNotAllowedError",
    "MissingArgumentError",
    "FaultCode",
    "trigger",
    "report",
    "getdoc",
)
