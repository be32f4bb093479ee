"""
Usage rendering for getoptions settings.

- render_usage(settings): build a rich renderable with the usage line and the option table.
- show_usage(occurrence, tokens, settings): ready-made option callback that prints
  the rendering and exits with status 0 (typically bound to -h/--help).
- render_version(settings) / show_version(occurrence, tokens, settings): the same
  pair for "<program> <version>" (typically bound to -V/--version).

Palette keys
- usage-label, program-name, usage-section, options-label
- program-version
- option-name, metavar, option-description

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- usage.program defaults to the running script's base name (without extension).
- settings.first shows only the first form of each option.
- settings.wrap bounds the rendered width.
- settings.version is what render_version prints ("unknown" when unset).
"""
import os.path
import sys
from collections import defaultdict

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .options import ArgumentMode, normalize


def _program():
    return os.path.basename(sys.argv[0] or "getopt").split(".", 1)[0]


def _styles():
    return defaultdict(str, {
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "program-version": "bold #00E6FF",
        "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
        "options-label": "bold #FFFFFF",  # Pure white headers
        "option-name": "bold #00E6FF",
        "metavar": "bold #FFD600",  # AMBER for arguments
        "option-description": "#9CA3AF",  # Muted gray
    } | getattr(sys.modules["__main__"], "__styles__", {}))


def render_usage(settings, /):
    """
    Render the usage of the given settings.

    Layout
        usage: <program> <spec>
        options:
          -v --verbose       be chatty
          -o --output=<ARG>  write the report to ARG
    """
    settings = normalize(settings)
    styles = _styles()

    usage = Text()
    usage.append("usage", styles["usage-label"]).append(":")
    usage.append(" ")
    usage.append(settings.usage["program"] or _program(), styles["program-name"])
    usage.append(" ")
    usage.append(settings.usage["spec"], styles["usage-section"])

    renders = [usage]

    if options := settings.options:
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()

        for option in options:
            forms = ["-" + form for form in option.short] + ["--" + form for form in option.long]
            if settings.first:
                forms = forms[:1]

            name = Text(" ").join(Text(form, styles["option-name"]) for form in forms)
            if option.argument is not ArgumentMode.NONE:
                # the separator follows the forms shown: '=' only after a long form
                name.append("=" if forms[-1].startswith("--") else " ")
                metavar = ("[%s]" if option.argument is ArgumentMode.OPTIONAL else "<%s>") % option.metavar
                name.append(metavar, styles["metavar"])

            table.add_row(Text("  ").append_text(name), Text(option.description or "", styles["option-description"]))

        renders.append(Text("options", styles["options-label"]).append(":"))
        renders.append(table)

    return Group(*renders)


def show_usage(occurrence, tokens, settings, /):
    """
    Option callback printing the usage to stdout, then exiting with status 0.

    Example
        OptionSpec(short="h", long="help", description="show this help", callback=show_usage)
    """
    console = Console(width=settings.wrap)
    console.print(render_usage(settings))
    sys.exit(0)


def render_version(settings, /):
    """
    Render "<program> <version>" for the given settings.
    """
    settings = normalize(settings)
    styles = _styles()
    return Text.assemble(
        (settings.usage["program"] or _program(), styles["program-name"]),
        " ",
        (settings.version or "unknown", styles["program-version"]),
    )


def show_version(occurrence, tokens, settings, /):
    """
    Option callback printing the version to stdout, then exiting with status 0.
    """
    console = Console(width=settings.wrap)
    console.print(render_version(settings))
    sys.exit(0)


__all__ = (
    "render_usage",
    "show_usage",
    "render_version",
    "show_version",
)
