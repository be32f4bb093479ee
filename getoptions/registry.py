"""
Option registry: index option specifications by every short and long form.

The registry is built once per parse call from normalized settings and is
read-only afterwards. Construction fails with DuplicateOptionError when two
specifications claim the same form, or more generally the same result key
(name, short or long), since both would otherwise write to one entry of
ParseResult.options.
"""
from types import MappingProxyType

from .faults import DuplicateOptionError


class Registry:
    """
    Two lookup tables: short form -> OptionSpec and long form -> OptionSpec.

    - short: read-only mapping of short forms (without the leading '-').
    - long: read-only mapping of long forms (without the leading '--').
    - options: the indexed specifications, in declaration order.
    """
    __slots__ = ("short", "long", "options")

    def __init__(self, options=(), /):
        options = tuple(options)
        short = {}
        long = {}
        owners = {}

        for option in options:
            for key in option.keys:
                if (owner := owners.setdefault(key, option)) is not option:
                    raise DuplicateOptionError(
                        "option key %r is declared by both %r and %r" % (key, owner, option),
                        hint="give every option its own short, long and name keys",
                        key=key,
                    )
            for form in option.short:
                short[form] = option
            for form in option.long:
                long[form] = option

        self.short = MappingProxyType(short)
        self.long = MappingProxyType(long)
        self.options = options

    def __repr__(self):
        return "registry(short=%r, long=%r)" % (sorted(self.short), sorted(self.long))


__all__ = (
    "Registry",
)
