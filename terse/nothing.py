"""
The "no subcommand selected" marker.

A parse result records which child command was selected at every level. That
choice is a tagged union: either a Branch naming exactly one declared child, or
the process-wide singleton `nothing` defined here.

Semantics
- Falsy: bool(nothing) is False, so `if parse.subcommand:` reads naturally.
- Stable string form: repr(nothing) == "nothing" (Rich renders it dimmed).
- Identity: nothingtype() always returns the same instance per interpreter,
  and copying or pickling preserves that identity.

Example
    parse = tool.parse(["--verbose"])
    if parse.subcommand is nothing:
        ...
"""
import functools

from rich.text import Text


class nothingtype:
    """
    Singleton type of the `nothing` marker.

    Notes
    - Subclassing is blocked to preserve the singleton guarantees.
    - The instance is falsy and has a stable string/console representation.
    """

    @functools.cache
    def __new__(cls):
        """
        Return the unique instance of nothingtype (per process).
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __rich__(self):
        """
        Rich protocol hook: render a dim 'nothing' token.
        """
        return Text(repr(self), style="dim")

    def __repr__(self):
        return "nothing"

    def __reduce__(self):
        # Unpickling calls nothingtype() again, which yields the cached singleton.
        return nothingtype, ()

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'nothingtype' is not an acceptable base type")


nothing = nothingtype()


__all__ = (
    "nothingtype",
    "nothing",
)
