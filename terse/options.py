r"""
Terse option specifications.

Overview
- Specs
  • Flag: named, presence-only switch (no payload), e.g. -v/--verbose.
  • Option[_T]: named, value-bearing option, e.g. -m/--mem <int32>.
  A spec is declared as the default of a command callback parameter; the
  parameter name is the field the parsed value is written to.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    the fields listed in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- Shared (all specs)
  • longhand: str, the name used as "--longhand" (no leading dashes).
  • shorthand: Unset | single character, used as "-s" (may be stacked: "-vq").
  • usage: Unset | str | Text (short help), non-empty when provided.
- Option only (value-bearing)
  • type: str | int | Kind (see terse.kinds); str → STRING, int → INTEGER.
  • optional: bool, wrap the kind so the field stays None until supplied.
  • default: value before the option appears (kind zero value when Unset;
    forbidden for optional options, which always start as None).
  • metavar: Unset | str, the placeholder shown in help (defaults to the kind's).

Validation highlights
- longhand must match r"[^\W\d_](-?[^\W_]+)*" (unicode letters allowed,
  hyphen-separated segments, no underscores, no leading digits).
- shorthand must be exactly one letter or digit.
- uniqueness of longhands/shorthands is a per-command rule, checked when the
  owning command is declared.

Quick example:
    >>> from terse import command, Flag, Option, INT32
    >>> @command(usage="usage test")
    ... def test(
    ...         verbose=Flag("verbose", "v", usage="prints verbosely"),
    ...         mem=Option("mem", "m", usage="aa", type=INT32),
    ...         path=Option("path", "p", usage="sets path"),
    ... ):
    ...     ...
"""
import functools
import operator
import re

from rich.text import Text

from . import kinds
from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable, read-only descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help output.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag(longhand='verbose', shorthand='v', usage=None, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs from __introspectable__ for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize metadata shared by every spec.

    - longhand: required, string matching r"[^\W\d_](-?[^\W_]+)*".
    - shorthand: Unset or exactly one letter/digit; Unset becomes None.
    - usage: Unset or non-empty string/Text after trimming; Unset becomes None.

    Raises
    - TypeError: on wrong value types.
    - ValueError: on empty or malformed names/usage.
    """
    if not isinstance(longhand := metadata["longhand"], str):
        raise TypeError(f"{cls.__typename__} 'longhand' must be a string")
    elif not (longhand := longhand.strip()):
        raise ValueError(f"{cls.__typename__} 'longhand' cannot be empty")
    elif longhand.startswith("-"):
        raise ValueError(f"{cls.__typename__} 'longhand' must be given without leading dashes")
    elif not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", longhand):
        raise ValueError(f"{cls.__typename__} 'longhand' must be a valid shell-style option name (unicodes are allowed)")
    metadata["longhand"] = longhand

    if not isinstance(shorthand := metadata["shorthand"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'shorthand' must be a string")
    elif isinstance(shorthand, str) and not re.fullmatch(r"[^\W_]", shorthand):
        raise ValueError(f"{cls.__typename__} 'shorthand' must be a single letter or digit")
    metadata["shorthand"] = coalesce(shorthand)

    if not isinstance(usage := metadata["usage"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'usage' must be a string")
    elif isinstance(usage, str) and not (usage := usage.strip()):
        raise ValueError(f"{cls.__typename__} 'usage' cannot be empty")
    metadata["usage"] = coalesce(usage)


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate and normalize metadata for value-bearing options.

    - type: resolved into a value kind (kinds.resolve); flag kinds are refused,
      use Flag for presence-only switches.
    - optional: wraps the kind with OptionalKind; an explicit default is refused
      since optional options always start absent (None).
    - default: Unset becomes the kind's zero value ("" for strings, 0 for integers).
    - metavar: Unset or non-empty string; Unset becomes the kind's placeholder.
    """
    kind = kinds.resolve(metadata.pop("type"))
    if not kind.takes_value:
        raise TypeError(f"{cls.__typename__} 'type' must take a value (use flag for switches)")

    if metadata.pop("optional") and not isinstance(kind, kinds.OptionalKind):
        kind = kinds.optional(kind)
    metadata["kind"] = kind

    if isinstance(kind, kinds.OptionalKind) and metadata["default"] is not Unset:
        raise TypeError(f"optional {cls.__typename__} cannot specify a 'default'")
    metadata["default"] = coalesce(metadata["default"], kind.default)

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar, kind.metavar)


class Flag(metaclass=ArgumentType):
    """
    Named, presence-only option specification.

    A flag consumes no value: its field starts as False and becomes True when
    "--longhand" or "-shorthand" appears (repetition is harmless). Flags are
    the only specs allowed anywhere inside a stacked shorthand group.
    """

    __introspectable__ = (
        "longhand",
        "shorthand",
        "usage",
        "kind",
        "default",
    )

    def __new__(cls, longhand, shorthand=Unset, /, usage=Unset):
        """
        Construct a Flag spec.

        Parameters
        - longhand: str, e.g. "verbose" for --verbose.
        - shorthand: Unset | str, e.g. "v" for -v.
        - usage: Unset | str | Text, short description for help.
        """
        metadata = {
            "longhand": longhand,
            "shorthand": shorthand,
            "usage": usage,
        }
        _sanitize_metadata(cls, metadata)
        metadata["kind"] = kinds.FLAG
        metadata["default"] = kinds.FLAG.default

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def metavar(self):
        return None

    def __flag__(self):
        """
        Introspection hook: identify this spec as a Flag.
        """
        return self


class Option[_T](metaclass=ArgumentType):
    """
    Named, value-bearing option specification.

    The token right after "--longhand"/"-shorthand" (or the inline tail of
    "--longhand=value") is converted by the option's kind and written to the
    field; a later occurrence overwrites an earlier one.
    """

    __introspectable__ = (
        "longhand",
        "shorthand",
        "usage",
        "kind",
        "default",
        "metavar",
    )

    def __new__(
            cls,
            longhand,
            shorthand=Unset,
            /,
            usage=Unset,
            *,
            type=str,
            optional=False,
            default=Unset,
            metavar=Unset
    ):
        """
        Construct an Option spec.

        Parameters
        - longhand: str, e.g. "mem" for --mem.
        - shorthand: Unset | str, e.g. "m" for -m.
        - usage: Unset | str | Text, short description for help.
        - type: str | int | Kind, the value kind (INT32, UINT8, ...).
        - optional: bool, keep the field None until the option is supplied.
        - default: initial field value for non-optional options.
        - metavar: help placeholder, defaults to the kind's name.
        """
        metadata = {
            "longhand": longhand,
            "shorthand": shorthand,
            "usage": usage,
            "type": type,
            "optional": bool(optional),
            "default": default,
            "metavar": metavar,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_parametric_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def __option__(self):
        """
        Introspection hook: identify this spec as an Option.
        """
        return self


__all__ = (
    "Flag",
    "Option",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
