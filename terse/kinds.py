"""
Value kinds: how the text after an option becomes a typed value.

Kinds
- FlagKind      presence-only; consumes no token and yields True.
- StringKind    one token, stored verbatim.
- IntegerKind   one token, strict base-10; optionally bounded to a fixed width.
- OptionalKind  wraps a value-taking kind; the field stays None until the
                option appears, then holds the wrapped kind's value.

Each kind knows its zero value (`default`), whether it consumes a token
(`takes_value`) and its help placeholder (`metavar`). Conversion failures are
raised as ValueError (malformed text) or OverflowError (outside the width);
commands translate both into InvalidArgumentError with position context.

Ready-made instances: FLAG, STRING, INTEGER (unbounded), INT8…INT64,
UINT8…UINT64, plus optional(kind) for wrapping.
"""
import re


class Kind:
    """
    Base of all value kinds. Kinds are immutable and freely shared.
    """
    __slots__ = ()

    takes_value = True
    default = None
    metavar = "value"

    def coerce(self, text, /):
        raise NotImplementedError

    def __repr__(self):
        return self.metavar

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return repr(self) == repr(other)

    def __hash__(self):
        return hash((type(self), repr(self)))


class FlagKind(Kind):
    __slots__ = ()

    takes_value = False
    default = False
    metavar = "flag"

    def coerce(self, text=None, /):
        return True


class StringKind(Kind):
    __slots__ = ()

    default = ""
    metavar = "string"

    def coerce(self, text, /):
        return text


class IntegerKind(Kind):
    """
    Integer kind with strict base-10 parsing.

    Accepted text is r"-?[0-9]+" for signed kinds and r"[0-9]+" for unsigned
    ones: no "+" sign, surrounding whitespace, digit separators, or non-ASCII
    digits. With a width, values outside the two's complement (signed) or
    plain binary (unsigned) range raise OverflowError.
    """
    __slots__ = ("_width", "_signed")

    default = 0

    def __init__(self, width=None, signed=True):
        if width is not None and (not isinstance(width, int) or isinstance(width, bool) or width < 1):
            raise ValueError("integer kind 'width' must be a positive integer")
        self._width = width
        self._signed = bool(signed)

    @property
    def width(self):
        return self._width

    @property
    def signed(self):
        return self._signed

    @property
    def bounds(self):
        """
        Inclusive (low, high) range, or None when unbounded.
        """
        if self._width is None:
            return None if self._signed else (0, None)
        if self._signed:
            return -(1 << (self._width - 1)), (1 << (self._width - 1)) - 1
        return 0, (1 << self._width) - 1

    @property
    def metavar(self):
        if self._width is None:
            return "integer" if self._signed else "unsigned"
        return ("int" if self._signed else "uint") + str(self._width)

    def coerce(self, text, /):
        if not re.fullmatch(r"-?[0-9]+" if self._signed else r"[0-9]+", text):
            raise ValueError("%r is not a valid base-10 %s" % (text, "integer" if self._signed else "unsigned integer"))
        value = int(text)
        if bounds := self.bounds:
            low, high = bounds
            if value < low or (high is not None and value > high):
                raise OverflowError("%d is out of range for %s" % (value, self.metavar))
        return value


class OptionalKind(Kind):
    """
    Optional wrapper: absent (None) until supplied, then the wrapped value.
    """
    __slots__ = ("_kind",)

    default = None

    def __init__(self, kind):
        if not isinstance(kind, Kind):
            raise TypeError("optional kind must wrap a kind")
        if isinstance(kind, OptionalKind):
            raise TypeError("optional kind cannot wrap another optional kind")
        if not kind.takes_value:
            raise TypeError("optional kind must wrap a value-taking kind")
        self._kind = kind

    @property
    def kind(self):
        return self._kind

    @property
    def metavar(self):
        return self._kind.metavar

    def coerce(self, text, /):
        return self._kind.coerce(text)

    def __repr__(self):
        return "optional[%r]" % self._kind


def optional(kind, /):
    return OptionalKind(kind)


def resolve(type, /):
    """
    Map a declared option type to its kind.

    - str  → STRING
    - int  → INTEGER (unbounded)
    - Kind → itself
    """
    if isinstance(type, Kind):
        return type
    if type is str:
        return STRING
    if type is int:
        return INTEGER
    raise TypeError("option 'type' must be str, int, or a value kind")


FLAG = FlagKind()
STRING = StringKind()
INTEGER = IntegerKind()

INT8 = IntegerKind(8)
INT16 = IntegerKind(16)
INT32 = IntegerKind(32)
INT64 = IntegerKind(64)

UINT8 = IntegerKind(8, signed=False)
UINT16 = IntegerKind(16, signed=False)
UINT32 = IntegerKind(32, signed=False)
UINT64 = IntegerKind(64, signed=False)


__all__ = (
    # Types
    "Kind",
    "FlagKind",
    "StringKind",
    "IntegerKind",
    "OptionalKind",

    # Functions
    "optional",

    # Constants
    "FLAG",
    "STRING",
    "INTEGER",
    "INT8",
    "INT16",
    "INT32",
    "INT64",
    "UINT8",
    "UINT16",
    "UINT32",
    "UINT64",
)
