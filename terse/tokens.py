"""
Terse tokenizer: classify raw arguments into option and bare tokens.

Rules (one raw argument → at most one token)
- "--name"   → LONG, text "name" (everything after the two dashes, including
               an inline "=value" tail which the resolver splits off).
- "-abc"     → SHORT, text "abc" (one or more stacked shorthand characters).
- "--"       → terminator: dropped, and every later argument is BARE no matter
               how many dashes it starts with.
- otherwise  → BARE, text unchanged. A lone "-" is BARE (conventionally stdin).

Tokens remember their 1-based position in the argument list so faults can
point at the offending argument ("at third position").

The resolver consumes the deque returned by tokenize() strictly front to back;
nothing here inspects the command schema.
"""
from collections import deque, namedtuple
from collections.abc import Iterable
from enum import Enum

TERMINATOR = "--"


class TokenKind(Enum):
    """
    Classification tag of a token.
    """
    LONG = "long"
    SHORT = "short"
    BARE = "bare"


class Token(namedtuple("Token", ("kind", "text", "index"))):
    """
    A classified argument: kind tag, text without the option prefix, and the
    1-based position of the raw argument it came from.
    """
    __slots__ = ()

    @property
    def option(self):
        """
        True for option-shaped tokens (LONG or SHORT).
        """
        return self.kind is not TokenKind.BARE

    @property
    def raw(self):
        """
        The argument as the user typed it (prefix restored).
        """
        match self.kind:
            case TokenKind.LONG:
                return "--" + self.text
            case TokenKind.SHORT:
                return "-" + self.text
            case _:
                return self.text


def classify(argument, /, index=1):
    """
    Classify a single raw argument (no terminator handling).
    """
    if not isinstance(argument, str):
        raise TypeError("classify() argument must be a string")
    if argument.startswith("--") and len(argument) > 2:
        return Token(TokenKind.LONG, argument[2:], index)
    if argument.startswith("-") and len(argument) > 1:
        return Token(TokenKind.SHORT, argument[1:], index)
    return Token(TokenKind.BARE, argument, index)


def tokenize(arguments, /):
    """
    Turn an iterable of raw arguments (program name excluded) into a token deque.

    Raises
    - TypeError: when arguments is a plain string or contains a non-string item.
    """
    if isinstance(arguments, str) or not isinstance(arguments, Iterable):
        raise TypeError("tokenize() argument must be an iterable of strings")

    tokens = deque()
    terminated = False
    for index, argument in enumerate(arguments, 1):
        if not isinstance(argument, str):
            raise TypeError("tokenize() argument must be an iterable of strings")
        if terminated:
            tokens.append(Token(TokenKind.BARE, argument, index))
        elif argument == TERMINATOR:
            terminated = True
        else:
            tokens.append(classify(argument, index))
    return tokens


__all__ = (
    "TERMINATOR",
    "TokenKind",
    "Token",
    "classify",
    "tokenize",
)
