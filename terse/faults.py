"""
Terse faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse failure.
  Codes are grouped by domain to keep copy consistent and searches predictable.
- CommandException: base type carrying a message plus read-only options
  (code, title, hint, tool, input, index) and knowing how to render itself
  through rich in a friendly, lowercased and actionable way.
- report(): print a fault to a stderr console; presentation only, the caller
  keeps control of process exit.
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- every fault aborts the whole parse; nothing is retried or recovered.
- MalformedInvocationError  argument vector without even a program name.
- UnknownOptionError        longhand/shorthand not declared by the command.
- UnknownSubcommandError    selector token matches no declared child.
- MissingArgumentError      value-taking option with no bare token after it.
- InvalidArgumentError      value text rejected by the option's kind.
- StackedValueOptionError   value-taking shorthand inside a stack (not last).
- FlagAssignmentError       inline "=value" given to a flag.

UX goals
- Position-first messages: messages include the ordinal position of the
  offending argument ("at third position").
- Soft but technical language: short titles, one-sentence bodies, a single hint.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - invocation (1010x)
      • MALFORMED_INVOCATION
    - routing (1110x)
      • UNKNOWN_SUBCOMMAND
    - options (1111x/1112x)
      • UNKNOWN_OPTION, FLAG_ASSIGNMENT, STACKED_VALUE_OPTION,
        MISSING_ARGUMENT, INVALID_ARGUMENT

    normalize() lets hosts remap codes to their own labels.
    """
    # --- invocation errors (10xxx) ---
    MALFORMED_INVOCATION        = 10101

    # --- routing errors (11xxx) ---
    UNKNOWN_SUBCOMMAND          = 11102

    # --- option errors (11xxx) ---
    UNKNOWN_OPTION              = 11112
    FLAG_ASSIGNMENT             = 11113
    STACKED_VALUE_OPTION        = 11116
    MISSING_ARGUMENT            = 11117
    INVALID_ARGUMENT            = 11124

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base of every parse fault.

    the message is the one-line body; options is a read-only mapping with the
    context the renderer (or the host) may want: code, title, hint, tool (the
    command whose schema was active), input, index and any extras.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        main = __import__("__main__")
        tool = self.options.get("tool")

        fancy = self.options.get("fancy", getattr(tool, "fancy", False))
        colorful = self.options.get("colorful", getattr(tool, "colorful", False))

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

        prog = text(getattr(main, "__prog__", getattr(getattr(tool, "root", None), "name", "terse")), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "?"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint"), styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)


class MalformedInvocationError(CommandException): ...
class UnknownOptionError(CommandException): ...
class UnknownSubcommandError(CommandException): ...
class MissingArgumentError(CommandException): ...
class InvalidArgumentError(CommandException): ...
class StackedValueOptionError(CommandException): ...
class FlagAssignmentError(CommandException): ...


def report(fault, /, *, console=console):
    """
    print a fault on the given console (stderr by default).

    contract
    - fault must provide __rich__ (every CommandException does).
    - this function never exits the process and never raises the fault;
      deciding the exit status is up to the host application.
    """
    if not hasattr(fault, "__rich__") or not callable(fault.__rich__):
        raise TypeError("report() argument must be renderable (implement __rich__)")
    console.print(fault)


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "MalformedInvocationError",
    "UnknownOptionError",
    "UnknownSubcommandError",
    "MissingArgumentError",
    "InvalidArgumentError",
    "StackedValueOptionError",
    "FlagAssignmentError",
    "FaultCode",
    "report",
    "getdoc",
)
