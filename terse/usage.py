"""
Terse usage rendering: turn a command schema into help text.

render() builds a rich Text (str() of it is the plain rendition) with:
- a synopsis line: "usage: <route> [options] <command> ..." for nonterminal
  commands, "usage: <route> [options] [arguments ...]" for terminal ones;
- the command's usage text;
- an "options:" section, one row per option ("-v, --verbose", "--mem <int32>");
- a "commands:" (root) or "subcommands:" section listing the children.

display() prints the rendition on a stderr console, inside a panel when the
command is fancy. Styles come from the palette below and can be overridden by
a __styles__ mapping in __main__; they are dropped unless colorful is set.
"""
from collections import defaultdict

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce


def _label(option):
    label = "--" + option.longhand
    if option.shorthand is not None:
        label = "-" + option.shorthand + ", " + label
    if option.kind.takes_value:
        label += " <%s>" % option.metavar
    return label


def render(command, /, *, colorful=Unset):
    """
    Build the help text of a command.

    Parameters
    - command: the Command to describe (any level of a tree).
    - colorful: bool | Unset, overrides command.colorful when given.
    """
    colorful = coalesce(colorful, command.colorful)
    styles = defaultdict(str, {
        # synopsis
        "usage-label": "bold #FF4D94",  # magenta label
        "route": "bold #E6E6F0",  # near-white command route
        "synopsis": "#9CA3AF",  # neutral placeholders

        # sections
        "section": "bold #FFD600",  # amber headers
        "option": "#00E6FF",  # cyan option labels
        "command": "#36C5F0",  # sky-blue child names
        "description": "#C8C8D0",  # soft gray usage text
    } | getattr(__import__("__main__"), "__styles__", {}))

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

    options = [(_label(option), option.usage) for option in command.options.values()]
    children = [(name, child.usage) for name, child in command.children.items()]
    padding = max(map(lambda x: len(x[0]), options + children), default=0) + 2

    renders = Text.assemble(
        text("usage", styler("usage-label")),
        ": ",
        text(command.route, styler("route")),
        text(" [options]" if options else "", styler("synopsis")),
        text(" [arguments ...]" if command.terminal else " <command> ...", styler("synopsis")),
    )

    if command.usage:
        renders.append("\n\n").append(text(command.usage, styler("description")))

    def section(title, rows, style):
        renders.append("\n\n").append(text(title, styler("section"))).append(":")
        for label, usage in rows:
            renders.append("\n  ").append(text(label, styler(style)))
            if usage:
                renders.append(" " * (padding - len(label))).append(text(usage, styler("description")))

    if options:
        section("options", options, "option")

    if children:
        section("subcommands" if command.parent else "commands", children, "command")

    return renders


def display(command, /, *, console=Unset):
    """
    Print the help text of a command (stderr by default).

    Presentation only: never exits the process.
    """
    console = coalesce(console, Console(stderr=True))
    renderable = render(command)

    if command.fancy:
        renderable = Panel(renderable, title=Text.assemble("[ ", command.route, " ]"), title_align="left")

    console.print(renderable)


__all__ = (
    "render",
    "display",
)
