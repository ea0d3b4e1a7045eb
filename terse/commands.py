"""
Terse command layer: declare command trees and parse argument vectors.

What this module provides
- Command: wraps a Python callable into a command schema:
  • Option discovery from the callable's parameter defaults (Flag, Option);
    each parameter name is the field the parsed value is written to.
  • Hierarchies (parent/child) to model subcommands of arbitrary depth.
  • An option registry per command (lookup by longhand or shorthand).
  • A recursive resolver turning a token deque into typed values, the chain of
    selected subcommands and the leftover bare arguments.

- Results:
  • Parse(options, subcommand, bares): the root namespace, the selected child
    (a Branch, or `nothing`) and the bare arguments in encounter order.
  • Branch(command, options, subcommand): one selected level of the chain.
  • Namespace: generated per command; one slot per option field, each starting
    at its option's default.

- Factories and helpers:
  • command(...): create a Command or a decorator that produces one.
  • execute(command, argv): parse a full argument vector (program name first).
  • invoke(object, argv): execute, then call every matched level's callback.

Resolution rules
- options are resolved left to right against the current command only.
- at a nonterminal command the first bare token selects the child; the rest of
  the input belongs to that child's subtree (no backtracking).
- at a terminal command bare tokens are collected and options keep binding to
  the terminal command, in any order.
- repeated options overwrite (last write wins).

Quick start
    from terse import command, execute, Flag, Option, INT32

    @command(usage="usage test")
    def test(
        verbose=Flag("verbose", "v", usage="prints verbosely"),
        mem=Option("mem", "m", usage="aa", type=INT32),
    ):
        ...

    @test.command
    def foo(inner_verbose=Flag("verbose", "v", usage="prints verbosely, extra")):
        ...

    parse = execute(test, ["test", "--verbose", "foo", "-v"])
    parse.options.verbose                    # True
    parse.subcommand.command is foo          # True
    parse.subcommand.options.inner_verbose   # True
"""
import functools
import inspect
import operator
import os.path
import re
import sys
import textwrap
from collections import namedtuple
from collections.abc import Sequence
from inspect import Parameter

from rich.text import Text

from .faults import *
from .nothing import nothing
from .options import Flag, Option
from .tokens import TokenKind, tokenize
from .utils import *


def _invoker(callback, fields):
    """
    Build a trampoline __call__ that mirrors the callback's signature and forwards into self._callback.

    Why
    - Command instances behave like the function they wrap, so a handler can be
      called directly with option values (invoke() does exactly that).

    Behavior
    - Positional-or-keyword parameters stay as they are; a star (*) is inserted
      before the first keyword-only parameter.
    - Defaults of the generated function are the declared option defaults.

    Notes
    - If a parameter named 'self' already exists in the callback, the trampoline uses '__self__'.
    """
    parameters = inspect.signature(callback).parameters.values()

    signature = [self := "self" if "self" not in map(lambda x: x.name, parameters) else "__self__"]
    arguments = []
    starred = False

    for parameter in parameters:
        if parameter.kind is Parameter.KEYWORD_ONLY and not starred:
            signature.append("*")
            starred = True
        signature.append(name := parameter.name)
        arguments.append(f"{name}={name}")

    exec(textwrap.dedent(f"""
        @rename("__call__")
        def __call__({", ".join(signature)}):
            return {self}._callback({", ".join(arguments)})
    """), globals(), namespace := locals())

    namespace["__call__"].__doc__ = f"Trampoline generated from callback={callback.__qualname__!s}."

    namespace["__call__"].__defaults__ = tuple(
        fields[parameter.name].default for parameter in parameters if parameter.kind is not Parameter.KEYWORD_ONLY
    )
    namespace["__call__"].__kwdefaults__ = {
        parameter.name: fields[parameter.name].default for parameter in parameters if parameter.kind is Parameter.KEYWORD_ONLY
    }

    return namespace["__call__"]


class CommandType(type):
    """
    Metaclass that turns callbacks into callable, introspectable Command classes.

    Responsibilities
    - Inject a trampoline __call__ on factory-backed Command classes that mirrors
      the wrapped callback's signature (built via _invoker(callback, fields)).
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics.
    - Expose selected fields as read-only properties using mirror() for all names
      listed in __introspectable__.
    - Seal factory-backed Command classes against further subclassing.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        if options.get("factory", False):
            namespace["__call__"] = _invoker(options["callback"], options["fields"])

        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
                "__module__": "dynamic-factory::commands",
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - command(name='foo', usage=None, parent=command(name='test', ...), ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs from __displayable__ (or __introspectable__).
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("factory", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                """
                Disallow subclassing of factory-backed Command classes.
                """
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _process_source(cls, metadata):
    """
    Introspect the command callback and materialize the option registry.

    Responsibilities
    - Read the callable stored in metadata["callback"] and inspect its signature.
    - Every parameter must default to a Flag or an Option and accept keywords.
    - Build, in metadata:
      • options:    mapping[field -> Flag|Option] in declaration order
      • longhands:  mapping[longhand -> Flag|Option]
      • shorthands: mapping[shorthand -> Flag|Option]

    Errors
    - TypeError on non-inspectable callbacks, variadic or positional-only
      parameters, and defaults that are not option specs.
    - ValueError on duplicate longhands or shorthands within the command.
    """
    options = metadata["options"] = {}
    longhands = metadata["longhands"] = {}
    shorthands = metadata["shorthands"] = {}

    try:
        signature = inspect.signature(metadata["callback"])
    except TypeError:
        raise TypeError(f"{cls.__typename__} 'callback' must be callable") from None
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'callback' must be an inspectable callable") from None

    def _resolve_option(x):
        """
        Return the concrete spec (Flag|Option) from a parameter default.
        """
        if hasattr(x, "__flag__") and callable(x.__flag__):
            if not isinstance(flag := x.__flag__(), Flag):
                raise TypeError("__flag__() non-flag returned")
            return flag
        if hasattr(x, "__option__") and callable(x.__option__):
            if not isinstance(option := x.__option__(), Option):
                raise TypeError("__option__() non-option returned")
            return option
        raise TypeError(f"{cls.__typename__} 'callback' parameter {name!r} default must be a flag or an option")

    for name, parameter in signature.parameters.items():
        if parameter.kind not in (Parameter.POSITIONAL_OR_KEYWORD, Parameter.KEYWORD_ONLY):
            raise TypeError(f"{cls.__typename__} 'callback' parameter {name!r} must accept keywords and cannot be variadic")
        if parameter.default is Parameter.empty:
            raise TypeError(f"{cls.__typename__} 'callback' parameter {name!r} must have a default")

        option = _resolve_option(parameter.default)
        if option.longhand in longhands:
            raise ValueError(f"{cls.__typename__} longhand {'--' + option.longhand!r} is already in use")
        if option.shorthand is not None and option.shorthand in shorthands:
            raise ValueError(f"{cls.__typename__} shorthand {'-' + option.shorthand!r} is already in use")

        options[name] = option
        longhands[option.longhand] = option
        if option.shorthand is not None:
            shorthands[option.shorthand] = option


def _process_strings(cls, metadata):
    """
    Normalize the scalar name/usage fields.

    - name: non-empty string that cannot start with '-' (it would tokenize as
      an option and could never be selected).
    - usage: str | Text | Unset; strings are trimmed, empty strings rejected.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif name.startswith("-"):
        raise ValueError(f"{cls.__typename__} 'name' cannot start with '-'")
    metadata["name"] = name

    if not isinstance(usage := metadata["usage"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'usage' must be a string")
    elif isinstance(usage, str) and not (usage := usage.strip()):
        raise ValueError(f"{cls.__typename__} 'usage' cannot be empty")
    metadata["usage"] = coalesce(usage)


def _attach_to_parent(self, parent):
    """
    Register this command under its parent, enforcing unique sibling names.
    """
    if getattr(parent, "_children", {}).setdefault(name := self.name, self) is self:
        return

    typeof = "subcommand" if parent.parent else "command"
    raise ValueError(f"{type(self).__typename__} {typeof} name {name!r} is already in use")


class Namespace:
    """
    Option values of one command level.

    Concrete namespace classes are generated per command (see Command.namespace)
    with one slot per option field; instances start with every field at its
    option's default and are filled in by the resolver through setters.
    """
    __slots__ = ()
    __command__ = Unset

    def __init__(self):
        for field, option in type(self).__command__.options.items():
            setattr(self, field, option.default)

    def __iter__(self):
        for field in type(self).__slots__:
            yield field, getattr(self, field)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return tuple(self) == tuple(other)

    __hash__ = None

    def __repr__(self):
        return f"{type(self).__name__}({", ".join(map(functools.partial(operator.mod, "%s=%r"), self))})"

    def __rich_repr__(self):
        yield from self


class Branch(namedtuple("Branch", ("command", "options", "subcommand"))):
    """
    A selected subcommand: the child command, its namespace, and its own
    selection (another Branch, or `nothing`).
    """
    __slots__ = ()


class Parse(namedtuple("Parse", ("options", "subcommand", "bares"))):
    """
    Result of a successful parse.

    - options: namespace of the root command.
    - subcommand: Branch of the selected child, or `nothing`.
    - bares: bare arguments in encounter order (only terminal commands collect them).
    """
    __slots__ = ()

    @property
    def route(self):
        """
        Names of the selected subcommand chain, outermost first.
        """
        route = []
        branch = self.subcommand
        while branch:
            route.append(branch.command.name)
            branch = branch.subcommand
        return tuple(route)


class Command(metaclass=CommandType):
    """
    Command schema built from a Python callable.

    Responsibilities
    - Introspection: exposes name, usage, options, parent and children as
      read-only properties.
    - Composition: parent/child hierarchies model subcommands; a command
      without children is terminal.
    - Registry: lookup() and expand() map option tokens to specs.
    - Parsing: resolve() runs the recursive descent over a token deque;
      parse() tokenizes and resolves in one call.
    - Invocation: acts as a callable (via a generated __call__) forwarding to
      the wrapped callback.

    Schemas are meant to be declared once (module level) and then shared by
    any number of sequential parses; parsing never mutates them.
    """

    __introspectable__ = (
        "name",
        "usage",
        "options",
        "parent",
        "children",
        "fancy",
        "colorful",
    )

    __displayable__ = (
        "name",
        "usage",
        "options",
        "children",
    )

    @property
    def root(self):
        """
        Return the topmost command in the current command hierarchy.
        """
        child, parent = self, self.parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Return the full ancestry from root to this command as a tuple.
        """
        path = [command := self]
        while command.parent:
            path.append(command := command.parent)
        return tuple(reversed(path))

    @property
    def route(self):
        """
        Space-joined names from the root to this command ("test foo").
        """
        return " ".join(step.name for step in self.path)

    @property
    def terminal(self):
        """
        True when the command declares no children.
        """
        return not self._children

    def __new__(
            cls,
            source,
            /,
            parent=Unset,
            name=Unset,
            usage=Unset,
            *,
            fancy=Unset,
            colorful=Unset
    ):
        """
        Construct a Command from a callback.

        Parameters
        - parent: Command | Unset
          Parent under which to attach this command. If Unset, remains top-level.
        - name: str | Unset
          Command name (the selector token for children). Defaults to the
          callback's __name__, or the script name when it has none.
        - usage: str | Text | Unset
          Short description. Defaults to the callback's docstring.
        - fancy, colorful: bool | Unset
          Presentation flags for usage and fault rendering. If Unset, values
          inherit from the parent (or default to False).

        Raises
        - TypeError/ValueError on invalid parent, metadata types, callback
          shape, duplicate option names, or sibling name conflicts.
        """
        if not isinstance(parent, Command | Unset):
            raise TypeError(f"{cls.__typename__} 'parent' must be a command")
        if not callable(source):
            raise TypeError(f"{cls.__typename__} 'callback' must be callable")

        metadata = {
            "callback": source,
            "name": coalesce(name, getattr(source, "__name__", os.path.basename(sys.argv[0]))),
            "usage": coalesce(usage, inspect.getdoc(source) or Unset),
            "fancy": bool(coalesce(fancy, getattr(parent, "fancy", False))),
            "colorful": bool(coalesce(colorful, getattr(parent, "colorful", False))),
            "parent": parent,
            "children": {},
        }
        _process_source(cls, metadata)
        _process_strings(cls, metadata)

        self = super().__new__(type(cls)(cls.__name__, (cls,), dict(cls.__dict__), factory=True, callback=source, fields=metadata["options"]))
        self._callback = metadata.pop("callback")
        self._fields = {option: field for field, option in metadata["options"].items()}
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))
        self._namespace = type(self.name, (Namespace,), {
            "__slots__": tuple(self._options),
            "__command__": self,
            "__module__": "dynamic-factory::namespaces",
        })

        _attach_to_parent(self, self.parent)
        return self

    def command(self, source=Unset, /, *args, **kwargs):
        """
        Create or attach a subcommand under this command.

        Thin wrapper around the top-level command(...) factory that injects the
        current command as the parent. Supports direct and decorator modes:
        - self.command(callback, ...) -> Command
        - @self.command / @self.command(name=..., usage=...)
        """
        return command(source, self, *args, **kwargs)

    def namespace(self):
        """
        Return a fresh namespace with every field at its declared default.
        """
        return self._namespace()

    def lookup(self, name, /, *, shorthand=False, index=Unset):
        """
        Resolve an option spec by longhand (default) or shorthand character.

        Raises
        - UnknownOptionError when the name is not declared by this command.
        """
        registry = self._shorthands if shorthand else self._longhands
        try:
            return registry[name]
        except KeyError:
            input = ("-" if shorthand else "--") + name
            position = "" if index is Unset else " at %s position" % ordinal(index)
            raise UnknownOptionError(
                "unknown option %r%s" % (input, position),
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                tool=self,
                input=input,
                index=index,
                hint="'%s' does not declare %r; see its usage for the available options" % (self.route, input),
                docs=getdoc(FaultCode.UNKNOWN_OPTION),
            ) from None

    def expand(self, stack, /, *, index=Unset):
        """
        Resolve a stacked shorthand group ("vqm") into its option specs.

        Every character must be declared; every spec but the last must be a
        flag (the last one may take a value from the next token).

        Raises
        - UnknownOptionError for an undeclared character.
        - StackedValueOptionError for a value-taking option before the end.
        """
        options = []
        for position, character in enumerate(stack, 1):
            option = self.lookup(character, shorthand=True, index=index)
            if option.kind.takes_value and position < len(stack):
                input = "-" + character
                raise StackedValueOptionError(
                    "option %r takes a value and must be last in %r%s" % (
                        input, "-" + stack, "" if index is Unset else " at %s position" % ordinal(index)
                    ),
                    title="stacked value option",
                    code=FaultCode.STACKED_VALUE_OPTION,
                    tool=self,
                    input=input,
                    index=index,
                    hint="move %r to the end of the group or pass it separately (for example: %s <%s>)" % (
                        input, input, option.metavar
                    ),
                    docs=getdoc(FaultCode.STACKED_VALUE_OPTION),
                )
            options.append(option)
        return options

    def _getvalue(self, option, token, tokens, value=Unset):
        """
        consume and convert the value for one matched option.

        - flags consume nothing and yield True.
        - value-taking options use the inline value when given, otherwise the
          next token, which must be bare.
        - conversion errors from the kind become InvalidArgumentError.
        """
        input = token.raw.partition("=")[0] if token.kind is TokenKind.LONG else "-" + (option.shorthand or "")

        if not option.kind.takes_value:
            return option.kind.coerce()

        index = token.index
        if value is Unset:
            if not tokens or tokens[0].option:
                raise MissingArgumentError(
                    "option %r at %s position requires a %s value" % (input, ordinal(token.index), option.metavar),
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    tool=self,
                    input=input,
                    index=token.index,
                    argument=option,
                    hint="pass a value right after the option (for example: %s <%s>)" % (input, option.metavar),
                    docs=getdoc(FaultCode.MISSING_ARGUMENT),
                )
            value, index = tokens.popleft()[1:]

        try:
            return option.kind.coerce(value)
        except (ValueError, OverflowError) as exception:
            raise InvalidArgumentError(
                "option %r got invalid value %r at %s position" % (input, value, ordinal(index)),
                title="invalid argument",
                code=FaultCode.INVALID_ARGUMENT,
                tool=self,
                input=input,
                index=index,
                value=value,
                argument=option,
                hint=str(exception),
                docs=getdoc(FaultCode.INVALID_ARGUMENT),
            ) from exception

    def _resolve_longhand(self, token, tokens, setters):
        """
        resolve a LONG token ("name" or "name=value") and write its field.
        """
        name, separator, value = token.text.partition("=")
        option = self.lookup(name, index=token.index)

        if separator and not option.kind.takes_value:
            raise FlagAssignmentError(
                "flag %r at %s position cannot have an inline value" % ("--" + name, ordinal(token.index)),
                title="flag cannot take a value",
                code=FaultCode.FLAG_ASSIGNMENT,
                tool=self,
                input="--" + name,
                index=token.index,
                argument=option,
                hint="remove everything from '=' (for example: --%s)" % name,
                docs=getdoc(FaultCode.FLAG_ASSIGNMENT),
            )

        setters[self._fields[option]](self._getvalue(option, token, tokens, value if separator else Unset))

    def _resolve_shorthands(self, token, tokens, setters):
        """
        resolve a SHORT token (one or more stacked characters) and write fields.
        """
        for option in self.expand(token.text, index=token.index):
            setters[self._fields[option]](self._getvalue(option, token, tokens))

    def resolve(self, tokens, /):
        """
        Recursive descent over a token deque, consuming it front to back.

        States
        - parsing options: option tokens bind to this command's schema.
        - awaiting subcommand (nonterminal): the first bare token is the child
          name; resolution continues inside that child with the rest of the
          deque and this level ends.
        - terminal: bare tokens are collected, options keep binding here.

        Returns
        - Parse(options, subcommand, bares) for this level.

        Raises
        - UnknownOptionError, MissingArgumentError, InvalidArgumentError,
          StackedValueOptionError, FlagAssignmentError, UnknownSubcommandError.
        """
        namespace = self.namespace()
        # Setter closures bound to this parse's namespace, one per field.
        setters = {field: functools.partial(setattr, namespace, field) for field in self._options}
        bares = []

        while tokens:
            token = tokens.popleft()
            match token.kind:
                case TokenKind.LONG:
                    self._resolve_longhand(token, tokens, setters)
                case TokenKind.SHORT:
                    self._resolve_shorthands(token, tokens, setters)
                case _ if self.terminal:
                    bares.append(token.text)
                case _:
                    try:
                        child = self._children[token.text]
                    except KeyError:
                        typeof = "subcommand" if self.parent else "command"
                        raise UnknownSubcommandError(
                            "unknown %s %r at %s position" % (typeof, token.text, ordinal(token.index)),
                            title="unknown %s" % typeof,
                            code=FaultCode.UNKNOWN_SUBCOMMAND,
                            tool=self,
                            input=token.text,
                            index=token.index,
                            hint="'%s' expects one of: %s" % (self.route, ", ".join(map(repr, self._children))),
                            docs=getdoc(FaultCode.UNKNOWN_SUBCOMMAND),
                        ) from None
                    parse = child.resolve(tokens)
                    return Parse(namespace, Branch(child, parse.options, parse.subcommand), parse.bares)

        return Parse(namespace, nothing, bares)

    def parse(self, arguments, /):
        """
        Tokenize and resolve arguments (program name excluded).
        """
        return self.resolve(tokenize(arguments))

    def __invoke__(self, argv=Unset, /):
        """
        Parse an argument vector (program name first) and run the callbacks of
        every matched level, root first. Returns the Parse.
        """
        parse = execute(self, coalesce(argv, sys.argv))
        self(**dict(parse.options))
        branch = parse.subcommand
        while branch:
            branch.command(**dict(branch.options))
            branch = branch.subcommand
        return parse


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct callback:
        cmd = command(func, name="x", usage="...")
    - Decorator:
        @command(name="x", usage="...")
        def func(...): ...

    Parameters
    - source: Unset | Callable
      When Unset, a decorator is returned. Otherwise a Command is created.
    - *args, **kwargs: forwarded to Command.__new__.
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source) or isinstance(source, Command):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


def execute(command, argv, /):
    """
    Parse a full argument vector whose first item is the program name.

    Behavior
    - empty vector → MalformedInvocationError.
    - program name only → every option at its default, no subcommand, no bares.
    - otherwise the program name is dropped and the rest is parsed from the root.
    """
    if not isinstance(command, Command):
        raise TypeError("execute() first argument must be a command")
    if isinstance(argv, str) or not isinstance(argv, Sequence):
        raise TypeError("execute() second argument must be a sequence of strings")
    if not argv:
        raise MalformedInvocationError(
            "argument vector is empty (not even a program name)",
            title="malformed invocation",
            code=FaultCode.MALFORMED_INVOCATION,
            tool=command,
            hint="pass the full vector, program name first (for example: sys.argv)",
            docs=getdoc(FaultCode.MALFORMED_INVOCATION),
        )
    return command.parse(argv[1:])


def invoke(object, argv=Unset, /):
    """
    Convenience runner for commands or callables.

    Parameters
    - object: an instance providing __invoke__(argv) or a plain callable whose
      parameters default to option specs.
    - argv: Unset (use sys.argv) or a sequence whose first item is the program name.

    Returns
    - the Parse produced while invoking.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(argv)

    if callable(object):
        return invoke(command(object), argv)

    target = "argument" if argv is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Command",
    "Namespace",
    "Branch",
    "Parse",
    "command",
    "execute",
    "invoke",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
