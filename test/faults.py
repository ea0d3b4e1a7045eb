"""
Fault taxonomy and rendering tests.

Scope
- Stable fault codes and host normalization.
- Read-only fault context.
- Rich rendering through report() (plain and fancy).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured on an in-memory console without colors.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console

from terse import command, execute, Flag
from terse.faults import *


@command(name="prog")
def plain(verbose=Flag("verbose", "v")):
    pass


@command(name="prog", fancy=True)
def framed(verbose=Flag("verbose", "v")):
    pass


def capture(fault):
    console = Console(file=io.StringIO(), color_system=None, width=120)
    report(fault, console=console)
    return console.file.getvalue()


class TestFaultCodes(TestCase):

    def testStableValues(self):
        self.assertEqual(FaultCode.MALFORMED_INVOCATION, 10101)
        self.assertEqual(FaultCode.UNKNOWN_OPTION, 11112)
        self.assertEqual(FaultCode.INVALID_ARGUMENT, 11124)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_SUBCOMMAND.normalize(), "11102")

    def testGetdocWithoutHostDocs(self):
        self.assertIsNone(getdoc(FaultCode.MISSING_ARGUMENT))

    def testGetdocRejectsPlainIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(11112)


class TestCommandException(TestCase):

    def testHierarchy(self):
        for error in (
                MalformedInvocationError,
                UnknownOptionError,
                UnknownSubcommandError,
                MissingArgumentError,
                InvalidArgumentError,
                StackedValueOptionError,
                FlagAssignmentError,
        ):
            with self.subTest(error=error):
                self.assertTrue(issubclass(error, CommandException))

    def testOptionsAreReadOnly(self):
        fault = CommandException("boom", code=FaultCode.UNKNOWN_OPTION)
        with self.assertRaises(TypeError):
            fault.options["code"] = None
        self.assertIs(fault.code, FaultCode.UNKNOWN_OPTION)
        self.assertEqual(str(fault), "boom")

    def testParseFaultContext(self):
        with self.assertRaises(UnknownOptionError) as context:
            execute(plain, ["prog", "--quiet"])
        fault = context.exception
        self.assertEqual(fault.options["title"], "unknown option")
        self.assertIs(fault.options["tool"], plain)
        self.assertIn("prog", fault.options["hint"])


class TestReport(TestCase):

    def testPlainRendering(self):
        with self.assertRaises(UnknownOptionError) as context:
            execute(plain, ["prog", "-x"])
        output = capture(context.exception)
        self.assertIn("[ prog — 11112 | Unknown Option ]", output)
        self.assertIn("unknown option '-x' at first position", output)
        self.assertIn("→", output)

    def testFancyRendering(self):
        with self.assertRaises(MalformedInvocationError) as context:
            execute(framed, [])
        output = capture(context.exception)
        self.assertIn("Malformed Invocation", output)
        self.assertIn("argument vector is empty", output)

    def testWithoutTool(self):
        output = capture(CommandException("boom", title="failure"))
        self.assertIn("Failure", output)
        self.assertIn("boom", output)

    def testRejectsNonRenderable(self):
        with self.assertRaises(TypeError):
            report(object())


if __name__ == '__main__':
    unittest.main()
