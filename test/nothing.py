"""
Tests for the `nothing` marker (no subcommand selected).

Scope
- Singleton identity across construction, copying and pickling.
- Falsy semantics and stable repr/rich rendering.
- Finality of nothingtype.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from rich.console import Console
from rich.text import Text

from terse.nothing import *


class NothingTest(TestCase):
    """
    `nothing` behaves as a falsy, unique, unsubclassable marker.
    """

    def testSingleton(self):
        self.assertIs(nothingtype(), nothing)
        self.assertIs(nothingtype(), nothingtype())

    def testFalsy(self):
        self.assertFalse(nothing)
        self.assertNotEqual(nothing, None)
        self.assertNotEqual(nothing, False)  # noqa: E712

    def testRepr(self):
        self.assertEqual(repr(nothing), "nothing")
        self.assertEqual(str(nothing), "nothing")

    def testRich(self):
        self.assertEqual(nothing.__rich__(), Text("nothing", style="dim"))

    def testRichConsolePrint(self):
        """
        Console output is the bare word when color is disabled.
        """
        console = Console(color_system=None, force_terminal=False)
        with console.capture() as capture:
            console.print(nothing)
        self.assertEqual(capture.get().strip(), "nothing")

    def testCopyAndPicklePreserveIdentity(self):
        self.assertIs(copy.copy(nothing), nothing)
        self.assertIs(copy.deepcopy(nothing), nothing)
        self.assertIs(pickle.loads(pickle.dumps(nothing)), nothing)

    def testFinalClass(self):
        with self.assertRaises(TypeError):
            type("marker", (nothingtype,), {})


if __name__ == '__main__':
    unittest.main()
