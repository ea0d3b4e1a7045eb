"""
Option spec tests (construction, normalization and representation).

Scope
- Flag and Option metadata validation.
- Kind resolution, defaults and metavars of value-bearing options.

Conventions
- Test method names follow CamelCase per project convention.
- Declaration mistakes surface as TypeError or ValueError.
"""
import unittest
from unittest import TestCase

from rich.text import Text

from terse import Flag, Option, OptionalKind, FLAG, STRING, INTEGER, INT32, UINT8


class TestFlag(TestCase):

    def testDefaults(self):
        flag = Flag("verbose", "v", usage="prints verbosely")
        self.assertEqual(flag.longhand, "verbose")
        self.assertEqual(flag.shorthand, "v")
        self.assertEqual(flag.usage, "prints verbosely")
        self.assertIs(flag.kind, FLAG)
        self.assertIs(flag.default, False)
        self.assertIsNone(flag.metavar)

    def testOptionalMetadata(self):
        flag = Flag("dry-run")
        self.assertIsNone(flag.shorthand)
        self.assertIsNone(flag.usage)

    def testUsageIsTrimmed(self):
        self.assertEqual(Flag("verbose", usage="  talk more ").usage, "talk more")

    def testUsageAcceptsText(self):
        self.assertEqual(Flag("verbose", usage=Text("loud")).usage, Text("loud"))

    def testInvalidLonghands(self):
        for longhand in ("", "  ", "--verbose", "-v", "dry_run", "9lives", "dry--run", "dry-"):
            with self.subTest(longhand=longhand), self.assertRaises(ValueError):
                Flag(longhand)

    def testUnicodeLonghand(self):
        self.assertEqual(Flag("größe").longhand, "größe")

    def testInvalidShorthands(self):
        for shorthand in ("", "vv", "-", "_"):
            with self.subTest(shorthand=shorthand), self.assertRaises(ValueError):
                Flag("verbose", shorthand)

    def testWrongTypes(self):
        with self.assertRaises(TypeError):
            Flag(1)
        with self.assertRaises(TypeError):
            Flag("verbose", 1)
        with self.assertRaises(TypeError):
            Flag("verbose", usage=1)

    def testEmptyUsageRejected(self):
        with self.assertRaises(ValueError):
            Flag("verbose", usage=" ")

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            Flag("verbose").longhand = "quiet"

    def testRepr(self):
        self.assertEqual(
            repr(Flag("verbose", "v")),
            "flag(longhand='verbose', shorthand='v', usage=None, kind=flag, default=False)",
        )


class TestOption(TestCase):

    def testStringByDefault(self):
        option = Option("path", "p", usage="sets path")
        self.assertIs(option.kind, STRING)
        self.assertEqual(option.default, "")
        self.assertEqual(option.metavar, "string")

    def testIntType(self):
        option = Option("count", type=int)
        self.assertIs(option.kind, INTEGER)
        self.assertEqual(option.default, 0)

    def testFixedWidthType(self):
        option = Option("mem", "m", type=INT32)
        self.assertIs(option.kind, INT32)
        self.assertEqual(option.metavar, "int32")

    def testExplicitDefaultAndMetavar(self):
        option = Option("level", type=UINT8, default=3, metavar="n")
        self.assertEqual(option.default, 3)
        self.assertEqual(option.metavar, "n")

    def testOptional(self):
        option = Option("mem", type=int, optional=True)
        self.assertIsInstance(option.kind, OptionalKind)
        self.assertIs(option.kind.kind, INTEGER)
        self.assertIsNone(option.default)
        self.assertEqual(option.metavar, "integer")

    def testOptionalRefusesDefault(self):
        with self.assertRaises(TypeError):
            Option("mem", type=int, optional=True, default=4)

    def testFlagKindRefused(self):
        with self.assertRaises(TypeError):
            Option("verbose", type=FLAG)

    def testUnsupportedType(self):
        with self.assertRaises(TypeError):
            Option("ratio", type=float)

    def testEmptyMetavarRejected(self):
        with self.assertRaises(ValueError):
            Option("mem", metavar="")

    def testGenericAlias(self):
        self.assertIs(Option[int].__origin__, Option)

    def testHooks(self):
        option = Option("mem")
        self.assertIs(option.__option__(), option)
        flag = Flag("verbose")
        self.assertIs(flag.__flag__(), flag)

    def testRichRepr(self):
        self.assertEqual(
            dict(Option("mem", "m", type=INT32).__rich_repr__()),
            {
                "longhand": "mem",
                "shorthand": "m",
                "usage": None,
                "kind": INT32,
                "default": 0,
                "metavar": "int32",
            },
        )


if __name__ == '__main__':
    unittest.main()
