"""
Tokenizer tests.

Scope
- Classification of long, short and bare arguments.
- The "--" terminator and the lone "-".
- 1-based positions and input validation.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from collections import deque
from unittest import TestCase

from terse.tokens import *


class TestClassify(TestCase):

    def testLong(self):
        self.assertEqual(classify("--verbose"), Token(TokenKind.LONG, "verbose", 1))

    def testLongKeepsInlineValue(self):
        self.assertEqual(classify("--mem=4").text, "mem=4")

    def testShort(self):
        self.assertEqual(classify("-v"), Token(TokenKind.SHORT, "v", 1))

    def testShortStack(self):
        token = classify("-vqm", 3)
        self.assertIs(token.kind, TokenKind.SHORT)
        self.assertEqual(token.text, "vqm")
        self.assertEqual(token.index, 3)

    def testBare(self):
        self.assertEqual(classify("file.txt"), Token(TokenKind.BARE, "file.txt", 1))

    def testLoneDashIsBare(self):
        self.assertIs(classify("-").kind, TokenKind.BARE)

    def testEmptyIsBare(self):
        self.assertEqual(classify(""), Token(TokenKind.BARE, "", 1))

    def testRawRestoresPrefix(self):
        self.assertEqual(classify("--mem=4").raw, "--mem=4")
        self.assertEqual(classify("-vq").raw, "-vq")
        self.assertEqual(classify("foo").raw, "foo")

    def testOptionProperty(self):
        self.assertTrue(classify("--a").option)
        self.assertTrue(classify("-a").option)
        self.assertFalse(classify("a").option)

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            classify(4)


class TestTokenize(TestCase):

    def testReturnsDequeInOrder(self):
        tokens = tokenize(["--verbose", "foo", "-v"])
        self.assertIsInstance(tokens, deque)
        self.assertEqual([token.kind for token in tokens], [TokenKind.LONG, TokenKind.BARE, TokenKind.SHORT])
        self.assertEqual([token.index for token in tokens], [1, 2, 3])

    def testEmpty(self):
        self.assertEqual(tokenize([]), deque())

    def testTerminatorMakesRestBare(self):
        tokens = tokenize(["-v", TERMINATOR, "--verbose", "-x", "--"])
        self.assertEqual(
            list(tokens),
            [
                Token(TokenKind.SHORT, "v", 1),
                Token(TokenKind.BARE, "--verbose", 3),
                Token(TokenKind.BARE, "-x", 4),
                Token(TokenKind.BARE, "--", 5),
            ],
        )

    def testAcceptsAnyIterable(self):
        self.assertEqual(len(tokenize(iter(("a", "b")))), 2)

    def testPlainStringRejected(self):
        with self.assertRaises(TypeError):
            tokenize("--verbose")

    def testNonStringItemRejected(self):
        with self.assertRaises(TypeError):
            tokenize(["--mem", 4])


if __name__ == '__main__':
    unittest.main()
