"""
Scanner behavioral tests (token rules, bundles, argument carry-over, faults).

Scope
- Validate positional numbering and the '--' end-of-options marker.
- Validate longest-match resolution of short bundles and inline arguments.
- Validate long options split at the first '='.
- Validate the carry-over of arguments into the next token for short forms.
- Validate fault ordering: events before the offending form are delivered first.

Conventions
- Test method names follow CamelCase per project convention.
- Scanners are driven through the Registry, without settings or callbacks.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from getoptions import OptionSpec, OptionOccurrence, PositionalOccurrence
from getoptions.faults import (
    UnrecognizedOptionError,
    ArgumentNotAllowedError,
    MissingArgumentError,
)
from getoptions.registry import Registry
from getoptions.scanner import Scanner


def scan(tokens, *specs):
    return list(Scanner(tokens, Registry(specs)))


class TestPositionals(TestCase):
    """Behavioral tests for positional parameters."""

    def testPlainTokens(self):
        self.assertEqual(scan(["a", "b"]), [
            PositionalOccurrence(0, "a", 0),
            PositionalOccurrence(1, "b", 1),
        ])

    def testLoneDashIsPositional(self):
        self.assertEqual(scan(["-"]), [PositionalOccurrence(0, "-", 0)])

    def testPositionCountsPositionalsOnly(self):
        verbose = OptionSpec(short="v")
        self.assertEqual(scan(["a", "-v", "b"], verbose), [
            PositionalOccurrence(0, "a", 0),
            OptionOccurrence(verbose, None, 1, 0, 1),
            PositionalOccurrence(1, "b", 2),
        ])

    def testEndOfOptions(self):
        foo = OptionSpec(long="foo")
        self.assertEqual(scan(["--foo", "--", "-bar", "--"], foo), [
            OptionOccurrence(foo, None, 0),
            PositionalOccurrence(0, "-bar", 2),
            PositionalOccurrence(1, "--", 3),
        ])

    def testEmptyInput(self):
        self.assertEqual(scan([], OptionSpec(short="v")), [])


class TestBundles(TestCase):
    """Behavioral tests for short-form bundles."""

    def testLongestMatch(self):
        m = OptionSpec(short="M")
        mf = OptionSpec(short="MF", argument="required")
        mg = OptionSpec(short="MG")
        mp = OptionSpec(short="MP")
        self.assertEqual(scan(["-MMGMPMFfile"], m, mf, mg, mp), [
            OptionOccurrence(m, None, 0, 0, 1),
            OptionOccurrence(mg, None, 0, 1, 2),
            OptionOccurrence(mp, None, 0, 3, 2),
            OptionOccurrence(mf, "file", 0, 5, 2),
        ])

    def testFlagsBundle(self):
        a, b = OptionSpec(short="a"), OptionSpec(short="b")
        self.assertEqual(scan(["-aba"], a, b), [
            OptionOccurrence(a, None, 0, 0, 1),
            OptionOccurrence(b, None, 0, 1, 1),
            OptionOccurrence(a, None, 0, 2, 1),
        ])

    def testInlineArgumentTakesRemainder(self):
        v = OptionSpec(short="v")
        output = OptionSpec(short="o", argument="required")
        self.assertEqual(scan(["-vofile.txt"], v, output), [
            OptionOccurrence(v, None, 0, 0, 1),
            OptionOccurrence(output, "file.txt", 0, 1, 1),
        ])

    def testInlineOptionalArgument(self):
        output = OptionSpec(short="o", argument="optional")
        self.assertEqual(scan(["-ofile"], output), [OptionOccurrence(output, "file", 0, 0, 1)])

    def testUnknownFormAfterKnownOnes(self):
        verbose = OptionSpec(short="v")
        scanner = Scanner(["-vx", "rest"], Registry([verbose]))
        self.assertEqual(next(scanner), OptionOccurrence(verbose, None, 0, 0, 1))
        with self.assertRaises(UnrecognizedOptionError) as context:
            next(scanner)
        self.assertEqual(context.exception.options["subindex"], 1)
        self.assertEqual(context.exception.options["input"], "-x")
        with self.assertRaises(StopIteration):
            next(scanner)


class TestCarryOver(TestCase):
    """Behavioral tests for arguments taken from the next token."""

    def testRequiredTakesNextToken(self):
        output = OptionSpec(short="o", argument="required")
        self.assertEqual(scan(["-o", "file", "x"], output), [
            OptionOccurrence(output, "file", 0, 0, 1),
            PositionalOccurrence(0, "x", 2),
        ])

    def testRequiredTakesOptionLookingToken(self):
        output = OptionSpec(short="o", argument="required")
        verbose = OptionSpec(short="v")
        self.assertEqual(scan(["-o", "-v"], output, verbose), [OptionOccurrence(output, "-v", 0, 0, 1)])

    def testRequiredTakesEndMarker(self):
        output = OptionSpec(short="o", argument="required")
        self.assertEqual(scan(["-o", "--", "x"], output), [
            OptionOccurrence(output, "--", 0, 0, 1),
            PositionalOccurrence(0, "x", 2),
        ])

    def testRequiredAtEndOfInput(self):
        output = OptionSpec(short="o", argument="required")
        with self.assertRaises(MissingArgumentError) as context:
            scan(["x", "-o"], output)
        self.assertEqual(context.exception.options["index"], 1)
        self.assertEqual(context.exception.options["input"], "-o")

    def testOptionalTakesNextToken(self):
        output = OptionSpec(short="o", argument="optional")
        self.assertEqual(scan(["-o", "file"], output), [OptionOccurrence(output, "file", 0, 0, 1)])

    def testOptionalLeavesOptionToken(self):
        output = OptionSpec(short="o", argument="optional")
        verbose = OptionSpec(short="v")
        self.assertEqual(scan(["-o", "-v"], output, verbose), [
            OptionOccurrence(output, None, 0, 0, 1),
            OptionOccurrence(verbose, None, 1, 0, 1),
        ])

    def testOptionalLeavesEndMarker(self):
        output = OptionSpec(short="o", argument="optional")
        self.assertEqual(scan(["-o", "--", "-o"], output), [
            OptionOccurrence(output, None, 0, 0, 1),
            PositionalOccurrence(0, "-o", 2),
        ])

    def testOptionalAtEndOfInput(self):
        output = OptionSpec(short="o", argument="optional")
        self.assertEqual(scan(["-o"], output), [OptionOccurrence(output, None, 0, 0, 1)])


class TestLongOptions(TestCase):
    """Behavioral tests for '--name[=value]' tokens."""

    def testFlag(self):
        quiet = OptionSpec(long="quiet")
        self.assertEqual(scan(["--quiet"], quiet), [OptionOccurrence(quiet, None, 0)])

    def testInlineValueSplitAtFirstEquals(self):
        define = OptionSpec(long="define", argument="required")
        self.assertEqual(scan(["--define=a=b"], define), [OptionOccurrence(define, "a=b", 0)])

    def testRequiredWithoutValue(self):
        output = OptionSpec(long="output", argument="required")
        for token in ("--output", "--output="):
            with self.subTest(token=token), self.assertRaises(MissingArgumentError):
                scan([token, "file"], output)

    def testNeverTakesNextToken(self):
        output = OptionSpec(long="output", argument="optional")
        self.assertEqual(scan(["--output", "file"], output), [
            OptionOccurrence(output, None, 0),
            PositionalOccurrence(0, "file", 1),
        ])

    def testOptionalEmptyValue(self):
        output = OptionSpec(long="output", argument="optional")
        self.assertEqual(scan(["--output="], output), [OptionOccurrence(output, "", 0)])

    def testValueNotAllowed(self):
        quiet = OptionSpec(long="quiet")
        for token in ("--quiet=x", "--quiet="):
            with self.subTest(token=token), self.assertRaises(ArgumentNotAllowedError):
                scan([token], quiet)

    def testUnrecognized(self):
        with self.assertRaises(UnrecognizedOptionError) as context:
            scan(["a", "--nope=1"], OptionSpec(long="yes"))
        self.assertEqual(context.exception.options["input"], "--nope")
        self.assertEqual(context.exception.options["index"], 1)

    def testShortFormIsNotLong(self):
        with self.assertRaises(UnrecognizedOptionError):
            scan(["--v"], OptionSpec(short="v"))


if __name__ == "__main__":
    unittest.main()
