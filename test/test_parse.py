"""
Parser behavioral tests without option configurations.

Scope
- Validate token classification (long options, short clusters, inline params).
- Validate the end-of-options marker and the bare hyphen.
- Validate invalid-character faults and the empty result handed back with them.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (parse, ParsedArgs, faults).
"""

from __future__ import annotations

import sys
import unittest
from unittest import TestCase, mock

from clidax import parse, ParsedArgs, OptionHasInvalidCharError, FaultCode


class TestParse(TestCase):
    """Behavioral tests for parse()."""

    def assertAbsent(self, args, *names):
        for name in names:
            self.assertFalse(args.has_opt(name))
            self.assertEqual(args.opt_param(name), "")
            self.assertIsNone(args.opt_params(name))

    def testZeroArg(self):
        args = parse([])
        self.assertEqual(args.cmd_params, [])
        self.assertEqual(args.options, {})
        self.assertAbsent(args, "a", "alphabet", "s", "silent")

    def testDefaultsToSystemArguments(self):
        with mock.patch.object(sys, "argv", ["prog", "--silent", "abcd"]):
            args = parse()
        self.assertEqual(args.cmd_params, ["abcd"])
        self.assertTrue(args.has_opt("silent"))

    def testOneNonOptArg(self):
        args = parse(["abcd"])
        self.assertEqual(args.cmd_params, ["abcd"])
        self.assertAbsent(args, "a", "alphabet", "s", "silent")

    def testOneLongOpt(self):
        args = parse(["--silent"])
        self.assertEqual(args.cmd_params, [])
        self.assertTrue(args.has_opt("silent"))
        self.assertEqual(args.opt_param("silent"), "")
        self.assertEqual(args.opt_params("silent"), [])
        self.assertAbsent(args, "a", "alphabet", "s")

    def testOneLongOptWithParam(self):
        args = parse(["--alphabet=ABC"])
        self.assertEqual(args.cmd_params, [])
        self.assertTrue(args.has_opt("alphabet"))
        self.assertEqual(args.opt_param("alphabet"), "ABC")
        self.assertEqual(args.opt_params("alphabet"), ["ABC"])
        self.assertAbsent(args, "a", "s", "silent")

    def testLongOptDoesNotTakeNextArg(self):
        args = parse(["--alphabet", "ABC"])
        self.assertEqual(args.cmd_params, ["ABC"])
        self.assertEqual(args.opt_params("alphabet"), [])

    def testLongOptWithEmptyParam(self):
        args = parse(["--alphabet="])
        self.assertEqual(args.opt_params("alphabet"), [""])

    def testOneShortOpt(self):
        args = parse(["-s"])
        self.assertEqual(args.cmd_params, [])
        self.assertTrue(args.has_opt("s"))
        self.assertEqual(args.opt_param("s"), "")
        self.assertEqual(args.opt_params("s"), [])
        self.assertAbsent(args, "a", "alphabet", "silent")

    def testOneShortOptWithParam(self):
        args = parse(["-a=123"])
        self.assertEqual(args.cmd_params, [])
        self.assertTrue(args.has_opt("a"))
        self.assertEqual(args.opt_param("a"), "123")
        self.assertEqual(args.opt_params("a"), ["123"])
        self.assertAbsent(args, "alphabet", "s", "silent")

    def testOneArgByMultipleShortOpts(self):
        args = parse(["-sa"])
        self.assertEqual(args.cmd_params, [])
        self.assertEqual(args.opt_params("a"), [])
        self.assertEqual(args.opt_params("s"), [])
        self.assertAbsent(args, "alphabet", "silent")

    def testOneArgByMultipleShortOptsWithParam(self):
        args = parse(["-sa=123"])
        self.assertEqual(args.cmd_params, [])
        self.assertEqual(args.opt_param("a"), "123")
        self.assertEqual(args.opt_params("a"), ["123"])
        self.assertTrue(args.has_opt("s"))
        self.assertEqual(args.opt_params("s"), [])
        self.assertAbsent(args, "alphabet", "silent")

    def testLongOptNameIncludesHyphenMark(self):
        args = parse(["--aaa-bbb-ccc=123"])
        self.assertEqual(args.cmd_params, [])
        self.assertEqual(args.opt_params("aaa-bbb-ccc"), ["123"])

    def testOptParamsIncludesEqualMark(self):
        args = parse(["-sa=b=c"])
        self.assertEqual(args.opt_params("a"), ["b=c"])
        self.assertEqual(args.opt_params("s"), [])

    def testOptParamsIncludesMarks(self):
        args = parse(["-sa=1,2-3"])
        self.assertEqual(args.opt_params("a"), ["1,2-3"])
        self.assertEqual(args.opt_params("s"), [])

    def testIllegalLongOptIfIncludingInvalidChar(self):
        with self.assertRaises(OptionHasInvalidCharError) as context:
            parse(["-s", "--abc%def", "-a"])
        self.assertEqual(context.exception.options["option"], "abc%def")
        self.assertEqual(context.exception.options["code"], FaultCode.OPTION_HAS_INVALID_CHAR)

        result = context.exception.options["result"]
        self.assertIsInstance(result, ParsedArgs)
        self.assertEqual(result.cmd_params, [])
        self.assertAbsent(result, "a", "alphabet", "s", "silent")

    def testIllegalLongOptIfFirstCharIsNumber(self):
        with self.assertRaises(OptionHasInvalidCharError) as context:
            parse(["--1abc"])
        self.assertEqual(context.exception.options["option"], "1abc")
        self.assertEqual(context.exception.options["result"].cmd_params, [])

    def testIllegalLongOptIfFirstCharIsHyphen(self):
        with self.assertRaises(OptionHasInvalidCharError) as context:
            parse(["---aaa=123"])
        self.assertEqual(context.exception.options["option"], "-aaa=123")
        self.assertEqual(context.exception.options["result"].cmd_params, [])

    def testIllegalCharInShortOpt(self):
        with self.assertRaises(OptionHasInvalidCharError) as context:
            parse(["-s", "--alphabet", "-s@"])
        self.assertEqual(context.exception.options["option"], "@")
        result = context.exception.options["result"]
        self.assertEqual(result.cmd_params, [])
        self.assertAbsent(result, "a", "alphabet", "s", "silent")

    def testIllegalCharInMiddleOfShortOpts(self):
        with self.assertRaises(OptionHasInvalidCharError) as context:
            parse(["-a1b=2"])
        self.assertEqual(context.exception.options["option"], "1b")

    def testEmptyShortOptCluster(self):
        with self.assertRaises(OptionHasInvalidCharError) as context:
            parse(["-=abc"])
        self.assertEqual(context.exception.options["option"], "=abc")

    def testErrorDiscardsCmdParamsBeforeFailingToken(self):
        with self.assertRaises(OptionHasInvalidCharError) as context:
            parse(["abc", "def", "--ghi%"])
        self.assertEqual(context.exception.options["result"].cmd_params, [])
        self.assertEqual(context.exception.options["result"].options, {})

    def testUseEndOptMark(self):
        args = parse(["-s", "--", "-s", "--", "-s@", "xxx"])
        self.assertEqual(args.cmd_params, ["-s", "--", "-s@", "xxx"])
        self.assertTrue(args.has_opt("s"))
        self.assertEqual(args.opt_params("s"), [])
        self.assertAbsent(args, "a", "alphabet", "silent")

    def testSingleHyphen(self):
        args = parse(["-"])
        self.assertEqual(args.cmd_params, ["-"])
        self.assertAbsent(args, "a", "alphabet", "s", "silent")

    def testMultipleArgs(self):
        args = parse(["--foo-bar", "-a", "--baz", "-bc=3", "qux", "-c=4", "quux"])
        self.assertEqual(args.opt_params("a"), [])
        self.assertEqual(args.opt_params("b"), [])
        self.assertEqual(args.opt_param("c"), "3")
        self.assertEqual(args.opt_params("c"), ["3", "4"])
        self.assertEqual(args.opt_params("foo-bar"), [])
        self.assertEqual(args.opt_params("baz"), [])
        self.assertEqual(args.cmd_params, ["qux", "quux"])

    def testMultipleArgsWithInlineLongParam(self):
        args = parse(["--foo-bar=A", "-a", "--baz", "-bc=3", "qux"])
        self.assertEqual(args.options, {"foo-bar": ["A"], "a": [], "baz": [], "b": [], "c": ["3"]})
        self.assertEqual(args.cmd_params, ["qux"])

    def testCmdParamsOnlyKeepOrder(self):
        tokens = ["one", "two", "-", "three"]
        args = parse(tokens)
        self.assertEqual(args.cmd_params, tokens)
        self.assertEqual(parse(args.cmd_params).cmd_params, tokens)

    def testResultIsNotShared(self):
        args = parse(["-a=1", "x"])
        args.cmd_params.append("y")
        args.opt_params("a").append("2")
        args.options["b"] = []
        self.assertEqual(args.cmd_params, ["x"])
        self.assertEqual(args.opt_params("a"), ["1"])
        self.assertFalse(args.has_opt("b"))

    def testShellModeExits(self):
        with mock.patch("clidax.faults.console") as console:
            with self.assertRaises(SystemExit) as context:
                parse(["--1abc"], shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        console.print.assert_called_once()
        fault, = console.print.call_args.args
        self.assertIsInstance(fault, OptionHasInvalidCharError)
        self.assertTrue(fault.options["shell"])


if __name__ == "__main__":
    unittest.main()
