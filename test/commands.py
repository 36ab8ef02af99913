"""
Commands module behavioral tests (construction, lifecycle order, hooks, invoke).

Scope
- Validate that construction registers hooks and loads params/options.
- Validate the exec() sequence: pre_action, action, post_action, reset out, reset err.
- Validate failure policy: errors propagate, post_action is skipped, reset still runs.
- Validate invoke(): collaborator assembly, argv forms, shell-mode fault rendering.

Conventions
- Test method names follow CamelCase per project convention.
- In-memory streams replace the process streams.
"""

from __future__ import annotations

import io
import unittest
from contextlib import redirect_stderr
from unittest import TestCase

from bosun import (
    Command,
    Context,
    Flag,
    Getopt,
    Option,
    Signal,
    Stdio,
    StdioResource,
    invoke,
)
from bosun.faults import ParseError, SchemaError, UnknownSwitchError


def _stdio(posix=False):
    return Stdio(
        StdioResource(io.StringIO(), posix),
        StdioResource(io.StringIO(), posix),
        StdioResource(io.StringIO(), posix),
    )


class MockCommand(Command):
    def __init__(self, *args, **kwargs):
        self._pre_action = False
        self._post_action = False
        self.calls = []
        super().__init__(*args, **kwargs)

    def pre_action(self):
        self._pre_action = True
        self.calls.append("pre_action")

    def action(self):
        self.calls.append("action")

    def post_action(self):
        self._post_action = True
        self.calls.append("post_action")


class FailingCommand(MockCommand):
    def action(self):
        self.stdio.out("<<red>>partial")
        raise RuntimeError("action failed")


class OptionsCommand(MockCommand):
    options = {
        "output": Option("-o", "--output"),
        "verbose": Flag("-v", "--verbose"),
    }


class LenientCommand(MockCommand):
    strict = False


class BrokenSchemaCommand(MockCommand):
    options = {"verbose": "-v"}


class RecordingStdioResource(StdioResource):
    def __init__(self, label, calls):
        super().__init__(io.StringIO(), False)
        self.label = label
        self.calls = calls

    def write(self, text, /):
        self.calls.append("%s:%s" % (self.label, text))
        super().write(text)


class ClosedStdioResource(StdioResource):
    def __init__(self):
        super().__init__(io.StringIO(), False)

    def write(self, text, /):
        raise BrokenPipeError("stream closed")


class TestCommand(TestCase):
    """Behavioral tests for the Command lifecycle."""

    def newMockCommand(self, argv=(), cls=MockCommand, *, stdio=None, signal=None):
        return cls(
            Context(argv),
            _stdio() if stdio is None else stdio,
            Getopt(),
            Signal() if signal is None else signal,
        )

    def testExec(self):
        expect = ["foo", "bar", "baz", "dib"]
        command = self.newMockCommand(expect)
        self.assertEqual(command.params, expect)
        command.exec()
        self.assertEqual(command.params, expect)

    def testExecHooks(self):
        command = self.newMockCommand()
        command.exec()
        self.assertTrue(command._pre_action)
        self.assertTrue(command._post_action)
        self.assertEqual(command.calls.count("pre_action"), 1)
        self.assertEqual(command.calls.count("post_action"), 1)

    def testEmptyArgvRunsFullSequence(self):
        command = self.newMockCommand([])
        self.assertEqual(command.params, [])
        command.exec()
        self.assertEqual(command.calls, ["pre_action", "action", "post_action"])

    def testConstructionRegistersHooks(self):
        signal = Signal()
        command = self.newMockCommand(signal=signal)
        names = [(handler.subscriber, handler.name) for handler in signal.handlers()]
        self.assertEqual(names, [(command, "pre_action"), (command, "post_action")])

    def testConstructionDoesNotRunHooks(self):
        command = self.newMockCommand()
        self.assertEqual(command.calls, [])

    def testLifecycleOrder(self):
        calls = []
        stdio = Stdio(
            StdioResource(io.StringIO(), False),
            RecordingStdioResource("out", calls),
            RecordingStdioResource("err", calls),
        )
        signal = Signal()
        signal.handler(None, "pre_action", lambda: calls.append("external pre"))
        command = self.newMockCommand(stdio=stdio, signal=signal)
        command.calls = calls
        signal.handler(None, "post_action", lambda: calls.append("external post"))
        command.exec()
        self.assertEqual(calls, [
            "external pre",
            "pre_action",
            "action",
            "post_action",
            "external post",
            "out:<<reset>>",
            "err:<<reset>>",
        ])

    def testResetWrittenToBothChannels(self):
        stdio = _stdio(posix=True)
        self.newMockCommand(stdio=stdio).exec()
        self.assertEqual(stdio.stdout.stream.getvalue(), "\x1b[0m")
        self.assertEqual(stdio.stderr.stream.getvalue(), "\x1b[0m")

    def testResetStrippedOnNonPosix(self):
        stdio = _stdio(posix=False)
        self.newMockCommand(stdio=stdio).exec()
        self.assertEqual(stdio.stdout.stream.getvalue(), "")
        self.assertEqual(stdio.stderr.stream.getvalue(), "")

    def testExecTwiceRunsTwice(self):
        command = self.newMockCommand()
        command.exec()
        command.exec()
        self.assertEqual(command.calls, ["pre_action", "action", "post_action"] * 2)

    def testFailingActionPropagatesAndStillResets(self):
        stdio = _stdio(posix=True)
        command = self.newMockCommand(cls=FailingCommand, stdio=stdio)
        with self.assertRaisesRegex(RuntimeError, "action failed"):
            command.exec()
        self.assertEqual(command.calls, ["pre_action"])
        self.assertFalse(command._post_action)
        self.assertEqual(stdio.stdout.stream.getvalue(), "\x1b[31mpartial\x1b[0m")
        self.assertEqual(stdio.stderr.stream.getvalue(), "\x1b[0m")

    def testActionErrorWinsOverFailingReset(self):
        stdio = Stdio(
            StdioResource(io.StringIO(), False),
            StdioResource(io.StringIO(), True),
            ClosedStdioResource(),
        )
        command = self.newMockCommand(cls=FailingCommand, stdio=stdio)
        with self.assertRaisesRegex(RuntimeError, "action failed"):
            command.exec()
        self.assertEqual(stdio.stdout.stream.getvalue(), "\x1b[31mpartial\x1b[0m")

    def testFailingResetPropagatesAfterSuccess(self):
        stdio = Stdio(
            StdioResource(io.StringIO(), False),
            ClosedStdioResource(),
            StdioResource(io.StringIO(), False),
        )
        command = self.newMockCommand(stdio=stdio)
        with self.assertRaises(BrokenPipeError):
            command.exec()
        self.assertEqual(command.calls, ["pre_action", "action", "post_action"])

    def testFailingHookSkipsAction(self):
        signal = Signal()
        command = self.newMockCommand(signal=signal)

        def deny():
            raise PermissionError("denied")

        signal.handler(None, "pre_action", deny)
        with self.assertRaises(PermissionError):
            command.exec()
        self.assertEqual(command.calls, ["pre_action"])

    def testOptionsAreParsed(self):
        command = self.newMockCommand(["-v", "--output=out.txt", "src"], OptionsCommand)
        self.assertEqual(command.params, ["src"])
        self.assertIs(command.getopt.get("verbose"), True)
        self.assertEqual(command.getopt.get("output"), "out.txt")

    def testStrictRejectsUnknownBeforeAction(self):
        with self.assertRaises(UnknownSwitchError):
            self.newMockCommand(["--nope"], OptionsCommand)

    def testLenientKeepsUnknown(self):
        command = self.newMockCommand(["--nope", "file"], LenientCommand)
        self.assertEqual(command.params, ["file"])
        self.assertIs(command.getopt.get("--nope"), True)

    def testMalformedSchemaAbortsConstruction(self):
        with self.assertRaises(SchemaError):
            self.newMockCommand([], BrokenSchemaCommand)

    def testParamsSnapshotIsIsolated(self):
        command = self.newMockCommand(["a"])
        command.params.append("b")
        self.assertEqual(command.params, ["a"])

    def testActionIsRequired(self):
        class Incomplete(Command):
            pass

        with self.assertRaises(TypeError):
            self.newMockCommand(cls=Incomplete)

    def testNameDefaultsToKebabCase(self):
        class ListFiles(MockCommand):
            pass

        class Named(MockCommand):
            name = "custom"

        self.assertEqual(ListFiles.name, "list-files")
        self.assertEqual(Named.name, "custom")


class TestInvoke(TestCase):
    """Behavioral tests for the invoke() entry point."""

    def testInvokeWithIterable(self):
        command = invoke(MockCommand, ["a", "b"], stdio=_stdio())
        self.assertEqual(command.params, ["a", "b"])
        self.assertEqual(command.calls, ["pre_action", "action", "post_action"])

    def testInvokeWithString(self):
        command = invoke(OptionsCommand, "-o 'my file.txt' src", stdio=_stdio())
        self.assertEqual(command.getopt.get("output"), "my file.txt")
        self.assertEqual(command.params, ["src"])

    def testInvokeUsesSharedSignal(self):
        signal = Signal()
        seen = []
        signal.handler(None, "post_action", lambda: seen.append("audit"))
        invoke(MockCommand, [], stdio=_stdio(), signal=signal)
        self.assertEqual(seen, ["audit"])

    def testInvokeRejectsNonCommand(self):
        with self.assertRaises(TypeError):
            invoke(object, [])

    def testInvokeRaisesOutsideShell(self):
        with self.assertRaises(ParseError):
            invoke(OptionsCommand, ["--nope"], stdio=_stdio())

    def testInvokeShellRendersAndExits(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as caught:
            invoke(OptionsCommand, ["--nope"], stdio=_stdio(), shell=True, colorful=False)
        self.assertEqual(caught.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
