#!/usr/bin/env python3
"""
Execution Engine Tests

Commands run for real: the engine forks, redirects and execs the fixture
scripts written to a temporary search directory.

Version: 1.0.0
"""

import os
import signal
import stat
import tempfile
import unittest

from simpsh.core.environment import EnvironmentTable
from simpsh.core.signals import InterruptFlag
from simpsh.exceptions import AbnormalTerminationError, ExitArgumentError, ShellExit
from simpsh.process import (
    INTERRUPTED_STATUS,
    NO_OP,
    ExecutionEngine,
    ProcessHandle,
    ProcessState,
)
from simpsh.shell.parser import CommandParser
from simpsh.tests.fixtures import make_bin_dir, parse_echo_output, write_script


class ExecutorTestCase(unittest.TestCase):
    """Shared setup: a search directory with the fixture scripts."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.bin_dir = make_bin_dir(os.path.join(self.tmpdir.name, "bin"))
        self.flag = InterruptFlag()
        self.engine = ExecutionEngine(self.flag)
        self.parser = CommandParser()
        self.env = EnvironmentTable("simpsh", self.bin_dir, "dumb")

    def tearDown(self):
        self.tmpdir.cleanup()

    def path(self, name):
        return os.path.join(self.tmpdir.name, name)

    def run_line(self, line):
        return self.engine.execute(self.parser.parse(line), self.env)

    def read(self, name):
        with open(self.path(name), 'r', encoding='utf-8') as f:
            return f.read()


class TestExecutionEngine(ExecutorTestCase):
    """Test fork/exec/wait."""

    def test_exit_status(self):
        """The child's exit status is returned."""
        for code in (0, 7, 255):
            with self.subTest(code=code):
                result = self.run_line(f"status {code}")
                self.assertEqual(result.status, code)
                self.assertFalse(result.noop)

    def test_arguments_and_environment(self):
        """The child gets its argv and exactly the shell's environment."""
        out = self.path("out.txt")
        self.env.record_status(3)

        result = self.run_line(f"myecho > {out} hello world")

        self.assertEqual(result.status, 0)
        args, environ = parse_echo_output(self.read("out.txt"))
        self.assertEqual(args, ["hello", "world"])
        self.assertEqual(environ["SHELL"], "simpsh")
        self.assertEqual(environ["PATH"], self.bin_dir)
        self.assertEqual(environ["TERM"], "dumb")
        self.assertEqual(environ["?"], "3")
        self.assertNotIn("HOME", environ)

    def test_output_file_mode(self):
        """Output redirection creates the file readable by its owner only."""
        out = self.path("out.txt")

        self.run_line(f"myecho > {out}")

        mode = stat.S_IMODE(os.stat(out).st_mode)
        self.assertEqual(mode & 0o077, 0)
        self.assertTrue(mode & stat.S_IRUSR)
        self.assertTrue(mode & stat.S_IWUSR)

    def test_output_truncates(self):
        """An existing output file is truncated."""
        out = self.path("out.txt")
        with open(out, 'w') as f:
            f.write("x" * 10000)

        self.run_line(f"myecho > {out} short")

        self.assertLess(len(self.read("out.txt")), 10000)
        self.assertTrue(self.read("out.txt").startswith("argv[1]: short\n"))

    def test_input_and_output_redirection(self):
        """Both orders of the symbols connect the same files."""
        src = self.path("in.txt")
        with open(src, 'w') as f:
            f.write("line one\nline two\n")

        for i, template in enumerate(("copy < {src} > {dst}", "copy > {dst} < {src}")):
            dst = self.path(f"out{i}.txt")
            with self.subTest(template=template):
                result = self.run_line(template.format(src=src, dst=dst))
                self.assertEqual(result.status, 0)
                self.assertEqual(self.read(f"out{i}.txt"), "line one\nline two\n")

    def test_missing_input_file(self):
        """A redirection failure in the child exits with 1."""
        result = self.run_line(f"copy < {self.path('missing.txt')}")

        self.assertEqual(result.status, 1)

    def test_command_not_found(self):
        """A bare name missing from the search path exits with 255."""
        result = self.run_line("doesnotexist")

        self.assertEqual(result.status, 255)
        self.assertFalse(result.noop)

    def test_unreadable_search_directory(self):
        """A search directory that cannot be opened exits with 255."""
        self.env = EnvironmentTable("simpsh", self.path("nodir"), "dumb")

        self.assertEqual(self.run_line("status 0").status, 255)

    def test_explicit_path(self):
        """A name with a separator is executed as given."""
        result = self.run_line(f"{os.path.join(self.bin_dir, 'status')} 4")
        self.assertEqual(result.status, 4)

        result = self.run_line(self.path("nope/status"))
        self.assertEqual(result.status, 127)

    def test_not_executable(self):
        """A found file that cannot be executed exits with 255."""
        write_script(self.bin_dir, "plain", "print('never')\n", mode=0o644)

        self.assertEqual(self.run_line("plain").status, 255)

    def test_abnormal_termination(self):
        """A child killed by a signal with no interrupt pending is fatal."""
        with self.assertLogs('simpsh.executor', level='ERROR') as logs:
            with self.assertRaises(AbnormalTerminationError) as cm:
                self.run_line("selfkill")

        self.assertEqual(cm.exception.signal, signal.SIGTERM)
        self.assertEqual(logs.records[-1].context['signal'], signal.SIGTERM)

    def test_runtime_logged(self):
        """The child's runtime is logged when it exits."""
        with self.assertLogs('simpsh.executor', level='INFO') as logs:
            self.run_line("status 0")

        exited = [r for r in logs.records if r.getMessage() == "Child exited"]
        self.assertEqual(len(exited), 1)
        self.assertTrue(exited[0].context['runtime'].endswith("s"))


class TestEngineControl(ExecutorTestCase):
    """Test paths that never fork."""

    def test_empty_command(self):
        """A blank line does nothing."""
        result = self.run_line("   ")

        self.assertIs(result, NO_OP)
        self.assertTrue(result.noop)
        self.assertEqual(result.status, 255)

    def test_pending_interrupt(self):
        """An interrupt pending before the fork cancels the command."""
        out = self.path("out.txt")
        self.flag.set()

        result = self.run_line(f"myecho > {out}")

        self.assertTrue(result.noop)
        self.assertFalse(os.path.exists(out))

    def test_exit_builtin(self):
        """exit is handled in the shell itself."""
        cases = [("exit", 0), ("exit 7", 7), ("exit -3", -3), ("exit +2 extra", 2)]
        for line, code in cases:
            with self.subTest(line=line):
                with self.assertRaises(ShellExit) as cm:
                    self.run_line(line)
                self.assertEqual(cm.exception.code, code)

    def test_exit_builtin_bad_argument(self):
        """A non-numeric exit argument is fatal."""
        for line in ("exit abc", "exit 1x", "exit 0x10"):
            with self.subTest(line=line):
                with self.assertRaises(ExitArgumentError):
                    self.run_line(line)


class TestProcessHandle(unittest.TestCase):
    """Test wait status bookkeeping."""

    def test_exited(self):
        """Test a normal exit."""
        pid = os.fork()
        if pid == 0:
            os._exit(9)

        handle = ProcessHandle(pid, "child")
        self.assertTrue(handle.is_running)
        handle.wait()

        self.assertEqual(handle.state, ProcessState.EXITED)
        self.assertEqual(handle.exit_code, 9)
        self.assertEqual(handle.status_code, 9)
        self.assertGreaterEqual(handle.get_runtime(), 0)

    def test_signaled(self):
        """Death by signal n maps to 128 + n."""
        pid = os.fork()
        if pid == 0:
            os.kill(os.getpid(), signal.SIGTERM)
            os._exit(0)

        handle = ProcessHandle(pid, "child")
        handle.wait()

        self.assertEqual(handle.state, ProcessState.SIGNALED)
        self.assertEqual(handle.term_signal, signal.SIGTERM)
        self.assertEqual(handle.status_code, 128 + signal.SIGTERM)

    def test_reaped(self):
        """A child collected elsewhere reports the interrupted status."""
        pid = os.fork()
        if pid == 0:
            os._exit(0)
        os.waitpid(pid, 0)

        handle = ProcessHandle(pid, "child")
        with self.assertRaises(ChildProcessError):
            handle.wait()
        handle.mark_reaped()

        self.assertEqual(handle.status_code, INTERRUPTED_STATUS)
        self.assertEqual(INTERRUPTED_STATUS, 130)

    def test_running_has_no_status(self):
        """Asking a running child for its status is an error."""
        handle = ProcessHandle(1, "init")

        with self.assertRaises(RuntimeError):
            handle.status_code


if __name__ == '__main__':
    unittest.main()
