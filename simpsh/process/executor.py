"""
Execution Engine

Runs one parsed command: builtins in the shell itself, everything else
in a forked child that applies redirections and replaces its image with
the command. The parent waits for that single foreground child and
reports its exit status.

Version: 1.0.0
"""

import os
import signal
import sys
from dataclasses import dataclass
from typing import List, NoReturn, Optional

from simpsh.core.config_loader import NO_COMMAND_STATUS
from simpsh.core.environment import EnvironmentTable
from simpsh.core.signals import InterruptFlag
from simpsh.exceptions import (
    AbnormalTerminationError,
    EXEC_FAILURE_STATUS,
    ForkError,
    RecoverableCommandError,
    RedirectionError,
    WaitError,
)
from simpsh.filesystem.path_resolver import PathResolver
from simpsh.logger import get_logger
from simpsh.shell.builtins import BuiltinCommands
from simpsh.shell.parser import ParsedCommand, Redirection
from .handle import ProcessHandle
from .states import INTERRUPTED_STATUS


STDIN_FILENO = 0
STDOUT_FILENO = 1

#: Child status when the command exists but cannot be executed.
NOT_EXECUTABLE_STATUS = 126
#: Child status for a missing path that is not eligible for search.
NOT_FOUND_STATUS = 127
#: Owner read/write for files created by output redirection.
OUTPUT_FILE_MODE = 0o600


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of executing one command line.

    noop is true when nothing ran (blank line); the main loop does not
    record a status for it.
    """
    status: int
    noop: bool = False


NO_OP = CommandResult(status=NO_COMMAND_STATUS, noop=True)


class ExecutionEngine:
    """
    Forks, redirects, execs and waits.

    Example:
        >>> engine = ExecutionEngine(InterruptFlag())
        >>> env = EnvironmentTable.initialize()
        >>> engine.execute(CommandParser().parse("true"), env)
        CommandResult(status=0, noop=False)
    """

    def __init__(
        self,
        flag: InterruptFlag,
        builtins: Optional[BuiltinCommands] = None
    ):
        self._flag = flag
        self._builtins = builtins or BuiltinCommands()
        self._logger = get_logger('executor')

    def execute(
        self,
        command: ParsedCommand,
        environment: EnvironmentTable
    ) -> CommandResult:
        """
        Execute a parsed command.

        Args:
            command: Parsed command line
            environment: Environment table handed to the child

        Returns:
            CommandResult with the exit status (NO_OP for a blank line)

        Raises:
            ShellExit: From the exit builtin
            ExitArgumentError: Non-numeric argument to exit
            ForkError: fork() failed
            AbnormalTerminationError: The child died by signal with no
                interrupt pending
            WaitError: waitpid() failed with no interrupt pending
        """
        if command.is_empty:
            return NO_OP

        if self._builtins.is_builtin(command.command):
            return CommandResult(
                self._builtins.execute(command.command, command.args)
            )

        # An interrupt that landed after the read cancels the command.
        if self._flag.is_set():
            return NO_OP

        handle = self._fork(command, environment)
        return self._wait(handle)

    def _fork(
        self,
        command: ParsedCommand,
        environment: EnvironmentTable
    ) -> ProcessHandle:
        """Fork the child; only the parent returns."""
        # Pending output would otherwise be written twice.
        sys.stdout.flush()
        sys.stderr.flush()

        try:
            pid = os.fork()
        except OSError as e:
            raise ForkError(
                f"Fork error: {e.strerror}",
                parent_pid=os.getpid()
            ) from e

        if pid == 0:
            self._run_child(command, environment)

        self._logger.info(
            "Forked child",
            pid=pid,
            context={'argv0': command.command, 'redirection': command.redirection.name}
        )
        return ProcessHandle(pid, command.command)

    def _wait(self, handle: ProcessHandle) -> CommandResult:
        """Wait for the foreground child and turn its fate into a status."""
        if self._flag.is_set():
            self._logger.info("Interrupt pending, not waiting", pid=handle.pid)
            return CommandResult(INTERRUPTED_STATUS)

        try:
            handle.wait()
        except ChildProcessError as e:
            if self._flag.is_set():
                handle.mark_reaped()
                return CommandResult(handle.status_code)
            self._logger.error(
                "Wait failed",
                pid=handle.pid,
                context={'error': e.strerror}
            )
            raise WaitError(f"Wait error: {e.strerror}", pid=handle.pid) from e

        if handle.exit_code is not None:
            self._logger.info(
                "Child exited",
                pid=handle.pid,
                context={
                    'status': handle.exit_code,
                    'runtime': f"{handle.get_runtime():.3f}s",
                }
            )
            return CommandResult(handle.exit_code)

        if self._flag.is_set():
            return CommandResult(handle.status_code)

        self._logger.error(
            "Child exited abnormally",
            pid=handle.pid,
            context={
                'signal': handle.term_signal,
                'runtime': f"{handle.get_runtime():.3f}s",
            }
        )
        raise AbnormalTerminationError(handle.pid, signal=handle.term_signal)

    # Child side. Every path below ends in os._exit().

    def _run_child(
        self,
        command: ParsedCommand,
        environment: EnvironmentTable
    ) -> NoReturn:
        """Set up and exec the command inside the forked child."""
        status = EXEC_FAILURE_STATUS
        try:
            signal.signal(signal.SIGINT, signal.SIG_DFL)
            self._apply_redirections(command)
            status = self._exec(command.argv, environment)
        except RecoverableCommandError as e:
            self._report(e.message)
            status = e.exit_status
        except Exception as e:
            self._report(f"{command.command}: {e}")
            status = EXEC_FAILURE_STATUS
        finally:
            try:
                sys.stderr.flush()
            finally:
                os._exit(status)

    @staticmethod
    def _apply_redirections(command: ParsedCommand) -> None:
        """Point fd 0 and/or fd 1 at the redirection files, input first."""
        if command.redirection & Redirection.INPUT:
            ExecutionEngine._redirect(
                command.input_file, os.O_RDONLY, STDIN_FILENO
            )
        if command.redirection & Redirection.OUTPUT:
            ExecutionEngine._redirect(
                command.output_file,
                os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
                STDOUT_FILENO
            )

    @staticmethod
    def _redirect(path: str, flags: int, target_fd: int) -> None:
        try:
            fd = os.open(path, flags, OUTPUT_FILE_MODE)
        except OSError as e:
            raise RedirectionError(f"{path}: {e.strerror}", path=path) from e
        os.dup2(fd, target_fd)
        os.close(fd)

    def _exec(self, argv: List[str], environment: EnvironmentTable) -> int:
        """
        Replace the child image with the command.

        Returns only on failure, with the status the child exits with.
        A bare name missing from the working directory is looked up in
        the search path and tried once more.
        """
        env = environment.as_mapping()
        name = argv[0]

        try:
            os.execve(name, argv, env)
        except FileNotFoundError:
            if not PathResolver.is_searchable(name):
                self._report(f"{name}: No such file or directory")
                return NOT_FOUND_STATUS
        except OSError as e:
            self._report(f"{name}: {e.strerror}")
            return NOT_EXECUTABLE_STATUS

        path = PathResolver.resolve(name, environment.search_path)
        try:
            os.execve(path, [path] + argv[1:], env)
        except OSError as e:
            self._report(f"{path}: {e.strerror}")
        return EXEC_FAILURE_STATUS

    @staticmethod
    def _report(message: str) -> None:
        """Write a diagnostic to the child's stderr."""
        print(f"simpsh: {message}", file=sys.stderr)
