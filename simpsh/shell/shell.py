"""
simpsh Shell Module

The interactive read-tokenize-execute loop.

Version: 1.0.0
"""

import sys
from typing import Any, Optional

from .parser import CommandParser
from .reader import LineReader
from simpsh.core.config_loader import Config, get_config
from simpsh.core.environment import EnvironmentTable
from simpsh.core.signals import InterruptFlag
from simpsh.exceptions import RecoverableCommandError
from simpsh.logger import get_logger
from simpsh.process.executor import CommandResult, ExecutionEngine


class Shell:
    """
    simpsh Interactive Shell.

    Each iteration prints the prompt, clears the interrupt flag, reads
    a line, tokenizes it, executes it and records its exit status in
    the environment table. The loop only ends through ShellExit (exit
    builtin or end of input) or a FatalShellError, both handled by the
    entry point.

    Example:
        >>> shell = Shell()
        >>> shell.run()
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        flag: Optional[InterruptFlag] = None,
        reader: Optional[LineReader] = None,
        output: Any = None,
        wakeup_fd: Optional[int] = None
    ):
        self._config = config or get_config()
        self._logger = get_logger('shell')
        self._flag = flag if flag is not None else InterruptFlag()
        self._output = output or sys.stdout

        limits = self._config.limits
        self._parser = CommandParser(
            token_capacity=limits.token_capacity,
            max_redirections=limits.max_redirections
        )
        self._environment = EnvironmentTable.initialize(self._config)
        self._executor = ExecutionEngine(self._flag)
        self._reader = reader or LineReader(
            self._flag,
            capacity=limits.line_capacity,
            poll_interval=limits.poll_interval,
            farewell=self._config.shell.farewell,
            output=self._output,
            wakeup_fd=wakeup_fd
        )

        self._prompt = self._config.shell.prompt

    @property
    def environment(self) -> EnvironmentTable:
        return self._environment

    @property
    def flag(self) -> InterruptFlag:
        return self._flag

    @property
    def parser(self) -> CommandParser:
        return self._parser

    @property
    def prompt(self) -> str:
        return self._prompt

    def close(self) -> None:
        """Release the line reader."""
        self._reader.close()

    def run(self) -> None:
        """
        Run the interactive shell.

        This is the main REPL loop; it never returns normally.
        """
        self._logger.info("Shell started", context={'prompt': self._prompt})
        while True:
            self.run_once()

    def run_once(self) -> Optional[CommandResult]:
        """
        Run one loop iteration.

        Returns:
            The command result, or None if an interrupt abandoned the read
        """
        self._output.write(self._prompt)
        self._output.flush()

        self._flag.clear()

        line = self._reader.read_line()
        if line is None:
            return None

        return self.execute_line(line)

    def execute_line(self, line: str) -> CommandResult:
        """
        Tokenize and execute a command line.

        Recoverable errors are reported here and recorded as the
        command's status; fatal errors and ShellExit propagate.

        Args:
            line: Command line string

        Returns:
            The command result
        """
        try:
            command = self._parser.parse(line)
            result = self._executor.execute(command, self._environment)
        except RecoverableCommandError as e:
            self._logger.warning(str(e))
            self._output.flush()
            print(f"simpsh: {e.message}", file=sys.stderr)
            result = CommandResult(e.exit_status)

        if not result.noop:
            self._environment.record_status(result.status)

        return result
