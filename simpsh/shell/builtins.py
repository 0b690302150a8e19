"""
Shell Built-in Commands

Commands interpreted by the shell itself rather than run as a child
process.

Version: 1.0.0
"""

import re
from typing import Callable, List

from simpsh.exceptions import ExitArgumentError, ShellExit
from simpsh.logger import get_logger


EXIT_CODE_PATTERN = re.compile(r'[+-]?[0-9]+')


class BuiltinCommands:
    """
    Built-in shell commands.

    These commands are executed directly by the shell without
    creating a new process.
    """

    def __init__(self):
        self._logger = get_logger('builtins')
        self._commands: dict[str, Callable[[List[str]], int]] = {
            'exit': self.cmd_exit,
        }

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in."""
        return name in self._commands

    def execute(self, name: str, args: List[str]) -> int:
        """
        Execute a built-in command.

        Args:
            name: Command name
            args: Command arguments

        Returns:
            Exit code
        """
        return self._commands[name](args)

    def cmd_exit(self, args: List[str]) -> int:
        """
        Exit the shell.

        With no argument the shell exits with 0; otherwise the first
        argument must be a base-10 integer and becomes the exit code.
        Further arguments are ignored.

        Raises:
            ShellExit: Always, carrying the exit code
            ExitArgumentError: If the argument is not an integer
        """
        if not args:
            code = 0
        elif EXIT_CODE_PATTERN.fullmatch(args[0]):
            code = int(args[0], 10)
        else:
            raise ExitArgumentError(args[0])

        self._logger.notice("Exit requested", context={'code': code})
        raise ShellExit(code)
