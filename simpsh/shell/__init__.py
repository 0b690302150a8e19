"""
simpsh Shell Module

Provides the interactive command-line shell:
- Line reading
- Command parsing and redirection
- Built-in commands

The main loop lives in simpsh.shell.shell; it is not re-exported here
because the execution engine imports the parser from this package.
"""

from .parser import CommandParser, ParsedCommand, Redirection, Token, TokenType
from .reader import LineReader
from .builtins import BuiltinCommands

__all__ = [
    'CommandParser',
    'ParsedCommand',
    'Redirection',
    'Token',
    'TokenType',
    'LineReader',
    'BuiltinCommands',
]
