"""
simpsh - A simple interactive shell

Reads a command line, splits it into arguments and redirections, runs
the command as a child process with a minimal fixed environment, waits
for it and keeps its exit status in the '?' variable.
"""

__version__ = "1.0.0"

from .shell.shell import Shell
from .main import main

__all__ = [
    'Shell',
    'main',
]
