"""
simpsh Process Module

Foreground child processes:
- Process states
- Process handles
- Execution engine (fork, redirect, exec, wait)
"""

from .states import ProcessState, INTERRUPTED_STATUS, SIGNAL_STATUS_BASE
from .handle import ProcessHandle
from .executor import ExecutionEngine, CommandResult, NO_OP

__all__ = [
    'ProcessState',
    'INTERRUPTED_STATUS',
    'SIGNAL_STATUS_BASE',
    'ProcessHandle',
    'ExecutionEngine',
    'CommandResult',
    'NO_OP',
]
