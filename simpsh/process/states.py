"""
Process States Module

Lifecycle states of a foreground child process.

Version: 1.0.0
"""

import signal
from enum import Enum, auto


class ProcessState(Enum):
    """
    Child process lifecycle states.

    State transitions:
        RUNNING -> EXITED: waitpid() reports a normal exit
        RUNNING -> SIGNALED: waitpid() reports death by signal
        RUNNING -> REAPED: the interrupt handler collected the child
            first, so its status is unknown
    """

    RUNNING = auto()
    """Forked and not yet waited on."""

    EXITED = auto()
    """Terminated through exit() with a status code."""

    SIGNALED = auto()
    """Killed by a signal."""

    REAPED = auto()
    """Collected by the interrupt handler before the shell waited."""


#: Shell convention for a command that died by signal n: 128 + n.
SIGNAL_STATUS_BASE = 128

#: Status reported for a foreground command cut short by an interrupt.
INTERRUPTED_STATUS = SIGNAL_STATUS_BASE + signal.SIGINT
