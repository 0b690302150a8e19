"""
Process Handle Module

A ProcessHandle stands for one forked child. It owns the child's pid
until the child has been waited on and records how it terminated.

Version: 1.0.0
"""

import os
import time
from typing import Optional

from .states import ProcessState, SIGNAL_STATUS_BASE, INTERRUPTED_STATUS
from simpsh.logger import get_logger


class ProcessHandle:
    """
    Handle on a forked child process.

    Attributes:
        pid: Process ID of the child
        name: Command name the child was started for
        state: Current lifecycle state
        exit_code: Exit status once EXITED
        term_signal: Signal number once SIGNALED

    Example:
        >>> handle = ProcessHandle(pid=4242, name="ls")
        >>> handle.wait()
        >>> handle.exit_code
        0
    """

    def __init__(self, pid: int, name: str = ""):
        self.pid = pid
        self.name = name
        self.state = ProcessState.RUNNING
        self.exit_code: Optional[int] = None
        self.term_signal: Optional[int] = None
        self.start_time = time.monotonic()
        self.end_time: Optional[float] = None
        self._logger = get_logger('process')

    @property
    def is_running(self) -> bool:
        return self.state == ProcessState.RUNNING

    @property
    def status_code(self) -> int:
        """
        Shell status for the terminated child.

        The exit code for a normal exit, 128 + signal for a child killed
        by a signal, 128 + SIGINT when the interrupt handler reaped it.
        """
        if self.is_running:
            raise RuntimeError(f"process {self.pid} is still running")
        if self.state == ProcessState.EXITED:
            return self.exit_code
        if self.state == ProcessState.SIGNALED:
            return SIGNAL_STATUS_BASE + self.term_signal
        return INTERRUPTED_STATUS

    def wait(self) -> None:
        """
        Block until the child changes state.

        Raises:
            ChildProcessError: If the child no longer exists (already
                reaped elsewhere)
        """
        _, status = os.waitpid(self.pid, 0)
        self.update(status)

    def update(self, status: int) -> None:
        """Record a wait status returned by waitpid()."""
        if os.WIFEXITED(status):
            self.state = ProcessState.EXITED
            self.exit_code = os.WEXITSTATUS(status)
        elif os.WIFSIGNALED(status):
            self.state = ProcessState.SIGNALED
            self.term_signal = os.WTERMSIG(status)
        else:
            return

        self.end_time = time.monotonic()
        self._logger.debug(
            f"Child {self.state.name.lower()}",
            pid=self.pid,
            context={
                'name': self.name,
                'exit_code': self.exit_code,
                'signal': self.term_signal,
            }
        )

    def mark_reaped(self) -> None:
        """Note that the interrupt handler collected the child."""
        self.state = ProcessState.REAPED
        self.end_time = time.monotonic()
        self._logger.debug("Child reaped by interrupt handler", pid=self.pid)

    def get_runtime(self) -> float:
        """Seconds between fork and termination (or now, while running)."""
        end = self.end_time if self.end_time is not None else time.monotonic()
        return end - self.start_time

    def __repr__(self) -> str:
        return (
            f"ProcessHandle(pid={self.pid}, name={self.name!r}, "
            f"state={self.state.name})"
        )
