"""
Signal Controller

Installs the interrupt (SIGINT) handler and owns the interrupt flag, the
only state shared between the handler and the rest of the shell.

Handler state machine:
    IDLE -> (SIGINT delivered) -> HANDLING -> (handler returns) -> IDLE

The handler sets the flag, writes one newline straight to the output
descriptor and reaps every terminated child. Cancellation is cooperative:
the main loop, the line reader and the execution engine check the flag,
and the wakeup pipe lets a blocked read notice the signal at once.

Version: 1.0.0
"""

import os
import signal
from typing import Any, Optional

from simpsh.exceptions import SignalInstallError
from simpsh.logger import get_logger


STDOUT_FILENO = 1


class InterruptFlag:
    """
    Process-wide interrupt flag.

    Set only by the signal handler, cleared only at the top of each main
    loop iteration. Python runs signal handlers on the main thread between
    bytecodes, so a plain attribute is atomic here; a lock would deadlock
    if the signal arrived while the main flow held it.
    """

    __slots__ = ('_set',)

    def __init__(self) -> None:
        self._set = False

    def set(self) -> None:
        self._set = True

    def clear(self) -> None:
        self._set = False

    def is_set(self) -> bool:
        return self._set

    def __repr__(self) -> str:
        return f"InterruptFlag(set={self._set})"


class SignalController:
    """
    Interrupt handling for the shell.

    Example:
        >>> flag = InterruptFlag()
        >>> controller = SignalController(flag)
        >>> controller.install()
        >>> ...
        >>> controller.restore()
    """

    def __init__(
        self,
        flag: Optional[InterruptFlag] = None,
        output_fd: int = STDOUT_FILENO,
        signum: int = signal.SIGINT
    ):
        self._logger = get_logger('signals')
        self._flag = flag if flag is not None else InterruptFlag()
        self._output_fd = output_fd
        self._signum = signum
        self._previous: Any = None
        self._previous_wakeup_fd = -1
        self._wakeup_fds: Optional[tuple[int, int]] = None
        self._installed = False

    @property
    def flag(self) -> InterruptFlag:
        return self._flag

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def wakeup_fd(self) -> Optional[int]:
        """Read end of the wakeup pipe; readable once a signal arrives."""
        return self._wakeup_fds[0] if self._wakeup_fds else None

    def install(self) -> None:
        """
        Install the handler and the wakeup pipe.

        The interpreter writes the signal number to the pipe as soon as
        the signal arrives, so a selector watching wakeup_fd returns
        without polling the flag.

        Raises:
            SignalInstallError: If the handler cannot be installed
                (e.g. called off the main thread)
        """
        try:
            self._previous = signal.signal(self._signum, self.handle)
            read_fd, write_fd = os.pipe()
            os.set_blocking(read_fd, False)
            os.set_blocking(write_fd, False)
            self._previous_wakeup_fd = signal.set_wakeup_fd(
                write_fd, warn_on_full_buffer=False
            )
        except (ValueError, OSError) as e:
            raise SignalInstallError(
                f"Signal error: {e}",
                signum=self._signum
            ) from e
        self._wakeup_fds = (read_fd, write_fd)
        self._installed = True
        self._logger.debug(
            "Interrupt handler installed",
            context={'signal': signal.Signals(self._signum).name, 'wakeup_fd': read_fd}
        )

    def restore(self) -> None:
        """Put back the disposition that was active before install()."""
        if not self._installed:
            return
        signal.set_wakeup_fd(self._previous_wakeup_fd)
        for fd in self._wakeup_fds:
            os.close(fd)
        self._wakeup_fds = None
        self._previous_wakeup_fd = -1

        # None means the previous handler was not installed from Python.
        previous = self._previous if self._previous is not None else signal.SIG_DFL
        signal.signal(self._signum, previous)
        self._installed = False
        self._previous = None

    def handle(self, signum: int, frame: Any) -> None:
        """
        Signal handler body.

        Restricted to what is safe at an arbitrary suspension point:
        no logging, no buffered output, no locks.
        """
        self._flag.set()
        try:
            os.write(self._output_fd, b"\n")
        except OSError:
            # Output may already be closed; the flag is what matters.
            pass
        self.reap_children()

    @staticmethod
    def reap_children() -> int:
        """
        Reap every terminated child without blocking.

        All children are reaped, not only the current foreground one.

        Returns:
            Number of children reaped
        """
        reaped = 0
        while True:
            try:
                pid, _ = os.waitpid(-1, os.WNOHANG)
            except ChildProcessError:
                break
            if pid == 0:
                break
            reaped += 1
        return reaped
