"""
Line Reader Module

Acquires one line of input at a time from the shell's standard input.

The descriptor is watched with a selector together with the signal
controller's wakeup pipe, so an interrupt wakes the wait at once and
abandons the partial line instead of letting the read resume. Without a
wakeup pipe the selector polls the interrupt flag every poll interval.

Version: 1.0.0
"""

import os
import selectors
import sys
from typing import Any, Optional

from simpsh.core.config_loader import DEFAULT_FAREWELL, LINE_CAPACITY
from simpsh.core.signals import InterruptFlag
from simpsh.exceptions import InputReadError, ShellExit
from simpsh.logger import get_logger


STDIN_FILENO = 0
READ_SIZE = 4096


class LineReader:
    """
    Reads newline-terminated lines from a file descriptor.

    Lines longer than the line capacity are truncated with a diagnostic.

    Example:
        >>> reader = LineReader(InterruptFlag())
        >>> line = reader.read_line()
    """

    def __init__(
        self,
        flag: InterruptFlag,
        fd: int = STDIN_FILENO,
        capacity: int = LINE_CAPACITY,
        poll_interval: float = 0.05,
        farewell: str = DEFAULT_FAREWELL,
        output: Any = None,
        wakeup_fd: Optional[int] = None
    ):
        self._flag = flag
        self._fd = fd
        self._limit = capacity - 1
        self._wakeup_fd = wakeup_fd
        # Block until input or a signal when the wakeup pipe is available.
        self._timeout = None if wakeup_fd is not None else poll_interval
        self._farewell = farewell
        self._output = output
        self._pending = bytearray()
        self._eof = False
        self._logger = get_logger('reader')

        # epoll refuses regular files, so stdin redirected from a file
        # needs select().
        self._selector = selectors.SelectSelector()
        self._selector.register(fd, selectors.EVENT_READ)
        if wakeup_fd is not None:
            self._selector.register(wakeup_fd, selectors.EVENT_READ)

    @property
    def limit(self) -> int:
        """Largest number of bytes kept from one line."""
        return self._limit

    def read_line(self) -> Optional[str]:
        """
        Read the next line.

        Returns:
            The line without its newline, or None if an interrupt
            abandoned the read

        Raises:
            ShellExit: At end of input, after printing the farewell
            InputReadError: If reading fails with no interrupt pending
        """
        while True:
            newline = self._pending.find(b"\n")
            if newline >= 0:
                raw = bytes(self._pending[:newline])
                del self._pending[:newline + 1]
                return self._finish(raw)

            if self._eof:
                if self._pending:
                    raw = bytes(self._pending)
                    self._pending.clear()
                    return self._finish(raw)
                self._end_of_input()

            if self._flag.is_set():
                self._discard()
                return None

            ready = {key.fd for key, _ in self._selector.select(self._timeout)}
            if self._wakeup_fd in ready:
                self._drain_wakeup()
            if self._fd not in ready:
                continue

            try:
                chunk = os.read(self._fd, READ_SIZE)
            except OSError as e:
                if self._flag.is_set():
                    self._discard()
                    return None
                raise InputReadError(f"STDIN: {e.strerror}", errno=e.errno) from e

            if chunk:
                self._pending += chunk
            else:
                self._eof = True

    def close(self) -> None:
        """Release the selector."""
        self._selector.close()

    def _finish(self, raw: bytes) -> str:
        """Apply the line capacity and decode."""
        if len(raw) > self._limit:
            self._logger.warning(
                "Input line truncated",
                context={'length': len(raw), 'limit': self._limit}
            )
            print(
                f"simpsh: input line truncated to {self._limit} bytes",
                file=sys.stderr
            )
            raw = raw[:self._limit]
        return raw.decode('utf-8', errors='surrogateescape')

    def _drain_wakeup(self) -> None:
        """Empty the wakeup pipe; the flag says whether to stop."""
        while True:
            try:
                if not os.read(self._wakeup_fd, READ_SIZE):
                    return
            except BlockingIOError:
                return

    def _discard(self) -> None:
        if self._pending:
            self._logger.debug(
                "Discarded partial line",
                context={'bytes': len(self._pending)}
            )
        self._pending.clear()

    def _end_of_input(self) -> None:
        """Print the farewell and end the shell with status 0."""
        output = self._output or sys.stdout
        output.write(f"\n{self._farewell}\n")
        output.flush()
        self._logger.info("End of input")
        raise ShellExit(0)
