"""
Process Exceptions

Exceptions related to creating and waiting on child processes.

Version: 1.0.0
"""

from typing import Optional, Any

from .shell_exceptions import FatalShellError


class ForkError(FatalShellError):
    """
    Error during fork() system call.

    Common causes include:
    - Process limit exceeded
    - Memory allocation failure for the child

    Example:
        >>> raise ForkError("Resource temporarily unavailable", parent_pid=1)
    """

    def __init__(
        self,
        message: str,
        parent_pid: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if parent_pid is not None:
            ctx["parent_pid"] = parent_pid
        super().__init__(message=message, error_code=1101, context=ctx)
        self.parent_pid = parent_pid


class AbnormalTerminationError(FatalShellError):
    """
    The foreground child did not terminate by a normal exit.

    Raised only when no interrupt is pending; an interrupted child
    is expected to die by signal.

    Example:
        >>> raise AbnormalTerminationError(pid=42, signal=9)
    """

    def __init__(
        self,
        pid: int,
        signal: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["pid"] = pid
        if signal is not None:
            ctx["signal"] = signal
        super().__init__(
            message="Child exited abnormally",
            error_code=1102,
            context=ctx
        )
        self.pid = pid
        self.signal = signal


class WaitError(FatalShellError):
    """waitpid() failed for the foreground child with no interrupt pending."""

    def __init__(
        self,
        message: str,
        pid: int,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["pid"] = pid
        super().__init__(message=message, error_code=1103, context=ctx)
        self.pid = pid
