"""
Shell Exceptions

Base exceptions for the shell and the errors raised by the line reader,
tokenizer, configuration loader and builtins.

Errors come in two tiers. A FatalShellError terminates the shell from the
top-level handler; a RecoverableCommandError is reported by the main loop,
recorded as the command's exit status, and the loop continues.

Version: 1.0.0
"""

from typing import Optional, Any


class ShellError(Exception):
    """
    Base exception for all shell errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        recoverable: Whether the main loop may continue after the error
        context: Additional context about the error

    Example:
        >>> raise ShellError("Unexpected state", error_code=1000)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        recoverable: bool = False,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 0
        self.recoverable = recoverable
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"recoverable={self.recoverable})"
        )


class FatalShellError(ShellError):
    """
    Unrecoverable shell failure.

    The error propagates to the entry point, which prints a diagnostic
    and terminates the shell process with exit code 1.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code or 1000,
            recoverable=False,
            context=context
        )


class RecoverableCommandError(ShellError):
    """
    A command failed but the shell keeps running.

    Attributes:
        exit_status: Status recorded in the environment table for the
            offending command
    """

    def __init__(
        self,
        message: str,
        exit_status: int = 1,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code or 2000,
            recoverable=True,
            context=context
        )
        self.exit_status = exit_status


class ShellExit(Exception):
    """
    User-requested (or end-of-input) termination of the shell.

    Not an error: the entry point turns it into the process exit code.

    Example:
        >>> raise ShellExit(7)
    """

    def __init__(self, code: int = 0) -> None:
        super().__init__(f"exit {code}")
        self.code = code


class ConfigurationError(FatalShellError):
    """
    The configuration file cannot be read or holds invalid values.

    Example:
        >>> raise ConfigurationError("Invalid JSON", path="simpsh.json")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message=message, error_code=1001, context=ctx)
        self.path = path


class InputReadError(FatalShellError):
    """Reading standard input failed for a reason other than an interrupt."""

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if errno is not None:
            ctx["errno"] = errno
        super().__init__(message=message, error_code=1002, context=ctx)
        self.errno = errno


class SignalInstallError(FatalShellError):
    """The interrupt handler could not be installed."""

    def __init__(
        self,
        message: str,
        signum: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if signum is not None:
            ctx["signal"] = signum
        super().__init__(message=message, error_code=1003, context=ctx)
        self.signum = signum


class TokenizeError(FatalShellError):
    """
    The command line cannot be tokenized.

    Raised for more redirection symbols than the shell accepts.

    Example:
        >>> raise TokenizeError("too many redirections", line="a < b > c < d")
    """

    def __init__(
        self,
        message: str,
        line: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if line is not None:
            ctx["line"] = line
        super().__init__(message=message, error_code=1004, context=ctx)
        self.line = line


class ExitArgumentError(FatalShellError):
    """The argument given to the exit builtin is not a base-10 integer."""

    def __init__(
        self,
        argument: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"exit: {argument}: numeric argument required",
            error_code=1005,
            context=context
        )
        self.argument = argument


class TokenLimitError(RecoverableCommandError):
    """The command line holds more tokens than the token vector can carry."""

    def __init__(
        self,
        count: int,
        limit: int,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx.update({"count": count, "limit": limit})
        super().__init__(
            message=f"too many arguments ({count} > {limit})",
            error_code=2001,
            context=ctx
        )
        self.count = count
        self.limit = limit


class RedirectionError(RecoverableCommandError):
    """
    A redirection request is malformed or its target cannot be used.

    Example:
        >>> raise RedirectionError("missing redirection target")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message=message, error_code=2002, context=ctx)
        self.path = path
