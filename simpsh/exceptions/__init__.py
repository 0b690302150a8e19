"""
simpsh Exception Hierarchy

All shell errors inherit from ShellError. Fatal errors end the shell
from the top-level handler; recoverable errors are reported by the main
loop and recorded as the offending command's exit status.

Architecture:
    ShellError (Base)
    ├── FatalShellError
    │   ├── ConfigurationError
    │   ├── InputReadError
    │   ├── SignalInstallError
    │   ├── TokenizeError
    │   ├── ExitArgumentError
    │   ├── ForkError
    │   ├── AbnormalTerminationError
    │   └── WaitError
    └── RecoverableCommandError
        ├── TokenLimitError
        ├── RedirectionError
        ├── PathResolutionError
        └── CommandNotFoundError

    ShellExit (user-requested termination, not an error)
"""

from .shell_exceptions import (
    ShellError,
    FatalShellError,
    RecoverableCommandError,
    ShellExit,
    ConfigurationError,
    InputReadError,
    SignalInstallError,
    TokenizeError,
    ExitArgumentError,
    TokenLimitError,
    RedirectionError,
)

from .process_exceptions import (
    ForkError,
    AbnormalTerminationError,
    WaitError,
)

from .fs_exceptions import (
    EXEC_FAILURE_STATUS,
    PathResolutionError,
    CommandNotFoundError,
)

__all__ = [
    # Base
    "ShellError",
    "FatalShellError",
    "RecoverableCommandError",
    "ShellExit",
    # Fatal
    "ConfigurationError",
    "InputReadError",
    "SignalInstallError",
    "TokenizeError",
    "ExitArgumentError",
    "ForkError",
    "AbnormalTerminationError",
    "WaitError",
    # Recoverable
    "TokenLimitError",
    "RedirectionError",
    "PathResolutionError",
    "CommandNotFoundError",
    "EXEC_FAILURE_STATUS",
]
