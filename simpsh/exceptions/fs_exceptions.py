"""
Filesystem Exceptions

Exceptions raised while resolving a bare command name against the
search path. Both are recoverable: the shell reports them and goes on.

Version: 1.0.0
"""

from typing import Optional, Any

from .shell_exceptions import RecoverableCommandError

#: Status of a command that could not be resolved or executed after search.
EXEC_FAILURE_STATUS = 255


class PathResolutionError(RecoverableCommandError):
    """
    A search path directory could not be opened for enumeration.

    The search stops at the failing directory instead of skipping it.

    Example:
        >>> raise PathResolutionError("ls", "/usr/bin/", "Permission denied")
    """

    def __init__(
        self,
        name: str,
        directory: str,
        reason: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx.update({"name": name, "directory": directory})
        super().__init__(
            message=f"{directory}: {reason}",
            exit_status=EXEC_FAILURE_STATUS,
            error_code=2101,
            context=ctx
        )
        self.name = name
        self.directory = directory
        self.reason = reason


class CommandNotFoundError(RecoverableCommandError):
    """
    No directory of the search path holds the requested command.

    Example:
        >>> raise CommandNotFoundError("doesnotexist")
    """

    def __init__(
        self,
        name: str,
        search_path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if search_path is not None:
            ctx["search_path"] = search_path
        super().__init__(
            message=f"{name}: command not found",
            exit_status=EXEC_FAILURE_STATUS,
            error_code=2102,
            context=ctx
        )
        self.name = name
        self.search_path = search_path
