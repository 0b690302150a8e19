"""
Environment Table

The fixed, four-entry environment handed to every child process:

    SHELL=<shell id>
    PATH=<search path>
    TERM=<terminal type>
    ?=<last exit status>

The shell never forwards its own inherited environment. Only the status
entry changes after initialization.

Version: 1.0.0
"""

from typing import Optional, List

from simpsh.core.config_loader import (
    Config,
    STATUS_FIELD_CAPACITY,
    get_config,
)
from simpsh.logger import get_logger


STATUS_KEY = '?'


class EnvironmentTable:
    """
    Shell-controlled variables passed to children.

    Entries keep their insertion order, so the environment a child sees
    is always SHELL, PATH, TERM, ? in that order.

    Example:
        >>> env = EnvironmentTable.initialize()
        >>> env.record_status(3)
        >>> env.entries()[-1]
        '?=3'
    """

    KEYS = ('SHELL', 'PATH', 'TERM', STATUS_KEY)

    def __init__(self, shell_id: str, search_path: str, terminal: str):
        self._logger = get_logger('environment')
        self._values: dict[str, str] = {
            'SHELL': shell_id,
            'PATH': search_path,
            'TERM': terminal,
            STATUS_KEY: '',
        }

    @classmethod
    def initialize(cls, config: Optional[Config] = None) -> 'EnvironmentTable':
        """
        Build the table from configuration defaults with an empty status.

        Args:
            config: Configuration to take the values from (global
                configuration if omitted)

        Returns:
            A new EnvironmentTable
        """
        config = config or get_config()
        return cls(
            shell_id=config.shell.shell_id,
            search_path=config.shell.search_path,
            terminal=config.shell.terminal,
        )

    @property
    def search_path(self) -> str:
        return self._values['PATH']

    @property
    def status(self) -> str:
        """The raw status value ('' until the first command completes)."""
        return self._values[STATUS_KEY]

    def record_status(self, code: int) -> None:
        """
        Overwrite the status entry with '?=<code>'.

        Args:
            code: Exit status of the last foreground command

        Raises:
            ValueError: If the formatted entry does not fit the status field
        """
        entry = f"{STATUS_KEY}={code}"
        if len(entry) > STATUS_FIELD_CAPACITY:
            raise ValueError(
                f"status {code} does not fit in {STATUS_FIELD_CAPACITY} characters"
            )
        self._values[STATUS_KEY] = str(code)
        self._logger.debug("Recorded exit status", context={'status': code})

    def entries(self) -> List[str]:
        """Return the entries as 'KEY=value' strings, in fixed order."""
        return [f"{key}={self._values[key]}" for key in self.KEYS]

    def as_mapping(self) -> dict[str, str]:
        """Return the ordered mapping passed to os.execve."""
        return {key: self._values[key] for key in self.KEYS}

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"EnvironmentTable({self.entries()!r})"
