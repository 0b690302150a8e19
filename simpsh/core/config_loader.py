"""
simpsh Configuration Loader

Configuration management for the shell:
- JSON configuration file loading
- Default values for every setting
- Validation of limits and log settings
- Type-safe access through dataclasses

The numeric limits below size the input line, the token vector and the
environment table: 256-byte lines, 128 token slots, 4 environment entries.

Version: 1.0.0
"""

import json
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from simpsh.exceptions import ConfigurationError
from simpsh.logger import LogLevel


LINE_CAPACITY = 256          # bytes per input line, terminator included
TOKEN_CAPACITY = 128         # token vector slots, sentinel included
MAX_REDIRECTIONS = 2
ENV_SIZE = 4
STATUS_FIELD_CAPACITY = 6    # "?=" + sign + 3 digits
NO_COMMAND_STATUS = 255

DEFAULT_PROMPT = "linux> "
DEFAULT_SHELL_ID = "simpsh"
DEFAULT_SEARCH_PATH = "/usr/bin/:"
DEFAULT_TERMINAL = "dumb"
DEFAULT_FAREWELL = "exit"

#: Environment variable naming the configuration file.
CONFIG_ENV_VAR = "SIMPSH_CONFIG"


@dataclass
class ShellConfig:
    """Shell identity and interaction settings."""
    prompt: str = DEFAULT_PROMPT
    shell_id: str = DEFAULT_SHELL_ID
    search_path: str = DEFAULT_SEARCH_PATH
    terminal: str = DEFAULT_TERMINAL
    farewell: str = DEFAULT_FAREWELL


@dataclass
class LimitsConfig:
    """Buffer and token limits."""
    line_capacity: int = LINE_CAPACITY
    token_capacity: int = TOKEN_CAPACITY
    max_redirections: int = MAX_REDIRECTIONS
    poll_interval: float = 0.05


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_file: Optional[str] = None
    console_output: bool = False
    use_colors: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for the shell.
    """
    shell: ShellConfig = field(default_factory=ShellConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Handles loading configuration from JSON files, validating
    settings, and providing runtime configuration access.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('simpsh.json')
        >>> print(config.shell.prompt)
        linux>
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigurationError: If the file cannot be loaded, parsed or
                holds invalid values
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                path=config_path
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in configuration file: {e}",
                path=config_path
            )
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file: {e}",
                path=config_path
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration root must be an object",
                path=config_path
            )

        config = self._parse_config(data)
        self._validate(config, config_path)

        self._config = config
        self._loaded = True
        return self._config

    def load_from_environment(self) -> Config:
        """Load the file named by SIMPSH_CONFIG, or keep the defaults."""
        config_path = os.environ.get(CONFIG_ENV_VAR)
        if config_path:
            return self.load(config_path)
        return self.config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        if 'shell' in data:
            shell_data = data['shell']
            config.shell = ShellConfig(
                prompt=shell_data.get('prompt', config.shell.prompt),
                shell_id=shell_data.get('shell_id', config.shell.shell_id),
                search_path=shell_data.get('search_path', config.shell.search_path),
                terminal=shell_data.get('terminal', config.shell.terminal),
                farewell=shell_data.get('farewell', config.shell.farewell),
            )

        if 'limits' in data:
            limits_data = data['limits']
            config.limits = LimitsConfig(
                line_capacity=limits_data.get('line_capacity', config.limits.line_capacity),
                token_capacity=limits_data.get('token_capacity', config.limits.token_capacity),
                max_redirections=limits_data.get('max_redirections', config.limits.max_redirections),
                poll_interval=limits_data.get('poll_interval', config.limits.poll_interval),
            )

        if 'logging' in data:
            log_data = data['logging']
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                console_output=log_data.get('console_output', config.logging.console_output),
                use_colors=log_data.get('use_colors', config.logging.use_colors),
            )

        return config

    @staticmethod
    def _validate(config: Config, config_path: str) -> None:
        """Reject settings the shell cannot run with."""
        for key in ('prompt', 'shell_id', 'search_path', 'terminal', 'farewell'):
            if not isinstance(getattr(config.shell, key), str):
                raise ConfigurationError(
                    f"shell.{key} must be a string",
                    path=config_path
                )

        for key in ('line_capacity', 'token_capacity', 'max_redirections'):
            value = getattr(config.limits, key)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigurationError(
                    f"limits.{key} must be a positive integer",
                    path=config_path
                )

        poll = config.limits.poll_interval
        if not isinstance(poll, (int, float)) or poll <= 0:
            raise ConfigurationError(
                "limits.poll_interval must be a positive number",
                path=config_path
            )

        level = config.logging.level
        if not isinstance(level, str) or level.upper() not in LogLevel.__members__:
            raise ConfigurationError(
                f"Unknown log level: {config.logging.level}",
                path=config_path
            )

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if not self._loaded:
            return Config()
        return self._config

    def reset(self) -> None:
        """Drop any loaded file and go back to the defaults."""
        self._config = Config()
        self._loaded = False


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    loader = ConfigLoader()
    return loader.config
