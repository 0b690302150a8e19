"""
simpsh Core Module

Process-wide shell state:
- Configuration Loader
- Environment Table
- Signal Controller and interrupt flag
"""

from .config_loader import (
    ConfigLoader,
    Config,
    ShellConfig,
    LimitsConfig,
    LoggingConfig,
    get_config,
    LINE_CAPACITY,
    TOKEN_CAPACITY,
    MAX_REDIRECTIONS,
    ENV_SIZE,
    STATUS_FIELD_CAPACITY,
    NO_COMMAND_STATUS,
)
from .environment import EnvironmentTable
from .signals import InterruptFlag, SignalController

__all__ = [
    # Config
    'ConfigLoader',
    'Config',
    'ShellConfig',
    'LimitsConfig',
    'LoggingConfig',
    'get_config',
    'LINE_CAPACITY',
    'TOKEN_CAPACITY',
    'MAX_REDIRECTIONS',
    'ENV_SIZE',
    'STATUS_FIELD_CAPACITY',
    'NO_COMMAND_STATUS',
    # Environment
    'EnvironmentTable',
    # Signals
    'InterruptFlag',
    'SignalController',
]
