#!/usr/bin/env python3
"""
simpsh - A simple interactive shell

This is the main entry point for simpsh.

Startup sequence:
1. Load configuration (SIMPSH_CONFIG, or defaults)
2. Initialize logging
3. Install the interrupt handler
4. Run the shell loop

main() is the single place where the shell process ends: ShellExit
becomes the exit code, a FatalShellError prints a diagnostic and exits 1.

Version: 1.0.0
"""

import sys

from simpsh.core.config_loader import ConfigLoader
from simpsh.core.signals import InterruptFlag, SignalController
from simpsh.exceptions import FatalShellError, ShellExit
from simpsh.logger import Logger, get_logger, parse_level
from simpsh.shell.shell import Shell


FATAL_STATUS = 1


def main() -> int:
    """
    Main entry point for simpsh.

    Returns:
        Process exit code
    """
    loader = ConfigLoader()
    try:
        config = loader.load_from_environment()
    except FatalShellError as e:
        Logger.initialize()
        try:
            return _fatal(e)
        finally:
            Logger.shutdown()

    Logger.initialize(
        level=parse_level(config.logging.level),
        log_file=config.logging.log_file,
        use_colors=config.logging.use_colors,
        console_output=config.logging.console_output
    )
    logger = get_logger('main')

    flag = InterruptFlag()
    controller = SignalController(flag)
    shell = None

    try:
        controller.install()
        shell = Shell(config, flag=flag, wakeup_fd=controller.wakeup_fd)
        shell.run()
    except ShellExit as e:
        logger.info("Shell exiting", context={'code': e.code})
        return e.code
    except FatalShellError as e:
        return _fatal(e)
    finally:
        sys.stdout.flush()
        if shell is not None:
            shell.close()
        controller.restore()
        Logger.shutdown()

    return 0


def _fatal(error: FatalShellError) -> int:
    """Report a fatal error and return the shell's exit code."""
    sys.stdout.flush()
    print(f"simpsh: {error.message}", file=sys.stderr)
    get_logger('main').critical(str(error))
    return FATAL_STATUS


if __name__ == '__main__':
    sys.exit(main())
