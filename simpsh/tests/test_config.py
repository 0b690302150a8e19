#!/usr/bin/env python3
"""
Configuration and Logging Tests

Version: 1.0.0
"""

import json
import logging
import os
import tempfile
import unittest
from unittest import mock

from simpsh.core.config_loader import (
    CONFIG_ENV_VAR,
    Config,
    ConfigLoader,
    LINE_CAPACITY,
    TOKEN_CAPACITY,
    get_config,
)
from simpsh.exceptions import ConfigurationError
from simpsh.logger import LogFormatter, LogLevel, Logger, get_logger, parse_level


class TestConfig(unittest.TestCase):
    """Test configuration loading."""

    def setUp(self):
        self.loader = ConfigLoader()
        self.loader.reset()
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.loader.reset()
        self.tmpdir.cleanup()

    def _write(self, data, name="simpsh.json"):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, 'w', encoding='utf-8') as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)
        return path

    def test_default_config(self):
        """Test default configuration values."""
        config = Config()

        self.assertEqual(config.shell.prompt, "linux> ")
        self.assertEqual(config.shell.shell_id, "simpsh")
        self.assertEqual(config.shell.search_path, "/usr/bin/:")
        self.assertEqual(config.shell.terminal, "dumb")
        self.assertEqual(config.limits.line_capacity, LINE_CAPACITY)
        self.assertEqual(config.limits.token_capacity, TOKEN_CAPACITY)
        self.assertEqual(config.limits.max_redirections, 2)

    def test_singleton(self):
        """ConfigLoader is a singleton."""
        self.assertIs(ConfigLoader(), self.loader)

    def test_get_config_defaults(self):
        """Without a loaded file the defaults are served."""
        self.assertEqual(get_config().shell.prompt, "linux> ")

    def test_load_file(self):
        """Values from the file override the defaults they name."""
        path = self._write({
            'shell': {'prompt': "$ ", 'search_path': "/bin"},
            'limits': {'line_capacity': 64},
            'logging': {'level': "debug"},
        })

        config = self.loader.load(path)

        self.assertEqual(config.shell.prompt, "$ ")
        self.assertEqual(config.shell.search_path, "/bin")
        self.assertEqual(config.shell.terminal, "dumb")
        self.assertEqual(config.limits.line_capacity, 64)
        self.assertEqual(config.limits.token_capacity, TOKEN_CAPACITY)
        self.assertIs(get_config(), config)

    def test_missing_file(self):
        """A missing file is a configuration error."""
        with self.assertRaises(ConfigurationError) as cm:
            self.loader.load(os.path.join(self.tmpdir.name, "nope.json"))
        self.assertIn("not found", cm.exception.message)

    def test_invalid_json(self):
        """Malformed JSON is a configuration error."""
        path = self._write("{not json")
        with self.assertRaises(ConfigurationError):
            self.loader.load(path)

    def test_invalid_values(self):
        """Out-of-range limits and unknown log levels are rejected."""
        cases = [
            {'limits': {'line_capacity': 0}},
            {'limits': {'token_capacity': "many"}},
            {'limits': {'max_redirections': True}},
            {'limits': {'poll_interval': 0}},
            {'shell': {'prompt': 5}},
            {'logging': {'level': "LOUD"}},
            [1, 2, 3],
        ]
        for data in cases:
            with self.subTest(data=data):
                path = self._write(data)
                with self.assertRaises(ConfigurationError):
                    self.loader.load(path)

    def test_load_from_environment(self):
        """SIMPSH_CONFIG names the file to load."""
        path = self._write({'shell': {'prompt': "> "}})

        with mock.patch.dict(os.environ, {CONFIG_ENV_VAR: path}):
            config = self.loader.load_from_environment()

        self.assertEqual(config.shell.prompt, "> ")

    def test_load_from_environment_unset(self):
        """Without SIMPSH_CONFIG the defaults are kept."""
        with mock.patch.dict(os.environ, clear=False):
            os.environ.pop(CONFIG_ENV_VAR, None)
            config = self.loader.load_from_environment()

        self.assertEqual(config.shell.prompt, "linux> ")


class TestLogger(unittest.TestCase):
    """Test logging system."""

    def test_logger_creation(self):
        """Test logger creation."""
        logger = get_logger('test')
        self.assertIsNotNone(logger)
        self.assertEqual(logger.subsystem, 'test')

    def test_logger_singleton(self):
        """Test that loggers are singletons per subsystem."""
        logger1 = get_logger('test')
        logger2 = get_logger('test')
        self.assertIs(logger1, logger2)
        self.assertIsNot(logger1, get_logger('other'))

    def test_log_levels(self):
        """Test log levels."""
        self.assertLess(LogLevel.DEBUG, LogLevel.INFO)
        self.assertLess(LogLevel.INFO, LogLevel.NOTICE)
        self.assertLess(LogLevel.NOTICE, LogLevel.WARNING)
        self.assertEqual(logging.getLevelName(LogLevel.NOTICE), 'NOTICE')

    def test_parse_level(self):
        """Level names are case-insensitive."""
        self.assertEqual(parse_level("debug"), LogLevel.DEBUG)
        self.assertEqual(parse_level("NOTICE"), LogLevel.NOTICE)
        with self.assertRaises(ValueError):
            parse_level("loud")

    def test_shutdown_detaches_handlers(self):
        """shutdown() closes the handlers installed by initialize()."""
        root = logging.getLogger('simpsh')
        Logger.shutdown()
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = os.path.join(tmpdir, "logs", "simpsh.log")
            try:
                Logger.initialize(level=LogLevel.DEBUG, log_file=log_file)
                file_handlers = [
                    h for h in root.handlers if isinstance(h, logging.FileHandler)
                ]
                self.assertEqual(len(file_handlers), 1)

                get_logger('test').error("Wait failed", pid=42)
                Logger.shutdown()

                self.assertEqual(root.handlers, [])
                self.assertIsNone(file_handlers[0].stream)
                with open(log_file, encoding='utf-8') as f:
                    self.assertIn("Wait failed", f.read())
            finally:
                Logger.shutdown()
                root.propagate = True
                root.setLevel(logging.NOTSET)

    def test_formatter(self):
        """The formatter shows subsystem, pid and context."""
        formatter = LogFormatter(use_colors=False)
        record = logging.LogRecord(
            'simpsh.executor', logging.INFO, __file__, 1,
            "Forked child", None, None
        )
        record.subsystem = 'executor'
        record.pid = 4242
        record.context = {'argv0': 'ls'}

        line = formatter.format(record)

        self.assertIn("INFO", line)
        self.assertIn("[executor]", line)
        self.assertIn("(pid=4242)", line)
        self.assertIn("Forked child", line)
        self.assertIn("{argv0=ls}", line)


if __name__ == '__main__':
    unittest.main()
