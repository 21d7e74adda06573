"""Tests for logging setup."""

import logging

from backend.app.logging_config import LOGGER_NAME, resolve_level, setup_logging


class TestResolveLevel:
    def test_explicit_name(self):
        assert resolve_level("debug") == logging.DEBUG

    def test_environment_used_when_omitted(self, monkeypatch):
        monkeypatch.setenv("SPLITFRAME_LOG_LEVEL", "WARNING")
        assert resolve_level() == logging.WARNING

    def test_unknown_name_falls_back_to_info(self, monkeypatch):
        monkeypatch.delenv("SPLITFRAME_LOG_LEVEL", raising=False)
        assert resolve_level("chatty") == logging.INFO
        assert resolve_level() == logging.INFO


class TestSetupLogging:
    def setup_method(self):
        self.logger = logging.getLogger(LOGGER_NAME)
        self.saved = (self.logger.level, list(self.logger.handlers))
        self.logger.handlers.clear()

    def teardown_method(self):
        self.logger.setLevel(self.saved[0])
        self.logger.handlers[:] = self.saved[1]

    def test_repeated_calls_keep_one_handler(self):
        setup_logging("INFO")
        setup_logging("DEBUG")
        assert len(self.logger.handlers) == 1
        assert self.logger.level == logging.DEBUG

    def test_module_loggers_are_children(self):
        assert setup_logging("ERROR") is logging.getLogger("splitframe.session").parent
