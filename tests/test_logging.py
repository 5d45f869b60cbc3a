"""Tests for logging setup."""

import logging

import pytest

from truthchain.utils.logging import NOISY_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_verbose_wins(self):
        setup_logging(level="ERROR", verbose=True)

        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("TRUTHCHAIN_LOG_LEVEL", "warning")

        setup_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(level="chatty")

        assert logging.getLogger().level == logging.INFO

    def test_library_loggers_are_quieted(self):
        setup_logging(verbose=True)

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
