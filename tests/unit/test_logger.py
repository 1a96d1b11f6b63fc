"""Tests for the stderr logger setup."""

import logging

from redmine_cli.logging.logger import setup_logger


def test_setup_logger_is_idempotent():
    first = setup_logger("rd_logger_test", level="INFO")
    second = setup_logger("rd_logger_test", level="debug")
    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.DEBUG


def test_unknown_level_falls_back_to_warning():
    logger = setup_logger("rd_logger_fallback_test", level="chatty")
    assert logger.level == logging.WARNING
