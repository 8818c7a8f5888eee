import logging

import pytest

from spam_pipeline.logging_setup import LOG_FORMAT, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_level_from_argument(restore_root_logger):
    configure_logging("debug")

    assert restore_root_logger.level == logging.DEBUG
    assert restore_root_logger.handlers[0].formatter._fmt == LOG_FORMAT
    assert logging.getLogger("httpx").level == logging.WARNING


def test_level_from_environment(restore_root_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    configure_logging()

    assert restore_root_logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info(restore_root_logger):
    configure_logging("chatty")

    assert restore_root_logger.level == logging.INFO
