"""Tests for hex_logging."""

import logging

import pytest

from hexstrata import hex_logging
from hexstrata.hex_logging import (
    LOGGER_NAME,
    create_module_logger,
    function_logger,
    get_module_logger,
    log_to_stderr,
    method_logger,
)


@pytest.fixture
def restore_rootlogger():
    """Undo log_to_stderr after a test."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = True
    hex_logging._rootlogger = None


def test_module_logger_names():
    """Test module loggers live below the hexstrata root logger."""
    logger = create_module_logger("hexstrata.some_module")
    assert logger.name == f"{LOGGER_NAME}.hexstrata.some_module"
    assert get_module_logger("hexstrata.some_module") is logger


def test_module_logger_defaults_to_caller():
    """Test the calling module's name is used when none is given."""
    logger = create_module_logger()
    assert logger.name == f"{LOGGER_NAME}.{__name__}"


def test_function_logger(caplog):
    """Test calls to a decorated function are logged at debug level."""

    @function_logger(__name__)
    def descend(depth, careful=True):
        return depth - 1

    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        assert descend(3, careful=False) == 2
    assert "calling descend with (3,) and {'careful': False}" in caplog.text


def test_method_logger(caplog):
    """Test calls to a decorated method are logged without the instance."""

    class Delver:
        @method_logger(__name__)
        def dig(self, depth):
            return depth

    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        assert Delver().dig(2) == 2
    assert "calling Delver.dig with (2,) and {}" in caplog.text


def test_log_to_stderr(restore_rootlogger):
    """Test stderr logging is configured once."""
    logger = log_to_stderr(logging.INFO)
    assert logger is restore_rootlogger
    assert logger.level == logging.INFO
    assert hex_logging.get_rootlogger() is logger

    log_to_stderr()
    stream_handlers = [h for h in logger.handlers if type(h) is logging.StreamHandler]
    assert len(stream_handlers) == 1
    assert logger.level == hex_logging.DEFAULT_LEVEL
