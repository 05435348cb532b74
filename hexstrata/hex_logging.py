"""Logging support for hexstrata.

It is modeled on the default `logging approach that comes with Python <https://docs.python.org/library/logging.html>`_.
All loggers live below the ``HEXSTRATA`` logger, which only carries a
``NullHandler`` until :func:`log_to_stderr` is called.
"""

import inspect
import logging
from functools import wraps
from logging import DEBUG, INFO, WARNING

__all__ = [
    "DEBUG",
    "DEFAULT_LEVEL",
    "INFO",
    "LOGGER_NAME",
    "WARNING",
    "create_module_logger",
    "function_logger",
    "get_module_logger",
    "get_rootlogger",
    "log_to_stderr",
    "method_logger",
]

LOGGER_NAME = "HEXSTRATA"
DEFAULT_LEVEL = DEBUG

_rootlogger = None
_module_loggers: dict[str, logging.Logger] = {}

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def create_module_logger(name: str | None = None) -> logging.Logger:
    """Create a module logger below the hexstrata root logger.

    Args:
        name: name of the module, defaults to the name of the calling module

    """
    if name is None:
        frm = inspect.stack()[1]
        mod = inspect.getmodule(frm[0])
        name = mod.__name__
    logger = logging.getLogger(f"{LOGGER_NAME}.{name}")

    _module_loggers[name] = logger
    return logger


def get_module_logger(name: str) -> logging.Logger:
    """Return the module logger for name, creating it if needed."""
    try:
        logger = _module_loggers[name]
    except KeyError:
        logger = create_module_logger(name)

    return logger


def method_logger(name: str):
    """Decorator that logs calls to a method at debug level.

    Args:
        name: name of the module the method is defined in

    """
    logger = get_module_logger(name)
    classname = inspect.getouterframes(inspect.currentframe())[1][3]

    def real_decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            # the first argument is the instance, leave it out of the message
            logger.debug(
                f"calling {classname}.{func.__name__} with {args[1::]} and {kwargs}"
            )
            return func(*args, **kwargs)

        return wrapper

    return real_decorator


def function_logger(name: str):
    """Decorator that logs calls to a module level function at debug level.

    Args:
        name: name of the module the function is defined in

    """
    logger = get_module_logger(name)

    def real_decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"calling {func.__name__} with {args} and {kwargs}")
            return func(*args, **kwargs)

        return wrapper

    return real_decorator


def get_rootlogger() -> logging.Logger | None:
    """Return the logger configured by log_to_stderr, if any."""
    return _rootlogger


def log_to_stderr(level: int | None = None) -> logging.Logger:
    """Send hexstrata log messages to stderr.

    Args:
        level: the level of the root logger, defaults to DEFAULT_LEVEL

    """
    global _rootlogger  # noqa: PLW0603

    if not level:
        level = DEFAULT_LEVEL

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # avoid creating multiple stderr streams
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("[%(levelname)s %(name)s] %(message)s")
        )
        logger.addHandler(handler)
    logger.propagate = False

    _rootlogger = logger
    return logger
