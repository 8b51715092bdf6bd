"""
Logging configuration for queuesim.

Library modules only create `logging.getLogger(__name__)` loggers under the
"queuesim" namespace and never configure them: records propagate to
whatever the host application installs, including pytest's caplog.

setup_logging() is opt-in, for scripts and debugging sessions that want
queuesim output on the console at QUEUESIM_LOG_LEVEL without touching the
root logger. reset_logging() undoes it.
"""

import logging
from typing import Optional, TextIO

from .config import get_settings

LOGGER_NAME = "queuesim"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _clear_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


def setup_logging(log_level: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Send queuesim logs to a console handler and return the package logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            defaults to the configured QUEUESIM_LOG_LEVEL
        stream: Console stream (default: sys.stderr)

    Returns:
        logging.Logger: The "queuesim" logger
    """
    if log_level is None:
        log_level = get_settings().log_level
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Avoid duplicate output through the root logger
    logger.propagate = False

    _clear_handlers(logger)

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    logger.debug(f"Logging to console at level {log_level}")
    return logger


def reset_logging() -> logging.Logger:
    """Drop queuesim handlers and hand records back to the root logger."""
    logger = logging.getLogger(LOGGER_NAME)
    _clear_handlers(logger)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger
