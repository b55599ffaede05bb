from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Every line written to stdout starts with one of INFO|WARN|ERROR|SUMMARY
(DEBUG in --debug mode). Module loggers under ``ctn_summary.*`` propagate to
the application logger configured here.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
]

APP_LOGGER_NAME = "ctn_summary"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formats records as ``LABEL message``."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{level_label} {record.getMessage()}"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the application logger (idempotent).

    Args:
        debug: lower logger and handler level to DEBUG

    Returns:
        Configured logger instance for the application
    """
    global _logger

    if _logger is None:
        logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

        logger = logging.getLogger(APP_LOGGER_NAME)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(LabeledFormatter())
        logger.addHandler(handler)

        # Prevent propagation to root logger to avoid duplicate output
        logger.propagate = False
        _logger = logger

    level = logging.DEBUG if debug else logging.INFO
    _logger.setLevel(level)
    for h in _logger.handlers:
        h.setLevel(level)
    return _logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    """Log a message at SUMMARY level."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Reset the global logger state. Mainly for testing purposes."""
    global _logger
    if _logger is not None:
        for handler in _logger.handlers[:]:
            _logger.removeHandler(handler)
    _logger = None
