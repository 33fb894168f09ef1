from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Every line written by the application logger is prefixed with its label
(DEBUG|INFO|WARN|ERROR|SUMMARY). Module loggers obtained with
logging.getLogger(__name__) under the bvt_data package are children of the
application logger and share its handler.
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

APP_LOGGER_NAME = "bvt_data"

SUMMARY_LEVEL = 25  # INFO < SUMMARY < WARNING
_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter producing "LABEL message" lines."""

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


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach one labeled stdout handler to the bvt_data logger.

    Only the first call configures; later calls return the same logger and ignore
    `level`. Output does not propagate to the root logger.
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(level)

    for stale in list(logger.handlers):
        logger.removeHandler(stale)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured application logger, configuring it on first use."""
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    """Log a message at SUMMARY level."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() reconfigures."""
    global _logger
    _logger = None
