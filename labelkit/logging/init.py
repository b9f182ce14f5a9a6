from __future__ import annotations

import logging
import sys

"""Console logging for labelkit.

A run prints one line per event, each starting with a label:

    INFO Importing workbook: plans.xlsx
    WARN no label rows found in sheet 'Sayfa1' -> using fallback row
    WARN row 9 skipped: invalid label number format: 'AUTO-2' (expected e.g. A108)
    SUMMARY sheet=DİLME PLANLARI rows=3 selected=3 labels=10 skipped=1 fallback=no

Module loggers (labelkit.excel.extractor, labelkit.services.generator, ...)
are children of the "labelkit" logger and share its stdout handler. The
structured counterpart of the WARN lines is the JSON Lines error log
(labelkit.logging.error_log).
"""

__all__ = [
    "setup_logging",
    "get_logger",
    "set_debug",
    "log_summary",
    "reset_logging",
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
]

LOGGER_NAME = "labelkit"

SUMMARY_LEVEL = 25  # between INFO and WARNING

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Render records as `LABEL message`; WARNING is shortened to WARN."""

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


def setup_logging() -> logging.Logger:
    """Attach the labeled stdout handler to the "labelkit" logger.

    Safe to call more than once: later calls return the configured logger
    without adding a second handler. The logger does not propagate to the
    root logger, so an embedding application's handlers do not repeat the
    lines.
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def set_debug(logger: logging.Logger) -> None:
    """--debug: also show per-label store events and sheet selection details."""
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)
    logger.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    """Print the end-of-run line, e.g. `SUMMARY sheet=... labels=10 ...`."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() starts fresh (tests)."""
    global _logger
    _logger = None
