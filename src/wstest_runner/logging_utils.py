"""Logging helpers for step-level progress tracking."""

from __future__ import annotations

import logging


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """
    Configure the runner logger once per process.

    Output goes to stderr so stdout stays reserved for the usage line,
    dry-run commands and report summaries.
    """
    normalized = (level or "WARNING").upper()
    log_level = getattr(logging, normalized, logging.WARNING)

    logger = logging.getLogger("wstest_runner")
    logger.setLevel(log_level)
    logger.propagate = False

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    else:
        for handler in logger.handlers:
            handler.setLevel(log_level)

    return logger
