"""Utility helpers for toongraph."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "toongraph"
LOG_LEVEL_ENV = "TOONGRAPH_LOG_LEVEL"

console = Console()
# Log records and error reports go to stderr.
err_console = Console(stderr=True)


def get_logger() -> logging.Logger:
    """Return the package logger, attaching a rich handler on first use."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = RichHandler(console=err_console, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)
    return logger


logger = get_logger()


def set_log_level(level: str) -> None:
    """Allow callers (e.g. CLI) to adjust logging verbosity at runtime."""

    level_value = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level_value)


def default_log_level() -> str:
    return os.getenv(LOG_LEVEL_ENV, "INFO")


__all__ = [
    "LOGGER_NAME",
    "console",
    "default_log_level",
    "err_console",
    "get_logger",
    "logger",
    "set_log_level",
]
