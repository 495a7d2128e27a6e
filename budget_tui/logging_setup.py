"""Centralized logging configuration for the ``budget_tui`` package.

The terminal belongs to curses while the app runs, so log records go to a
file. Library modules only call :func:`get_logger` and never attach handlers
themselves; the entry point calls :func:`configure_logging` once.
"""
from __future__ import annotations

import logging
from pathlib import Path

from .config import parse_level

_PKG_LOGGER_NAME = "budget_tui"
_CONFIGURED = False

DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(
    log_file: Path | str | None,
    level: int | str | None = None,
    *,
    fmt: str | None = None,
) -> None:
    """Attach a single ``FileHandler`` to the package root logger.

    When ``log_file`` is ``None`` logging stays silent (``NullHandler``).
    Repeated calls are ignored.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    if log_file is None:
        if not logger.handlers:
            logger.addHandler(logging.NullHandler())
        _CONFIGURED = True
        return

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    numeric = parse_level(level)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(numeric)
    logger.addHandler(handler)
    # stderr is the curses screen; never bubble up to the root logger
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, making sure the package root has at least a ``NullHandler``."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
