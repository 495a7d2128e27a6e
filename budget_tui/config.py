"""Runtime settings read from environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_FILE = "budget.db"
DEFAULT_NOTIFICATION_LIMIT = 500
DEFAULT_SAMPLE_SIZE = 5


def parse_level(level: int | str | None) -> int:
    """Convert a level name or number into a ``logging`` level."""

    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    db_path: Path
    log_file: Path | None = None
    log_level: int = logging.INFO
    notification_limit: int = DEFAULT_NOTIFICATION_LIMIT
    sample_size: int = DEFAULT_SAMPLE_SIZE

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``BUDGET_TUI_*`` variables, falling back to defaults."""

        db_file = os.getenv("BUDGET_TUI_DB") or DEFAULT_DB_FILE
        log_file = os.getenv("BUDGET_TUI_LOG_FILE")
        return cls(
            db_path=Path(db_file),
            log_file=Path(log_file) if log_file else None,
            log_level=parse_level(os.getenv("BUDGET_TUI_LOG_LEVEL")),
            notification_limit=_int_env(
                "BUDGET_TUI_NOTIFICATION_LIMIT", DEFAULT_NOTIFICATION_LIMIT
            ),
            sample_size=_int_env("BUDGET_TUI_SAMPLE_SIZE", DEFAULT_SAMPLE_SIZE),
        )
