"""Utilities to configure logging for the command-line tool.

Standard output carries the release URL, so log records always go to stderr.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# CLI level names mapped onto logging levels
LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_level(name: str) -> int:
    """Return the logging level for a CLI level name such as ``"warn"``.

    Raises:
        ValueError: if the name is not one of `LEVELS`.
    """
    try:
        return LEVELS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"invalid log level {name!r} (choose from debug, info, warn, error)"
        ) from None


def configure_logging(log_path: Path | None = None, level: int = logging.INFO) -> None:
    """Configure root logging handlers and formatting.

    Args:
        log_path: Optional path to a file where logs will also be written.
        level: Logging level (defaults to INFO).
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
    )
