"""Configuration helpers and Settings container.

The release endpoint and its headers are fixed; only the ambient behaviour of
the tool (HTTP timeout, log file, cookie write-back) is read from the
environment, optionally via a `.env` file in the working directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import find_dotenv, load_dotenv

_TRUE = ("1", "true", "yes", "y", "on")
_FALSE = ("0", "false", "no", "n", "off")


@dataclass(frozen=True)
class Settings:
    """Container for tool configuration read from the environment.

    Attributes:
        http_timeout: Seconds to wait for the release endpoint, or None to
            rely on the HTTP library default (no timeout).
        log_file: Optional file that receives a copy of the log records.
        save_cookies: Whether cookies received during the request are
            written back to the cookie store.
    """
    http_timeout: float | None
    log_file: Path | None
    save_cookies: bool


def _getenv_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise RuntimeError(f"{name} must be a boolean (got {raw!r}).")


def _getenv_timeout(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number of seconds (got {raw!r}).") from None
    if value <= 0:
        raise RuntimeError(f"{name} must be positive (got {raw!r}).")
    return value


def get_settings() -> Settings:
    """Load `.env`, read environment variables and return a frozen `Settings`.

    Raises:
        RuntimeError: if a variable is set to a value that cannot be parsed.
    """
    load_dotenv(find_dotenv(usecwd=True))

    log_file = os.getenv("FOUNDRY_LOG_FILE", "").strip()

    return Settings(
        http_timeout=_getenv_timeout("FOUNDRY_HTTP_TIMEOUT"),
        log_file=Path(log_file) if log_file else None,
        save_cookies=_getenv_bool("FOUNDRY_SAVE_COOKIES", True),
    )
