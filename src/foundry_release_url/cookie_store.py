"""Read and write the JSON cookie store shared with the login step.

The store layout is ``{domain: {path: {name: record}}}`` as written by the
Node `tough-cookie-file-store` package. `FileCookieStore.load` fills a
`requests` cookie jar from it; `FileCookieStore.save` merges the jar back so
cookies refreshed by the server survive to the next run.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from http.cookiejar import Cookie, CookieJar
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from requests.cookies import create_cookie

from foundry_release_url.errors import CookieLoadError
from foundry_release_url.models import StoredCookie

log = logging.getLogger(__name__)


def _to_cookie(rec: StoredCookie) -> Cookie:
    """Convert a stored record into a cookie the jar can match against requests."""
    domain = rec.domain if rec.host_only else f".{rec.domain}"
    expires = int(rec.expires.timestamp()) if rec.expires is not None else None
    return create_cookie(
        rec.key,
        rec.value,
        domain=domain,
        path=rec.path,
        secure=rec.secure,
        expires=expires,
        discard=expires is None,
        rest={"HttpOnly": None} if rec.http_only else {},
    )


def _from_cookie(cookie: Cookie) -> StoredCookie:
    expires = (
        datetime.fromtimestamp(cookie.expires, tz=timezone.utc)
        if cookie.expires is not None
        else None
    )
    return StoredCookie(
        key=cookie.name,
        value=cookie.value or "",
        domain=cookie.domain,
        path=cookie.path or "/",
        expires=expires,
        secure=bool(cookie.secure),
        http_only=cookie.has_nonstandard_attr("HttpOnly"),
        host_only=not cookie.domain.startswith("."),
    )


class FileCookieStore:
    """Cookie store backed by a JSON file owned by the login tool.

    Args:
        path: Location of the store file. It must exist before `load`.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"FileCookieStore({str(self.path)!r})"

    def _read(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise CookieLoadError(f"Cannot read cookie store {self.path}: {e}") from e
        except UnicodeDecodeError as e:
            raise CookieLoadError(f"Cookie store {self.path} is not UTF-8 text: {e}") from e

        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CookieLoadError(f"Cookie store {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CookieLoadError(f"Cookie store {self.path} must contain a JSON object")
        return data

    def records(self) -> list[StoredCookie]:
        """Parse and validate every cookie record in the store.

        Raises:
            CookieLoadError: if the file is missing, unreadable or malformed.
        """
        data = self._read()
        out: list[StoredCookie] = []
        try:
            for paths in data.values():
                for cookies in paths.values():
                    for rec in cookies.values():
                        out.append(StoredCookie.model_validate(rec))
        except (AttributeError, ValidationError) as e:
            raise CookieLoadError(f"Malformed cookie store {self.path}: {e}") from e
        return out

    def load(self, jar: CookieJar) -> int:
        """Add every stored cookie to `jar` and return how many were loaded."""
        recs = self.records()
        for rec in recs:
            jar.set_cookie(_to_cookie(rec))
        log.debug("Loaded %d cookies from %s", len(recs), self.path)
        return len(recs)

    def save(self, jar: CookieJar) -> int:
        """Rewrite the store from the cookies in `jar` and return the count.

        The jar is authoritative: records it no longer holds (expired or
        deleted by the server) are dropped. Surviving records keep fields this
        tool does not manage (``creation`` and any tough-cookie extras);
        value, expiry and flags are refreshed. The file is replaced atomically.
        """
        old = self._read()
        jar.clear_expired_cookies()
        now = datetime.now(timezone.utc).isoformat()
        data: dict[str, Any] = {}
        n = 0
        for cookie in jar:
            rec = _from_cookie(cookie)
            prev = old.get(rec.domain, {}).get(rec.path, {}).get(rec.key, {})
            merged = dict(prev) if isinstance(prev, dict) else {}
            merged.update(rec.to_store())
            # expires is absolute now
            merged.pop("maxAge", None)
            merged.setdefault("creation", now)
            merged["lastAccessed"] = now
            data.setdefault(rec.domain, {}).setdefault(rec.path, {})[rec.key] = merged
            n += 1

        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        log.debug("Saved %d cookies to %s", n, self.path)
        return n
