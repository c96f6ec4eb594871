from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from requests.cookies import RequestsCookieJar
from requests.structures import CaseInsensitiveDict

S3_URL = "https://s3.example.com/x"


class FakeResponse:
    def __init__(self, status_code: int, reason: str = "", headers: dict[str, str] | None = None) -> None:
        self.status_code = status_code
        self.reason = reason
        self.headers = CaseInsensitiveDict(headers or {})


class FakeSession:
    """Stands in for `requests.Session`; records calls instead of sending them."""

    def __init__(self, response: FakeResponse | None = None, exc: Exception | None = None,
                 set_cookies: dict[str, str | None] | None = None) -> None:
        self.cookies = RequestsCookieJar()
        self.response = response
        self.exc = exc
        self.set_cookies = set_cookies or {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        # a None value deletes the cookie, like an expired Set-Cookie
        for name, value in self.set_cookies.items():
            self.cookies.set(name, value, domain=".foundryvtt.com", path="/")
        assert self.response is not None
        return self.response

    def close(self) -> None:
        self.closed = True


def cookie_record(key: str, value: str, **extra: Any) -> dict[str, Any]:
    rec = {
        "key": key,
        "value": value,
        "domain": "foundryvtt.com",
        "path": "/",
        "expires": "2099-01-01T00:00:00.000Z",
        "secure": True,
        "httpOnly": True,
        "hostOnly": False,
        "creation": "2024-05-01T10:00:00.000Z",
        "lastAccessed": "2024-05-01T10:00:00.000Z",
    }
    rec.update(extra)
    return rec


@pytest.fixture
def cookie_file(tmp_path: Path) -> Path:
    """A store holding a logged-in Foundry session."""
    path = tmp_path / "cookies.json"
    data = {
        "foundryvtt.com": {
            "/": {
                "sessionid": cookie_record("sessionid", "abc123"),
                "csrftoken": cookie_record("csrftoken", "tok", httpOnly=False),
            }
        }
    }
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so variables loaded from a .env during the test are undone too
    for name in ("FOUNDRY_HTTP_TIMEOUT", "FOUNDRY_LOG_FILE", "FOUNDRY_SAVE_COOKIES"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
