"""Resolve a Foundry VTT version into a pre-signed release download URL.

`ReleaseRequest` represents the single request sent to the releases endpoint.
The endpoint answers an authenticated request with a redirect whose
``Location`` is a time-limited object-storage URL.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from http.cookiejar import CookieJar
from pathlib import Path
from typing import Any, Mapping, Protocol

import requests

from foundry_release_url.cookie_store import FileCookieStore
from foundry_release_url.errors import (
    CookieLoadError,
    MissingLocationError,
    NetworkError,
    UnexpectedResponseError,
)

log = logging.getLogger(__name__)

BASE_URL = "https://foundryvtt.com"
PLATFORM = "linux"

HEADERS: dict[str, str] = {
    "DNT": "1",
    "Referer": BASE_URL,
    "Upgrade-Insecure-Requests": "1",
    "User-Agent": "Mozilla/5.0",
}


class HTTPResponse(Protocol):
    """The part of `requests.Response` the resolver reads."""

    status_code: int
    reason: str | None
    headers: Mapping[str, str]


class HTTPSession(Protocol):
    """The part of `requests.Session` the resolver relies on."""

    cookies: CookieJar

    def get(self, url: str, **kwargs: Any) -> HTTPResponse: ...


@dataclass(frozen=True)
class ReleaseRequest:
    """Target build for the releases endpoint.

    Attributes:
        build: Build number, e.g. ``"305"``.
        platform: Release platform; always ``linux`` for this tool.
        base_url: Site root the endpoint lives under.
    """
    build: str
    platform: str = PLATFORM
    base_url: str = BASE_URL
    headers: dict[str, str] = field(default_factory=lambda: dict(HEADERS))

    @property
    def url(self) -> str:
        return f"{self.base_url}/releases/download"

    @property
    def params(self) -> dict[str, str]:
        return {"build": self.build, "platform": self.platform}


def build_number(version: str) -> str:
    """Return the build number of a dotted Foundry version.

    Versions look like ``x.yyy`` where ``yyy`` is the build. A version with
    no dot is already a build number.

    Examples:
        >>> build_number("11.305")
        '305'
        >>> build_number("305")
        '305'
    """
    return version.rsplit(".", 1)[-1]


def fetch_release_url(
    session: HTTPSession,
    request: ReleaseRequest,
    timeout: float | None = None,
) -> str:
    """Send the release request without following redirects.

    Args:
        session: HTTP session carrying the authenticated cookies.
        request: Which build to ask for.
        timeout: Request timeout in seconds, or None for no timeout.

    Returns:
        The pre-signed URL from the redirect's ``Location`` header.

    Raises:
        NetworkError: if the request could not be completed.
        UnexpectedResponseError: if the response is not a 3xx redirect.
        MissingLocationError: if the redirect has no usable ``Location``.
    """
    log.info("Fetching S3 pre-signed release URL for build %s...", request.build)
    log.debug("Fetching: %s %s", request.url, request.params)
    try:
        resp = session.get(
            request.url,
            params=request.params,
            headers=request.headers,
            allow_redirects=False,
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise NetworkError(f"Release request failed: {e}") from e

    # Expect a redirect status
    if not 300 <= resp.status_code < 400:
        raise UnexpectedResponseError(resp.status_code, resp.reason)

    location = (resp.headers.get("Location") or "").strip()
    log.debug("S3 presigned URL: %s", location)
    if not location:
        raise MissingLocationError()
    return location


def resolve(
    cookie_store_path: Path | str,
    version: str,
    session: HTTPSession | None = None,
    timeout: float | None = None,
    save_cookies: bool = True,
) -> str:
    """Load cookies, ask for `version` and return its pre-signed URL.

    Cookies are loaded before anything touches the network, so a bad store
    fails with `CookieLoadError` without a request being sent. When a session
    is not supplied a `requests.Session` is created and closed here.

    Args:
        cookie_store_path: JSON cookie store written by the login step.
        version: Foundry version such as ``"11.305"``.
        session: Optional HTTP session, mainly for tests.
        timeout: Request timeout in seconds, or None for no timeout.
        save_cookies: Write cookies refreshed by the server back to the store.
    """
    store = FileCookieStore(cookie_store_path)
    log.debug("Loading cookies from: %s", store.path)

    owned = session is None
    sess: HTTPSession = requests.Session() if session is None else session
    try:
        store.load(sess.cookies)
        url = fetch_release_url(sess, ReleaseRequest(build=build_number(version)), timeout)
        if save_cookies:
            try:
                store.save(sess.cookies)
            except (OSError, CookieLoadError) as e:
                log.warning("Could not update cookie store %s: %s", store.path, e)
        return url
    finally:
        if owned:
            sess.close()  # type: ignore[attr-defined]
