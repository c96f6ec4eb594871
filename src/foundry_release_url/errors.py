"""Exceptions raised while resolving a release URL.

Every error is fatal for the single resolve operation. The CLI catches
`ReleaseURLError` and turns it into a non-zero exit status.
"""

from __future__ import annotations


class ReleaseURLError(RuntimeError):
    """Base class for all resolution failures."""


class CookieLoadError(ReleaseURLError):
    """The cookie store is missing, unreadable or malformed."""


class NetworkError(ReleaseURLError):
    """The release request could not be completed (DNS, connect, timeout)."""


class UnexpectedResponseError(ReleaseURLError):
    """The release endpoint answered with something other than a redirect."""

    def __init__(self, status_code: int, reason: str | None) -> None:
        self.status_code = status_code
        self.reason = reason or ""
        super().__init__(f"Unexpected response {status_code} {self.reason}".rstrip())


class MissingLocationError(ReleaseURLError):
    """The redirect response did not carry a usable `Location` header."""

    def __init__(self, message: str = "Could not fetch a release URL.") -> None:
        super().__init__(message)
