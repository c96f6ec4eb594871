"""Pydantic models for records of the JSON cookie store.

The store is written by the Node `tough-cookie-file-store` package used by the
login step, so field names follow tough-cookie's serialisation.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class StoredCookie(BaseModel):
    """Schema for one cookie record in the store.

    Attributes:
        key: Cookie name.
        value: Cookie value (may be empty).
        domain: Domain the cookie is scoped to, without a leading dot.
        path: Path the cookie is scoped to.
        expires: Expiry timestamp, or None for a session cookie
            (tough-cookie writes ``"Infinity"`` for those).
        secure: Only send over HTTPS.
        http_only: Set with the HttpOnly attribute.
        host_only: Only send to exactly `domain`, not its subdomains.
        max_age: Lifetime in seconds counted from `creation`; when present
            it takes precedence over `expires`.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    key: str = Field(..., min_length=1)
    value: str = ""
    domain: str = Field(..., min_length=1)
    path: str = "/"
    expires: datetime | None = None
    secure: bool = False
    http_only: bool = Field(False, alias="httpOnly")
    host_only: bool = Field(False, alias="hostOnly")
    creation: datetime | None = None
    last_accessed: datetime | None = Field(None, alias="lastAccessed")
    max_age: float | None = Field(None, alias="maxAge")

    @field_validator("expires", mode="before")
    @classmethod
    def _infinity_is_session(cls, v: object) -> object:
        if v in ("Infinity", ""):
            return None
        return v

    @field_validator("max_age", mode="before")
    @classmethod
    def _max_age_sentinels(cls, v: object) -> object:
        if v in ("Infinity", ""):
            return None
        if v == "-Infinity":
            return 0
        return v

    @model_validator(mode="after")
    def _expiry_from_max_age(self) -> "StoredCookie":
        if self.max_age is not None and self.creation is not None:
            self.expires = self.creation + timedelta(seconds=max(self.max_age, 0))
        return self

    @field_validator("domain", mode="after")
    @classmethod
    def _strip_leading_dot(cls, v: str) -> str:
        return v.lstrip(".").lower()

    def to_store(self) -> dict[str, object]:
        """Return the record in tough-cookie's JSON layout."""
        rec: dict[str, object] = {
            "key": self.key,
            "value": self.value,
            "domain": self.domain,
            "path": self.path,
            "expires": self.expires.isoformat() if self.expires else "Infinity",
            "secure": self.secure,
            "httpOnly": self.http_only,
            "hostOnly": self.host_only,
        }
        if self.creation is not None:
            rec["creation"] = self.creation.isoformat()
        if self.last_accessed is not None:
            rec["lastAccessed"] = self.last_accessed.isoformat()
        return rec
