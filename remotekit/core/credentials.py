"""Opaque credential values attachable to outgoing requests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AuthorizationCredential(BaseModel):
    """Base class for credentials. Subclasses render themselves as headers."""

    def as_headers(self) -> dict[str, str]:
        return {}

    model_config = ConfigDict(frozen=True)


class APIKey(AuthorizationCredential):
    """A static API key, optionally scoped to a server."""

    value: str = Field(..., min_length=1)
    server_url: str | None = None
    header_name: str = "X-API-Key"

    def as_headers(self) -> dict[str, str]:
        return {self.header_name: self.value}


class BearerToken(AuthorizationCredential):
    """An OAuth-style bearer token."""

    token: str = Field(..., min_length=1)

    def as_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}
