"""Request and response value types.

A request is a hashable value identifying one remote call. Its equality and
hash define the key domain of every session cache, and ``cache_key`` gives the
deterministic string form used by string-keyed backends (disk files,
preference domains).
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_pairs(value: Any) -> tuple[tuple[str, str], ...]:
    if value is None:
        return ()
    items = value.items() if isinstance(value, Mapping) else value
    pairs = []
    for key, item in items:
        if item is None:
            continue
        if isinstance(item, bool):
            item = "true" if item else "false"
        pairs.append((str(key), str(item)))
    return tuple(sorted(pairs))


class Request(ABC):
    """A hashable value describing a call to a remote API."""

    @property
    @abstractmethod
    def cache_key(self) -> str:
        """Deterministic string form of this request."""


class HTTPRequest(BaseModel, Request):
    """An HTTP request description.

    Query parameters and headers are stored as sorted pairs so that two
    requests built from equal mappings are equal and hash identically.
    """

    method: str = "GET"
    path: str
    query: tuple[tuple[str, str], ...] = ()
    body: Any = None
    headers: tuple[tuple[str, str], ...] = ()

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, v: Any) -> str:
        return str(v).upper()

    @field_validator("query", "headers", mode="before")
    @classmethod
    def _pairs(cls, v: Any) -> tuple[tuple[str, str], ...]:
        return _normalize_pairs(v)

    @property
    def cache_key(self) -> str:
        return json.dumps(
            {
                "method": self.method,
                "path": self.path,
                "query": self.query,
                "body": self.body,
                "headers": self.headers,
            },
            sort_keys=True,
            separators=(",", ":"),
            default=str,
        )

    def __hash__(self) -> int:
        return hash(self.cache_key)

    @property
    def query_dict(self) -> dict[str, str]:
        return dict(self.query)

    @property
    def headers_dict(self) -> dict[str, str]:
        return dict(self.headers)

    def with_header(self, name: str, value: str) -> HTTPRequest:
        headers = self.headers_dict
        headers[name] = value
        return HTTPRequest(
            method=self.method, path=self.path, query=self.query, body=self.body, headers=headers
        )

    def with_query(self, **params: Any) -> HTTPRequest:
        query = self.query_dict
        query.update(params)
        return HTTPRequest(
            method=self.method, path=self.path, query=query, body=self.body, headers=self.headers
        )

    def url(self, base_url: str | None = None) -> str:
        """Full URL including the encoded query string."""
        url = self.path
        if base_url and not url.startswith("http"):
            url = f"{base_url.rstrip('/')}/{url.lstrip('/')}"
        if self.query:
            url = f"{url}?{urlencode(self.query)}"
        return url

    model_config = ConfigDict(frozen=True)


class HTTPResponse(BaseModel):
    """An HTTP response with a raw body.

    Bytes are base64 encoded in JSON so responses survive JSON coders.
    """

    status: int = 200
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body as JSON (``None`` for an empty body)."""
        if not self.body:
            return None
        return json.loads(self.body)

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding)

    @classmethod
    def from_json(cls, payload: Any, status: int = 200, headers: dict[str, str] | None = None) -> HTTPResponse:
        return cls(
            status=status,
            headers={"Content-Type": "application/json", **(headers or {})},
            body=json.dumps(payload).encode("utf-8"),
        )

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")
