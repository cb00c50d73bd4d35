"""Pagination cursor models.

A cursor is an opaque pagination position drawn from a closed set of
representations. Each representation is its own frozen model tagged by a
``type`` literal; together they form a discriminated union, so decoding
dispatches on ``type`` before the payload is parsed.

Cursors compare equal only within the same representation. Ordering is
defined for offset and page-number cursors of the same representation;
every other comparison is ``False``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Annotated, Any, ClassVar, Literal, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class _Cursor(BaseModel):
    """Shared behavior of cursor representations."""

    ordered: ClassVar[bool] = False

    def __init__(self, *args: Any, **data: Any) -> None:
        if args:
            (data["value"],) = args
        super().__init__(**data)

    def __lt__(self, other: object) -> bool:
        if type(self) is not type(other) or not self.ordered:
            return False
        return self.value < other.value  # type: ignore[attr-defined]

    def __gt__(self, other: object) -> bool:
        if type(self) is not type(other) or not self.ordered:
            return False
        return self.value > other.value  # type: ignore[attr-defined]

    def offset_value(self) -> int | None:
        return None

    def string_value(self) -> str | None:
        return None

    def url_value(self) -> str | None:
        return None

    def __str__(self) -> str:
        return f"{self.type}:{self.value}"  # type: ignore[attr-defined]

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")


class DataCursor(_Cursor):
    """Raw bytes position."""

    type: Literal["data"] = "data"
    value: bytes


class StringCursor(_Cursor):
    """Opaque string token."""

    type: Literal["string"] = "string"
    value: str

    def string_value(self) -> str | None:
        return self.value


class OffsetCursor(_Cursor):
    """Integer item offset."""

    ordered: ClassVar[bool] = True

    type: Literal["offset"] = "offset"
    value: int = Field(..., ge=0)

    def offset_value(self) -> int | None:
        return self.value


class PageNumberCursor(_Cursor):
    """Integer page number."""

    ordered: ClassVar[bool] = True

    type: Literal["pageNumber"] = "pageNumber"
    value: int = Field(..., ge=0)


class URLCursor(_Cursor):
    """Absolute URL of the next page."""

    type: Literal["url"] = "url"
    value: str

    @field_validator("value")
    @classmethod
    def validate_url(cls, v: str) -> str:
        parts = urlsplit(v)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"not an absolute URL: {v!r}")
        return v

    def url_value(self) -> str | None:
        return self.value


class ProviderTokenCursor(_Cursor):
    """Provider-specific token kept in its archived byte form."""

    type: Literal["providerToken"] = "providerToken"
    value: bytes


class OpaqueValueCursor(_Cursor):
    """Arbitrary JSON-compatible value."""

    type: Literal["opaqueValue"] = "opaqueValue"
    value: Any

    def __hash__(self) -> int:
        return hash((self.type, json.dumps(self.value, sort_keys=True, default=str)))


PaginationCursor = Annotated[
    Union[
        DataCursor,
        StringCursor,
        OffsetCursor,
        PageNumberCursor,
        URLCursor,
        ProviderTokenCursor,
        OpaqueValueCursor,
    ],
    Field(discriminator="type"),
]

CURSOR_TYPES: tuple[type[_Cursor], ...] = (
    DataCursor,
    StringCursor,
    OffsetCursor,
    PageNumberCursor,
    URLCursor,
    ProviderTokenCursor,
    OpaqueValueCursor,
)

_cursor_adapter: TypeAdapter[Any] = TypeAdapter(PaginationCursor)


def is_cursor(value: Any) -> bool:
    return isinstance(value, CURSOR_TYPES)


def encode_cursor(cursor: _Cursor) -> dict[str, Any]:
    """Wire form ``{"type": ..., "value": ...}`` of ``cursor``."""
    return cursor.model_dump(mode="json")


def decode_cursor(payload: Mapping[str, Any] | str | bytes) -> Any:
    """Parse a cursor from its wire form (a mapping or a JSON document).

    Raises:
        pydantic.ValidationError: On an unknown ``type`` or a payload that
            does not match the tagged representation.
    """
    if not isinstance(payload, (str, bytes)):
        # byte payloads are base64 text on the wire; only JSON mode decodes them
        payload = json.dumps(dict(payload))
    return _cursor_adapter.validate_json(payload)
