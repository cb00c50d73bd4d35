"""Cursor pagination: cursors, coalescing list and async iteration."""

from .cursor import (
    CURSOR_TYPES,
    DataCursor,
    OffsetCursor,
    OpaqueValueCursor,
    PageNumberCursor,
    PaginationCursor,
    ProviderTokenCursor,
    StringCursor,
    URLCursor,
    decode_cursor,
    encode_cursor,
    is_cursor,
)
from .iterator import CursorPaginatedItems, CursorPaginatedIterator, PaginatedResults
from .list import CursorPaginatedList, PaginatedPage, PaginatedPartial
from .options import CursorPaginationOptions, PaginatedResponse, SpecifiesPaginationCursor

__all__ = [
    "CURSOR_TYPES",
    "CursorPaginatedItems",
    "CursorPaginatedIterator",
    "CursorPaginatedList",
    "CursorPaginationOptions",
    "DataCursor",
    "OffsetCursor",
    "OpaqueValueCursor",
    "PageNumberCursor",
    "PaginatedPage",
    "PaginatedPartial",
    "PaginatedResponse",
    "PaginatedResults",
    "PaginationCursor",
    "ProviderTokenCursor",
    "SpecifiesPaginationCursor",
    "StringCursor",
    "URLCursor",
    "decode_cursor",
    "encode_cursor",
    "is_cursor",
]
