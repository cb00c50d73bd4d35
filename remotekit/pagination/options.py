"""Pagination-aware endpoint options."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from .cursor import PaginationCursor
from .list import PaginatedPartial


@runtime_checkable
class SpecifiesPaginationCursor(Protocol):
    """Options that carry a pagination cursor.

    Coordinators inject the previous result's next cursor into any options
    object implementing this protocol.
    """

    pagination_cursor: Any

    def with_pagination_cursor(self, cursor: Any) -> Any: ...


@runtime_checkable
class PaginatedResponse(Protocol):
    """A decoded response convertible to one page."""

    def to_partial(self) -> PaginatedPartial[Any]: ...


class CursorPaginationOptions(BaseModel):
    """Endpoint options with a pagination cursor and fetch limit.

    Subclass to add endpoint specific options.
    """

    pagination_cursor: Optional[PaginationCursor] = None
    fetch_limit: Optional[int] = Field(default=None, gt=0)

    def with_pagination_cursor(self, cursor: Any) -> CursorPaginationOptions:
        return self.model_copy(update={"pagination_cursor": cursor})

    model_config = ConfigDict(frozen=True)
