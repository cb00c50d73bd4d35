"""Cursor-paginated list.

Architecture:
    ``CursorPaginatedList`` accumulates fetched pages while keeping the full
    page history, so earlier pages can be re-derived without re-fetching:

    - ``head``: items of the most recently fetched page
    - ``tail``: earlier pages in fetch order, keyed by the cursor used to
      fetch each one
    - ``cursors_consumed``: cursors already resolved, in order
    - ``current_cursor`` / ``next_cursor``: position of ``head`` and of the
      page after it; ``next_cursor is None`` marks the terminal page
    - ``all_items``: every page in ``tail`` order followed by ``head``

    The list is created empty and mutated only by ``coalesce`` (append one
    page) and ``concatenate`` (merge another list under a cursor continuity
    precondition).

Design Decisions:
    - Continuity violations raise ``PaginationContinuityError`` instead of
      merging, leaving the list untouched.
    - The model is serialisable; decoding also accepts a plain list of
      items, which becomes a single unpaged run.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.exceptions import PaginationContinuityError
from .cursor import PaginationCursor

Item = TypeVar("Item")
T = TypeVar("T")


class PaginatedPartial(BaseModel, Generic[Item]):
    """One fetched page: its items and the cursor of the page after it."""

    items: Optional[list[Item]] = None
    next_cursor: Optional[PaginationCursor] = None

    def map(self, transform: Callable[[Item], T]) -> PaginatedPartial[Any]:
        items = [transform(item) for item in self.items] if self.items is not None else None
        return PaginatedPartial(items=items, next_cursor=self.next_cursor)

    def to_partial(self) -> PaginatedPartial[Item]:
        return self

    model_config = ConfigDict(frozen=True)


class PaginatedPage(BaseModel, Generic[Item]):
    """An archived page."""

    cursor: Optional[PaginationCursor] = None
    items: Optional[list[Item]] = None


class CursorPaginatedList(BaseModel, Generic[Item]):
    """Accumulating list of cursor-paginated results."""

    cursors_consumed: list[Optional[PaginationCursor]] = Field(default_factory=list)
    tail: list[PaginatedPage[Item]] = Field(default_factory=list)
    head: Optional[list[Item]] = None
    current_cursor: Optional[PaginationCursor] = None
    next_cursor: Optional[PaginationCursor] = None
    all_items: list[Item] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def accept_plain_list(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            return {"all_items": list(data)}
        return data

    @classmethod
    def from_partial(
        cls, partial: PaginatedPartial[Any], cursor: Any = None
    ) -> CursorPaginatedList[Any]:
        """A list holding one page fetched with ``cursor``."""
        result = cls()
        result.coalesce(partial)
        result.current_cursor = cursor
        return result

    # ------------------------------------------------------------------
    # Mutation

    def coalesce(self, partial: PaginatedPartial[Any]) -> CursorPaginatedList[Item]:
        """Append one fetched page."""
        self.all_items.extend(partial.items or [])
        if self.head is not None:
            self._archive_head()
        self.head = list(partial.items) if partial.items is not None else None
        self.current_cursor = self.next_cursor
        self.next_cursor = partial.next_cursor
        return self

    def concatenate(self, other: CursorPaginatedList[Any]) -> CursorPaginatedList[Item]:
        """Merge ``other``, fetched starting at this list's next cursor.

        Raises:
            PaginationContinuityError: If ``other`` already consumed cursors,
                or both sides specify cursors and
                ``self.next_cursor != other.current_cursor``.
        """
        if other.cursors_consumed:
            raise PaginationContinuityError(
                "Cannot concatenate a list that has already consumed cursors."
            )
        if (
            self.next_cursor is not None
            and other.current_cursor is not None
            and self.next_cursor != other.current_cursor
        ):
            raise PaginationContinuityError(
                "lhs.next_cursor != rhs.current_cursor",
                expected=self.next_cursor,
                actual=other.current_cursor,
            )

        self.all_items.extend(other.all_items)
        if self.head is not None:
            self._archive_head()
        self.head = list(other.head) if other.head is not None else None
        self.current_cursor = (
            other.current_cursor if other.current_cursor is not None else self.next_cursor
        )
        self.next_cursor = other.next_cursor
        return self

    def set_next_cursor(self, cursor: Any) -> None:
        self.next_cursor = cursor

    def _archive_head(self) -> None:
        self.cursors_consumed.append(self.current_cursor)
        for page in self.tail:
            if page.cursor == self.current_cursor:
                page.items = self.head
                return
        self.tail.append(PaginatedPage(cursor=self.current_cursor, items=self.head))

    # ------------------------------------------------------------------
    # Queries

    @property
    def items(self) -> list[Item]:
        return list(self.all_items)

    @property
    def is_exhausted(self) -> bool:
        """Whether at least one page was fetched and the last was terminal."""
        return (self.head is not None or bool(self.tail)) and self.next_cursor is None

    def page_for(self, cursor: Any) -> list[Item] | None:
        """Items of the page fetched with ``cursor``, without re-fetching."""
        if self.head is not None and cursor == self.current_cursor:
            return list(self.head)
        for page in self.tail:
            if page.cursor == cursor:
                return list(page.items) if page.items is not None else None
        return None

    def pages(self) -> list[tuple[Any, list[Item]]]:
        """Every page in fetch order as ``(cursor, items)``."""
        result = [(page.cursor, list(page.items or [])) for page in self.tail]
        if self.head is not None:
            result.append((self.current_cursor, list(self.head)))
        return result

    # ------------------------------------------------------------------
    # Sequence protocol

    def __len__(self) -> int:
        return len(self.all_items)

    def __getitem__(self, index: Any) -> Any:
        return self.all_items[index]

    def __iter__(self) -> Iterator[Item]:  # type: ignore[override]
        return iter(self.all_items)

    def __contains__(self, item: object) -> bool:
        return item in self.all_items
