"""Async iteration over cursor-paginated sources.

``CursorPaginatedIterator`` drives a ``fetch(cursor)`` coroutine page by
page, ``CursorPaginatedItems`` flattens the pages into items, and
``PaginatedResults`` accumulates fetched pages into a
``CursorPaginatedList``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from typing import Any, Generic, TypeVar

from .list import CursorPaginatedList, PaginatedPartial

logger = logging.getLogger(__name__)

Item = TypeVar("Item")

PageFetcher = Callable[[Any], Awaitable[Any]]


def _as_partial(result: Any) -> PaginatedPartial[Any]:
    if isinstance(result, PaginatedPartial):
        return result
    to_partial = getattr(result, "to_partial", None)
    if to_partial is None:
        raise TypeError(f"{type(result).__name__} is not a page; expected PaginatedPartial")
    return to_partial()


class CursorPaginatedIterator(Generic[Item]):
    """Async iterator of pages.

    Stops after yielding the page whose ``next_cursor`` is ``None``.

    Args:
        fetch: Coroutine function returning the page at a cursor, either a
            ``PaginatedPartial`` or an object with ``to_partial()``.
        start_cursor: Cursor of the first page.
    """

    def __init__(self, fetch: PageFetcher, start_cursor: Any = None) -> None:
        self._fetch = fetch
        self.next_cursor = start_cursor
        self.has_reached_end = False

    def __aiter__(self) -> CursorPaginatedIterator[Item]:
        return self

    async def __anext__(self) -> PaginatedPartial[Item]:
        if self.has_reached_end:
            raise StopAsyncIteration
        partial = _as_partial(await self._fetch(self.next_cursor))
        self.next_cursor = partial.next_cursor
        if partial.next_cursor is None:
            self.has_reached_end = True
        return partial


class CursorPaginatedItems(Generic[Item]):
    """Async iterable of items across every page.

    Each iteration starts a fresh page walk from ``start_cursor``.
    """

    def __init__(self, fetch: PageFetcher, start_cursor: Any = None) -> None:
        self._fetch = fetch
        self._start_cursor = start_cursor

    async def __aiter__(self) -> AsyncIterator[Item]:
        async for partial in CursorPaginatedIterator(self._fetch, self._start_cursor):
            for item in partial.items or []:
                yield item

    async def collect(self) -> list[Item]:
        return [item async for item in self]


class PaginatedResults(Generic[Item]):
    """Pages fetched on demand and accumulated in order.

    Concurrent ``fetch_next`` calls are serialised so pages are coalesced in
    fetch order.
    """

    def __init__(self, fetch: PageFetcher, start_cursor: Any = None) -> None:
        self._iterator: CursorPaginatedIterator[Item] = CursorPaginatedIterator(fetch, start_cursor)
        self._lock = asyncio.Lock()
        self.current: CursorPaginatedList[Item] = CursorPaginatedList()

    @property
    def is_exhausted(self) -> bool:
        return self._iterator.has_reached_end

    async def fetch_next(self) -> PaginatedPartial[Item] | None:
        """Fetch and coalesce the next page; ``None`` once exhausted."""
        async with self._lock:
            try:
                partial = await anext(self._iterator)
            except StopAsyncIteration:
                return None
            self.current.coalesce(partial)
            logger.debug(
                "Page coalesced",
                extra={"items": len(partial.items or []), "total": len(self.current)},
            )
            return partial

    async def fetch_all(self, max_pages: int | None = None) -> CursorPaginatedList[Item]:
        """Fetch until exhausted, or until ``max_pages`` more pages arrived."""
        fetched = 0
        while max_pages is None or fetched < max_pages:
            if await self.fetch_next() is None:
                break
            fetched += 1
        return self.current

    def __iter__(self) -> Iterator[Item]:
        return iter(self.current)

    def __len__(self) -> int:
        return len(self.current)
