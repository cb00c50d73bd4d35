"""Unit tests for CursorPaginatedList coalescing and concatenation."""

from __future__ import annotations

import pytest

from remotekit.core import PaginationContinuityError
from remotekit.pagination import (
    CursorPaginatedList,
    OffsetCursor,
    PaginatedPartial,
    StringCursor,
)


def page(items, next_cursor=None):
    return PaginatedPartial(items=items, next_cursor=next_cursor)


class TestCoalesce:
    """Test appending fetched pages."""

    def test_two_pages_to_terminal(self):
        c1 = StringCursor("c1")
        result = CursorPaginatedList()
        result.coalesce(page(["a", "b"], c1))
        result.coalesce(page(["c", "d"], None))

        assert result.items == ["a", "b", "c", "d"]
        assert result.next_cursor is None
        assert result.is_exhausted

    def test_history_is_kept(self):
        c1 = StringCursor("c1")
        result = CursorPaginatedList()
        result.coalesce(page(["a", "b"], c1))
        result.coalesce(page(["c", "d"], None))

        assert result.head == ["c", "d"]
        assert result.current_cursor == c1
        assert result.cursors_consumed == [None]
        assert result.page_for(None) == ["a", "b"]
        assert result.page_for(c1) == ["c", "d"]
        assert result.pages() == [(None, ["a", "b"]), (c1, ["c", "d"])]

    def test_new_list_is_not_exhausted(self):
        result = CursorPaginatedList()
        assert not result.is_exhausted
        assert len(result) == 0

    def test_from_partial(self):
        start = OffsetCursor(10)
        result = CursorPaginatedList.from_partial(page([1, 2], OffsetCursor(12)), cursor=start)
        assert result.current_cursor == start
        assert result.next_cursor == OffsetCursor(12)
        assert list(result) == [1, 2]
        assert 2 in result
        assert result[0] == 1

    def test_map_partial(self):
        partial = page([1, 2], OffsetCursor(2)).map(str)
        assert partial.items == ["1", "2"]
        assert partial.next_cursor == OffsetCursor(2)


class TestConcatenate:
    """Test merging lists under the cursor continuity precondition."""

    def test_matching_cursors(self):
        c1 = OffsetCursor(2)
        left = CursorPaginatedList.from_partial(page(["a", "b"], c1))
        right = CursorPaginatedList.from_partial(page(["c", "d"], None), cursor=c1)

        merged = left.concatenate(right)

        assert merged is left
        assert merged.items == ["a", "b", "c", "d"]
        assert merged.current_cursor == c1
        assert merged.next_cursor is None
        assert merged.page_for(None) == ["a", "b"]

    def test_right_without_cursor_continues_from_left(self):
        c1 = OffsetCursor(2)
        left = CursorPaginatedList.from_partial(page(["a"], c1))
        right = CursorPaginatedList.from_partial(page(["b"], OffsetCursor(3)))

        left.concatenate(right)

        assert left.current_cursor == c1
        assert left.next_cursor == OffsetCursor(3)

    def test_mismatched_cursors_rejected(self):
        left = CursorPaginatedList.from_partial(page(["a"], OffsetCursor(2)))
        right = CursorPaginatedList.from_partial(page(["b"]), cursor=OffsetCursor(5))

        with pytest.raises(PaginationContinuityError) as exc_info:
            left.concatenate(right)

        assert exc_info.value.expected == OffsetCursor(2)
        assert exc_info.value.actual == OffsetCursor(5)
        assert left.items == ["a"]

    def test_right_with_consumed_cursors_rejected(self):
        left = CursorPaginatedList.from_partial(page(["a"], OffsetCursor(1)))
        right = CursorPaginatedList()
        right.coalesce(page(["b"], OffsetCursor(2)))
        right.coalesce(page(["c"], None))

        with pytest.raises(PaginationContinuityError):
            left.concatenate(right)

    def test_set_next_cursor(self):
        result = CursorPaginatedList.from_partial(page(["a"]))
        assert result.is_exhausted
        result.set_next_cursor(OffsetCursor(1))
        assert not result.is_exhausted
