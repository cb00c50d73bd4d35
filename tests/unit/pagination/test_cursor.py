"""Unit tests for pagination cursors and their wire encoding."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from remotekit.pagination import (
    DataCursor,
    OffsetCursor,
    OpaqueValueCursor,
    PageNumberCursor,
    ProviderTokenCursor,
    StringCursor,
    URLCursor,
    decode_cursor,
    encode_cursor,
    is_cursor,
)


class TestCursorWireFormat:
    """Test the tagged {type, value} encoding."""

    def test_encode_tags(self):
        assert encode_cursor(OffsetCursor(20)) == {"type": "offset", "value": 20}
        assert encode_cursor(PageNumberCursor(3)) == {"type": "pageNumber", "value": 3}
        assert encode_cursor(StringCursor("abc")) == {"type": "string", "value": "abc"}
        assert encode_cursor(DataCursor(b"\x00\x01")) == {"type": "data", "value": "AAE="}

    @pytest.mark.parametrize(
        "cursor",
        [
            DataCursor(b"\xff\x00"),
            StringCursor("next"),
            OffsetCursor(40),
            PageNumberCursor(2),
            URLCursor("https://api.example.com/items?page=2"),
            ProviderTokenCursor(b"archived-token"),
            OpaqueValueCursor({"after": "x", "n": 1}),
        ],
    )
    def test_decode_restores_variant(self, cursor):
        decoded = decode_cursor(encode_cursor(cursor))
        assert type(decoded) is type(cursor)
        assert decoded == cursor

    def test_decode_json_document(self):
        assert decode_cursor('{"type": "offset", "value": 5}') == OffsetCursor(5)

    def test_decode_dispatches_on_type(self):
        # "5" is valid for a string cursor but not for an offset cursor
        assert decode_cursor({"type": "string", "value": "5"}) == StringCursor("5")
        with pytest.raises(ValidationError):
            decode_cursor({"type": "offset", "value": "five"})

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            decode_cursor({"type": "timestamp", "value": 1})

    def test_url_must_be_absolute(self):
        with pytest.raises(ValidationError):
            URLCursor("/items?page=2")


class TestCursorComparison:
    """Test equality and ordering across representations."""

    def test_equality_only_within_variant(self):
        assert OffsetCursor(1) == OffsetCursor(1)
        assert OffsetCursor(1) != PageNumberCursor(1)
        assert StringCursor("1") != DataCursor(b"1")

    def test_ordering_within_variant(self):
        assert OffsetCursor(1) < OffsetCursor(2)
        assert PageNumberCursor(3) > PageNumberCursor(2)

    def test_ordering_across_variants_is_false(self):
        assert not OffsetCursor(1) < PageNumberCursor(2)
        assert not OffsetCursor(1) > PageNumberCursor(0)

    def test_unordered_variants(self):
        assert not StringCursor("a") < StringCursor("b")
        assert not StringCursor("b") > StringCursor("a")

    def test_hashable(self):
        assert len({OffsetCursor(1), OffsetCursor(1), OpaqueValueCursor({"a": 1})}) == 2

    def test_accessors(self):
        assert OffsetCursor(7).offset_value() == 7
        assert StringCursor("t").string_value() == "t"
        assert URLCursor("https://x.io/p").url_value() == "https://x.io/p"
        assert PageNumberCursor(1).offset_value() is None
        assert is_cursor(OffsetCursor(0))
        assert not is_cursor({"type": "offset", "value": 0})
