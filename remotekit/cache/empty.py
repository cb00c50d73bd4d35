"""No-op cache."""

from __future__ import annotations

from typing import Any

from .base import KeyedCodingCache


class EmptyKeyedCache(KeyedCodingCache):
    """A keyed cache where every operation is a no-op.

    Retrieval always yields ``None``. Usable wherever a ``KeyedCache`` or a
    ``KeyedCodingCache`` is expected.
    """

    async def put(self, value: Any, key: Any) -> None:
        return None

    async def get(self, key: Any, type_: Any = None) -> Any:
        return None

    def get_fast_path(self, key: Any, type_: Any = None) -> Any:
        return None

    async def remove(self, key: Any) -> None:
        return None

    async def remove_all(self) -> None:
        return None

    def __repr__(self) -> str:
        return "EmptyKeyedCache()"
