"""Adapters over coding caches."""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from ..core.exceptions import UnsupportedCacheOperationError
from .base import EnumerableCache, KeyedCache, KeyedCodingCache, cache_key_for

logger = logging.getLogger(__name__)

K = TypeVar("K")
T = TypeVar("T")


def _coding_get_fast_path(base: KeyedCache[Any, Any], key: str, type_: Any) -> Any:
    if isinstance(base, KeyedCodingCache):
        return base.get_fast_path(key, type_)
    return base.get_fast_path(key)


async def _coding_get(base: KeyedCache[Any, Any], key: str, type_: Any) -> Any:
    if isinstance(base, KeyedCodingCache):
        return await base.get(key, type_)
    return await base.get(key)


class PrefixedCodingCache(KeyedCodingCache, EnumerableCache):
    """Namespaces every key of ``base`` under ``prefix``.

    ``remove_all`` only touches keys in the namespace, which requires the
    base cache to enumerate its keys.
    """

    def __init__(self, base: KeyedCache[Any, Any], prefix: str) -> None:
        self.base = base
        self.prefix = prefix

    def _key(self, key: Any) -> str:
        return self.prefix + cache_key_for(key)

    async def put(self, value: Any, key: Any) -> None:
        await self.base.put(value, self._key(key))

    async def get(self, key: Any, type_: Any = None) -> Any:
        return await _coding_get(self.base, self._key(key), type_)

    def get_fast_path(self, key: Any, type_: Any = None) -> Any:
        return _coding_get_fast_path(self.base, self._key(key), type_)

    async def remove(self, key: Any) -> None:
        await self.base.remove(self._key(key))

    async def remove_all(self) -> None:
        if not isinstance(self.base, EnumerableCache):
            raise UnsupportedCacheOperationError(
                f"{type(self.base).__name__} cannot enumerate keys; "
                f"remove_all under prefix {self.prefix!r} is not supported"
            )
        matching = [key for key in self.base.keys() if key.startswith(self.prefix)]
        for key in matching:
            await self.base.remove(key)
        logger.debug("Prefixed keys removed", extra={"prefix": self.prefix, "count": len(matching)})

    def keys(self) -> list[str]:
        if not isinstance(self.base, EnumerableCache):
            raise UnsupportedCacheOperationError(
                f"{type(self.base).__name__} cannot enumerate keys"
            )
        return [key[len(self.prefix) :] for key in self.base.keys() if key.startswith(self.prefix)]


class TypedKeyedCache(KeyedCache[K, T], Generic[K, T]):
    """A coding cache viewed as a ``KeyedCache`` of one value type.

    Keys of any kind are converted with ``cache_key_for``; stored bytes are
    decoded into ``type_``.
    """

    def __init__(self, base: KeyedCodingCache, type_: type[T]) -> None:
        self.base = base
        self.type_ = type_

    async def put(self, value: T, key: K) -> None:
        await self.base.put(value, cache_key_for(key))

    async def get(self, key: K) -> T | None:
        return await self.base.get(cache_key_for(key), self.type_)

    def get_fast_path(self, key: K) -> T | None:
        return self.base.get_fast_path(cache_key_for(key), self.type_)

    async def remove(self, key: K) -> None:
        await self.base.remove(cache_key_for(key))

    async def remove_all(self) -> None:
        await self.base.remove_all()
