"""In-memory LRU cache backend."""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Hashable
from typing import Any, Generic, TypeVar

from .base import EnumerableCache, KeyedCache, cache_key_for

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class MemoryKeyedCache(KeyedCache[K, V], EnumerableCache, Generic[K, V]):
    """Process-memory cache with optional LRU bound.

    Every lookup hits the fast path. Reads refresh recency; inserting a new
    key into a full cache evicts the least recently used entry.
    """

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is not None and capacity <= 0:
            raise ValueError("capacity must be positive")
        self._data: OrderedDict[K, V] = OrderedDict()
        self._capacity = capacity
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int | None:
        return self._capacity

    async def put(self, value: V, key: K) -> None:
        with self._lock:
            if key in self._data:
                del self._data[key]
            elif self._capacity is not None and len(self._data) >= self._capacity:
                self._data.popitem(last=False)
                self._evictions += 1
            self._data[key] = value

    async def get(self, key: K) -> V | None:
        return self.get_fast_path(key)

    def get_fast_path(self, key: K) -> V | None:
        with self._lock:
            if key not in self._data:
                self._misses += 1
                return None
            self._hits += 1
            self._data.move_to_end(key)
            return self._data[key]

    async def remove(self, key: K) -> None:
        with self._lock:
            self._data.pop(key, None)

    async def remove_all(self) -> None:
        with self._lock:
            self._data.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return [cache_key_for(k) for k in self._data]

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "entries": len(self._data),
                "capacity": self._capacity,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }
