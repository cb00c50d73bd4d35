"""Keyed cache contract.

Architecture:
    Every cache backend implements the same small interface so that
    coordinators and resources can be handed any backend at construction
    time:

    - ``put(value, key)``: store a value
    - ``get(key)``: retrieve a value, possibly performing I/O
    - ``get_fast_path(key)``: synchronous, in-memory only lookup; ``None``
      means "not available in memory", never "absent from durable storage"
    - ``remove(key)`` / ``remove_all()``

    Coding caches narrow values to anything a ``Coder`` can serialize and
    keys to strings, and decode on the way out into a caller-supplied type.

See Also:
    - EmptyKeyedCache, MemoryKeyedCache: in-process backends
    - PreferencesCache, DiskCache: durable backends
    - PrefixedCodingCache, TypedKeyedCache: adapters over coding caches
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from .coding import PrefixedCodingCache, TypedKeyedCache

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
T = TypeVar("T")


def cache_key_for(key: Any) -> str:
    """String form of a cache key.

    Strings are used as-is; requests (and anything else exposing a string
    ``cache_key``) use that; other values fall back to ``repr``.
    """
    if isinstance(key, str):
        return key
    cache_key = getattr(key, "cache_key", None)
    if isinstance(cache_key, str):
        return cache_key
    return repr(key)


class KeyedCache(ABC, Generic[K, V]):
    """A keyed cache suitable for storing and retrieving values."""

    @abstractmethod
    async def put(self, value: V, key: K) -> None:
        """Store ``value`` under ``key``."""

    async def get(self, key: K) -> V | None:
        """Retrieve the value stored under ``key``.

        The default implementation only consults the fast path; durable
        backends override it.
        """
        return self.get_fast_path(key)

    @abstractmethod
    def get_fast_path(self, key: K) -> V | None:
        """Retrieve an in-memory value without performing I/O."""

    @abstractmethod
    async def remove(self, key: K) -> None:
        """Remove the value stored under ``key`` (no-op when absent)."""

    @abstractmethod
    async def remove_all(self) -> None:
        """Remove every stored value."""


class EnumerableCache(ABC):
    """Cache whose stored keys can be listed."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Stored keys, in string form."""


class KeyedCodingCache(KeyedCache[str, Any]):
    """Cache of encodable values under string keys.

    ``get``/``get_fast_path`` accept an optional ``type_`` the stored bytes
    are decoded into; without it the coder's natural representation is
    returned.
    """

    @abstractmethod
    async def put(self, value: Any, key: str) -> None: ...

    async def get(self, key: str, type_: Any = None) -> Any:
        return self.get_fast_path(key, type_)

    @abstractmethod
    def get_fast_path(self, key: str, type_: Any = None) -> Any: ...

    def typed(self, type_: type[T]) -> TypedKeyedCache[Any, T]:
        """View of this cache as a ``KeyedCache`` of ``type_`` values."""
        from .coding import TypedKeyedCache

        return TypedKeyedCache(self, type_)

    def prefixed(self, prefix: str) -> PrefixedCodingCache:
        """View of this cache confined to a key namespace."""
        from .coding import PrefixedCodingCache

        return PrefixedCodingCache(self, prefix)
