"""Keyed caches: contract, backends and adapters."""

from .base import EnumerableCache, KeyedCache, KeyedCodingCache, cache_key_for
from .coders import Coder, JSONCoder, PickleCoder
from .coding import PrefixedCodingCache, TypedKeyedCache
from .disk import DiskCache
from .empty import EmptyKeyedCache
from .memory import MemoryKeyedCache
from .preferences import (
    InMemoryPreferenceStore,
    JSONFilePreferenceStore,
    PreferencesCache,
    PreferenceStore,
)

__all__ = [
    "Coder",
    "DiskCache",
    "EmptyKeyedCache",
    "EnumerableCache",
    "InMemoryPreferenceStore",
    "JSONCoder",
    "JSONFilePreferenceStore",
    "KeyedCache",
    "KeyedCodingCache",
    "MemoryKeyedCache",
    "PickleCoder",
    "PreferenceStore",
    "PreferencesCache",
    "PrefixedCodingCache",
    "TypedKeyedCache",
    "cache_key_for",
]
