"""Resource configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CachePolicy(str, Enum):
    """How a resource uses its persisted value."""

    # Never hydrate from or persist to the resource cache
    RELOAD_IGNORING_CACHE_DATA = "reload_ignoring_cache_data"
    # Hydrate, and fetch regardless
    RETURN_CACHE_DATA_THEN_LOAD = "return_cache_data_then_load"
    # Hydrate; fetch only when nothing was persisted
    RETURN_CACHE_DATA_ELSE_LOAD = "return_cache_data_else_load"
    # Hydrate; never fetch automatically
    RETURN_CACHE_DATA_DONT_LOAD = "return_cache_data_dont_load"

    @property
    def returns_cache_data(self) -> bool:
        return self is not CachePolicy.RELOAD_IGNORING_CACHE_DATA


@dataclass(frozen=True)
class ResourceConfiguration:
    """Persistence settings of a resource.

    Attributes:
        persistent_identifier: Key of the value in the client's resource
            cache; ``None`` disables persistence
        cache_policy: How persisted data and fetching interact
    """

    persistent_identifier: str | None = None
    cache_policy: CachePolicy = CachePolicy.RETURN_CACHE_DATA_THEN_LOAD

    @property
    def uses_cache(self) -> bool:
        return self.persistent_identifier is not None and self.cache_policy.returns_cache_data
