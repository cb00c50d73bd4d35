"""Library defaults.

This module centralizes capacities, timeouts and locations used by the
transport and cache layers so individual components stay small.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

# Disk cache
DEFAULT_DISK_CACHE_CAPACITY = 100 * 1024 * 1024  # 100 MiB
DEFAULT_DISK_CACHE_NAME = "remotekit.DiskCache.default"
CACHE_DIR_ENV_VAR = "REMOTEKIT_CACHE_DIR"

# Preference store
DEFAULT_PREFERENCES_DIR_NAME = "preferences"

# HTTP transport
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3
# Used when a 429/418 response carries no Retry-After header
DEFAULT_RETRY_AFTER = 1.0
RETRYABLE_STATUSES = frozenset({418, 429})


def default_cache_root() -> Path:
    """Root directory for on-disk caches.

    ``REMOTEKIT_CACHE_DIR`` overrides the platform default
    (``$XDG_CACHE_HOME`` or ``~/.cache``).
    """
    override = os.environ.get(CACHE_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".cache"
    return base / "remotekit"


def default_cache_location() -> Path:
    """Default directory of the shared disk cache."""
    return default_cache_root() / DEFAULT_DISK_CACHE_NAME


def default_preferences_location() -> Path:
    """Default directory of the file-backed preference store."""
    return default_cache_root() / DEFAULT_PREFERENCES_DIR_NAME


@dataclass(frozen=True)
class TransportConfig:
    """HTTP transport settings.

    Attributes:
        timeout: Total request timeout in seconds
        max_retries: Retries for rate-limited (429/418) responses
        default_retry_after: Backoff used when no Retry-After header is sent
        headers: Headers sent with every request
    """

    timeout: float = DEFAULT_HTTP_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    default_retry_after: float = DEFAULT_RETRY_AFTER
    headers: dict[str, str] = field(default_factory=dict)
