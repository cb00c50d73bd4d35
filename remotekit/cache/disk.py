"""Content-addressed disk cache with capacity eviction.

Architecture:
    One file per key. The file name is the md5 hex digest of the key's
    string form with non-alphanumeric characters stripped, so arbitrary keys
    map onto filesystem-safe names. There is no index file: the directory
    listing plus each file's modification time is the full index.

    - Writes go to a temporary sibling and are renamed into place.
    - Every read bumps the file's modification time, so evicting the oldest
      modification times first gives LRU eviction.
    - A running total of file sizes is computed once at startup and then
      maintained incrementally; whenever it exceeds the configured capacity,
      files are evicted oldest first until it fits again.

    All file I/O runs on a dedicated single-worker executor. Operations are
    therefore applied one at a time in submission order, which keeps the
    size accounting race free without fine-grained locking, while callers
    see an async interface.

    The disk cache has no in-memory path: ``get_fast_path`` always returns
    ``None``. Wrap it with a memory tier when fast-path hits are needed.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
import tempfile
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from contextlib import suppress
from functools import partial
from pathlib import Path
from typing import Any, TypeVar

from ..config import DEFAULT_DISK_CACHE_CAPACITY, default_cache_location
from ..core.exceptions import CacheWriteError
from .base import KeyedCodingCache, cache_key_for
from .coders import Coder, JSONCoder

logger = logging.getLogger(__name__)

R = TypeVar("R")

_TEMP_PREFIX = ".tmp-"


def file_name_for_key(key: Any) -> str:
    """File name used for ``key``."""
    digest = hashlib.md5(cache_key_for(key).encode("utf-8")).hexdigest()
    return "".join(c for c in digest if c.isalnum())


class DiskCache(KeyedCodingCache):
    """Coding cache persisting each value in its own file."""

    def __init__(
        self,
        location: str | os.PathLike[str] | None = None,
        coder: Coder | None = None,
        capacity: int = DEFAULT_DISK_CACHE_CAPACITY,
    ) -> None:
        self.location = Path(location) if location is not None else default_cache_location()
        self.coder = coder or JSONCoder()
        self._capacity = capacity
        self._size = 0
        self._last_touch_ns = 0
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="remotekit-disk-cache")
        self.location.mkdir(parents=True, exist_ok=True)
        self._executor.submit(self._initialize)

    # ------------------------------------------------------------------
    # Public API

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        self._capacity = value
        self._executor.submit(self._control_capacity)

    @property
    def size(self) -> int:
        """Tracked total size in bytes of all cached files."""
        return self._size

    async def put(self, value: Any, key: Any) -> None:
        await self._submit(self._set_sync, value, cache_key_for(key))

    async def get(self, key: Any, type_: Any = None) -> Any:
        return await self._submit(self._get_sync, cache_key_for(key), type_)

    def get_fast_path(self, key: Any, type_: Any = None) -> Any:
        return None

    async def remove(self, key: Any) -> None:
        await self._submit(self._remove_sync, cache_key_for(key))

    async def remove_all(self) -> None:
        await self._submit(self._remove_all_sync)

    async def flush(self) -> None:
        """Wait until every previously submitted operation has completed."""
        await self._submit(lambda: None)

    def path_for_key(self, key: Any) -> Path:
        return self.location / file_name_for_key(key)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Queue helpers

    async def _submit(self, fn: Callable[..., R], *args: Any) -> R:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(fn, *args))

    # ------------------------------------------------------------------
    # Operations (executor thread only)

    def _initialize(self) -> None:
        try:
            self._calculate_size()
            self._control_capacity()
        except OSError:
            logger.exception("Failed to index disk cache", extra={"location": str(self.location)})

    def _set_sync(self, value: Any, key: str) -> None:
        path = self.location / file_name_for_key(key)
        previous_size = self._file_size(path)
        try:
            data = self.coder.encode(value)
            fd, tmp = tempfile.mkstemp(dir=self.location, prefix=_TEMP_PREFIX)
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp, path)
            except BaseException:
                with suppress(FileNotFoundError):
                    os.unlink(tmp)
                raise
        except Exception as e:
            logger.error("Failed to write key on the disk cache", extra={"key": key})
            raise CacheWriteError(f"Failed to write key {key!r}: {e}", key=key) from e

        self._touch(path)
        new_size = self._file_size(path)
        self._size += new_size - previous_size
        if new_size > previous_size:
            self._control_capacity()

    def _get_sync(self, key: str, type_: Any) -> Any:
        path = self.location / file_name_for_key(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        value = self.coder.decode(data, type_)
        self._touch(path)
        return value

    def _remove_sync(self, key: str) -> None:
        path = self.location / file_name_for_key(key)
        if path.exists():
            self._remove_file(path)

    def _remove_all_sync(self) -> None:
        for path in self._entries():
            with suppress(FileNotFoundError):
                path.unlink()
        self._calculate_size()

    def _entries(self) -> list[Path]:
        return [
            p for p in self.location.iterdir() if p.is_file() and not p.name.startswith(_TEMP_PREFIX)
        ]

    def _calculate_size(self) -> None:
        self._size = sum(self._file_size(p) for p in self._entries())

    def _control_capacity(self) -> None:
        if self._size <= self._capacity:
            return
        entries = []
        for path in self._entries():
            with suppress(FileNotFoundError):
                entries.append((path.stat().st_mtime_ns, path))
        entries.sort(key=lambda item: item[0])
        evicted = 0
        for _, path in entries:
            if self._size <= self._capacity:
                break
            self._remove_file(path)
            evicted += 1
        logger.debug(
            "Disk cache capacity enforced",
            extra={"evicted": evicted, "size": self._size, "capacity": self._capacity},
        )

    def _remove_file(self, path: Path) -> None:
        try:
            size = path.stat().st_size
            path.unlink()
        except FileNotFoundError:
            return
        self._size -= size

    def _touch(self, path: Path) -> None:
        # strictly increasing so eviction order is total even within one clock tick
        now = max(time.time_ns(), self._last_touch_ns + 1)
        self._last_touch_ns = now
        with suppress(OSError):
            os.utime(path, ns=(now, now))

    @staticmethod
    def _file_size(path: Path) -> int:
        try:
            return path.stat().st_size
        except FileNotFoundError:
            return 0
