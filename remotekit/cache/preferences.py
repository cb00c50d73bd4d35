"""Preference-store cache backend.

Architecture:
    A preference store holds named *domains*, each a flat ``{str: bytes}``
    map persisted as a unit. ``PreferencesCache`` keeps an in-memory mirror
    of one domain, populated lazily from the store on first access, and
    rewrites the whole domain on every mutation by replacing the mirror
    atomically (copy, modify, swap). When the map becomes empty the domain
    is removed from the store rather than persisted empty. Mutations run
    in a worker thread so store writes never block the event loop.

    Because the mirror is memory resident, ``get_fast_path`` serves reads
    without touching the store once the domain has been loaded.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import os
import tempfile
import threading
from contextlib import suppress
from pathlib import Path
from typing import Any, Protocol

from .base import EnumerableCache, KeyedCodingCache, cache_key_for
from .coders import Coder, JSONCoder

logger = logging.getLogger(__name__)


class PreferenceStore(Protocol):
    """Durable store of named flat domains."""

    def persistent_domain(self, name: str) -> dict[str, bytes] | None: ...

    def set_persistent_domain(self, domain: dict[str, bytes], name: str) -> None: ...

    def remove_persistent_domain(self, name: str) -> None: ...


class InMemoryPreferenceStore:
    """Preference store kept in process memory."""

    def __init__(self) -> None:
        self._domains: dict[str, dict[str, bytes]] = {}
        self.reads = 0
        self.writes = 0

    def persistent_domain(self, name: str) -> dict[str, bytes] | None:
        self.reads += 1
        domain = self._domains.get(name)
        return dict(domain) if domain is not None else None

    def set_persistent_domain(self, domain: dict[str, bytes], name: str) -> None:
        self.writes += 1
        self._domains[name] = dict(domain)

    def remove_persistent_domain(self, name: str) -> None:
        self.writes += 1
        self._domains.pop(name, None)

    def domain_names(self) -> list[str]:
        return list(self._domains)


class JSONFilePreferenceStore:
    """Preference store writing one JSON file per domain.

    Values are base64 encoded. Files are written to a temporary sibling and
    renamed into place.
    """

    def __init__(self, directory: str | os.PathLike[str] | None = None) -> None:
        if directory is None:
            from ..config import default_preferences_location

            directory = default_preferences_location()
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in name)
        return self.directory / f"{safe}.json"

    def persistent_domain(self, name: str) -> dict[str, bytes] | None:
        path = self._path(name)
        if not path.exists():
            return None
        raw = json.loads(path.read_text(encoding="utf-8"))
        return {key: base64.b64decode(value) for key, value in raw.items()}

    def set_persistent_domain(self, domain: dict[str, bytes], name: str) -> None:
        path = self._path(name)
        payload = {key: base64.b64encode(value).decode("ascii") for key, value in domain.items()}
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh)
            os.replace(tmp, path)
        except BaseException:
            with suppress(FileNotFoundError):
                os.unlink(tmp)
            raise

    def remove_persistent_domain(self, name: str) -> None:
        self._path(name).unlink(missing_ok=True)


class PreferencesCache(KeyedCodingCache, EnumerableCache):
    """Coding cache over one preference-store domain."""

    def __init__(
        self,
        domain_name: str,
        coder: Coder | None = None,
        store: PreferenceStore | None = None,
    ) -> None:
        self.domain_name = domain_name
        self.coder = coder or JSONCoder()
        self.store: PreferenceStore = store if store is not None else JSONFilePreferenceStore()
        self._mirror: dict[str, bytes] | None = None
        self._lock = threading.Lock()

    @property
    def _domain(self) -> dict[str, bytes]:
        mirror = self._mirror
        if mirror is None:
            mirror = self.store.persistent_domain(self.domain_name) or {}
            self._mirror = mirror
        return mirror

    def _replace_domain(self, domain: dict[str, bytes]) -> None:
        if domain:
            self.store.set_persistent_domain(domain, self.domain_name)
        else:
            self.store.remove_persistent_domain(self.domain_name)
        self._mirror = domain

    async def put(self, value: Any, key: Any) -> None:
        data = self.coder.encode(value)
        await asyncio.to_thread(self._put_sync, cache_key_for(key), data)

    def _put_sync(self, key: str, data: bytes) -> None:
        with self._lock:
            domain = dict(self._domain)
            domain[key] = data
            self._replace_domain(domain)

    async def get(self, key: Any, type_: Any = None) -> Any:
        return self.get_fast_path(key, type_)

    def get_fast_path(self, key: Any, type_: Any = None) -> Any:
        data = self._domain.get(cache_key_for(key))
        if data is None:
            return None
        return self.coder.decode(data, type_)

    async def remove(self, key: Any) -> None:
        await asyncio.to_thread(self._remove_sync, cache_key_for(key))

    def _remove_sync(self, key: str) -> None:
        with self._lock:
            if key not in self._domain:
                return
            domain = dict(self._domain)
            del domain[key]
            self._replace_domain(domain)

    async def remove_all(self) -> None:
        await asyncio.to_thread(self._remove_all_sync)
        logger.debug("Preferences domain cleared", extra={"domain": self.domain_name})

    def _remove_all_sync(self) -> None:
        with self._lock:
            self._replace_domain({})

    def keys(self) -> list[str]:
        return list(self._domain)
