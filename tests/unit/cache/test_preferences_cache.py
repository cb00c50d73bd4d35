"""Unit tests for the preference-store cache backend."""

from __future__ import annotations

import threading

import pytest
from pydantic import BaseModel

from remotekit.cache import InMemoryPreferenceStore, JSONFilePreferenceStore, PreferencesCache


class Profile(BaseModel):
    name: str
    age: int


class ThreadRecordingStore(InMemoryPreferenceStore):
    """Records the thread each store write runs on."""

    def __init__(self):
        super().__init__()
        self.write_threads = []

    def set_persistent_domain(self, domain, name):
        self.write_threads.append(threading.get_ident())
        super().set_persistent_domain(domain, name)

    def remove_persistent_domain(self, name):
        self.write_threads.append(threading.get_ident())
        super().remove_persistent_domain(name)


class TestPreferencesCache:
    """Test PreferencesCache domain handling."""

    @pytest.mark.asyncio
    async def test_round_trip_typed(self):
        cache = PreferencesCache("profiles", store=InMemoryPreferenceStore())
        await cache.put(Profile(name="ada", age=36), "me")
        assert await cache.get("me", Profile) == Profile(name="ada", age=36)
        assert await cache.get("me") == {"name": "ada", "age": 36}

    @pytest.mark.asyncio
    async def test_mirror_loaded_once(self):
        """Test fast path reads the mirror without touching the store."""
        store = InMemoryPreferenceStore()
        store.set_persistent_domain({"k": b"1"}, "numbers")
        cache = PreferencesCache("numbers", store=store)

        assert cache.get_fast_path("k", int) == 1
        reads = store.reads
        for _ in range(3):
            assert cache.get_fast_path("k", int) == 1
        assert store.reads == reads

    @pytest.mark.asyncio
    async def test_every_mutation_rewrites_domain(self):
        store = InMemoryPreferenceStore()
        cache = PreferencesCache("numbers", store=store)
        await cache.put(1, "a")
        await cache.put(2, "b")
        assert store.persistent_domain("numbers") == {"a": b"1", "b": b"2"}

    @pytest.mark.asyncio
    async def test_empty_domain_is_removed(self):
        store = InMemoryPreferenceStore()
        cache = PreferencesCache("numbers", store=store)
        await cache.put(1, "a")
        await cache.remove("a")
        assert store.domain_names() == []

        await cache.put(1, "a")
        await cache.remove_all()
        assert store.persistent_domain("numbers") is None

    @pytest.mark.asyncio
    async def test_json_file_store(self, tmp_path):
        """Test values survive a fresh cache over the same directory."""
        cache = PreferencesCache("session", store=JSONFilePreferenceStore(tmp_path))
        await cache.put(b"tok-123", "token")
        await cache.put([1, 2, 3], "ids")

        reopened = PreferencesCache("session", store=JSONFilePreferenceStore(tmp_path))
        assert await reopened.get("ids", list[int]) == [1, 2, 3]
        assert await reopened.get("token", bytes) == b"tok-123"
        assert sorted(reopened.keys()) == ["ids", "token"]

        await reopened.remove_all()
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_mutations_run_off_event_loop(self):
        """Test store writes happen on a worker thread, not the loop thread."""
        store = ThreadRecordingStore()
        cache = PreferencesCache("numbers", store=store)
        loop_thread = threading.get_ident()

        await cache.put(1, "a")
        await cache.put(2, "b")
        await cache.remove("a")
        await cache.remove_all()

        assert len(store.write_threads) == 4
        assert loop_thread not in store.write_threads
        assert store.persistent_domain("numbers") is None
        assert cache.keys() == []
