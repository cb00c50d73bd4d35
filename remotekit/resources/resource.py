"""Reactive resource bound to a client.

Architecture:
    A resource pairs a "get" coordinator (and optionally a "set" one) with
    the client it is attached to, and keeps the most recent value:

    - ``attach(client)`` snapshots the interface identity, subscribes to the
      client's change notifications and starts cache hydration
    - on every change notification the resource recomputes
      ``needs_fetch`` and fetches if warranted; an identity change resets
      the get coordinator so pages fetched for another principal are never
      concatenated onto new ones
    - ``value()`` makes the hydrate-or-fetch decision inline and returns the
      latest value without waiting
    - successful value updates are persisted to the client's resource cache
      in the background; hydration only fills the value if nothing has
      arrived yet

Design Decisions:
    - Cache failures while hydrating or persisting are logged and never
      surface: caching is an optimization, not a correctness requirement.
    - A failed fetch never clears ``latest_value``; only ``reset()`` does.
    - After an explicit cancellation the resource does not fetch on its own
      until ``fetch()`` is called again.
"""

from __future__ import annotations

import asyncio
import builtins
import logging
from collections.abc import Callable, Coroutine, Hashable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..cache.base import KeyedCodingCache
from ..core.exceptions import ClientResolutionError
from ..core.result import TaskResult
from .configuration import CachePolicy, ResourceConfiguration
from .coordinator import EndpointCoordinator

if TYPE_CHECKING:
    from ..runtime.client import Client

logger = logging.getLogger(__name__)

Value = TypeVar("Value")

ValueListener = Callable[[Any], None]


class Resource(Generic[Value]):
    """Reactive handle on a remotely fetched value.

    Args:
        get: Coordinator fetching the value.
        set: Coordinator pushing a new value; unavailable by default.
        configuration: Persistence settings.
        value_type: Type persisted values are decoded into when hydrating.
    """

    def __init__(
        self,
        get: EndpointCoordinator[Value],
        *,
        set: EndpointCoordinator[Value] | None = None,
        configuration: ResourceConfiguration | None = None,
        value_type: Any = None,
    ) -> None:
        self.get_coordinator = get
        self.set_coordinator = set if set is not None else EndpointCoordinator.unavailable()
        self.configuration = configuration or ResourceConfiguration()
        self.value_type = value_type
        self._client: Client[Any] | None = None
        self._last_root_id: Hashable | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._latest_value: Value | None = None
        self._listeners: list[ValueListener] = []
        self._background: set[asyncio.Task[Any]] = builtins.set()
        self._fetch_task: asyncio.Task[TaskResult[Value]] | None = None
        self._hydration: asyncio.Task[None] | None = None
        self._hydration_requested = False
        self._hydrating = False
        self._hydrated = False
        self._read_pending = False

    # ------------------------------------------------------------------
    # Attachment

    @property
    def client(self) -> Client[Any]:
        if self._client is None:
            raise ClientResolutionError()
        return self._client

    @property
    def is_attached(self) -> bool:
        return self._client is not None

    def attach(self, client: Client[Any]) -> None:
        """Bind this resource to ``client``."""
        if self._client is client:
            return
        if self._client is not None:
            self.detach()
        self._client = client
        self._last_root_id = client.interface.id
        self._unsubscribe = client.subscribe(self._on_client_change)
        self._hydration_requested = self._uses_cache
        self._start_hydration()

    def detach(self) -> None:
        """Stop observing the client and cancel background work."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for task in list(self._background):
            task.cancel()
        self._hydrating = False
        self._hydration_requested = False
        self._client = None

    def _on_client_change(self) -> None:
        client = self.client
        identity_changed = client.interface.id != self._last_root_id
        if identity_changed:
            self.get_coordinator.reset()
        if self._needs_fetch(identity_changed):
            self.fetch()
        self._last_root_id = client.interface.id

    # ------------------------------------------------------------------
    # Fetch decision

    @property
    def needs_fetch(self) -> bool:
        """Whether an automatic fetch is warranted now."""
        client = self._client
        if client is None:
            return False
        return self._needs_fetch(client.interface.id != self._last_root_id)

    def _needs_fetch(self, identity_changed: bool) -> bool:
        if self._client is None:
            return False
        policy = self.configuration.cache_policy
        if policy is CachePolicy.RETURN_CACHE_DATA_DONT_LOAD:
            return False
        if identity_changed:
            return True

        get = self.get_coordinator
        last_result = get.last_result
        if last_result is not None and last_result.is_canceled:
            return False
        if get.is_running:
            return False
        if last_result is not None:
            return False

        if policy is CachePolicy.RETURN_CACHE_DATA_ELSE_LOAD and self._uses_cache:
            if self._hydration_requested or self._hydrating or self._hydrated:
                return False
        return True

    @property
    def _uses_cache(self) -> bool:
        return self._client is not None and self.configuration.uses_cache

    # ------------------------------------------------------------------
    # Value access

    @property
    def latest_value(self) -> Value | None:
        return self._latest_value

    @latest_value.setter
    def latest_value(self, value: Value | None) -> None:
        self._set_value(value)

    def value(self) -> Value | None:
        """Latest value, starting hydration or a fetch when warranted.

        Does not wait: the returned value is whatever is held right now.
        Must be called from a running event loop when a fetch may start.
        """
        self._start_hydration()
        if self.needs_fetch:
            self.fetch()
        elif self._hydrating:
            self._read_pending = True
        return self._latest_value

    async def load(self) -> Value:
        """Wait for a value, fetching if needed.

        Raises:
            APIError: If the fetch fails.
            TaskCanceledError: If the fetch is canceled.
        """
        self._start_hydration()
        if self._hydration is not None and not self._hydration.done():
            await self._hydration
        if self._latest_value is not None and not self.needs_fetch:
            return self._latest_value
        if self.get_coordinator.is_running and self._fetch_task is not None:
            result = await self._fetch_task
        else:
            result = await self.fetch()
        return result.get()

    def fetch(self) -> asyncio.Task[TaskResult[Value]]:
        """Run the get coordinator and apply its result.

        Raises:
            APIError: Synchronously, when a dependency is unmet.
        """
        run = self.get_coordinator.run(self.client)
        task = asyncio.create_task(self._apply(run))
        self._fetch_task = task
        return task

    def push(self, input: Any) -> asyncio.Task[TaskResult[Value]]:
        """Run the set coordinator with ``input`` and apply its result."""
        run = self.set_coordinator.run(self.client, input)
        return asyncio.create_task(self._apply(run))

    async def _apply(self, run: asyncio.Task[TaskResult[Value]]) -> TaskResult[Value]:
        result = await run
        if result.is_success and result.value is not None:
            self._set_value(result.value)
        return result

    def cancel(self) -> None:
        self.get_coordinator.cancel()
        self.set_coordinator.cancel()

    def reset(self) -> None:
        """Forget the value and every result."""
        self.get_coordinator.reset()
        self.set_coordinator.reset()
        self._hydrated = False
        self._set_value(None)

    def subscribe(self, listener: ValueListener) -> Callable[[], None]:
        """Register ``listener``, called with every new value."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_value(self, value: Value | None, *, persist: bool = True) -> None:
        self._latest_value = value
        if persist and value is not None:
            self._persist(value)
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("Value listener failed")

    # ------------------------------------------------------------------
    # Cache

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    def _start_hydration(self) -> None:
        if not self._hydration_requested:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # attached outside a loop; hydrate on first access instead
            return
        self._hydration_requested = False
        self._hydrating = True
        self._hydration = self._spawn(
            self._hydrate(self.client.resource_cache, self.configuration.persistent_identifier)
        )

    async def _hydrate(self, cache: KeyedCodingCache, key: Any) -> None:
        try:
            if isinstance(cache, KeyedCodingCache):
                value = await cache.get(key, self.value_type)
            else:
                value = await cache.get(key)
        except Exception as e:
            logger.warning(
                "Resource hydration failed",
                extra={"key": key, "error_type": type(e).__name__, "error_message": str(e)},
            )
            value = None
        finally:
            self._hydrating = False

        if value is not None and self._latest_value is None:
            self._hydrated = True
            self._set_value(value, persist=False)
            logger.debug("Resource hydrated from cache", extra={"key": key})

        read_pending, self._read_pending = self._read_pending, False
        if read_pending and self._latest_value is None and self.needs_fetch:
            self.fetch()

    def _persist(self, value: Value) -> None:
        if not self._uses_cache:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; value not persisted")
            return
        self._spawn(
            self._write(self.client.resource_cache, self.configuration.persistent_identifier, value)
        )

    async def _write(self, cache: KeyedCodingCache, key: Any, value: Value) -> None:
        try:
            await cache.put(value, key)
        except Exception as e:
            logger.warning(
                "Resource persist failed",
                extra={"key": key, "error_type": type(e).__name__, "error_message": str(e)},
            )

    async def wait_idle(self) -> None:
        """Wait for background hydration and persistence to finish."""
        while True:
            pending = [task for task in self._background if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def __repr__(self) -> str:
        return (
            f"Resource(state={self.get_coordinator.state.value!r}, "
            f"has_value={self._latest_value is not None})"
        )
