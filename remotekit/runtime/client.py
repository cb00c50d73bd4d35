"""Client container.

Architecture:
    A client is the composition root binding a program interface to a
    transport session and two caches:

    - ``session_cache``: request -> response, consulted by every endpoint
      task (fast path) and written after each transport success
    - ``resource_cache``: coding cache used by resources to persist and
      hydrate their values under a persistent identifier

    The client is the single source of truth for the current interface.
    Replacing the interface notifies subscribers; resources attached to the
    client use the notification to re-check whether they need to fetch.

See Also:
    - EndpointTask: one run of an endpoint through this client
    - Resource: reactive handle attached to a client
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from ..cache.base import KeyedCache, KeyedCodingCache
from ..cache.empty import EmptyKeyedCache
from ..core.exceptions import EndpointUnavailableError
from ..core.interface import ProgramInterface
from ..endpoints.base import Endpoint
from .endpoint_task import EndpointTask
from .session import RequestSession

logger = logging.getLogger(__name__)

I = TypeVar("I", bound=ProgramInterface)

ChangeListener = Callable[[], None]


class Client(Generic[I]):
    """Binds an interface to a session and caches."""

    def __init__(
        self,
        interface: I,
        session: RequestSession,
        *,
        session_cache: KeyedCache[Any, Any] | None = None,
        resource_cache: KeyedCodingCache | None = None,
    ) -> None:
        self._interface = interface
        self.session = session
        self.session_cache: KeyedCache[Any, Any] = (
            session_cache if session_cache is not None else EmptyKeyedCache()
        )
        self.resource_cache: KeyedCodingCache = (
            resource_cache if resource_cache is not None else EmptyKeyedCache()
        )
        self._listeners: list[ChangeListener] = []

    # ------------------------------------------------------------------
    # Interface and change notification

    @property
    def interface(self) -> I:
        return self._interface

    @interface.setter
    def interface(self, interface: I) -> None:
        previous = self._interface
        self._interface = interface
        logger.debug(
            "Client interface replaced",
            extra={"identity_changed": previous.id != interface.id},
        )
        self.notify_change()

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register ``listener`` for change notifications.

        Returns:
            A callable removing the registration.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify_change(self) -> None:
        """Call every change listener. Listener failures are logged."""
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Change listener failed")

    # ------------------------------------------------------------------
    # Running endpoints

    def resolve_endpoint(self, endpoint: Endpoint[Any, Any, Any] | str) -> Endpoint[Any, Any, Any]:
        """Return ``endpoint``, looking names up on the interface."""
        if isinstance(endpoint, Endpoint):
            return endpoint
        resolved = getattr(self._interface, endpoint, None)
        if not isinstance(resolved, Endpoint):
            raise EndpointUnavailableError(
                f"{type(self._interface).__name__} has no endpoint named {endpoint!r}"
            )
        return resolved

    def run(
        self,
        endpoint: Endpoint[Any, Any, Any] | str,
        input: Any = None,
        options: Any = None,
        *,
        cache: KeyedCache[Any, Any] | None = None,
    ) -> EndpointTask[Any]:
        """Start running ``endpoint`` and return its task."""
        task: EndpointTask[Any] = EndpointTask(
            self,
            self.resolve_endpoint(endpoint),
            input,
            options,
            cache if cache is not None else self.session_cache,
        )
        return task.start()

    async def perform(
        self,
        endpoint: Endpoint[Any, Any, Any] | str,
        input: Any = None,
        options: Any = None,
        *,
        cache: KeyedCache[Any, Any] | None = None,
    ) -> Any:
        """Run ``endpoint`` and return its output, raising on failure."""
        return await self.run(endpoint, input, options, cache=cache).value()

    # ------------------------------------------------------------------
    # Lifecycle

    async def close(self) -> None:
        """Cancel outstanding work and close the session."""
        self.session.cancel_all()
        await self.session.close()

    async def __aenter__(self) -> Client[I]:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
