"""Endpoint coordinator: one endpoint's lifecycle for one resource.

Architecture:
    The coordinator is a small state machine::

        IDLE -> RUNNING -> {SUCCEEDED, FAILED, CANCELED}
                 reset() returns to IDLE

    ``run(client)``:

    1. Cancels the in-flight run, if any (last caller wins, not queued)
    2. Validates dependencies; unmet ones raise synchronously before any
       cache or network access
    3. Resolves endpoint and input through the client, builds default
       options and, when the previous value is a paginated list and the
       options carry a cursor, injects the list's next cursor
    4. Runs the endpoint through the client (cache fast path, transport,
       decode) and maps the output
    5. Concatenates paginated lists into a copy of the previous value
    6. Clears the in-flight handle and publishes the result, only if this
       run is still the current one

Design Decisions:
    - The client is passed to ``run`` rather than stored, so the
      coordinator holds no reference to its container.
    - A superseded run resolves to ``canceled`` for its own caller and never
      touches ``last_result``.
    - Pagination state comes from the last successful value, so a cancel or
      a failure does not restart pagination.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..cache.base import KeyedCache
from ..core.exceptions import DependencyResolutionError
from ..core.result import TaskResult, TaskStatus
from ..endpoints.base import Endpoint
from ..endpoints.never import NeverEndpoint
from ..pagination.list import CursorPaginatedList
from ..pagination.options import SpecifiesPaginationCursor
from .dependency import EndpointDependency

if TYPE_CHECKING:
    from ..runtime.client import Client
    from ..runtime.endpoint_task import EndpointTask

logger = logging.getLogger(__name__)

Value = TypeVar("Value")

ResultListener = Callable[[TaskResult[Any]], None]

_UNSET: Any = object()


class CoordinatorState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


def _identity(value: Any) -> Any:
    return value


class EndpointCoordinator(Generic[Value]):
    """Runs one endpoint on behalf of one resource.

    Args:
        endpoint: An ``Endpoint``, the name of an endpoint attribute on the
            interface, or ``client -> Endpoint``.
        input: ``client -> input`` or a constant input.
        output: Maps the endpoint output to the published value.
        dependencies: ``client -> [EndpointDependency]`` or a sequence.
        cache: Session cache consulted by runs; defaults to the client's.
    """

    def __init__(
        self,
        endpoint: Endpoint[Any, Any, Any] | str | Callable[[Client[Any]], Any],
        *,
        input: Any = None,
        output: Callable[[Any], Value] | None = None,
        dependencies: Sequence[EndpointDependency]
        | Callable[[Client[Any]], Sequence[EndpointDependency]]
        | None = None,
        cache: KeyedCache[Any, Any] | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._input = input
        self._output = output or _identity
        self._dependencies = dependencies
        self.cache = cache
        self.endpoint_task: EndpointTask[Any] | None = None
        self.last_result: TaskResult[Value] | None = None
        self.last_value: Value | None = None
        self._listeners: list[ResultListener] = []

    @classmethod
    def unavailable(cls) -> EndpointCoordinator[Any]:
        """Coordinator whose runs always fail with ``EndpointUnavailableError``."""
        return cls(NeverEndpoint())

    # ------------------------------------------------------------------
    # State

    @property
    def state(self) -> CoordinatorState:
        if self.endpoint_task is not None:
            return CoordinatorState.RUNNING
        if self.last_result is None:
            return CoordinatorState.IDLE
        return {
            TaskStatus.SUCCESS: CoordinatorState.SUCCEEDED,
            TaskStatus.ERROR: CoordinatorState.FAILED,
            TaskStatus.CANCELED: CoordinatorState.CANCELED,
        }[self.last_result.status]

    @property
    def is_running(self) -> bool:
        return self.endpoint_task is not None

    def subscribe(self, listener: ResultListener) -> Callable[[], None]:
        """Register ``listener`` for published results."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Resolution

    def dependencies_for(self, client: Client[Any]) -> list[EndpointDependency]:
        dependencies = self._dependencies
        if dependencies is None:
            return []
        if callable(dependencies):
            return list(dependencies(client))
        return list(dependencies)

    def check_dependencies(self, client: Client[Any]) -> None:
        """Raise the interface's error type if a dependency is unmet."""
        for dependency in self.dependencies_for(client):
            if not dependency.is_available(client):
                logger.debug(
                    "Dependency not resolved", extra={"dependency": dependency.description}
                )
                raise client.interface.error_type.runtime(
                    DependencyResolutionError(dependency=dependency)
                )

    def resolve_endpoint(self, client: Client[Any]) -> Endpoint[Any, Any, Any]:
        endpoint = self._endpoint
        if not isinstance(endpoint, (Endpoint, str)) and callable(endpoint):
            endpoint = endpoint(client)
        return client.resolve_endpoint(endpoint)

    def resolve_input(self, client: Client[Any]) -> Any:
        if callable(self._input):
            return self._input(client)
        return self._input

    # ------------------------------------------------------------------
    # Control

    def run(self, client: Client[Any], input: Any = _UNSET) -> asyncio.Task[TaskResult[Value]]:
        """Start a run, superseding any run in flight.

        Args:
            client: Container providing interface, session and cache.
            input: Overrides the configured input for this run.

        Returns:
            Task resolving to this run's ``TaskResult``.

        Raises:
            APIError: Synchronously, when a dependency is unmet.
            RuntimeError: When called without a running event loop; no state
                is touched.
        """
        asyncio.get_running_loop()
        if self.endpoint_task is not None:
            self.endpoint_task.cancel()
            self.endpoint_task = None

        self.check_dependencies(client)

        try:
            endpoint = self.resolve_endpoint(client)
            run_input = self.resolve_input(client) if input is _UNSET else input
            options = endpoint.make_default_options()
            previous = self.last_value
            if isinstance(previous, CursorPaginatedList) and isinstance(
                options, SpecifiesPaginationCursor
            ):
                options = options.with_pagination_cursor(previous.next_cursor)
            task = client.run(endpoint, run_input, options, cache=self.cache)
        except Exception as e:
            result: TaskResult[Value] = TaskResult.failure(client.interface.map_error(e))
            self._publish(result)
            return asyncio.create_task(self._resolved(result))

        self.endpoint_task = task
        return asyncio.create_task(self._complete(client, task))

    def cancel(self) -> None:
        """Cancel the in-flight run. ``last_result`` is kept."""
        if self.endpoint_task is not None:
            self.endpoint_task.cancel()

    def reset(self) -> None:
        """Cancel, then forget the in-flight run and every result."""
        self.cancel()
        self.endpoint_task = None
        self.last_result = None
        self.last_value = None

    # ------------------------------------------------------------------
    # Completion

    @staticmethod
    async def _resolved(result: TaskResult[Value]) -> TaskResult[Value]:
        return result

    async def _complete(
        self, client: Client[Any], task: EndpointTask[Any]
    ) -> TaskResult[Value]:
        try:
            raw = await task.result()
        except asyncio.CancelledError:
            task.cancel()
            raw = TaskResult.canceled()

        if self.endpoint_task is not task:
            return TaskResult.canceled()
        self.endpoint_task = None

        result = self._handle_output(client, raw)
        self._publish(result)
        return result

    def _handle_output(self, client: Client[Any], raw: TaskResult[Any]) -> TaskResult[Value]:
        result: TaskResult[Value] = raw.map(self._output).map_error(client.interface.map_error)
        if not result.is_success:
            return result

        previous = self.last_value
        value = result.value
        if (
            isinstance(previous, CursorPaginatedList)
            and isinstance(value, CursorPaginatedList)
            and previous.next_cursor is not None
        ):
            # published results keep their snapshot; merge into a copy
            merged = previous.model_copy(deep=True)
            try:
                merged.concatenate(value)
            except Exception as e:
                return TaskResult.failure(client.interface.map_error(e))
            result = TaskResult.success(merged)  # type: ignore[arg-type]
        return result

    def _publish(self, result: TaskResult[Value]) -> None:
        self.last_result = result
        if result.is_success:
            self.last_value = result.value
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception:
                logger.exception("Result listener failed")

    def __repr__(self) -> str:
        return f"EndpointCoordinator(state={self.state.value!r})"
