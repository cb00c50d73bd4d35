"""One execution of an endpoint through a client.

Architecture:
    ``EndpointTask`` wraps an ``asyncio.Task`` running the pipeline:

    1. Resolve options (caller supplied or the endpoint's defaults)
    2. Build the request and apply ``interface.update_request``
    3. Consult the cache fast path; a hit that decodes short-circuits
    4. Execute through the session, write the response to the cache
       (best effort), decode
    5. Produce a ``TaskResult``

    Failures never escape as exceptions: cancellation becomes a ``canceled``
    result and errors are mapped into the interface's error type
    (``bad_request`` for native request errors, ``runtime`` otherwise).

Design Decisions:
    - Cache writes are shielded so a cancellation that arrives after the
      network boundary does not interrupt them; the run still ends
      ``canceled``.
    - A fast-path entry that fails to decode is treated as a miss.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..cache.base import KeyedCache, cache_key_for
from ..core.request import Request
from ..core.result import TaskResult, TaskStatus
from ..endpoints.base import BuildRequestContext, DecodeOutputContext, Endpoint
from .telemetry import (
    log_cache_hit,
    log_cache_write_failed,
    log_request_canceled,
    log_request_completed,
    log_request_failed,
    log_request_started,
)

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)

Output = TypeVar("Output")

_MISS = object()


def endpoint_id_for(endpoint: Any) -> str:
    endpoint_id = getattr(endpoint, "id", None)
    if isinstance(endpoint_id, str):
        return endpoint_id
    return type(endpoint).__name__


class EndpointTask(Generic[Output]):
    """A cancelable run of one endpoint."""

    def __init__(
        self,
        client: Client[Any],
        endpoint: Endpoint[Any, Output, Any],
        input: Any = None,
        options: Any = None,
        cache: KeyedCache[Any, Any] | None = None,
    ) -> None:
        self.client = client
        self.endpoint = endpoint
        self.input = input
        self.options = options
        self.cache = cache
        self.endpoint_id = endpoint_id_for(endpoint)
        self.request: Request | None = None
        self._task: asyncio.Task[TaskResult[Output]] | None = None
        self._result: TaskResult[Output] | None = None

    # ------------------------------------------------------------------
    # Control

    def start(self) -> EndpointTask[Output]:
        """Schedule the run. Idempotent."""
        if self._task is None:
            self._task = asyncio.create_task(self._run())
        return self

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    @property
    def status(self) -> TaskStatus | None:
        """Terminal status, or ``None`` while the run is pending."""
        if self._result is not None:
            return self._result.status
        if self._task is not None and self._task.cancelled():
            return TaskStatus.CANCELED
        return None

    async def result(self) -> TaskResult[Output]:
        """Wait for the terminal result."""
        task = self.start()._task
        assert task is not None
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                # canceled before the pipeline started
                return TaskResult.canceled()
            raise

    async def value(self) -> Output:
        """Wait for the output, raising the mapped error on failure."""
        return (await self.result()).get()

    def __await__(self):
        return self.result().__await__()

    # ------------------------------------------------------------------
    # Pipeline

    async def _run(self) -> TaskResult[Output]:
        interface = self.client.interface
        started = time.perf_counter()
        result: TaskResult[Output]
        try:
            options = self.options if self.options is not None else self.endpoint.make_default_options()
            self.options = options
            request = self.endpoint.build_request(
                self.input, BuildRequestContext(root=interface, options=options)
            )
            request = interface.update_request(request)
            self.request = request
            decode_context = DecodeOutputContext(
                root=interface, input=self.input, options=options, request=request
            )

            cached = self._cached_output(request, decode_context)
            if cached is not _MISS:
                log_cache_hit(endpoint_id=self.endpoint_id, cache_key=cache_key_for(request))
                result = TaskResult.success(cached)
                log_request_completed(endpoint_id=self.endpoint_id, latency_ms=0.0, from_cache=True)
            else:
                log_request_started(endpoint_id=self.endpoint_id, cache_key=cache_key_for(request))
                response = await self.client.session.task(request)
                if self.cache is not None:
                    await asyncio.shield(self._write_cache(request, response))
                output = self.endpoint.decode_output(response, decode_context)
                result = TaskResult.success(output)
                log_request_completed(
                    endpoint_id=self.endpoint_id,
                    latency_ms=(time.perf_counter() - started) * 1000,
                )
        except asyncio.CancelledError:
            log_request_canceled(endpoint_id=self.endpoint_id)
            result = TaskResult.canceled()
        except Exception as e:
            error = interface.map_error(e)
            log_request_failed(endpoint_id=self.endpoint_id, error=error)
            result = TaskResult.failure(error)
        self._result = result
        return result

    def _cached_output(self, request: Request, context: DecodeOutputContext) -> Any:
        if self.cache is None:
            return _MISS
        try:
            response = self.cache.get_fast_path(request)
        except Exception:
            logger.debug("Cache fast path failed", exc_info=True)
            return _MISS
        if response is None:
            return _MISS
        try:
            return self.endpoint.decode_output(response, context)
        except Exception:
            logger.debug(
                "Cached response did not decode", extra={"endpoint_id": self.endpoint_id}
            )
            return _MISS

    async def _write_cache(self, request: Request, response: Any) -> None:
        assert self.cache is not None
        try:
            await self.cache.put(response, request)
        except Exception as e:
            log_cache_write_failed(cache_key=cache_key_for(request), error=e)

    def __repr__(self) -> str:
        return f"EndpointTask(endpoint={self.endpoint_id!r}, status={self.status!r})"
