"""HTTP client helper."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from typing import Any, Optional, TypeVar

import aiohttp

from ..config import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_AFTER,
    RETRYABLE_STATUSES,
    TransportConfig,
)
from ..core.request import HTTPResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

ResponseHook = Callable[[aiohttp.ClientResponse], Optional[float] | Awaitable[Optional[float]]]


class HTTPClient:
    """Async HTTP client wrapper.

    Adds to a plain ``aiohttp.ClientSession``:

    - lazy session creation (recreated after close)
    - ``base_url`` joining for relative URLs
    - response hooks, sync or async, which may return a delay in seconds to
      throttle subsequent requests
    - retry of 429/418 responses honoring ``Retry-After``
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        default_retry_after: float = DEFAULT_RETRY_AFTER,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max_retries
        self.default_retry_after = default_retry_after
        self.headers = dict(headers or {})
        self._session: Optional[aiohttp.ClientSession] = None
        self._response_hooks: list[ResponseHook] = []
        self._throttle_until: Optional[float] = None

    @classmethod
    def from_config(cls, config: TransportConfig, base_url: Optional[str] = None) -> HTTPClient:
        return cls(
            base_url=base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            default_retry_after=config.default_retry_after,
            headers=config.headers,
        )

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    def add_response_hook(self, hook: ResponseHook) -> None:
        self._response_hooks.append(hook)

    def set_throttle(self, delay: float) -> None:
        """Hold subsequent requests for ``delay`` seconds.

        A shorter window never cuts an existing one short.
        """
        if delay <= 0:
            return
        until = time.time() + delay
        if self._throttle_until is None or until > self._throttle_until:
            self._throttle_until = until

    async def _wait_for_throttle(self) -> None:
        if self._throttle_until is None:
            return
        remaining = self._throttle_until - time.time()
        if remaining > 0:
            await asyncio.sleep(remaining)
        self._throttle_until = None

    async def _run_hooks(self, response: aiohttp.ClientResponse) -> None:
        for hook in self._response_hooks:
            try:
                delay = hook(response)
                if inspect.isawaitable(delay):
                    delay = await delay
                if delay:
                    self.set_throttle(float(delay))
            except Exception:
                logger.warning("Response hook failed", exc_info=True)

    def _url(self, url: str) -> str:
        # If base_url is set and url is relative, combine them
        if self.base_url and not url.startswith("http"):
            return f"{self.base_url}{url}"
        return url

    def _retry_after(self, response: aiohttp.ClientResponse) -> float:
        value = response.headers.get("Retry-After")
        if value is None:
            return self.default_retry_after
        try:
            return max(float(value), 0.0)
        except (TypeError, ValueError):
            return self.default_retry_after

    async def _perform(
        self,
        open_response: Callable[[], AbstractAsyncContextManager[aiohttp.ClientResponse]],
        handle: Callable[[aiohttp.ClientResponse], Awaitable[T]],
    ) -> T:
        attempt = 0
        while True:
            await self._wait_for_throttle()
            async with open_response() as response:
                if response.status not in RETRYABLE_STATUSES or attempt >= self.max_retries:
                    await self._run_hooks(response)
                    return await handle(response)
                delay = self._retry_after(response)
            attempt += 1
            logger.warning(
                "Rate limited, retrying",
                extra={"status": response.status, "retry_after": delay, "attempt": attempt},
            )
            await asyncio.sleep(delay)

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> HTTPResponse:
        """Send a request and return the raw response, whatever its status."""
        url = self._url(url)

        async def read(response: aiohttp.ClientResponse) -> HTTPResponse:
            body = await response.read()
            return HTTPResponse(status=response.status, headers=dict(response.headers), body=body)

        return await self._perform(
            lambda: self.session.request(method, url, params=params, json=json, headers=headers),
            read,
        )

    async def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """GET request returning the decoded JSON body."""
        url = self._url(url)
        return await self._perform(
            lambda: self.session.get(url, params=params, headers=headers),
            self._json,
        )

    async def post(
        self,
        url: str,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """POST request returning the decoded JSON body."""
        url = self._url(url)
        return await self._perform(
            lambda: self.session.post(url, json=json, headers=headers),
            self._json,
        )

    @staticmethod
    async def _json(response: aiohttp.ClientResponse) -> Any:
        response.raise_for_status()
        return await response.json()

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
