"""REST session executing HTTP requests through HTTPClient."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from ..config import TransportConfig
from ..core.exceptions import RateLimitError, RequestError
from ..core.request import HTTPRequest, HTTPResponse, Request
from .http import HTTPClient, ResponseHook
from .session import RequestSession

logger = logging.getLogger(__name__)


def _error_payload(response: HTTPResponse) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.body.decode("utf-8", errors="replace")


class RESTSession(RequestSession):
    """Session for ``HTTPRequest`` values.

    Non-2xx statuses raise ``RequestError`` (429 raises ``RateLimitError``
    once retries are exhausted); aiohttp failures and timeouts are wrapped
    in ``RequestError``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        config: TransportConfig | None = None,
        http: HTTPClient | None = None,
    ) -> None:
        super().__init__()
        self._http = http or HTTPClient.from_config(config or TransportConfig(), base_url=base_url)

    @property
    def http(self) -> HTTPClient:
        return self._http

    def add_response_hook(self, hook: ResponseHook) -> None:
        self._http.add_response_hook(hook)

    async def execute(self, request: Request) -> HTTPResponse:
        if not isinstance(request, HTTPRequest):
            raise TypeError(f"RESTSession cannot execute {type(request).__name__}")
        try:
            response = await self._http.request(
                request.method,
                request.path,
                params=list(request.query) or None,
                json=request.body,
                headers=request.headers_dict or None,
            )
        except asyncio.TimeoutError as e:
            raise RequestError("Request timed out", request=request) from e
        except aiohttp.ClientError as e:
            raise RequestError(f"HTTP transport error: {e}", request=request) from e

        if response.status == 429:
            retry_after = response.headers.get("Retry-After")
            try:
                delay = float(retry_after) if retry_after is not None else 60.0
            except ValueError:
                delay = 60.0
            raise RateLimitError("Rate limit exceeded", retry_after=delay, request=request)
        if not response.ok:
            raise RequestError(
                f"HTTP {response.status} for {request.method} {request.path}",
                status_code=response.status,
                request=request,
                payload=_error_payload(response),
            )
        return response

    async def close(self) -> None:
        await super().close()
        await self._http.close()
