"""Unit tests for RESTSession and the session base class."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from remotekit.core import HTTPRequest, HTTPResponse, RateLimitError, RequestError
from remotekit.runtime import HTTPClient, RESTSession


@pytest.fixture
def mock_http():
    """Create mock HTTP client."""
    http = MagicMock(spec=HTTPClient)
    http.request = AsyncMock(return_value=HTTPResponse.from_json({"value": 5}))
    http.close = AsyncMock()
    return http


class TestRESTSession:
    """Test RESTSession request execution and error mapping."""

    @pytest.mark.asyncio
    async def test_execute_success(self, mock_http):
        session = RESTSession(http=mock_http)
        request = HTTPRequest(
            method="POST",
            path="https://api.example.com/items",
            query={"page": 2},
            body={"name": "x"},
            headers={"X-Test": "1"},
        )

        response = await session.execute(request)

        assert response.json() == {"value": 5}
        mock_http.request.assert_called_once_with(
            "POST",
            "https://api.example.com/items",
            params=[("page", "2")],
            json={"name": "x"},
            headers={"X-Test": "1"},
        )

    @pytest.mark.asyncio
    async def test_error_status_raises_request_error(self, mock_http):
        mock_http.request.return_value = HTTPResponse.from_json({"error": "nope"}, status=404)
        session = RESTSession(http=mock_http)

        with pytest.raises(RequestError) as exc_info:
            await session.execute(HTTPRequest(path="/missing"))

        assert exc_info.value.status_code == 404
        assert exc_info.value.payload == {"error": "nope"}
        assert exc_info.value.request == HTTPRequest(path="/missing")

    @pytest.mark.asyncio
    async def test_non_json_error_payload(self, mock_http):
        mock_http.request.return_value = HTTPResponse(status=502, body=b"Bad Gateway")
        session = RESTSession(http=mock_http)

        with pytest.raises(RequestError) as exc_info:
            await session.execute(HTTPRequest(path="/x"))

        assert exc_info.value.payload == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_rate_limit(self, mock_http):
        mock_http.request.return_value = HTTPResponse(status=429, headers={"Retry-After": "7"})
        session = RESTSession(http=mock_http)

        with pytest.raises(RateLimitError) as exc_info:
            await session.execute(HTTPRequest(path="/x"))

        assert exc_info.value.retry_after == 7.0

    @pytest.mark.asyncio
    async def test_transport_errors_wrapped(self, mock_http):
        session = RESTSession(http=mock_http)

        mock_http.request.side_effect = aiohttp.ClientConnectionError("refused")
        with pytest.raises(RequestError, match="refused"):
            await session.execute(HTTPRequest(path="/x"))

        mock_http.request.side_effect = asyncio.TimeoutError()
        with pytest.raises(RequestError, match="timed out"):
            await session.execute(HTTPRequest(path="/x"))

    @pytest.mark.asyncio
    async def test_rejects_foreign_requests(self, mock_http):
        session = RESTSession(http=mock_http)
        with pytest.raises(TypeError):
            await session.execute(MagicMock())

    @pytest.mark.asyncio
    async def test_close_closes_http_client(self, mock_http):
        async with RESTSession(http=mock_http):
            pass
        mock_http.close.assert_awaited_once()

    def test_default_http_client(self):
        session = RESTSession("https://api.example.com")
        assert isinstance(session.http, HTTPClient)
        assert session.http.base_url == "https://api.example.com"


class TestRequestSessionOutstanding:
    """Test outstanding-work tracking."""

    @pytest.mark.asyncio
    async def test_task_tracked_until_done(self, mock_http):
        session = RESTSession(http=mock_http)
        task = session.task(HTTPRequest(path="/x"))
        assert task in session.outstanding

        await task
        await asyncio.sleep(0)
        assert session.outstanding == frozenset()

    @pytest.mark.asyncio
    async def test_cancel_all(self, mock_http):
        started = asyncio.Event()

        async def slow(*args, **kwargs):
            started.set()
            await asyncio.sleep(10)

        mock_http.request.side_effect = slow
        session = RESTSession(http=mock_http)
        task = session.task(HTTPRequest(path="/slow"))
        await started.wait()

        assert session.cancel_all() == 1
        with pytest.raises(asyncio.CancelledError):
            await task
