"""Unit tests for the client container and endpoint tasks.

Tests focus on the cache fast path, error mapping and cancellation.
"""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from remotekit.cache import EmptyKeyedCache, MemoryKeyedCache
from remotekit.core import (
    APIError,
    CacheWriteError,
    EndpointUnavailableError,
    HTTPRequest,
    HTTPResponse,
    RequestError,
    TaskStatus,
)
from remotekit.endpoints import AnyEndpoint
from remotekit.runtime import Client


class FailingCache(EmptyKeyedCache):
    async def put(self, value, key):
        raise CacheWriteError("disk full", key="k")


class TestClient:
    """Test Client composition."""

    def test_defaults(self, numbers_api, fake_session):
        client = Client(numbers_api, fake_session)
        assert isinstance(client.session_cache, EmptyKeyedCache)
        assert isinstance(client.resource_cache, EmptyKeyedCache)

    def test_interface_change_notifies(self, numbers_api, fake_session):
        client = Client(numbers_api, fake_session)
        listener = MagicMock()
        unsubscribe = client.subscribe(listener)

        client.interface = numbers_api.as_principal("bob")
        assert listener.call_count == 1

        unsubscribe()
        client.interface = numbers_api
        assert listener.call_count == 1

    def test_listener_failure_does_not_stop_others(self, numbers_api, fake_session):
        client = Client(numbers_api, fake_session)
        client.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        second = MagicMock()
        client.subscribe(second)

        client.notify_change()
        second.assert_called_once_with()

    def test_resolve_endpoint(self, numbers_api, fake_session):
        client = Client(numbers_api, fake_session)
        assert client.resolve_endpoint("number") is type(numbers_api).number
        with pytest.raises(EndpointUnavailableError):
            client.resolve_endpoint("missing")

    @pytest.mark.asyncio
    async def test_close(self, numbers_api, fake_session):
        async with Client(numbers_api, fake_session):
            pass
        assert fake_session.closed


class TestEndpointTask:
    """Test endpoint runs through the client."""

    @pytest.mark.asyncio
    async def test_perform(self, numbers_api, fake_session):
        client = Client(numbers_api, fake_session)
        assert await client.perform("number") == 5
        assert fake_session.calls == [HTTPRequest(path="/number", query={"user": "alice"})]

    @pytest.mark.asyncio
    async def test_fast_path_hit_skips_transport(self, numbers_api, fake_session, respond):
        cache = MemoryKeyedCache()
        await cache.put(respond(9), HTTPRequest(path="/number", query={"user": "alice"}))
        client = Client(numbers_api, fake_session, session_cache=cache)

        task = client.run("number")
        result = await task

        assert result.value == 9
        assert task.status is TaskStatus.SUCCESS
        assert fake_session.calls == []

    @pytest.mark.asyncio
    async def test_response_written_to_cache(self, numbers_api, fake_session, respond):
        cache = MemoryKeyedCache()
        client = Client(numbers_api, fake_session, session_cache=cache)

        await client.perform("number")

        assert cache.get_fast_path(fake_session.calls[0]) == respond(5)

    @pytest.mark.asyncio
    async def test_undecodable_cache_entry_is_a_miss(self, numbers_api, fake_session):
        cache = MemoryKeyedCache()
        await cache.put(HTTPResponse(body=b"garbage"), HTTPRequest(path="/number", query={"user": "alice"}))
        client = Client(numbers_api, fake_session, session_cache=cache)

        assert await client.perform("number") == 5
        assert len(fake_session.calls) == 1

    @pytest.mark.asyncio
    async def test_cache_write_failure_is_not_fatal(self, numbers_api, fake_session):
        client = Client(numbers_api, fake_session, session_cache=FailingCache())
        assert await client.perform("number") == 5

    @pytest.mark.asyncio
    async def test_request_error_maps_to_bad_request(self, numbers_api, fake_session):
        def fail(request):
            raise RequestError("HTTP 500", status_code=500)

        fake_session.handler = fail
        result = await Client(numbers_api, fake_session).run("number").result()

        assert result.is_error
        assert isinstance(result.error, APIError)
        assert result.error.is_bad_request
        assert result.error.underlying.status_code == 500

    @pytest.mark.asyncio
    async def test_decode_error_maps_to_runtime(self, numbers_api, fake_session):
        fake_session.handler = lambda request: HTTPResponse.from_json({"unexpected": 1})
        client = Client(numbers_api, fake_session)

        with pytest.raises(APIError) as exc_info:
            await client.perform("number")

        assert exc_info.value.is_runtime
        assert isinstance(exc_info.value.underlying, KeyError)

    @pytest.mark.asyncio
    async def test_update_request_applied(self, numbers_api, fake_session):
        class SignedAPI(type(numbers_api)):
            def update_request(self, request):
                return request.with_header("X-Signature", "abc")

        client = Client(SignedAPI(), fake_session)
        await client.perform("number")
        assert fake_session.calls[0].headers_dict == {"X-Signature": "abc"}

    @pytest.mark.asyncio
    async def test_cancel_in_flight(self, numbers_api, fake_session, respond):
        gate = asyncio.Event()

        async def slow(request):
            await gate.wait()
            return respond(1)

        fake_session.handler = slow
        client = Client(numbers_api, fake_session)
        task = client.run("number")
        while not fake_session.calls:
            await asyncio.sleep(0)

        task.cancel()
        result = await task.result()

        assert result.is_canceled
        assert task.status is TaskStatus.CANCELED
        await asyncio.sleep(0)
        assert fake_session.outstanding == frozenset()

    @pytest.mark.asyncio
    async def test_cancel_before_start(self, numbers_api, fake_session):
        task = Client(numbers_api, fake_session).run("number")
        task.cancel()

        result = await task.result()

        assert result.is_canceled
        assert fake_session.calls == []

    @pytest.mark.asyncio
    async def test_explicit_endpoint_and_options(self, numbers_api, fake_session):
        seen = []

        def build(input, context):
            seen.append((input, context.options))
            return HTTPRequest(path="/custom")

        endpoint = AnyEndpoint(build, lambda response, context: response.json()["value"] + 1)
        value = await Client(numbers_api, fake_session).perform(endpoint, "in", {"limit": 1})

        assert value == 6
        assert seen == [("in", {"limit": 1})]
