"""Shared fixtures for unit tests.

Provides a scripted transport session and a small program interface whose
``number`` endpoint decodes ``{"value": n}`` bodies into ``n``.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Hashable
from typing import Any

import pytest

from remotekit import AnyEndpoint, HTTPRequest, HTTPResponse, ProgramInterface
from remotekit.runtime import RequestSession


class FakeSession(RequestSession):
    """Session answering from ``handler`` and recording every request."""

    def __init__(self, handler: Callable[[Any], Any]) -> None:
        super().__init__()
        self.handler = handler
        self.calls: list[Any] = []
        self.closed = False

    async def execute(self, request: Any) -> Any:
        self.calls.append(request)
        result = self.handler(request)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def close(self) -> None:
        await super().close()
        self.closed = True


class NumbersAPI(ProgramInterface):
    """Interface with one endpoint returning an integer."""

    number = AnyEndpoint(
        lambda input, context: HTTPRequest(
            path="/number", query={"user": context.root.principal}
        ),
        lambda response, context: int(response.json()["value"]),
    )

    def __init__(self, principal: str = "alice") -> None:
        self.principal = principal

    @property
    def id(self) -> Hashable:
        return self.principal

    def as_principal(self, principal: str) -> NumbersAPI:
        return NumbersAPI(principal)


def number_response(value: int) -> HTTPResponse:
    return HTTPResponse.from_json({"value": value})


@pytest.fixture
def respond() -> Callable[[int], HTTPResponse]:
    """Build a ``{"value": n}`` response."""
    return number_response


@pytest.fixture
def fake_session() -> FakeSession:
    """Session answering every request with the number 5."""
    return FakeSession(lambda request: number_response(5))


@pytest.fixture
def numbers_api() -> NumbersAPI:
    return NumbersAPI()
