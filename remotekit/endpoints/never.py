"""Sentinel endpoint for operations an interface does not offer."""

from __future__ import annotations

from typing import Any, NoReturn

from ..core.exceptions import EndpointUnavailableError
from .base import BuildRequestContext, DecodeOutputContext, Endpoint


class NeverEndpoint(Endpoint[Any, Any, Any]):
    """An unreachable endpoint: every operation raises."""

    def __init__(self, reason: str = "Endpoint is not available.") -> None:
        self.reason = reason

    def make_default_options(self) -> None:
        return None

    def build_request(self, input: Any, context: BuildRequestContext) -> NoReturn:
        raise EndpointUnavailableError(self.reason)

    def decode_output(self, response: Any, context: DecodeOutputContext) -> NoReturn:
        raise EndpointUnavailableError(self.reason)

    def __repr__(self) -> str:
        return "NeverEndpoint()"
