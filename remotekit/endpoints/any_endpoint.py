"""Type-erased endpoint built from callables."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ..core.request import Request
from .base import BuildRequestContext, DecodeOutputContext, Endpoint

BuildFn = Callable[[Any, BuildRequestContext], Request]
DecodeFn = Callable[[Any, DecodeOutputContext], Any]


class AnyEndpoint(Endpoint[Any, Any, Any]):
    """Endpoint whose behavior is a set of plain callables.

    Transforms return a new endpoint with the callable chained on; the
    original is left untouched.

    Args:
        build: ``(input, context) -> request``
        decode: ``(response, context) -> output``
        default_options: Zero-argument factory for default options.
    """

    def __init__(
        self,
        build: BuildFn,
        decode: DecodeFn,
        default_options: Callable[[], Any] | None = None,
    ) -> None:
        self._build = build
        self._decode = decode
        self._default_options = default_options

    @classmethod
    def wrap(cls, endpoint: Endpoint[Any, Any, Any]) -> AnyEndpoint:
        """Erase the concrete type of ``endpoint``."""
        if isinstance(endpoint, AnyEndpoint):
            return endpoint
        return cls(
            endpoint.build_request,
            endpoint.decode_output,
            endpoint.make_default_options,
        )

    def make_default_options(self) -> Any:
        if self._default_options is None:
            return None
        return self._default_options()

    def build_request(self, input: Any, context: BuildRequestContext) -> Request:
        return self._build(input, context)

    def decode_output(self, response: Any, context: DecodeOutputContext) -> Any:
        return self._decode(response, context)

    def add_request_transform(self, transform: Callable[[Request], Request]) -> AnyEndpoint:
        build = self._build
        return AnyEndpoint(
            lambda input, context: transform(build(input, context)),
            self._decode,
            self._default_options,
        )

    def add_input_request_transform(
        self, transform: Callable[[Any, Request], Request]
    ) -> AnyEndpoint:
        build = self._build
        return AnyEndpoint(
            lambda input, context: transform(input, build(input, context)),
            self._decode,
            self._default_options,
        )

    def add_output_transform(self, transform: Callable[[Any], Any]) -> AnyEndpoint:
        decode = self._decode
        return AnyEndpoint(
            self._build,
            lambda response, context: transform(decode(response, context)),
            self._default_options,
        )
