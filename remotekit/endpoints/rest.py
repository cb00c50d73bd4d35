"""Declarative REST endpoints using endpoint specs and response adapters."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, TypeAdapter

from ..core.request import HTTPRequest, HTTPResponse
from .base import BuildRequestContext, DecodeOutputContext, Endpoint


@dataclass(frozen=True)
class RestEndpointSpec:
    id: str
    method: str  # "GET" | "POST" | "PUT" | "PATCH" | "DELETE"
    build_path: Callable[[dict[str, Any]], str]
    build_query: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    build_body: Callable[[dict[str, Any]], Any] | None = None
    build_headers: Callable[[dict[str, Any]], dict[str, str]] | None = None


class ResponseAdapter:
    def parse(self, response: Any, params: dict[str, Any]) -> Any:
        return response


class ModelAdapter(ResponseAdapter):
    """Validates the payload into ``output_type`` with pydantic."""

    def __init__(self, output_type: Any) -> None:
        self.output_type = output_type
        self._adapter: TypeAdapter[Any] = TypeAdapter(output_type)

    def parse(self, response: Any, params: dict[str, Any]) -> Any:
        return self._adapter.validate_python(response)


def _as_params(value: Any, *, drop_none: bool) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, BaseModel):
        # attribute access keeps nested models (cursors) intact
        items = {name: getattr(value, name) for name in type(value).model_fields}
    elif isinstance(value, Mapping):
        items = dict(value)
    else:
        return {"input": value}
    if drop_none:
        return {k: v for k, v in items.items() if v is not None}
    return items


class RestEndpoint(Endpoint[Any, Any, Any]):
    """Endpoint described by a ``RestEndpointSpec``.

    The spec's builders and the adapter receive one params mapping: the
    input (a mapping or model; other values appear under ``"input"``)
    merged with the options' non-``None`` fields.
    """

    def __init__(
        self,
        spec: RestEndpointSpec,
        adapter: ResponseAdapter | None = None,
        *,
        options_type: type | None = None,
    ) -> None:
        self.spec = spec
        self.adapter = adapter or ResponseAdapter()
        self._options_type = options_type

    @property
    def id(self) -> str:
        return self.spec.id

    def make_default_options(self) -> Any:
        if self._options_type is None:
            return None
        return self._options_type()

    def params_for(self, input: Any, options: Any) -> dict[str, Any]:
        params = _as_params(input, drop_none=False)
        params.update(_as_params(options, drop_none=True))
        return params

    def build_request(self, input: Any, context: BuildRequestContext) -> HTTPRequest:
        spec = self.spec
        params = self.params_for(input, context.options)
        return HTTPRequest(
            method=spec.method,
            path=spec.build_path(params),
            query=spec.build_query(params) if spec.build_query else None,
            body=spec.build_body(params) if spec.build_body else None,
            headers=spec.build_headers(params) if spec.build_headers else None,
        )

    def decode_output(self, response: Any, context: DecodeOutputContext) -> Any:
        params = self.params_for(context.input, context.options)
        payload = response.json() if isinstance(response, HTTPResponse) else response
        return self.adapter.parse(payload, params)

    def __repr__(self) -> str:
        return f"RestEndpoint(id={self.spec.id!r}, method={self.spec.method!r})"


class JSONEndpoint(RestEndpoint):
    """REST endpoint decoding the JSON body into ``output_type``."""

    def __init__(
        self,
        spec: RestEndpointSpec,
        output_type: Any,
        *,
        options_type: type | None = None,
    ) -> None:
        super().__init__(spec, ModelAdapter(output_type), options_type=options_type)
        self.output_type = output_type
