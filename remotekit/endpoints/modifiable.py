"""Endpoints with chainable build and decode transforms."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Callable
from typing import Any

from ..core.request import Request
from .base import BuildRequestContext, DecodeOutputContext, Endpoint, TransformContext

RequestTransform = Callable[[Request, TransformContext], Request]
OutputTransform = Callable[[Any, TransformContext], Any]


class ModifiableEndpoint(Endpoint[Any, Any, Any]):
    """Endpoint base whose request and output can be post-processed.

    Subclasses implement ``build_request_base`` and ``decode_output_base``.
    Transforms registered on an instance run in registration order after
    the base step.
    """

    def __init__(self) -> None:
        self._request_transforms: list[RequestTransform] = []
        self._output_transforms: list[OutputTransform] = []

    @abstractmethod
    def build_request_base(self, input: Any, context: BuildRequestContext) -> Request: ...

    @abstractmethod
    def decode_output_base(self, response: Any, context: DecodeOutputContext) -> Any: ...

    def build_request(self, input: Any, context: BuildRequestContext) -> Request:
        request = self.build_request_base(input, context)
        transform_context = TransformContext(root=context.root, input=input, options=context.options)
        for transform in self._request_transforms:
            request = transform(request, transform_context)
        return request

    def decode_output(self, response: Any, context: DecodeOutputContext) -> Any:
        output = self.decode_output_base(response, context)
        transform_context = TransformContext(
            root=context.root, input=context.input, options=context.options
        )
        for transform in self._output_transforms:
            output = transform(output, transform_context)
        return output

    def add_build_request_transform(self, transform: RequestTransform) -> ModifiableEndpoint:
        self._request_transforms.append(transform)
        return self

    def add_decode_output_transform(self, transform: OutputTransform) -> ModifiableEndpoint:
        self._output_transforms.append(transform)
        return self
