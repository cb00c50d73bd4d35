"""Endpoint contract and implementations."""

from .any_endpoint import AnyEndpoint
from .base import BuildRequestContext, DecodeOutputContext, Endpoint, TransformContext
from .modifiable import ModifiableEndpoint
from .never import NeverEndpoint
from .rest import JSONEndpoint, ModelAdapter, ResponseAdapter, RestEndpoint, RestEndpointSpec

__all__ = [
    "AnyEndpoint",
    "BuildRequestContext",
    "DecodeOutputContext",
    "Endpoint",
    "JSONEndpoint",
    "ModelAdapter",
    "ModifiableEndpoint",
    "NeverEndpoint",
    "ResponseAdapter",
    "RestEndpoint",
    "RestEndpointSpec",
    "TransformContext",
]
