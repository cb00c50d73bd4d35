"""RemoteKit - Typed endpoints, keyed caches and reactive resources for remote APIs."""

from .cache import (
    DiskCache,
    EmptyKeyedCache,
    EnumerableCache,
    JSONCoder,
    KeyedCache,
    KeyedCodingCache,
    MemoryKeyedCache,
    PickleCoder,
    PreferencesCache,
    PrefixedCodingCache,
    TypedKeyedCache,
)
from .config import TransportConfig
from .core import (
    APIError,
    APIErrorKind,
    APIKey,
    AuthorizationCredential,
    BearerToken,
    CacheError,
    CacheWriteError,
    ClientResolutionError,
    DependencyResolutionError,
    EndpointUnavailableError,
    HTTPRequest,
    HTTPResponse,
    PaginationContinuityError,
    PaginationError,
    ProgramInterface,
    RateLimitError,
    RemoteKitError,
    Request,
    RequestError,
    RESTInterface,
    TaskCanceledError,
    TaskResult,
    TaskStatus,
    UnsupportedCacheOperationError,
)
from .endpoints import (
    AnyEndpoint,
    BuildRequestContext,
    DecodeOutputContext,
    Endpoint,
    JSONEndpoint,
    ModifiableEndpoint,
    NeverEndpoint,
    RestEndpoint,
    RestEndpointSpec,
    TransformContext,
)
from .pagination import (
    CursorPaginatedItems,
    CursorPaginatedIterator,
    CursorPaginatedList,
    CursorPaginationOptions,
    DataCursor,
    OffsetCursor,
    OpaqueValueCursor,
    PageNumberCursor,
    PaginatedPartial,
    PaginatedResults,
    PaginationCursor,
    ProviderTokenCursor,
    StringCursor,
    URLCursor,
)
from .resources import (
    CachePolicy,
    CoordinatorState,
    EndpointCoordinator,
    EndpointDependency,
    Resource,
    ResourceAccessor,
    ResourceConfiguration,
)
from .runtime import Client, EndpointTask, HTTPClient, RequestSession, RESTSession

__version__ = "0.1.0"

__all__ = [
    # Core
    "Request",
    "HTTPRequest",
    "HTTPResponse",
    "ProgramInterface",
    "RESTInterface",
    "AuthorizationCredential",
    "APIKey",
    "BearerToken",
    "TaskResult",
    "TaskStatus",
    "TransportConfig",
    # Errors
    "RemoteKitError",
    "APIError",
    "APIErrorKind",
    "RequestError",
    "RateLimitError",
    "CacheError",
    "CacheWriteError",
    "UnsupportedCacheOperationError",
    "PaginationError",
    "PaginationContinuityError",
    "DependencyResolutionError",
    "ClientResolutionError",
    "EndpointUnavailableError",
    "TaskCanceledError",
    # Endpoints
    "Endpoint",
    "AnyEndpoint",
    "ModifiableEndpoint",
    "NeverEndpoint",
    "RestEndpoint",
    "RestEndpointSpec",
    "JSONEndpoint",
    "BuildRequestContext",
    "DecodeOutputContext",
    "TransformContext",
    # Caches
    "KeyedCache",
    "KeyedCodingCache",
    "EnumerableCache",
    "EmptyKeyedCache",
    "MemoryKeyedCache",
    "DiskCache",
    "PreferencesCache",
    "PrefixedCodingCache",
    "TypedKeyedCache",
    "JSONCoder",
    "PickleCoder",
    # Pagination
    "PaginationCursor",
    "DataCursor",
    "StringCursor",
    "OffsetCursor",
    "PageNumberCursor",
    "URLCursor",
    "ProviderTokenCursor",
    "OpaqueValueCursor",
    "PaginatedPartial",
    "CursorPaginatedList",
    "CursorPaginationOptions",
    "CursorPaginatedIterator",
    "CursorPaginatedItems",
    "PaginatedResults",
    # Runtime
    "RequestSession",
    "RESTSession",
    "HTTPClient",
    "Client",
    "EndpointTask",
    # Resources
    "CachePolicy",
    "ResourceConfiguration",
    "EndpointCoordinator",
    "CoordinatorState",
    "EndpointDependency",
    "Resource",
    "ResourceAccessor",
]
