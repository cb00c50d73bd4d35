"""Core components."""

from .credentials import APIKey, AuthorizationCredential, BearerToken
from .exceptions import (
    APIError,
    APIErrorKind,
    CacheError,
    CacheWriteError,
    ClientResolutionError,
    DependencyResolutionError,
    EndpointUnavailableError,
    PaginationContinuityError,
    PaginationError,
    RateLimitError,
    RemoteKitError,
    RequestError,
    TaskCanceledError,
    UnsupportedCacheOperationError,
)
from .interface import ProgramInterface, RESTInterface
from .request import HTTPRequest, HTTPResponse, Request
from .result import TaskResult, TaskStatus

__all__ = [
    # Requests
    "Request",
    "HTTPRequest",
    "HTTPResponse",
    # Interfaces
    "ProgramInterface",
    "RESTInterface",
    "AuthorizationCredential",
    "APIKey",
    "BearerToken",
    # Results
    "TaskResult",
    "TaskStatus",
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
]
