"""Custom exception hierarchy."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .request import Request


class RemoteKitError(Exception):
    """Base exception for all library errors."""

    pass


class APIErrorKind(str, Enum):
    """Classification of an API-level failure."""

    BAD_REQUEST = "bad_request"
    RUNTIME = "runtime"


class APIError(RemoteKitError):
    """Error surfaced by a client for a failed endpoint run.

    ``bad_request`` carries the transport's native request error;
    ``runtime`` carries anything else (decode failures, cache failures,
    unresolved dependencies, misuse).
    """

    def __init__(
        self,
        message: str,
        *,
        kind: APIErrorKind = APIErrorKind.RUNTIME,
        underlying: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.underlying = underlying

    @classmethod
    def bad_request(cls, error: BaseException) -> APIError:
        return cls(str(error) or error.__class__.__name__, kind=APIErrorKind.BAD_REQUEST, underlying=error)

    @classmethod
    def runtime(cls, error: BaseException) -> APIError:
        return cls(str(error) or error.__class__.__name__, kind=APIErrorKind.RUNTIME, underlying=error)

    @property
    def is_bad_request(self) -> bool:
        return self.kind is APIErrorKind.BAD_REQUEST

    @property
    def is_runtime(self) -> bool:
        return self.kind is APIErrorKind.RUNTIME

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value!r}, underlying={self.underlying!r})"


class RequestError(RemoteKitError):
    """Transport or protocol layer failed to satisfy a request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        request: Request | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.request = request
        self.payload = payload


class RateLimitError(RequestError):
    """Remote rate limit exceeded."""

    def __init__(
        self,
        message: str,
        retry_after: float = 60,
        *,
        request: Request | None = None,
    ) -> None:
        super().__init__(message, status_code=429, request=request)
        self.retry_after = retry_after


class CacheError(RemoteKitError):
    """Cache backend failure."""

    pass


class CacheWriteError(CacheError):
    """Writing a value to a cache failed."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class UnsupportedCacheOperationError(CacheError):
    """Operation is not supported by this cache configuration."""

    pass


class PaginationError(RemoteKitError):
    """Pagination state misuse."""

    pass


class PaginationContinuityError(PaginationError):
    """Two paginated lists cannot be joined.

    Raised when the right-hand list already consumed cursors, or when its
    starting cursor differs from the left-hand list's next cursor.
    """

    def __init__(self, message: str, expected: Any = None, actual: Any = None) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class DependencyResolutionError(RemoteKitError):
    """A resource dependency does not hold a value yet."""

    def __init__(self, message: str = "Dependency resolution failed.", dependency: Any = None) -> None:
        super().__init__(message)
        self.dependency = dependency


class ClientResolutionError(RemoteKitError):
    """A resource was used before being attached to a client."""

    def __init__(self, message: str = "Client resolution failed.") -> None:
        super().__init__(message)


class EndpointUnavailableError(RemoteKitError):
    """An unreachable endpoint was invoked."""

    pass


class TaskCanceledError(RemoteKitError):
    """Value requested from a canceled task."""

    pass
