"""Program interface: the root description of a remote API.

Architecture:
    A program interface groups a set of endpoints with the identity of the
    remote principal and the error types the API surfaces. Endpoints are
    plain attributes of the interface; the client resolves them by name.

    The interface identity (``id``) is the signal resources use to decide
    whether previously fetched data still applies: when a client's interface
    is replaced by one with a different identity, attached resources
    re-fetch.

See Also:
    - Client: binds an interface to a session and caches
    - Endpoint: build/decode pair evaluated against the interface
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import ClassVar

from .credentials import AuthorizationCredential
from .exceptions import APIError, RequestError
from .request import HTTPRequest, Request


class ProgramInterface:
    """Base class for API descriptions."""

    error_type: ClassVar[type[APIError]] = APIError
    request_error_type: ClassVar[type[BaseException]] = RequestError

    @property
    def id(self) -> Hashable:
        """Identity of the principal this interface talks to."""
        return self.__class__.__qualname__

    def update_request(self, request: Request) -> Request:
        """Hook applied to every built request before it is executed."""
        return request

    def map_error(self, error: BaseException) -> APIError:
        """Map an arbitrary exception into this interface's error type."""
        if isinstance(error, self.error_type):
            return error
        if isinstance(error, self.request_error_type):
            return self.error_type.bad_request(error)
        return self.error_type.runtime(error)


class RESTInterface(ProgramInterface):
    """Interface for a JSON-over-HTTP API with optional credentials."""

    def __init__(
        self,
        base_url: str,
        *,
        credential: AuthorizationCredential | None = None,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.credential = credential
        self.default_headers = dict(default_headers or {})

    @property
    def id(self) -> Hashable:
        return (self.base_url, self.credential)

    def update_request(self, request: Request) -> Request:
        if not isinstance(request, HTTPRequest):
            return request
        path = request.path
        if not path.startswith("http"):
            path = f"{self.base_url}/{path.lstrip('/')}"
        headers = {**self.default_headers, **request.headers_dict}
        if self.credential is not None:
            headers.update(self.credential.as_headers())
        if path == request.path and headers == request.headers_dict:
            return request
        return HTTPRequest(
            method=request.method,
            path=path,
            query=request.query,
            body=request.body,
            headers=headers,
        )

    def with_credential(self, credential: AuthorizationCredential | None) -> RESTInterface:
        """Copy of this interface bound to another principal."""
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone.credential = credential
        return clone
