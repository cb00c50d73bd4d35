"""Runtime: transport sessions, HTTP client, client container."""

from .client import Client
from .endpoint_task import EndpointTask
from .http import HTTPClient
from .rest_session import RESTSession
from .session import RequestSession

__all__ = [
    "Client",
    "EndpointTask",
    "HTTPClient",
    "RESTSession",
    "RequestSession",
]
