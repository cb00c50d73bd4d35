"""Dependencies gating an endpoint coordinator."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..runtime.client import Client


class EndpointDependency:
    """A condition a client must satisfy before a coordinator may run."""

    def __init__(self, predicate: Callable[[Client[Any]], bool], description: str | None = None) -> None:
        self._predicate = predicate
        self.description = description or getattr(predicate, "__name__", "dependency")

    def is_available(self, client: Client[Any]) -> bool:
        return bool(self._predicate(client))

    @classmethod
    def on(cls, resource: Any) -> EndpointDependency:
        """Available once ``resource`` holds a value.

        ``resource`` is a ``Resource`` or a ``ResourceAccessor``; an accessor
        is resolved against the client being checked.
        """
        from .accessor import ResourceAccessor

        if isinstance(resource, ResourceAccessor):
            accessor = resource

            def accessor_has_value(client: Client[Any]) -> bool:
                return accessor.__get__(client, type(client)).latest_value is not None

            return cls(accessor_has_value, description=f"resource {accessor.name!r}")

        return cls(lambda client: resource.latest_value is not None, description=repr(resource))

    def __repr__(self) -> str:
        return f"EndpointDependency({self.description})"
