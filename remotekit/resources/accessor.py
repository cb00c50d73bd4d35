"""Resource accessor: declare resources on client subclasses.

Example::

    class Users(Client[UsersAPI]):
        me = ResourceAccessor("get_me", persistent_identifier="me", value_type=User)

    client = Users(UsersAPI(...), RESTSession())
    client.me.value()  # hydrate or fetch, then return the latest value
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Generic, TypeVar, overload

from ..cache.base import KeyedCache
from .configuration import CachePolicy, ResourceConfiguration
from .coordinator import EndpointCoordinator
from .dependency import EndpointDependency
from .resource import Resource

Value = TypeVar("Value")


class ResourceAccessor(Generic[Value]):
    """Descriptor creating one attached ``Resource`` per client instance.

    Args:
        get: Endpoint, interface endpoint name or ``client -> Endpoint``.
        set: Optional endpoint for ``Resource.push``.
        input: ``client -> input`` or a constant input for ``get``.
        output: Maps the get endpoint output to the resource value.
        dependencies: Dependencies gating the get coordinator.
        persistent_identifier: Resource cache key; ``None`` disables
            persistence.
        cache_policy: How persisted data and fetching interact.
        value_type: Type persisted values are decoded into.
        cache: Session cache override for the get coordinator.
    """

    def __init__(
        self,
        get: Any,
        *,
        set: Any = None,
        input: Any = None,
        output: Callable[[Any], Value] | None = None,
        dependencies: Sequence[EndpointDependency] | Callable[[Any], Sequence[EndpointDependency]] | None = None,
        persistent_identifier: str | None = None,
        cache_policy: CachePolicy = CachePolicy.RETURN_CACHE_DATA_THEN_LOAD,
        value_type: Any = None,
        cache: KeyedCache[Any, Any] | None = None,
    ) -> None:
        self.get = get
        self.set = set
        self.input = input
        self.output = output
        self.dependencies = dependencies
        self.configuration = ResourceConfiguration(
            persistent_identifier=persistent_identifier, cache_policy=cache_policy
        )
        self.value_type = value_type
        self.cache = cache
        self.name = "<unbound>"
        self._attr = "__resource_unbound"

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self._attr = f"__resource_{name}"

    def make_resource(self) -> Resource[Value]:
        get: EndpointCoordinator[Value] = EndpointCoordinator(
            self.get,
            input=self.input,
            output=self.output,
            dependencies=self.dependencies,
            cache=self.cache,
        )
        set_coordinator: EndpointCoordinator[Value] | None = None
        if self.set is not None:
            set_coordinator = EndpointCoordinator(self.set, output=self.output, cache=self.cache)
        return Resource(
            get,
            set=set_coordinator,
            configuration=self.configuration,
            value_type=self.value_type,
        )

    @overload
    def __get__(self, instance: None, owner: type) -> ResourceAccessor[Value]: ...

    @overload
    def __get__(self, instance: object, owner: type) -> Resource[Value]: ...

    def __get__(self, instance: object | None, owner: type) -> Any:
        if instance is None:
            return self
        resource = instance.__dict__.get(self._attr)
        if resource is None:
            resource = self.make_resource()
            instance.__dict__[self._attr] = resource
            resource.attach(instance)
        return resource

    def __repr__(self) -> str:
        return f"ResourceAccessor({self.name!r})"
