"""Resources: coordinators, dependencies and reactive resource handles."""

from .accessor import ResourceAccessor
from .configuration import CachePolicy, ResourceConfiguration
from .coordinator import CoordinatorState, EndpointCoordinator
from .dependency import EndpointDependency
from .resource import Resource

__all__ = [
    "CachePolicy",
    "CoordinatorState",
    "EndpointCoordinator",
    "EndpointDependency",
    "Resource",
    "ResourceAccessor",
    "ResourceConfiguration",
]
