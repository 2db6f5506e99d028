"""Resource types feature for neo-capabilities.

- entities/: ResourceType domain object and the registry protocol
- repositories/: In-memory registry and the process-wide default
- services/: Resolution of abstract slots into concrete capabilities
"""

from .entities import ResourceType, ResourceTypeRegistry, build_content_type_capabilities
from .repositories import (
    InMemoryResourceTypeRegistry,
    get_resource_type_registry,
    set_resource_type_registry,
)
from .services import ResourcePermissionResolver

__all__ = [
    # Entities
    "ResourceType",
    "ResourceTypeRegistry",
    "build_content_type_capabilities",

    # Repositories
    "InMemoryResourceTypeRegistry",
    "get_resource_type_registry",
    "set_resource_type_registry",

    # Services
    "ResourcePermissionResolver",
]
