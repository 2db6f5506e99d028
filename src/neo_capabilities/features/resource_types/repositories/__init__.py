"""Resource type registry implementations."""

from .in_memory_registry import (
    InMemoryResourceTypeRegistry,
    get_resource_type_registry,
    set_resource_type_registry,
)

__all__ = [
    "InMemoryResourceTypeRegistry",
    "get_resource_type_registry",
    "set_resource_type_registry",
]
