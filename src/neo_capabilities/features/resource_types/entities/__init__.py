"""Resource type entities package."""

from .resource_type import ResourceType, build_content_type_capabilities
from .protocols import ResourceTypeRegistry

__all__ = [
    "ResourceType",
    "ResourceTypeRegistry",
    "build_content_type_capabilities",
]
