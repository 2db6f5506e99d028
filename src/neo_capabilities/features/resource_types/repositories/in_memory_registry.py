"""In-memory ResourceTypeRegistry implementation.

Content types and taxonomies live in separate namespaces, so a name may be
registered as both.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from ..entities.protocols import ResourceTypeRegistry
from ..entities.resource_type import CapabilityType, ResourceType
from ....config.constants import ResourceKind

logger = logging.getLogger(__name__)


class InMemoryResourceTypeRegistry(ResourceTypeRegistry):
    """Thread-safe registry of content types and taxonomies."""

    def __init__(self):
        self._types: Dict[ResourceKind, Dict[str, ResourceType]] = {
            kind: {} for kind in ResourceKind
        }
        self._lock = threading.RLock()

    def register(self, resource_type: ResourceType) -> ResourceType:
        """Register a resource type, replacing any previous one of the same kind and name."""
        with self._lock:
            replaced = resource_type.name in self._types[resource_type.kind]
            self._types[resource_type.kind][resource_type.name] = resource_type

        if replaced:
            logger.warning(f"{resource_type} already registered, replacing")
        else:
            logger.debug(f"Registered {resource_type}")
        return resource_type

    def register_content_type(
        self,
        name: str,
        capability_type: CapabilityType = "post",
        capabilities: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> ResourceType:
        """Build and register a content type."""
        return self.register(
            ResourceType.content_type(name, capability_type, capabilities, **kwargs)
        )

    def register_taxonomy(
        self,
        name: str,
        capabilities: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> ResourceType:
        """Build and register a taxonomy."""
        return self.register(ResourceType.taxonomy(name, capabilities, **kwargs))

    def unregister(self, kind: ResourceKind, name: str) -> bool:
        """Remove a resource type.

        Returns:
            True if the type was registered and has been removed
        """
        with self._lock:
            removed = self._types[kind].pop(name, None)

        if removed is not None:
            logger.debug(f"Unregistered {removed}")
            return True
        return False

    def unregister_content_type(self, name: str) -> bool:
        return self.unregister(ResourceKind.CONTENT_TYPE, name)

    def unregister_taxonomy(self, name: str) -> bool:
        return self.unregister(ResourceKind.TAXONOMY, name)

    def get(self, kind: ResourceKind, name: str) -> Optional[ResourceType]:
        """Get a registered resource type, None when not registered."""
        with self._lock:
            return self._types[kind].get(name)

    def get_content_type(self, name: str) -> Optional[ResourceType]:
        return self.get(ResourceKind.CONTENT_TYPE, name)

    def get_taxonomy(self, name: str) -> Optional[ResourceType]:
        return self.get(ResourceKind.TAXONOMY, name)

    def names(self, kind: ResourceKind) -> List[str]:
        """Get registered names of one kind, in registration order."""
        with self._lock:
            return list(self._types[kind])

    def clear(self) -> None:
        """Remove every registered resource type."""
        with self._lock:
            for types in self._types.values():
                types.clear()


_registry_instance: Optional[ResourceTypeRegistry] = None


def get_resource_type_registry() -> ResourceTypeRegistry:
    """Get the process-wide resource type registry, creating it on first use."""
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = InMemoryResourceTypeRegistry()
    return _registry_instance


def set_resource_type_registry(registry: Optional[ResourceTypeRegistry]) -> None:
    """Replace the process-wide registry. None resets to a fresh default."""
    global _registry_instance
    _registry_instance = registry
