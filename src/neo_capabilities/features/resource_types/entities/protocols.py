"""Protocol interfaces for the resource type registry collaborator."""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

from ....config.constants import ResourceKind
from .resource_type import ResourceType


@runtime_checkable
class ResourceTypeRegistry(Protocol):
    """Protocol for looking up registered content types and taxonomies.

    Registry state may change at any time; callers must query on every use.
    """

    @abstractmethod
    def get(self, kind: ResourceKind, name: str) -> Optional[ResourceType]:
        """Get a registered resource type, None when not registered."""
        ...
