"""Resource permission resolution.

Turns a registered resource type into the map of concrete capabilities a
policy may distribute, and applies grant/deny polarity to that map.
"""

import logging
from typing import Dict, Iterable, Optional

from ..entities.protocols import ResourceTypeRegistry
from ..entities.resource_type import ResourceType
from ..repositories import get_resource_type_registry
from ....config.constants import CapabilitySlots, ResourceKind

logger = logging.getLogger(__name__)


class ResourcePermissionResolver:
    """Resolve resource types into distributable capability maps.

    The registry is queried on every call; nothing is cached, so types
    registered or unregistered between checks are reflected immediately.
    """

    def __init__(self, registry: Optional[ResourceTypeRegistry] = None):
        self._registry = registry

    @property
    def registry(self) -> ResourceTypeRegistry:
        """The injected registry, or the current process-wide one."""
        if self._registry is not None:
            return self._registry
        return get_resource_type_registry()

    def resolve(self, kind: ResourceKind, name: str) -> Optional[Dict[str, str]]:
        """Get the slot -> capability map for a resource type.

        Returns:
            The distributable slots, or None when the type is not registered
        """
        resource_type = self.registry.get(kind, name)

        if resource_type is None:
            logger.debug("Skipping unregistered %s '%s'", kind.value, name)
            return None

        return self.primitives_map(resource_type)

    @staticmethod
    def primitives_map(resource_type: ResourceType) -> Dict[str, str]:
        """Filter a resource type's slots down to assignable primitives."""
        cap = {
            slot: value
            for slot, value in resource_type.capabilities.items()
            if not resource_type.is_meta_permission(slot)
        }

        # A read slot left at its default is not a customization of this type
        if cap.get(CapabilitySlots.READ) == CapabilitySlots.READ:
            del cap[CapabilitySlots.READ]

        return {slot: value for slot, value in cap.items() if isinstance(value, str)}

    @staticmethod
    def distribute(
        slot_map: Dict[str, str],
        allow: bool,
        only: Iterable[str] = (),
        exceptions: Iterable[str] = ()
    ) -> Dict[str, bool]:
        """Assign polarity to each concrete capability in a slot map.

        Every capability gets ``allow``. When ``only`` is non-empty, slots not
        listed in it get the opposite. Slots listed in ``exceptions`` get the
        opposite regardless of ``only``.
        """
        only = list(only)
        result = {capability: allow for capability in slot_map.values()}

        if only:
            for slot, capability in slot_map.items():
                if slot not in only:
                    result[capability] = not allow

        for exception in exceptions:
            if exception in slot_map:
                result[slot_map[exception]] = not allow

        return result

    def capability_map(
        self,
        kind: ResourceKind,
        name: str,
        allow: bool,
        only: Iterable[str] = (),
        exceptions: Iterable[str] = ()
    ) -> Dict[str, bool]:
        """Resolve and distribute in one step; empty for unregistered types."""
        slot_map = self.resolve(kind, name)
        if not slot_map:
            return {}
        return self.distribute(slot_map, allow, only, exceptions)
