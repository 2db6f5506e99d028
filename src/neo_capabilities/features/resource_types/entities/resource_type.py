"""Resource type domain entity for neo-capabilities.

A resource type (content type or taxonomy) owns a mapping from abstract
capability slots (``edit_posts``, ``delete_terms``) to the concrete
capability strings users actually hold (``edit_books``, ``delete_genres``).
Some slots are meta capabilities: they are computed per object at check time
and never assigned directly.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple, Union

from ....config.constants import CapabilitySlots, ResourceKind
from ....config.settings import get_settings
from ....core.exceptions import ResourceTypeRegistrationError


CapabilityType = Union[str, Tuple[str, str]]


def build_content_type_capabilities(capability_type: CapabilityType = "post") -> Dict[str, str]:
    """Build the conventional slot map for a content type.

    Args:
        capability_type: Singular base name, or a (singular, plural) pair.
            A bare string is pluralized by appending "s".

    Returns:
        Ordered slot -> capability mapping
    """
    if isinstance(capability_type, str):
        singular, plural = capability_type, f"{capability_type}s"
    else:
        singular, plural = capability_type

    return {
        # Meta capabilities
        "edit_post": f"edit_{singular}",
        "read_post": f"read_{singular}",
        "delete_post": f"delete_{singular}",
        # Primitive capabilities used outside of map_meta_cap()
        "edit_posts": f"edit_{plural}",
        "edit_others_posts": f"edit_others_{plural}",
        "delete_posts": f"delete_{plural}",
        "publish_posts": f"publish_{plural}",
        "read_private_posts": f"read_private_{plural}",
        # Primitive capabilities used within map_meta_cap()
        "read": CapabilitySlots.READ,
        "delete_private_posts": f"delete_private_{plural}",
        "delete_published_posts": f"delete_published_{plural}",
        "delete_others_posts": f"delete_others_{plural}",
        "edit_private_posts": f"edit_private_{plural}",
        "edit_published_posts": f"edit_published_{plural}",
        "create_posts": f"edit_{plural}",
    }


@dataclass(frozen=True)
class ResourceType:
    """Immutable description of a registered content type or taxonomy."""

    name: str
    kind: ResourceKind
    capabilities: Dict[str, Any] = field(default_factory=dict)
    meta_capabilities: FrozenSet[str] = field(default_factory=frozenset)
    label: Optional[str] = None

    def __post_init__(self):
        """Validate the resource type definition."""
        if not self.name or not isinstance(self.name, str):
            raise ResourceTypeRegistrationError(
                "Resource type name must be a non-empty string",
                details={"name": self.name, "kind": getattr(self.kind, "value", self.kind)}
            )

        bad_slots = [slot for slot in self.capabilities if not isinstance(slot, str)]
        if bad_slots:
            raise ResourceTypeRegistrationError(
                f"Capability slot names must be strings: {bad_slots}",
                details={"name": self.name}
            )

        if self.label is None:
            object.__setattr__(self, "label", self.name)

        object.__setattr__(self, "capabilities", dict(self.capabilities))
        object.__setattr__(self, "meta_capabilities", frozenset(self.meta_capabilities))

    @classmethod
    def content_type(
        cls,
        name: str,
        capability_type: CapabilityType = "post",
        capabilities: Optional[Dict[str, Any]] = None,
        meta_capabilities: Optional[Iterable[str]] = None,
        label: Optional[str] = None
    ) -> "ResourceType":
        """Create a content type with the conventional capability map.

        Entries in ``capabilities`` override individual slots.
        """
        cap_map = build_content_type_capabilities(capability_type)
        cap_map.update(capabilities or {})

        if meta_capabilities is None:
            meta_capabilities = get_settings().content_type_meta_capabilities

        return cls(
            name=name,
            kind=ResourceKind.CONTENT_TYPE,
            capabilities=cap_map,
            meta_capabilities=frozenset(meta_capabilities),
            label=label
        )

    @classmethod
    def taxonomy(
        cls,
        name: str,
        capabilities: Optional[Dict[str, Any]] = None,
        meta_capabilities: Optional[Iterable[str]] = None,
        label: Optional[str] = None
    ) -> "ResourceType":
        """Create a taxonomy with the default term capability map."""
        cap_map = dict(CapabilitySlots.TAXONOMY_DEFAULTS)
        cap_map.update(capabilities or {})

        if meta_capabilities is None:
            meta_capabilities = get_settings().taxonomy_meta_capabilities

        return cls(
            name=name,
            kind=ResourceKind.TAXONOMY,
            capabilities=cap_map,
            meta_capabilities=frozenset(meta_capabilities),
            label=label
        )

    def is_meta_permission(self, slot: str) -> bool:
        """Check if a slot is a meta capability."""
        return slot in self.meta_capabilities

    def capability(self, slot: str) -> Optional[Any]:
        """Get the concrete capability for a slot."""
        return self.capabilities.get(slot)

    def __str__(self) -> str:
        return f"ResourceType({self.kind.value}:{self.name})"
