"""Constants and enums for neo-capabilities.

This module defines the constants, enums and sentinel values shared by the
policy engine, the resource-type registry and the user store.
"""

from enum import Enum
from typing import Final, FrozenSet


class PolicyDefaults:
    """Baseline values used when a policy is created."""

    PRIORITY: Final[int] = 10
    CHAIN_PRIORITY_STEP: Final[int] = 1


class TargetRoles(str, Enum):
    """Sentinel role targets."""

    ALL = "__ALL__"


# Stands for "every role currently assigned to the user".
ALL_ROLES: Final[TargetRoles] = TargetRoles.ALL


class ResourceKind(str, Enum):
    """Kinds of resource types whose capabilities can be distributed."""

    CONTENT_TYPE = "content_type"
    TAXONOMY = "taxonomy"


class CapabilitySlots:
    """Well-known abstract capability slot names."""

    READ: Final[str] = "read"

    CONTENT_TYPE_META: Final[FrozenSet[str]] = frozenset({
        "edit_post",
        "read_post",
        "delete_post",
    })

    TAXONOMY_META: Final[FrozenSet[str]] = frozenset({
        "edit_term",
        "delete_term",
        "assign_term",
    })

    TAXONOMY_DEFAULTS: Final[dict] = {
        "manage_terms": "manage_categories",
        "edit_terms": "manage_categories",
        "delete_terms": "manage_categories",
        "assign_terms": "edit_posts",
    }
