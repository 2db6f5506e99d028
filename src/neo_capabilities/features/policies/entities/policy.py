"""Policy domain entity for neo-capabilities.

A policy grants or denies capabilities to roles. It is configured fluently
and registered with the evaluation registry as soon as it is created:

    Policy.deny_to_all() \\
        .caps_for("post") \\
        .then_grant_to("editor") \\
        .except_for("delete_posts") \\
        .then_grant_to("administrator")

The capability map a policy contributes is computed on every permission
check from its current configuration and the live resource type registry.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Union

from ....config.constants import ALL_ROLES, ResourceKind, TargetRoles
from ....config.settings import get_settings
from ....core.exceptions import PolicyConfigurationError
from ....utils import as_list, unique
from ...resource_types.entities.protocols import ResourceTypeRegistry
from ...resource_types.services.resolver import ResourcePermissionResolver
from ...users.entities.protocols import UserStore
from ...users.services.membership import resolve_user, roles_intersect
from ..services.chain import chain_policy
from ..services.evaluation_registry import EvaluationRegistry, get_evaluation_registry

logger = logging.getLogger(__name__)

RoleTarget = Union[List[str], TargetRoles]


class Policy:
    """Fluently distribute capabilities to roles.

    Configuration calls and priority moves hold a per-policy lock. Setters
    replace their list rather than mutating it, so evaluation reads a
    consistent value without locking.
    """

    def __init__(
        self,
        target_roles: Any,
        allow: bool,
        priority: Optional[int] = None,
        *,
        registry: Optional[EvaluationRegistry] = None,
        resource_types: Optional[ResourceTypeRegistry] = None,
        users: Optional[UserStore] = None
    ):
        """
        Set up and register a policy.

        Prefer the grant_to(), deny_to(), grant_to_all() and deny_to_all()
        factories.

        Args:
            target_roles: Role name or names, or ALL_ROLES
            allow: Whether capabilities are granted (True) or denied (False)
            priority: Evaluation priority; defaults to the configured baseline
            registry: Evaluation registry to join; defaults to the process-wide one
            resource_types: Resource type registry; defaults to the process-wide one
            users: User store; defaults to the process-wide one

        Raises:
            PolicyConfigurationError: If roles are None or not strings, or priority is not an int
        """
        self._target_roles: RoleTarget = self._validate_roles(target_roles)
        self._allow = bool(allow)

        self._primitives: List[str] = []
        self._content_types: List[str] = []
        self._taxonomies: List[str] = []
        self._exceptions: List[str] = []
        self._only: List[str] = []

        self._registry = registry if registry is not None else get_evaluation_registry()
        self._resource_types = resource_types
        self._users = users
        self._resolver = ResourcePermissionResolver(resource_types)
        self._lock = threading.RLock()

        if priority is None:
            priority = get_settings().default_priority
        self._add_filter(self._validate_priority(priority))

    # Factories

    @classmethod
    def grant_to(cls, roles: Any, **collaborators) -> "Policy":
        """Start a policy that grants capabilities to roles."""
        return cls(roles, True, **collaborators)

    @classmethod
    def grant_to_all(cls, **collaborators) -> "Policy":
        """Start a policy that grants capabilities to all roles."""
        return cls(ALL_ROLES, True, **collaborators)

    @classmethod
    def deny_to(cls, roles: Any, **collaborators) -> "Policy":
        """Start a policy that denies capabilities to roles."""
        return cls(roles, False, **collaborators)

    @classmethod
    def deny_to_all(cls, **collaborators) -> "Policy":
        """Start a policy that denies capabilities to all roles."""
        return cls(ALL_ROLES, False, **collaborators)

    # Fluent configuration

    def primitives(self, primitives: Any) -> "Policy":
        """Add primitive capabilities to grant or deny."""
        with self._lock:
            self._primitives = unique(self._primitives + as_list(primitives))
        return self

    def caps_for(self, names: Any) -> "Policy":
        """
        Add content types or taxonomies whose capabilities are granted or denied.

        Content types and taxonomies rarely share a name, so each name is
        tried as both. Should they share one, use caps_for_content_type() or
        caps_for_taxonomy() to disambiguate.
        """
        return self.caps_for_content_type(names).caps_for_taxonomy(names)

    def caps_for_content_type(self, names: Any) -> "Policy":
        """Add content types whose capabilities are granted or denied."""
        with self._lock:
            self._content_types = unique(self._content_types + as_list(names))
        return self

    def caps_for_taxonomy(self, names: Any) -> "Policy":
        """Add taxonomies whose capabilities are granted or denied."""
        with self._lock:
            self._taxonomies = unique(self._taxonomies + as_list(names))
        return self

    def except_for(self, slots: Any) -> "Policy":
        """
        Set resource type slots that get the opposite of this policy's polarity.

        Slots are the generic names a resource type maps to concrete
        capabilities. For a content type with capability type "book", pass
        "edit_published_posts", not "edit_published_books".
        """
        with self._lock:
            self._exceptions = as_list(slots)
        return self

    def only(self, slots: Any) -> "Policy":
        """
        Set the only resource type slots that get this policy's polarity.

        Every other resolved slot gets the opposite. Slots are generic names,
        as for except_for().
        """
        with self._lock:
            self._only = as_list(slots)
        return self

    def at_priority(self, priority: int) -> "Policy":
        """Move this policy to another priority, behind anything already there."""
        priority = self._validate_priority(priority)
        with self._lock:
            previous = self._priority
            self._registry.unregister(self.filter_user_capabilities, previous)
            self._add_filter(priority)
        logger.debug(f"Moved {self!r} from priority {previous}")
        return self

    def then_grant_to(self, roles: Any) -> "Policy":
        """
        Chain a policy that grants this policy's capabilities to other roles.

            Policy.deny_to_all() \\
                .caps_for("post") \\
                .then_grant_to("editor") \\
                .except_for("delete_posts")

        Returns:
            The new policy; further configuration applies to it
        """
        return chain_policy(self, Policy.grant_to(roles, **self._collaborators()))

    def then_deny_to(self, roles: Any) -> "Policy":
        """
        Chain a policy that denies this policy's capabilities to other roles.

            Policy.grant_to_all() \\
                .caps_for("post") \\
                .then_deny_to(["subscriber", "contributor"])

        Returns:
            The new policy; further configuration applies to it
        """
        return chain_policy(self, Policy.deny_to(roles, **self._collaborators()))

    def remove(self) -> bool:
        """Stop applying this policy to permission checks."""
        with self._lock:
            return self._registry.unregister(self.filter_user_capabilities, self._priority)

    # Evaluation

    def filter_user_capabilities(
        self,
        allcaps: Dict[str, bool],
        caps: Any,
        args: Any,
        user: Any
    ) -> Dict[str, bool]:
        """
        Dynamically filter a user's capabilities.

        Args:
            allcaps: All the user's capabilities so far
            caps: Primitive capabilities being checked
            args: Extra arguments of the check, typically an object ID
            user: The user being checked

        Returns:
            The updated capability map
        """
        return self.evaluate(allcaps, user)

    def evaluate(self, allcaps: Dict[str, bool], user: Any) -> Dict[str, bool]:
        """Merge this policy's map over ``allcaps`` if it applies to the user."""
        if self._applies_to(user):
            return {**allcaps, **self.get_map()}
        return allcaps

    def get_map(self) -> Dict[str, bool]:
        """Get the capabilities this policy grants or denies, and their status."""
        result: Dict[str, bool] = dict.fromkeys(self._primitives, self._allow)

        for kind, names in (
            (ResourceKind.CONTENT_TYPE, self._content_types),
            (ResourceKind.TAXONOMY, self._taxonomies),
        ):
            for name in names:
                result.update(
                    self._resolver.capability_map(
                        kind, name, self._allow, self._only, self._exceptions
                    )
                )

        return result

    @staticmethod
    def users_roles_intersect(user: Any, roles: Any, users: Optional[UserStore] = None) -> bool:
        """Whether a user has any of the given roles."""
        return roles_intersect(user, roles, users)

    # Accessors

    @property
    def target_roles(self) -> RoleTarget:
        return self._target_roles if self.targets_all_roles else list(self._target_roles)

    @property
    def targets_all_roles(self) -> bool:
        return self._target_roles is ALL_ROLES

    @property
    def allow(self) -> bool:
        return self._allow

    @property
    def priority(self) -> int:
        return self._priority

    @property
    def registry(self) -> EvaluationRegistry:
        return self._registry

    def get_primitives(self) -> List[str]:
        return list(self._primitives)

    def get_content_types(self) -> List[str]:
        return list(self._content_types)

    def get_taxonomies(self) -> List[str]:
        return list(self._taxonomies)

    def get_resource_types(self) -> List[str]:
        """Content type and taxonomy names, without duplicates."""
        return unique(self._content_types + self._taxonomies)

    def get_exceptions(self) -> List[str]:
        return list(self._exceptions)

    def get_only(self) -> List[str]:
        return list(self._only)

    # Internals

    def _applies_to(self, user: Any) -> bool:
        if self.targets_all_roles:
            resolved = resolve_user(user, self._users)
            return resolved is not None and len(resolved.roles) > 0
        return roles_intersect(user, self._target_roles, self._users)

    def _add_filter(self, priority: int) -> None:
        self._priority = priority
        self._registry.register(self.filter_user_capabilities, self._priority)

    def _collaborators(self) -> Dict[str, Any]:
        return {
            "registry": self._registry,
            "resource_types": self._resource_types,
            "users": self._users,
        }

    @staticmethod
    def _validate_roles(target_roles: Any) -> RoleTarget:
        if target_roles is ALL_ROLES:
            return ALL_ROLES

        if target_roles is None:
            raise PolicyConfigurationError(
                "A policy needs a role list, or ALL_ROLES",
                details={"target_roles": repr(target_roles)}
            )

        # An empty list is allowed; the policy then matches nobody
        roles = unique(as_list(target_roles))
        invalid = [role for role in roles if not isinstance(role, str) or not role]
        if invalid:
            raise PolicyConfigurationError(
                f"Role names must be non-empty strings: {invalid!r}",
                details={"target_roles": repr(target_roles)}
            )

        return roles

    @staticmethod
    def _validate_priority(priority: Any) -> int:
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise PolicyConfigurationError(
                f"Priority must be an integer, got: {priority!r}",
                details={"priority": repr(priority)}
            )
        return priority

    def __repr__(self) -> str:
        verb = "grant" if self._allow else "deny"
        roles = "all" if self.targets_all_roles else ",".join(self._target_roles) or "nobody"
        return f"Policy({verb} to {roles}, priority={self._priority})"
