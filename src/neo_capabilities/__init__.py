"""Neo-Capabilities - role-based capability distribution for NeoMultiTenant services.

Grant or deny primitive capabilities, or the capabilities of content types
and taxonomies, to roles. Policies are evaluated on every permission check.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    ALL_ROLES,
    CapabilitySettings,
    ResourceKind,
    get_settings,
    reset_settings,
)

from .core.exceptions import (
    NeoCapabilitiesError,
    ConfigurationError,
    PolicyError,
    PolicyConfigurationError,
    ResourceTypeError,
    ResourceTypeRegistrationError,
    create_error_response,
)

from .features.users import (
    User,
    UserStore,
    InMemoryUserStore,
    get_user_store,
    set_user_store,
    roles_intersect,
)

from .features.resource_types import (
    ResourceType,
    ResourceTypeRegistry,
    InMemoryResourceTypeRegistry,
    ResourcePermissionResolver,
    get_resource_type_registry,
    set_resource_type_registry,
)

from .features.policies import (
    Policy,
    EvaluationRegistry,
    get_evaluation_registry,
    set_evaluation_registry,
    reset_evaluation_registry,
)

__all__ = [
    "__version__",

    # Configuration
    "ALL_ROLES",
    "CapabilitySettings",
    "ResourceKind",
    "get_settings",
    "reset_settings",

    # Exceptions
    "NeoCapabilitiesError",
    "ConfigurationError",
    "PolicyError",
    "PolicyConfigurationError",
    "ResourceTypeError",
    "ResourceTypeRegistrationError",
    "create_error_response",

    # Users
    "User",
    "UserStore",
    "InMemoryUserStore",
    "get_user_store",
    "set_user_store",
    "roles_intersect",

    # Resource Types
    "ResourceType",
    "ResourceTypeRegistry",
    "InMemoryResourceTypeRegistry",
    "ResourcePermissionResolver",
    "get_resource_type_registry",
    "set_resource_type_registry",

    # Policies
    "Policy",
    "EvaluationRegistry",
    "get_evaluation_registry",
    "set_evaluation_registry",
    "reset_evaluation_registry",
]
