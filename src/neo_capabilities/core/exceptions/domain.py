"""Domain-specific exceptions for neo-capabilities."""

from .base import NeoCapabilitiesError


# Configuration Errors
class ConfigurationError(NeoCapabilitiesError):
    """Raised when there's a configuration issue."""
    pass


# Policy Errors
class PolicyError(NeoCapabilitiesError):
    """Base class for policy-related errors."""
    pass


class PolicyConfigurationError(PolicyError):
    """Raised when a policy is constructed or configured incorrectly."""
    pass


# Resource Type Errors
class ResourceTypeError(NeoCapabilitiesError):
    """Base class for resource type errors."""
    pass


class ResourceTypeRegistrationError(ResourceTypeError):
    """Raised when a resource type cannot be registered."""
    pass
