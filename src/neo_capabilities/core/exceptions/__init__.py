"""Exceptions module for neo-capabilities."""

from .base import (
    NeoCapabilitiesError,
    create_error_response,
)

from .domain import (
    ConfigurationError,
    PolicyError,
    PolicyConfigurationError,
    ResourceTypeError,
    ResourceTypeRegistrationError,
)

__all__ = [
    "NeoCapabilitiesError",
    "create_error_response",
    "ConfigurationError",
    "PolicyError",
    "PolicyConfigurationError",
    "ResourceTypeError",
    "ResourceTypeRegistrationError",
]
