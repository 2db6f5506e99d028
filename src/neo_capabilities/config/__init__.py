"""Configuration module for neo-capabilities.

Constants, environment-driven settings and logging setup.
"""

from .constants import (
    ALL_ROLES,
    CapabilitySlots,
    PolicyDefaults,
    ResourceKind,
    TargetRoles,
)

from .settings import (
    CapabilitySettings,
    get_settings,
    reset_settings,
)

from .logging_config import (
    setup_logging,
    get_logger,
    LogVerbosity,
    LogFormat,
    LoggingConfig,
)

__all__ = [
    # Constants
    "ALL_ROLES",
    "CapabilitySlots",
    "PolicyDefaults",
    "ResourceKind",
    "TargetRoles",

    # Settings
    "CapabilitySettings",
    "get_settings",
    "reset_settings",

    # Logging
    "setup_logging",
    "get_logger",
    "LogVerbosity",
    "LogFormat",
    "LoggingConfig",
]
