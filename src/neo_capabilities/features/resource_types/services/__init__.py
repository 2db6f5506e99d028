"""Resource type services package."""

from .resolver import ResourcePermissionResolver

__all__ = [
    "ResourcePermissionResolver",
]
