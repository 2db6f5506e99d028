"""User services package."""

from .membership import resolve_user, roles_intersect

__all__ = [
    "resolve_user",
    "roles_intersect",
]
