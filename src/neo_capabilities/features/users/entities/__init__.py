"""User entities package."""

from .user import User
from .protocols import UserStore

__all__ = [
    "User",
    "UserStore",
]
