"""User repository implementations."""

from .in_memory_user_store import InMemoryUserStore, get_user_store, set_user_store

__all__ = [
    "InMemoryUserStore",
    "get_user_store",
    "set_user_store",
]
