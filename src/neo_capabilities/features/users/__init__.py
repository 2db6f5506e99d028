"""Users feature for neo-capabilities.

- entities/: User domain object and the UserStore protocol
- repositories/: In-memory store and the process-wide default
- services/: Role membership checks
"""

from .entities import User, UserStore
from .repositories import InMemoryUserStore, get_user_store, set_user_store
from .services import resolve_user, roles_intersect

__all__ = [
    # Entities
    "User",
    "UserStore",

    # Repositories
    "InMemoryUserStore",
    "get_user_store",
    "set_user_store",

    # Services
    "resolve_user",
    "roles_intersect",
]
