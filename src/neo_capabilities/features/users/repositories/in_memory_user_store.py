"""In-memory UserStore implementation.

Holds role definitions (role name -> capability map) and users. Used as the
process-wide default store and as the test double for hosts without a
persistent user backend.
"""

import itertools
import logging
import threading
from typing import Dict, Iterable, List, Optional, Union

from ..entities.protocols import UserStore
from ..entities.user import User
from ....utils import as_list

logger = logging.getLogger(__name__)


class InMemoryUserStore(UserStore):
    """Thread-safe in-memory store for roles and users."""

    def __init__(self):
        self._roles: Dict[str, Dict[str, bool]] = {}
        self._users: Dict[int, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    # Roles

    def add_role(
        self,
        name: str,
        capabilities: Union[Dict[str, bool], Iterable[str], None] = None
    ) -> None:
        """Define a role, replacing any existing definition with that name."""
        if isinstance(capabilities, dict):
            caps = {str(cap): bool(granted) for cap, granted in capabilities.items()}
        else:
            caps = {cap: True for cap in as_list(capabilities)}

        with self._lock:
            self._roles[name] = caps
        logger.debug(f"Defined role '{name}' with {len(caps)} capabilities")

    def remove_role(self, name: str) -> bool:
        """Delete a role definition. Users keep the name in their role list."""
        with self._lock:
            return self._roles.pop(name, None) is not None

    def role_names(self) -> List[str]:
        """Get all defined role names in definition order."""
        with self._lock:
            return list(self._roles)

    def get_role_capabilities(self, name: str) -> Dict[str, bool]:
        """Get a copy of a role's capability map, empty for unknown roles."""
        with self._lock:
            return dict(self._roles.get(name, {}))

    def add_role_capability(self, name: str, capability: str, granted: bool = True) -> None:
        """Add or overwrite a single capability on an existing role."""
        with self._lock:
            if name in self._roles:
                self._roles[name][capability] = granted

    def remove_role_capability(self, name: str, capability: str) -> None:
        """Remove a single capability from a role."""
        with self._lock:
            if name in self._roles:
                self._roles[name].pop(capability, None)

    # Users

    def create_user(self, login: Optional[str] = None, roles: Iterable[str] = ()) -> User:
        """Create and store a user with the given roles."""
        with self._lock:
            user_id = next(self._ids)
            user = User(id=user_id, login=login or f"user{user_id}")
            for role in as_list(roles):
                user.add_role(role)
            self._users[user_id] = user
        return user

    def add_user_role(self, user: Union[User, int, str], role: str) -> bool:
        """Give a stored user another role. Returns False for unknown users."""
        with self._lock:
            if not isinstance(user, User):
                user = self.get_user(user)
            if user is None or self._users.get(user.id) is not user:
                return False
            user.add_role(role)
        return True

    def delete_user(self, user_id: int) -> bool:
        """Remove a user from the store."""
        with self._lock:
            return self._users.pop(user_id, None) is not None

    def get_user(self, id_or_login: Union[int, str]) -> Optional[User]:
        """Resolve a user by numeric ID or login."""
        with self._lock:
            if isinstance(id_or_login, bool):
                return None
            if isinstance(id_or_login, int):
                return self._users.get(id_or_login)
            if isinstance(id_or_login, str):
                if id_or_login.isdigit():
                    return self._users.get(int(id_or_login))
                for user in self._users.values():
                    if user.login == id_or_login:
                        return user
        return None

    def get_capabilities(self, user: User) -> Dict[str, bool]:
        """Merge the capability maps of the user's roles, in role order."""
        allcaps: Dict[str, bool] = {}
        with self._lock:
            for role in user.roles:
                allcaps.update(self._roles.get(role, {}))
        return allcaps

    def clear(self) -> None:
        """Remove every role and user."""
        with self._lock:
            self._roles.clear()
            self._users.clear()
            self._ids = itertools.count(1)


_user_store_instance: Optional[UserStore] = None


def get_user_store() -> UserStore:
    """Get the process-wide user store, creating an in-memory one on first use."""
    global _user_store_instance
    if _user_store_instance is None:
        _user_store_instance = InMemoryUserStore()
    return _user_store_instance


def set_user_store(store: Optional[UserStore]) -> None:
    """Replace the process-wide user store. None resets to a fresh default."""
    global _user_store_instance
    _user_store_instance = store
