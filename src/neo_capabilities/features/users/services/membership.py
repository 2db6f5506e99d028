"""Role membership checks."""

from typing import Any, Optional, Union

from ..entities.protocols import UserStore
from ..entities.user import User
from ..repositories import get_user_store
from ....utils import as_list


def resolve_user(
    user: Union[User, int, str, None],
    users: Optional[UserStore] = None
) -> Optional[User]:
    """Resolve a user ID or login to a User; pass User instances through.

    Returns None when the user cannot be found or does not exist.
    """
    if not isinstance(user, User):
        if user is None:
            return None
        store = users if users is not None else get_user_store()
        user = store.get_user(user)

    if user is None or not user.exists():
        return None

    return user


def roles_intersect(
    user: Union[User, int, str, None],
    roles: Any,
    users: Optional[UserStore] = None
) -> bool:
    """Whether a user holds any of the given roles.

    Args:
        user: User instance, ID or login
        roles: Role name or names to check
        users: Store used to resolve IDs; defaults to the process-wide store

    Returns:
        True if the user exists and shares at least one role with ``roles``
    """
    resolved = resolve_user(user, users)
    if resolved is None:
        return False

    wanted = as_list(roles)
    return any(role in wanted for role in resolved.roles)
