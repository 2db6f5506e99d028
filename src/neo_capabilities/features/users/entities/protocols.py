"""Protocol interfaces for the user store collaborator."""

from abc import abstractmethod
from typing import Dict, Optional, Protocol, Union, runtime_checkable

from .user import User


@runtime_checkable
class UserStore(Protocol):
    """Protocol for resolving users and their role capabilities."""

    @abstractmethod
    def get_user(self, id_or_login: Union[int, str]) -> Optional[User]:
        """Resolve a user by numeric ID or login, None when not found."""
        ...

    @abstractmethod
    def get_capabilities(self, user: User) -> Dict[str, bool]:
        """Get the capabilities a user holds through its roles."""
        ...
