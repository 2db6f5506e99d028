"""User domain entity for neo-capabilities.

A user as seen by the policy engine: an identifier and an ordered list of
assigned role names.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class User:
    """Domain entity representing a user and the roles assigned to it."""

    id: int = 0
    login: Optional[str] = None
    roles: List[str] = field(default_factory=list)

    def exists(self) -> bool:
        """Check if the user is backed by a stored record."""
        return self.id > 0

    def has_role(self, role: str) -> bool:
        """Check if a role is assigned to this user."""
        return role in self.roles

    def add_role(self, role: str) -> None:
        """Assign a role, keeping the list free of duplicates."""
        if role not in self.roles:
            self.roles.append(role)

    def remove_role(self, role: str) -> None:
        """Remove a role if it is assigned."""
        if role in self.roles:
            self.roles.remove(role)

    def __str__(self) -> str:
        return f"User({self.id})"
