"""User roles for the content directory.

Three roles exist:
1. Admin - full moderation access, self-approves submissions and edits
2. Moderator - reviews the queue, self-approves submissions and edits
3. User - contributes content that waits in the moderation queue

Auto-approval eligibility is decided only through ``Role.is_privileged``.
A new role is non-privileged until it is added to ``PRIVILEGED_ROLES``.
"""

from enum import Enum
from typing import FrozenSet


class Role(str, Enum):
    """Roles a directory user can hold."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"

    @property
    def is_privileged(self) -> bool:
        """Whether the role may review content and self-approve."""
        return self in PRIVILEGED_ROLES

    @classmethod
    def parse(cls, value: str) -> "Role":
        """Parse a stored role string, rejecting unknown values."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown role: {value!r}") from None


PRIVILEGED_ROLES: FrozenSet[Role] = frozenset({Role.ADMIN, Role.MODERATOR})


def privileged_role_values() -> list[str]:
    """Stored role strings of every privileged role."""
    return sorted(role.value for role in PRIVILEGED_ROLES)
