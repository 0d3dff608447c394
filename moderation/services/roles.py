"""Role lookup against the users table."""

from sqlalchemy.orm import Session

from moderation.core.roles import Role
from moderation.db.models import User


class UserNotFoundError(LookupError):
    pass


class UserRoleResolver:
    def __init__(self, db: Session):
        self.db = db

    def get_role(self, user_id: str) -> Role:
        """
        Resolve a user's role.

        Raises:
            UserNotFoundError: No such user
            ValueError: The stored role is not a known role
        """
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return Role.parse(user.role)
