from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from moderation.core.config import get_settings
from moderation.core.roles import Role
from moderation.core.security import decode_token
from moderation.core.workflow import RecordKind, WorkflowEngine
from moderation.core.workflow.errors import ForbiddenError, UnauthorizedError
from moderation.db.models import User
from moderation.db.session import SessionLocal
from moderation.services import build_engine

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """Get current authenticated user from the bearer JWT."""
    if credentials is None:
        raise UnauthorizedError("Missing bearer token")

    user_id = decode_token(credentials.credentials)
    if not user_id:
        raise UnauthorizedError("Invalid or expired token")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise UnauthorizedError(f"Unknown or inactive user {user_id}")
    return user


def require_privileged(current_user: User = Depends(get_current_user)) -> User:
    """Only admins and moderators may review or list every record."""
    try:
        privileged = Role.parse(current_user.role).is_privileged
    except ValueError:
        privileged = False
    if not privileged:
        raise ForbiddenError(f"User {current_user.id} with role {current_user.role} may not review")
    return current_user


def get_moderation_engine(db: Session = Depends(get_db)) -> WorkflowEngine:
    return build_engine(RecordKind.SUBMISSION, db, get_settings())


def get_edit_proposal_engine(db: Session = Depends(get_db)) -> WorkflowEngine:
    return build_engine(RecordKind.EDIT_PROPOSAL, db, get_settings())
