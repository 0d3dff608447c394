"""Database-backed collaborators of the workflow engine."""

from .factory import build_engine
from .notifications import NotificationService
from .roles import UserRoleResolver
from .stores import EditProposalStore, ModerationQueueStore, SqlReviewStore, SqlUnitOfWork

__all__ = [
    "build_engine",
    "NotificationService",
    "UserRoleResolver",
    "SqlReviewStore",
    "ModerationQueueStore",
    "EditProposalStore",
    "SqlUnitOfWork",
]
