"""Database models for the moderation service."""

from moderation.db.models.user import User
from moderation.db.models.entities import Comment, Employee, EmploymentHistory, Establishment
from moderation.db.models.moderation import EditProposal, ModerationItem
from moderation.db.models.notification import Notification, NotificationType

__all__ = [
    "User",
    "Employee",
    "Establishment",
    "EmploymentHistory",
    "Comment",
    "ModerationItem",
    "EditProposal",
    "Notification",
    "NotificationType",
]
