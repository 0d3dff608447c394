"""In-app notification model."""

from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Boolean, Text

from moderation.db.base import Base, generate_uuid


class NotificationType(str, Enum):
    """Events that produce a user notification."""
    EMPLOYEE_APPROVED = "employee_approved"
    EMPLOYEE_REJECTED = "employee_rejected"
    ESTABLISHMENT_APPROVED = "establishment_approved"
    ESTABLISHMENT_REJECTED = "establishment_rejected"
    COMMENT_APPROVED = "comment_approved"
    COMMENT_REJECTED = "comment_rejected"
    NEW_CONTENT_PENDING = "new_content_pending"
    EDIT_PROPOSAL_SUBMITTED = "edit_proposal_submitted"
    EDIT_PROPOSAL_APPROVED = "edit_proposal_approved"
    EDIT_PROPOSAL_REJECTED = "edit_proposal_rejected"


class Notification(Base):
    """
    A message shown in a user's notification feed.

    ``metadata_`` carries the i18n key and parameters so clients can render
    the message in the reader's language.
    """
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(Text, nullable=True)
    is_read = Column(Boolean, default=False, index=True)
    related_entity_type = Column(String(50), nullable=True)
    related_entity_id = Column(String(36), nullable=True)
    metadata_ = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self) -> str:
        return f"<Notification {self.type} -> {self.user_id}>"
