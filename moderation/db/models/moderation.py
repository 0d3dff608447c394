"""Review record models.

``moderation_queue`` holds newly submitted content awaiting a moderator;
``edit_proposals`` holds proposed field changes to existing entities.
Both share the same review columns.
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Text

from moderation.db.base import Base, generate_uuid


class ModerationItem(Base):
    """A submission waiting in the moderation queue."""
    __tablename__ = "moderation_queue"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    # Target entity
    item_type = Column(String(20), nullable=False, index=True)  # employee, establishment, comment
    item_id = Column(String(36), nullable=False, index=True)

    # Snapshot of the submitted content
    proposed_changes = Column(JSON, nullable=False, default=dict)

    # Workflow state
    status = Column(String(20), nullable=False, default="pending", index=True)
    submitted_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Review tracking
    moderator_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    moderator_notes = Column(Text, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    # Timestamps
    submitted_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<ModerationItem {self.item_type}:{self.item_id} [{self.status}]>"


class EditProposal(Base):
    """Proposed field changes to an employee or establishment."""
    __tablename__ = "edit_proposals"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    # Target entity
    item_type = Column(String(20), nullable=False, index=True)  # employee, establishment
    item_id = Column(String(36), nullable=False, index=True)

    # Changes
    proposed_changes = Column(JSON, nullable=False, default=dict)
    current_values = Column(JSON, nullable=True)

    # Workflow state
    status = Column(String(20), nullable=False, default="pending", index=True)
    proposed_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Review tracking
    moderator_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    moderator_notes = Column(Text, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<EditProposal {self.item_type}:{self.item_id} [{self.status}]>"
