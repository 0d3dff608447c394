"""Value types exchanged between the workflow engine and its collaborators."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from .states import ReviewStatus


class ItemType(str, Enum):
    """Directory entity kinds that can be moderated."""

    EMPLOYEE = "employee"
    ESTABLISHMENT = "establishment"
    COMMENT = "comment"


class RecordKind(str, Enum):
    """The two kinds of reviewable records."""

    SUBMISSION = "submission"        # moderation queue item
    EDIT_PROPOSAL = "edit_proposal"  # proposed field changes to an existing entity

    @property
    def item_types(self) -> FrozenSet[ItemType]:
        """Entity kinds this record kind may target."""
        if self is RecordKind.EDIT_PROPOSAL:
            return frozenset({ItemType.EMPLOYEE, ItemType.ESTABLISHMENT})
        return frozenset(ItemType)


@dataclass(frozen=True)
class ReviewRecord:
    """A moderation queue item or an edit proposal, as seen by the engine."""

    kind: RecordKind
    item_type: ItemType
    item_id: str
    submitted_by: str
    proposed_changes: Dict[str, Any] = field(default_factory=dict)
    current_values: Optional[Dict[str, Any]] = None
    status: ReviewStatus = ReviewStatus.PENDING
    id: Optional[str] = None
    moderator_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def with_status(
        self,
        status: ReviewStatus,
        *,
        reviewed_by: Optional[str],
        reviewed_at: Optional[datetime],
        moderator_notes: Optional[str] = None,
    ) -> "ReviewRecord":
        return replace(
            self,
            status=status,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
            moderator_notes=moderator_notes,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for API responses."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "item_type": self.item_type.value,
            "item_id": self.item_id,
            "status": self.status.value,
            "submitted_by": self.submitted_by,
            "proposed_changes": dict(self.proposed_changes),
            "current_values": dict(self.current_values) if self.current_values is not None else None,
            "moderator_notes": self.moderator_notes,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a submit call."""

    record: ReviewRecord
    auto_approved: bool
