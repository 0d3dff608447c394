"""SQLAlchemy review stores.

Both stores share one session with the entity mutators; nothing here
commits. ``SqlUnitOfWork`` is the commit boundary handed to the engine.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from moderation.core.workflow.errors import AlreadyReviewedError, NotFoundError
from moderation.core.workflow.records import ItemType, RecordKind, ReviewRecord
from moderation.core.workflow.states import ReviewStatus
from moderation.db.models import EditProposal, ModerationItem

logger = logging.getLogger(__name__)


class SqlReviewStore:
    """
    Review store over one review table.

    Subclasses name the model and the columns that differ between the
    moderation queue and the edit proposal table.
    """

    kind: RecordKind
    model: Any
    actor_column: str
    created_column: str

    def __init__(self, db: Session):
        self.db = db

    @property
    def _actor(self):
        return getattr(self.model, self.actor_column)

    @property
    def _created(self):
        return getattr(self.model, self.created_column)

    def create(self, record: ReviewRecord) -> ReviewRecord:
        row = self.model(
            item_type=record.item_type.value,
            item_id=record.item_id,
            proposed_changes=dict(record.proposed_changes),
            status=record.status.value,
            moderator_id=record.reviewed_by,
            moderator_notes=record.moderator_notes,
            reviewed_at=record.reviewed_at,
            **{self.actor_column: record.submitted_by},
            **self._extra_columns(record),
        )
        self.db.add(row)
        self.db.flush()
        logger.debug(f"Created {self.kind.value} {row.id} [{row.status}]")
        return self._to_record(row)

    def get_by_id(self, record_id: str) -> Optional[ReviewRecord]:
        row = self.db.query(self.model).filter(self.model.id == record_id).first()
        return self._to_record(row) if row else None

    def update_status(
        self,
        record_id: str,
        status: ReviewStatus,
        reviewer_id: str,
        notes: Optional[str],
    ) -> ReviewRecord:
        """
        Move a pending record to ``status``.

        The update is conditional on the stored status still being pending,
        so of two concurrent reviews only one succeeds.

        Raises:
            NotFoundError: No record with this id
            AlreadyReviewedError: The record left pending in the meantime
        """
        now = datetime.utcnow()
        updated = (
            self.db.query(self.model)
            .filter(
                and_(
                    self.model.id == record_id,
                    self.model.status == ReviewStatus.PENDING.value,
                )
            )
            .update(
                {
                    self.model.status: status.value,
                    self.model.moderator_id: reviewer_id,
                    self.model.moderator_notes: notes,
                    self.model.reviewed_at: now,
                    self.model.updated_at: now,
                },
                synchronize_session=False,
            )
        )

        row = self.db.query(self.model).filter(self.model.id == record_id).first()
        if row is None:
            raise NotFoundError(f"{self.kind.value} {record_id} not found", record_id=record_id)
        self.db.refresh(row)
        if not updated:
            raise AlreadyReviewedError(
                f"{self.kind.value} {record_id} is already {row.status}",
                record_id=record_id,
                status=row.status,
            )
        return self._to_record(row)

    def list(
        self,
        *,
        status: Optional[ReviewStatus] = None,
        item_type: Optional[ItemType] = None,
    ) -> List[ReviewRecord]:
        query = self.db.query(self.model)
        if status is not None:
            query = query.filter(self.model.status == status.value)
        if item_type is not None:
            query = query.filter(self.model.item_type == item_type.value)
        return [self._to_record(row) for row in query.order_by(self._created.desc()).all()]

    def list_by_actor(self, actor_id: str) -> List[ReviewRecord]:
        rows = (
            self.db.query(self.model)
            .filter(self._actor == actor_id)
            .order_by(self._created.desc())
            .all()
        )
        return [self._to_record(row) for row in rows]

    def count_by_status(self) -> Dict[ReviewStatus, int]:
        rows = (
            self.db.query(self.model.status, func.count(self.model.id))
            .group_by(self.model.status)
            .all()
        )
        return {ReviewStatus(status): count for status, count in rows}

    def count_pending_by_type(self) -> Dict[ItemType, int]:
        rows = (
            self.db.query(self.model.item_type, func.count(self.model.id))
            .filter(self.model.status == ReviewStatus.PENDING.value)
            .group_by(self.model.item_type)
            .all()
        )
        return {ItemType(item_type): count for item_type, count in rows}

    def _extra_columns(self, record: ReviewRecord) -> Dict[str, Any]:
        return {}

    def _to_record(self, row) -> ReviewRecord:
        return ReviewRecord(
            kind=self.kind,
            id=row.id,
            item_type=ItemType(row.item_type),
            item_id=row.item_id,
            submitted_by=getattr(row, self.actor_column),
            proposed_changes=dict(row.proposed_changes or {}),
            current_values=self._current_values(row),
            status=ReviewStatus(row.status),
            moderator_notes=row.moderator_notes,
            reviewed_by=row.moderator_id,
            reviewed_at=row.reviewed_at,
            created_at=getattr(row, self.created_column),
        )

    def _current_values(self, row) -> Optional[Dict[str, Any]]:
        return None


class ModerationQueueStore(SqlReviewStore):
    kind = RecordKind.SUBMISSION
    model = ModerationItem
    actor_column = "submitted_by"
    created_column = "submitted_at"


class EditProposalStore(SqlReviewStore):
    kind = RecordKind.EDIT_PROPOSAL
    model = EditProposal
    actor_column = "proposed_by"
    created_column = "created_at"

    def _extra_columns(self, record: ReviewRecord) -> Dict[str, Any]:
        return {
            "current_values": dict(record.current_values) if record.current_values is not None else None,
        }

    def _current_values(self, row) -> Optional[Dict[str, Any]]:
        return dict(row.current_values) if row.current_values is not None else None


class SqlUnitOfWork:
    """Commit boundary of one engine operation."""

    def __init__(self, db: Session):
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
