"""Review workflow engine.

Orchestrates role lookup, record persistence, entity mutation and
notifications for moderation queue items and edit proposals. One engine
instance serves one record kind; both kinds share the same state machine.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from .errors import (
    AlreadyReviewedError,
    ApplyChangesError,
    CreateRecordError,
    FetchError,
    NotFoundError,
    RoleLookupError,
    StatusUpdateError,
    UnsupportedEntityTypeError,
    ValidationError,
    WorkflowError,
)
from .interfaces import (
    EntityMutator,
    NotificationDispatcher,
    ReviewStore,
    RoleResolver,
    UnitOfWork,
)
from .machine import ReviewStateMachine
from .records import ItemType, RecordKind, ReviewRecord, SubmitResult
from .states import ReviewStatus, ReviewTransition, TransitionRule

logger = logging.getLogger(__name__)

AUTO_APPROVE_NOTE = "Auto-approved (admin/moderator edit)"


def _utc_now() -> datetime:
    return datetime.utcnow()


class WorkflowEngine:
    """
    Submission and review workflow for one kind of review record.

    Handles:
    - Creating records, auto-approving for privileged roles
    - Approving (applies changes to the target entity) and rejecting
    - Listing records and queue statistics

    Every operation is sequential: store write, then entity mutation,
    then status update, then commit, then notification. Notifications are
    best-effort and never fail an operation.
    """

    def __init__(
        self,
        *,
        kind: RecordKind,
        store: ReviewStore,
        role_resolver: RoleResolver,
        mutator: EntityMutator,
        notifier: NotificationDispatcher,
        unit_of_work: Optional[UnitOfWork] = None,
        auto_approve_note: str = AUTO_APPROVE_NOTE,
    ):
        self.kind = kind
        self._store = store
        self._roles = role_resolver
        self._mutator = mutator
        self._notifier = notifier
        self._uow = unit_of_work
        self._auto_approve_note = auto_approve_note

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(
        self,
        actor_id: str,
        item_type: Union[ItemType, str],
        item_id: str,
        proposed_changes: Mapping[str, Any],
        current_values: Optional[Mapping[str, Any]] = None,
    ) -> SubmitResult:
        """
        Create a record, auto-approving it when the actor is privileged.

        Raises:
            ValidationError: Missing or malformed input (no store access)
            RoleLookupError: The actor's role could not be resolved
            CreateRecordError: The store rejected the new record
            ApplyChangesError: Auto-approval could not apply the changes
        """
        item_type = self._validate_submission(actor_id, item_type, item_id, proposed_changes, current_values)

        role = self._resolve_role(actor_id)

        record = ReviewRecord(
            kind=self.kind,
            item_type=item_type,
            item_id=item_id,
            submitted_by=actor_id,
            proposed_changes=dict(proposed_changes),
            current_values=dict(current_values) if current_values is not None else None,
        )

        if role.is_privileged:
            return self._submit_auto_approved(record, actor_id)

        created = self._create(record)
        self._commit(CreateRecordError, created)
        logger.info(
            f"{self.kind.value} {created.id} for {item_type.value} {item_id} "
            f"submitted by {actor_id}, awaiting review"
        )
        self._dispatch("notify_new_submission", created)
        return SubmitResult(record=created, auto_approved=False)

    def _submit_auto_approved(self, record: ReviewRecord, actor_id: str) -> SubmitResult:
        pre_approved = record.with_status(
            ReviewStatus.APPROVED,
            reviewed_by=actor_id,
            reviewed_at=_utc_now(),
            moderator_notes=self._auto_approve_note,
        )
        created = self._create(pre_approved)
        self._apply(created)
        self._commit(ApplyChangesError, created)
        logger.info(
            f"{self.kind.value} {created.id} for {created.item_type.value} {created.item_id} "
            f"auto-approved for {actor_id}"
        )
        self._dispatch("notify_approved", created)
        return SubmitResult(record=created, auto_approved=True)

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def approve(self, reviewer_id: str, record_id: str, notes: Optional[str] = None) -> ReviewRecord:
        """
        Approve a pending record and apply its changes.

        Raises:
            NotFoundError: No record with this id
            AlreadyReviewedError: The record is not pending
            ApplyChangesError: The entity mutation failed; status stays pending
            StatusUpdateError: The status update failed after the mutation
        """
        if not reviewer_id:
            raise ValidationError("reviewer_id is required")

        record = self.get(record_id)
        rule = ReviewStateMachine(record.id, record.status).check(ReviewTransition.APPROVE, notes=notes)
        updated = self._review(record, rule, reviewer_id, notes)

        logger.info(f"{self.kind.value} {record.id} approved by {reviewer_id}")
        self._dispatch("notify_approved", updated)
        return updated

    def reject(self, reviewer_id: str, record_id: str, notes: Optional[str]) -> ReviewRecord:
        """
        Reject a pending record. The target entity is never touched.

        Raises:
            ValidationError: Notes missing or blank (no store access)
            NotFoundError: No record with this id
            AlreadyReviewedError: The record is not pending
            StatusUpdateError: The status update failed
        """
        if not reviewer_id:
            raise ValidationError("reviewer_id is required")
        if not notes or not notes.strip():
            raise ValidationError("Moderator notes are required for rejection")

        record = self.get(record_id)
        rule = ReviewStateMachine(record.id, record.status).check(ReviewTransition.REJECT, notes=notes)
        updated = self._review(record, rule, reviewer_id, notes)

        logger.info(f"{self.kind.value} {record.id} rejected by {reviewer_id}")
        self._dispatch("notify_rejected", updated, notes)
        return updated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, record_id: str) -> ReviewRecord:
        """Fetch one record by id."""
        if not record_id:
            raise ValidationError("record_id is required")
        try:
            record = self._store.get_by_id(record_id)
        except WorkflowError:
            raise
        except Exception as exc:
            raise FetchError(f"Failed to fetch {self.kind.value} {record_id}: {exc}") from exc
        if record is None:
            raise NotFoundError(f"{self.kind.value} {record_id} not found", record_id=record_id)
        return record

    def list(
        self,
        status: Optional[Union[ReviewStatus, str]] = None,
        item_type: Optional[Union[ItemType, str]] = None,
    ) -> List[ReviewRecord]:
        """List records matching every supplied filter, newest first."""
        status_filter = self._parse_status(status) if status else None
        type_filter = self._parse_item_type(item_type) if item_type else None
        try:
            return self._store.list(status=status_filter, item_type=type_filter)
        except WorkflowError:
            raise
        except Exception as exc:
            raise FetchError(f"Failed to list {self.kind.value} records: {exc}") from exc

    def list_mine(self, actor_id: str) -> List[ReviewRecord]:
        """List the records submitted by an actor, newest first."""
        if not actor_id:
            raise ValidationError("actor_id is required")
        try:
            return self._store.list_by_actor(actor_id)
        except WorkflowError:
            raise
        except Exception as exc:
            raise FetchError(f"Failed to list {self.kind.value} records of {actor_id}: {exc}") from exc

    def stats(self) -> Dict[str, Any]:
        """Counts per status and pending counts per item type."""
        try:
            by_status = self._store.count_by_status()
            pending_by_type = self._store.count_pending_by_type()
        except WorkflowError:
            raise
        except Exception as exc:
            raise FetchError(f"Failed to count {self.kind.value} records: {exc}") from exc

        return {
            "total_pending": by_status.get(ReviewStatus.PENDING, 0),
            "total_approved": by_status.get(ReviewStatus.APPROVED, 0),
            "total_rejected": by_status.get(ReviewStatus.REJECTED, 0),
            "pending_by_type": {
                item_type.value: pending_by_type.get(item_type, 0)
                for item_type in sorted(self.kind.item_types, key=lambda t: t.value)
            },
        }

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _validate_submission(self, actor_id, item_type, item_id, proposed_changes, current_values) -> ItemType:
        if not actor_id:
            raise ValidationError("actor_id is required")
        parsed_type = self._parse_item_type(item_type)
        if not item_id:
            raise ValidationError("item_id is required")
        if not isinstance(proposed_changes, Mapping) or not proposed_changes:
            raise ValidationError("proposed_changes must be a non-empty mapping")
        if current_values is not None and not isinstance(current_values, Mapping):
            raise ValidationError("current_values must be a mapping")
        return parsed_type

    def _parse_item_type(self, item_type: Union[ItemType, str, None]) -> ItemType:
        try:
            parsed = ItemType(item_type)
        except ValueError:
            raise ValidationError(f"Unknown item_type: {item_type!r}") from None
        if parsed not in self.kind.item_types:
            raise ValidationError(f"item_type {parsed.value} is not accepted for {self.kind.value}")
        return parsed

    @staticmethod
    def _parse_status(status: Union[ReviewStatus, str]) -> ReviewStatus:
        try:
            return ReviewStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown status: {status!r}") from None

    def _resolve_role(self, actor_id: str):
        try:
            return self._roles.get_role(actor_id)
        except Exception as exc:
            logger.error(f"Role lookup failed for {actor_id}: {exc}")
            raise RoleLookupError(f"Failed to resolve role of {actor_id}: {exc}", actor_id=actor_id) from exc

    def _create(self, record: ReviewRecord) -> ReviewRecord:
        try:
            return self._store.create(record)
        except Exception as exc:
            self._rollback()
            logger.error(
                f"Failed to create {self.kind.value} for {record.item_type.value} {record.item_id}: {exc}"
            )
            raise CreateRecordError(
                f"Failed to create {self.kind.value}: {exc}",
                item_type=record.item_type.value,
                item_id=record.item_id,
            ) from exc

    def _review(
        self,
        record: ReviewRecord,
        rule: TransitionRule,
        reviewer_id: str,
        notes: Optional[str],
    ) -> ReviewRecord:
        """Carry out a checked transition and commit it."""
        if rule.applies_changes:
            self._apply(record)
        updated = self._update_status(record, rule.to_status, reviewer_id, notes)
        self._commit(StatusUpdateError, record)
        return updated

    def _apply(self, record: ReviewRecord) -> Dict[str, Any]:
        """Run the single entity mutation of an approval."""
        try:
            if self.kind is RecordKind.EDIT_PROPOSAL:
                return self._mutator.apply(record.item_type, record.item_id, record.proposed_changes)
            return self._mutator.activate(
                record.item_type, record.item_id, record.proposed_changes, record.submitted_by
            )
        except Exception as exc:
            self._rollback()
            self._log_reconciliation("apply changes", record, exc)
            if isinstance(exc, UnsupportedEntityTypeError):
                raise
            raise ApplyChangesError(
                f"Failed to apply {self.kind.value} {record.id}: {exc}",
                record_id=record.id,
                item_type=record.item_type.value,
                item_id=record.item_id,
            ) from exc

    def _update_status(
        self,
        record: ReviewRecord,
        status: ReviewStatus,
        reviewer_id: str,
        notes: Optional[str],
    ) -> ReviewRecord:
        try:
            return self._store.update_status(record.id, status, reviewer_id, notes)
        except AlreadyReviewedError:
            # Lost a race with a concurrent review
            self._rollback()
            logger.warning(f"{self.kind.value} {record.id} was reviewed concurrently")
            raise
        except Exception as exc:
            self._rollback()
            self._log_reconciliation(f"mark {status.value}", record, exc)
            raise StatusUpdateError(
                f"Failed to mark {self.kind.value} {record.id} {status.value}: {exc}",
                record_id=record.id,
                item_type=record.item_type.value,
                item_id=record.item_id,
            ) from exc

    def _commit(self, error_cls: Type[WorkflowError], record: ReviewRecord) -> None:
        if self._uow is None:
            return
        try:
            self._uow.commit()
        except Exception as exc:
            self._rollback()
            self._log_reconciliation("commit", record, exc)
            raise error_cls(
                f"Failed to commit {self.kind.value} {record.id}: {exc}",
                record_id=record.id,
                item_type=record.item_type.value,
                item_id=record.item_id,
            ) from exc

    def _rollback(self) -> None:
        if self._uow is None:
            return
        try:
            self._uow.rollback()
        except Exception:
            logger.exception("Rollback failed")

    def _log_reconciliation(self, step: str, record: ReviewRecord, exc: Exception) -> None:
        logger.error(
            f"Reconciliation required: failed to {step} for {self.kind.value} {record.id} "
            f"(item_type={record.item_type.value}, item_id={record.item_id}, status={record.status.value}): {exc}"
        )

    def _dispatch(self, method: str, *args: Any) -> None:
        """Call the notifier, logging and swallowing any failure."""
        try:
            getattr(self._notifier, method)(*args)
        except Exception:
            logger.exception(f"Notification {method} failed for {self.kind.value} {args[0].id}")
