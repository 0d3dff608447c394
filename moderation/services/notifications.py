"""In-app notifications for review outcomes.

Handles:
- Fan-out to admins and moderators when new content or an edit awaits review
- Approval and rejection notices addressed to the submitter

Every notification is its own committed row; a failing recipient is logged
and skipped. Nothing raised here reaches the workflow engine's caller.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from moderation.core.config import Settings, get_settings
from moderation.core.roles import privileged_role_values
from moderation.core.workflow.records import ItemType, RecordKind, ReviewRecord
from moderation.db.models import Employee, Establishment, Notification, NotificationType, User

logger = logging.getLogger(__name__)


NOTIFICATION_TEMPLATES: Dict[NotificationType, Dict[str, str]] = {
    NotificationType.NEW_CONTENT_PENDING: {
        "title": "New {item_type} pending review",
        "message": "{submitter} submitted {item_type} \"{entity_name}\" for review.",
        "i18n_key": "notifications.newContentPending",
    },
    NotificationType.EDIT_PROPOSAL_SUBMITTED: {
        "title": "New edit proposal",
        "message": "{submitter} proposed changes to {item_type} \"{entity_name}\".",
        "i18n_key": "notifications.editProposalSubmitted",
    },
    NotificationType.EDIT_PROPOSAL_APPROVED: {
        "title": "Edit approved",
        "message": "Your changes to {item_type} \"{entity_name}\" were approved.",
        "i18n_key": "notifications.editProposalApproved",
    },
    NotificationType.EDIT_PROPOSAL_REJECTED: {
        "title": "Edit rejected",
        "message": "Your changes to {item_type} \"{entity_name}\" were rejected: {reason}",
        "i18n_key": "notifications.editProposalRejected",
    },
}

for _item_type in ItemType:
    _label = _item_type.value.capitalize()
    _key = _item_type.value
    NOTIFICATION_TEMPLATES[NotificationType(f"{_key}_approved")] = {
        "title": f"{_label} approved",
        "message": "Your {item_type} \"{entity_name}\" is now live.",
        "i18n_key": f"notifications.{_key}Approved",
    }
    NOTIFICATION_TEMPLATES[NotificationType(f"{_key}_rejected")] = {
        "title": f"{_label} rejected",
        "message": "Your {item_type} \"{entity_name}\" was rejected: {reason}",
        "i18n_key": f"notifications.{_key}Rejected",
    }


class NotificationService:
    """
    Notification dispatcher backed by the notifications table.

    Called by the workflow engine after its own commit, so the rows written
    here are committed separately.
    """

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    def notify_new_submission(self, record: ReviewRecord) -> None:
        """Notify every active admin and moderator that a record awaits review."""
        if record.kind is RecordKind.EDIT_PROPOSAL:
            event_type = NotificationType.EDIT_PROPOSAL_SUBMITTED
            link = "/admin/proposals"
        else:
            event_type = NotificationType.NEW_CONTENT_PENDING
            link = f"/admin/moderation?item={record.id}"

        reviewers = self._reviewers()
        if not reviewers:
            logger.warning(f"No admins or moderators to notify about {record.kind.value} {record.id}")
            return

        context = self._build_context(record)
        sent = 0
        for reviewer in reviewers:
            if self._create_notification(
                user_id=reviewer.id,
                event_type=event_type,
                context=context,
                link=link,
                related_entity_type=record.kind.value if record.kind is RecordKind.EDIT_PROPOSAL else record.item_type.value,
                related_entity_id=record.id,
            ):
                sent += 1

        if sent < len(reviewers):
            logger.warning(
                f"Some reviewer notifications failed for {record.kind.value} {record.id}: "
                f"{len(reviewers) - sent} of {len(reviewers)}"
            )
        logger.info(f"Notified {sent} reviewers about {record.kind.value} {record.id}")

    def notify_approved(self, record: ReviewRecord) -> None:
        """Tell the submitter that their record was approved."""
        if record.kind is RecordKind.EDIT_PROPOSAL:
            event_type = NotificationType.EDIT_PROPOSAL_APPROVED
        else:
            event_type = NotificationType(f"{record.item_type.value}_approved")

        self._create_notification(
            user_id=record.submitted_by,
            event_type=event_type,
            context=self._build_context(record),
            link=f"/{record.item_type.value}/{record.item_id}",
            related_entity_type=record.item_type.value,
            related_entity_id=record.item_id,
        )

    def notify_rejected(self, record: ReviewRecord, notes: str) -> None:
        """Tell the submitter that their record was rejected, with the moderator's notes."""
        if record.kind is RecordKind.EDIT_PROPOSAL:
            event_type = NotificationType.EDIT_PROPOSAL_REJECTED
        else:
            event_type = NotificationType(f"{record.item_type.value}_rejected")

        context = self._build_context(record)
        context["reason"] = notes
        self._create_notification(
            user_id=record.submitted_by,
            event_type=event_type,
            context=context,
            link=None,
            related_entity_type=record.item_type.value,
            related_entity_id=record.item_id,
        )

    def _reviewers(self) -> List[User]:
        return (
            self.db.query(User)
            .filter(
                User.role.in_(privileged_role_values()),
                User.is_active.is_(True),
            )
            .all()
        )

    def _build_context(self, record: ReviewRecord) -> Dict[str, Any]:
        submitter = self.db.query(User).filter(User.id == record.submitted_by).first()
        return {
            "item_type": record.item_type.value,
            "entity_name": self._entity_name(record),
            "submitter": submitter.pseudonym if submitter else "Someone",
            "reason": "",
        }

    def _entity_name(self, record: ReviewRecord) -> str:
        model = {
            ItemType.EMPLOYEE: Employee,
            ItemType.ESTABLISHMENT: Establishment,
        }.get(record.item_type)
        if model is not None:
            entity = self.db.query(model).filter(model.id == record.item_id).first()
            if entity is not None:
                return entity.name
        return str(record.proposed_changes.get("name") or record.item_id)

    def _create_notification(
        self,
        *,
        user_id: Optional[str],
        event_type: NotificationType,
        context: Dict[str, Any],
        link: Optional[str],
        related_entity_type: Optional[str],
        related_entity_id: Optional[str],
    ) -> bool:
        """Write and commit one notification. Returns False on failure."""
        if not user_id:
            logger.warning(f"Skipping {event_type.value} notification without recipient")
            return False

        template = NOTIFICATION_TEMPLATES[event_type]
        try:
            notification = Notification(
                user_id=user_id,
                type=event_type.value,
                title=template["title"].format(**context),
                message=template["message"].format(**context),
                link=self._full_link(link),
                related_entity_type=related_entity_type,
                related_entity_id=related_entity_id,
                metadata_={
                    "i18n_key": template["i18n_key"],
                    "i18n_params": {k: v for k, v in context.items() if v},
                },
            )
            self.db.add(notification)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create {event_type.value} notification for {user_id}: {e}")
            return False

        logger.info(f"User {user_id} notified: {event_type.value}")
        return True

    def _full_link(self, link: Optional[str]) -> Optional[str]:
        if link and self.settings.notification_link_base:
            return self.settings.notification_link_base.rstrip("/") + link
        return link
