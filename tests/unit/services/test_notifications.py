"""Tests for the notification service."""

import logging
from unittest.mock import patch

from moderation.core.config import Settings
from moderation.core.workflow import ItemType, RecordKind, ReviewRecord, ReviewStatus
from moderation.db.models import Notification
from moderation.services import NotificationService
from tests.factories import create_employee, create_user


def make_record(**overrides) -> ReviewRecord:
    fields = dict(
        kind=RecordKind.SUBMISSION,
        id="rec-1",
        item_type=ItemType.EMPLOYEE,
        item_id="emp-1",
        submitted_by="user-1",
        proposed_changes={"name": "Nok"},
    )
    fields.update(overrides)
    return ReviewRecord(**fields)


def notifications_for(db_session, user_id):
    return db_session.query(Notification).filter(Notification.user_id == user_id).all()


class TestNewSubmission:
    """Test fan-out to reviewers."""

    def test_notifies_every_active_reviewer(self, db_session):
        submitter = create_user(db_session, pseudonym="alice")
        admin = create_user(db_session, role="admin")
        moderator = create_user(db_session, role="moderator")
        inactive = create_user(db_session, role="admin", is_active=False)
        other = create_user(db_session)

        NotificationService(db_session).notify_new_submission(make_record(submitted_by=submitter.id))

        for reviewer in (admin, moderator):
            [notification] = notifications_for(db_session, reviewer.id)
            assert notification.type == "new_content_pending"
            assert notification.link == "/admin/moderation?item=rec-1"
            assert notification.related_entity_type == "employee"
            assert notification.related_entity_id == "rec-1"
            assert "alice" in notification.message
            assert notification.metadata_["i18n_key"] == "notifications.newContentPending"
        assert notifications_for(db_session, inactive.id) == []
        assert notifications_for(db_session, other.id) == []

    def test_edit_proposal_submitted(self, db_session):
        admin = create_user(db_session, role="admin")
        employee = create_employee(db_session, name="Ploy")

        NotificationService(db_session).notify_new_submission(
            make_record(kind=RecordKind.EDIT_PROPOSAL, item_id=employee.id)
        )

        [notification] = notifications_for(db_session, admin.id)
        assert notification.type == "edit_proposal_submitted"
        assert notification.link == "/admin/proposals"
        assert notification.related_entity_type == "edit_proposal"
        assert "Ploy" in notification.message

    def test_no_reviewers(self, db_session, caplog):
        with caplog.at_level(logging.WARNING, logger="moderation"):
            NotificationService(db_session).notify_new_submission(make_record())

        assert db_session.query(Notification).count() == 0
        assert "No admins or moderators" in caplog.text

    def test_one_failing_recipient_does_not_stop_others(self, db_session, caplog):
        create_user(db_session, role="admin")
        create_user(db_session, role="moderator")
        db_session.commit()
        service = NotificationService(db_session)
        original_commit = db_session.commit
        calls = {"n": 0}

        def flaky_commit():
            calls["n"] += 1
            if calls["n"] == 1:
                raise RuntimeError("insert failed")
            original_commit()

        with patch.object(db_session, "commit", side_effect=flaky_commit):
            service.notify_new_submission(make_record())

        assert db_session.query(Notification).count() == 1
        assert "Some reviewer notifications failed" in caplog.text


class TestOutcome:
    """Test approval and rejection notices."""

    def test_approved_submission(self, db_session):
        submitter = create_user(db_session)
        employee = create_employee(db_session, name="Nok")

        NotificationService(db_session).notify_approved(
            make_record(submitted_by=submitter.id, item_id=employee.id, status=ReviewStatus.APPROVED)
        )

        [notification] = notifications_for(db_session, submitter.id)
        assert notification.type == "employee_approved"
        assert notification.link == f"/employee/{employee.id}"
        assert notification.related_entity_id == employee.id
        assert notification.metadata_["i18n_key"] == "notifications.employeeApproved"
        assert notification.metadata_["i18n_params"]["entity_name"] == "Nok"

    def test_approved_edit_proposal(self, db_session):
        submitter = create_user(db_session)

        NotificationService(db_session).notify_approved(
            make_record(kind=RecordKind.EDIT_PROPOSAL, item_type=ItemType.ESTABLISHMENT, submitted_by=submitter.id)
        )

        [notification] = notifications_for(db_session, submitter.id)
        assert notification.type == "edit_proposal_approved"

    def test_rejected_comment_carries_notes(self, db_session):
        submitter = create_user(db_session)

        NotificationService(db_session).notify_rejected(
            make_record(item_type=ItemType.COMMENT, item_id="cmt-1", submitted_by=submitter.id),
            "Offensive language",
        )

        [notification] = notifications_for(db_session, submitter.id)
        assert notification.type == "comment_rejected"
        assert "Offensive language" in notification.message
        assert notification.metadata_["i18n_params"]["reason"] == "Offensive language"
        assert notification.link is None

    def test_rejected_edit_proposal(self, db_session):
        submitter = create_user(db_session)

        NotificationService(db_session).notify_rejected(
            make_record(kind=RecordKind.EDIT_PROPOSAL, submitted_by=submitter.id),
            "Not accurate",
        )

        [notification] = notifications_for(db_session, submitter.id)
        assert notification.type == "edit_proposal_rejected"

    def test_link_base(self, db_session):
        submitter = create_user(db_session)
        settings = Settings(notification_link_base="https://directory.example/")

        NotificationService(db_session, settings).notify_approved(
            make_record(submitted_by=submitter.id, item_id="emp-9")
        )

        [notification] = notifications_for(db_session, submitter.id)
        assert notification.link == "https://directory.example/employee/emp-9"

    def test_missing_recipient_is_skipped(self, db_session, caplog):
        NotificationService(db_session).notify_approved(make_record(submitted_by=None))

        assert db_session.query(Notification).count() == 0
        assert "without recipient" in caplog.text
