"""End-to-end review flows through the HTTP API and the SQL collaborators."""

import pytest

from moderation.db.models import (
    Comment,
    EditProposal,
    Employee,
    EmploymentHistory,
    Establishment,
    ModerationItem,
    Notification,
)
from tests.factories import (
    create_employee,
    create_employment,
    create_establishment,
    create_user,
)


pytestmark = pytest.mark.integration


@pytest.fixture
def people(db_session):
    """A regular user, an admin and a moderator."""
    users = {
        "user": create_user(db_session, pseudonym="alice"),
        "admin": create_user(db_session, pseudonym="root", role="admin"),
        "moderator": create_user(db_session, pseudonym="mod", role="moderator"),
    }
    db_session.commit()
    return users


def notification_types(db_session, user):
    return sorted(
        n.type for n in db_session.query(Notification).filter(Notification.user_id == user.id).all()
    )


class TestEditProposalFlow:

    def test_user_proposal_approved_by_moderator(self, client, db_session, people, auth_headers):
        employee = create_employee(db_session, name="Old Name", nickname="Ploy")
        db_session.commit()
        employee_id = employee.id

        response = client.post(
            "/api/edit-proposals",
            json={
                "item_type": "employee",
                "item_id": employee_id,
                "proposed_changes": {"name": "New Name"},
                "current_values": {"name": "Old Name"},
            },
            headers=auth_headers(people["user"]),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["auto_approved"] is False
        assert body["message"] == "Edit proposal submitted for review"
        assert body["record"]["status"] == "pending"
        proposal_id = body["record"]["id"]

        # Nothing applied yet; every reviewer was told
        db_session.expire_all()
        assert db_session.get(Employee, employee_id).name == "Old Name"
        assert notification_types(db_session, people["admin"]) == ["edit_proposal_submitted"]
        assert notification_types(db_session, people["moderator"]) == ["edit_proposal_submitted"]

        response = client.post(
            f"/api/edit-proposals/{proposal_id}/approve",
            json={"moderator_notes": "Verified"},
            headers=auth_headers(people["moderator"]),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Proposal approved and changes applied"
        assert body["record"]["status"] == "approved"
        assert body["record"]["reviewed_by"] == people["moderator"].id

        db_session.expire_all()
        employee = db_session.get(Employee, employee_id)
        assert employee.name == "New Name"
        assert employee.nickname == "Ploy"
        assert notification_types(db_session, people["user"]) == ["edit_proposal_approved"]

        # A second review is refused and changes nothing
        response = client.post(
            f"/api/edit-proposals/{proposal_id}/reject",
            json={"moderator_notes": "Changed my mind"},
            headers=auth_headers(people["admin"]),
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Record already reviewed"}
        db_session.expire_all()
        assert db_session.get(EditProposal, proposal_id).status == "approved"

    def test_admin_edit_applies_immediately(self, client, db_session, people, auth_headers):
        employee = create_employee(db_session, name="Old Name")
        db_session.commit()
        employee_id = employee.id

        response = client.post(
            "/api/edit-proposals",
            json={"item_type": "employee", "item_id": employee_id, "proposed_changes": {"name": "New Name"}},
            headers=auth_headers(people["admin"]),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["auto_approved"] is True
        assert body["message"] == "Changes applied immediately"
        assert body["record"]["status"] == "approved"
        assert body["record"]["moderator_notes"] == "Auto-approved (admin/moderator edit)"

        db_session.expire_all()
        assert db_session.get(Employee, employee_id).name == "New Name"
        assert notification_types(db_session, people["admin"]) == ["edit_proposal_approved"]
        assert notification_types(db_session, people["moderator"]) == []

    def test_failed_auto_approval_leaves_no_record(self, client, db_session, people, auth_headers):
        response = client.post(
            "/api/edit-proposals",
            json={"item_type": "establishment", "item_id": "missing", "proposed_changes": {"name": "X"}},
            headers=auth_headers(people["admin"]),
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to apply changes"}
        db_session.expire_all()
        assert db_session.query(EditProposal).count() == 0

    def test_proposal_without_writable_fields_cannot_be_approved(self, client, db_session, people, auth_headers):
        establishment = create_establishment(db_session, status="pending")
        db_session.commit()
        establishment_id = establishment.id

        response = client.post(
            "/api/edit-proposals",
            json={"item_type": "establishment", "item_id": establishment_id, "proposed_changes": {"status": "approved"}},
            headers=auth_headers(people["user"]),
        )
        proposal_id = response.json()["record"]["id"]

        response = client.post(f"/api/edit-proposals/{proposal_id}/approve", headers=auth_headers(people["admin"]))

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to apply changes"}
        db_session.expire_all()
        assert db_session.get(EditProposal, proposal_id).status == "pending"
        assert db_session.get(Establishment, establishment_id).status == "pending"

    def test_rejection_keeps_entity(self, client, db_session, people, auth_headers):
        establishment = create_establishment(db_session, name="Bar One", category="Bar")
        db_session.commit()
        establishment_id = establishment.id

        response = client.post(
            "/api/edit-proposals",
            json={"item_type": "establishment", "item_id": establishment_id, "proposed_changes": {"name": "Bar Two"}},
            headers=auth_headers(people["user"]),
        )
        proposal_id = response.json()["record"]["id"]

        response = client.post(
            f"/api/edit-proposals/{proposal_id}/reject",
            json={"moderator_notes": "Name is correct as is"},
            headers=auth_headers(people["admin"]),
        )

        assert response.status_code == 200
        assert response.json()["record"]["moderator_notes"] == "Name is correct as is"
        db_session.expire_all()
        assert db_session.get(Establishment, establishment_id).name == "Bar One"
        assert notification_types(db_session, people["user"]) == ["edit_proposal_rejected"]

    def test_employee_move_through_proposal(self, client, db_session, people, auth_headers):
        old = create_establishment(db_session)
        new = create_establishment(db_session)
        employee = create_employee(db_session)
        create_employment(db_session, employee=employee, establishment=old)
        db_session.commit()
        employee_id, new_id = employee.id, new.id

        response = client.post(
            "/api/edit-proposals",
            json={
                "item_type": "employee",
                "item_id": employee_id,
                "proposed_changes": {"current_establishment_id": new_id},
            },
            headers=auth_headers(people["moderator"]),
        )

        assert response.status_code == 201
        db_session.expire_all()
        current = (
            db_session.query(EmploymentHistory)
            .filter(EmploymentHistory.employee_id == employee_id, EmploymentHistory.is_current.is_(True))
            .all()
        )
        assert [job.establishment_id for job in current] == [new_id]

    def test_listing(self, client, db_session, people, auth_headers):
        employee = create_employee(db_session)
        db_session.commit()
        employee_id = employee.id

        for name in ("A", "B"):
            client.post(
                "/api/edit-proposals",
                json={"item_type": "employee", "item_id": employee_id, "proposed_changes": {"name": name}},
                headers=auth_headers(people["user"]),
            )

        mine = client.get("/api/edit-proposals/my", headers=auth_headers(people["user"])).json()
        assert mine["total"] == 2

        pending = client.get(
            "/api/edit-proposals?status=pending&item_type=employee",
            headers=auth_headers(people["admin"]),
        ).json()
        assert pending["total"] == 2

        approved = client.get("/api/edit-proposals?status=approved", headers=auth_headers(people["admin"])).json()
        assert approved["total"] == 0

        record_id = mine["records"][0]["id"]
        response = client.get(f"/api/edit-proposals/{record_id}", headers=auth_headers(people["admin"]))
        assert response.status_code == 200
        assert response.json()["id"] == record_id


class TestModerationQueueFlow:

    def test_comment_submission_published_on_approval(self, client, db_session, people, auth_headers):
        employee = create_employee(db_session, name="Nok")
        db_session.commit()
        employee_id = employee.id

        response = client.post(
            "/api/moderation",
            json={
                "item_type": "comment",
                "item_id": "cmt-1",
                "proposed_changes": {
                    "employee_id": employee_id,
                    "content": "Very kind",
                    "rating": 5,
                },
            },
            headers=auth_headers(people["user"]),
        )
        assert response.status_code == 201
        assert response.json()["auto_approved"] is False
        item_id = response.json()["record"]["id"]
        db_session.expire_all()
        assert db_session.get(Comment, "cmt-1") is None
        assert notification_types(db_session, people["admin"]) == ["new_content_pending"]

        response = client.post(f"/api/moderation/{item_id}/approve", headers=auth_headers(people["admin"]))

        assert response.status_code == 200
        assert response.json()["message"] == "Item approved successfully"
        db_session.expire_all()
        comment = db_session.get(Comment, "cmt-1")
        assert comment.status == "approved"
        assert comment.content == "Very kind"
        assert comment.user_id == people["user"].id
        assert notification_types(db_session, people["user"]) == ["comment_approved"]

    def test_published_content_is_authored_by_submitter(self, client, db_session, people, auth_headers):
        """An author named in the submitted fields never overrides the submitter."""
        other = create_user(db_session, pseudonym="bob")
        employee = create_employee(db_session, name="Nok")
        db_session.commit()
        other_id, employee_id, submitter_id = other.id, employee.id, people["user"].id

        comment_item = client.post(
            "/api/moderation",
            json={
                "item_type": "comment",
                "item_id": "c-1",
                "proposed_changes": {"employee_id": employee_id, "user_id": other_id, "content": "forged"},
            },
            headers=auth_headers(people["user"]),
        ).json()["record"]["id"]
        employee_item = client.post(
            "/api/moderation",
            json={"item_type": "employee", "item_id": "e-new", "proposed_changes": {"name": "Fresh"}},
            headers=auth_headers(people["user"]),
        ).json()["record"]["id"]

        for item_id in (comment_item, employee_item):
            response = client.post(f"/api/moderation/{item_id}/approve", headers=auth_headers(people["admin"]))
            assert response.status_code == 200

        db_session.expire_all()
        assert db_session.get(Comment, "c-1").user_id == submitter_id
        assert db_session.get(Employee, "e-new").created_by == submitter_id

    def test_admin_submission_is_authored_by_admin(self, client, db_session, people, auth_headers):
        admin_id = people["admin"].id

        response = client.post(
            "/api/moderation",
            json={"item_type": "establishment", "item_id": "est-admin", "proposed_changes": {"name": "Club Nine"}},
            headers=auth_headers(people["admin"]),
        )

        assert response.status_code == 201
        assert response.json()["auto_approved"] is True
        db_session.expire_all()
        establishment = db_session.get(Establishment, "est-admin")
        assert establishment.status == "approved"
        assert establishment.created_by == admin_id

    def test_pending_establishment_rejected(self, client, db_session, people, auth_headers):
        establishment = create_establishment(db_session, name="New Club", status="pending")
        db_session.commit()
        establishment_id = establishment.id

        response = client.post(
            "/api/moderation",
            json={"item_type": "establishment", "item_id": establishment_id, "proposed_changes": {"name": "New Club"}},
            headers=auth_headers(people["user"]),
        )
        item_id = response.json()["record"]["id"]

        response = client.post(
            f"/api/moderation/{item_id}/reject",
            json={"moderator_notes": "Closed permanently"},
            headers=auth_headers(people["moderator"]),
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Item rejected successfully"
        db_session.expire_all()
        assert db_session.get(Establishment, establishment_id).status == "pending"
        assert db_session.get(ModerationItem, item_id).status == "rejected"
        assert notification_types(db_session, people["user"]) == ["establishment_rejected"]

    def test_stats(self, client, db_session, people, auth_headers):
        employee = create_employee(db_session, status="pending")
        db_session.commit()
        employee_id = employee.id

        client.post(
            "/api/moderation",
            json={"item_type": "employee", "item_id": employee_id, "proposed_changes": {"name": "Mint"}},
            headers=auth_headers(people["user"]),
        )
        client.post(
            "/api/moderation",
            json={"item_type": "employee", "item_id": employee_id, "proposed_changes": {"name": "Mint"}},
            headers=auth_headers(people["admin"]),
        )

        response = client.get("/api/moderation/stats", headers=auth_headers(people["moderator"]))

        assert response.status_code == 200
        assert response.json() == {
            "total_pending": 1,
            "total_approved": 1,
            "total_rejected": 0,
            "pending_by_type": {"employee": 1, "establishment": 0, "comment": 0},
        }
