"""Initial schema: users, directory entities, review records, notifications

Revision ID: 0001
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NOW = sa.text("CURRENT_TIMESTAMP")


def upgrade() -> None:
    """Create all tables."""

    # --- users (no FK deps) ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("pseudonym", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=NOW),
        sa.Column("updated_at", sa.DateTime(), server_default=NOW),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("pseudonym", name="uq_users_pseudonym"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_role", "users", ["role"])

    # --- establishments (FK -> users) ---
    op.create_table(
        "establishments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("zone", sa.String(100), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("website", sa.String(255), nullable=True),
        sa.Column("opening_hours", sa.JSON(), nullable=True),
        sa.Column("services", sa.JSON(), nullable=True),
        sa.Column("logo_url", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_by", sa.String(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=NOW),
        sa.Column("updated_at", sa.DateTime(), server_default=NOW),
        sa.PrimaryKeyConstraint("id", name="pk_establishments"),
        sa.ForeignKeyConstraint(
            ["created_by"], ["users.id"],
            name="fk_establishments_created_by_users", ondelete="SET NULL",
        ),
    )
    op.create_index("ix_establishments_zone", "establishments", ["zone"])
    op.create_index("ix_establishments_status", "establishments", ["status"])

    # --- employees (FK -> users) ---
    op.create_table(
        "employees",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("nickname", sa.String(100), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("nationality", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("photos", sa.JSON(), nullable=True),
        sa.Column("social_media", sa.JSON(), nullable=True),
        sa.Column("is_freelance", sa.Boolean(), server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_by", sa.String(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=NOW),
        sa.Column("updated_at", sa.DateTime(), server_default=NOW),
        sa.PrimaryKeyConstraint("id", name="pk_employees"),
        sa.ForeignKeyConstraint(
            ["created_by"], ["users.id"],
            name="fk_employees_created_by_users", ondelete="SET NULL",
        ),
    )
    op.create_index("ix_employees_status", "employees", ["status"])

    # --- employment_history (FK -> employees, establishments, users) ---
    op.create_table(
        "employment_history",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("employee_id", sa.String(36), nullable=False),
        sa.Column("establishment_id", sa.String(36), nullable=False),
        sa.Column("position", sa.String(100), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("is_current", sa.Boolean(), server_default=sa.true()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=NOW),
        sa.PrimaryKeyConstraint("id", name="pk_employment_history"),
        sa.ForeignKeyConstraint(
            ["employee_id"], ["employees.id"],
            name="fk_employment_history_employee_id_employees", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["establishment_id"], ["establishments.id"],
            name="fk_employment_history_establishment_id_establishments", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["created_by"], ["users.id"],
            name="fk_employment_history_created_by_users", ondelete="SET NULL",
        ),
    )
    op.create_index("ix_employment_history_employee_id", "employment_history", ["employee_id"])
    op.create_index("ix_employment_history_establishment_id", "employment_history", ["establishment_id"])
    op.create_index("ix_employment_history_is_current", "employment_history", ["is_current"])

    # --- comments (FK -> employees, users) ---
    op.create_table(
        "comments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("employee_id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), server_default=NOW),
        sa.Column("updated_at", sa.DateTime(), server_default=NOW),
        sa.PrimaryKeyConstraint("id", name="pk_comments"),
        sa.ForeignKeyConstraint(
            ["employee_id"], ["employees.id"],
            name="fk_comments_employee_id_employees", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_comments_user_id_users", ondelete="SET NULL",
        ),
    )
    op.create_index("ix_comments_employee_id", "comments", ["employee_id"])
    op.create_index("ix_comments_user_id", "comments", ["user_id"])
    op.create_index("ix_comments_status", "comments", ["status"])

    # --- moderation_queue (FK -> users) ---
    op.create_table(
        "moderation_queue",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("item_type", sa.String(20), nullable=False),
        sa.Column("item_id", sa.String(36), nullable=False),
        sa.Column("proposed_changes", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("submitted_by", sa.String(36), nullable=True),
        sa.Column("moderator_id", sa.String(36), nullable=True),
        sa.Column("moderator_notes", sa.Text(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(), server_default=NOW),
        sa.Column("updated_at", sa.DateTime(), server_default=NOW),
        sa.PrimaryKeyConstraint("id", name="pk_moderation_queue"),
        sa.ForeignKeyConstraint(
            ["submitted_by"], ["users.id"],
            name="fk_moderation_queue_submitted_by_users", ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["moderator_id"], ["users.id"],
            name="fk_moderation_queue_moderator_id_users", ondelete="SET NULL",
        ),
    )
    op.create_index("ix_moderation_queue_item_type", "moderation_queue", ["item_type"])
    op.create_index("ix_moderation_queue_item_id", "moderation_queue", ["item_id"])
    op.create_index("ix_moderation_queue_status", "moderation_queue", ["status"])
    op.create_index("ix_moderation_queue_submitted_by", "moderation_queue", ["submitted_by"])
    op.create_index("ix_moderation_queue_submitted_at", "moderation_queue", ["submitted_at"])

    # --- edit_proposals (FK -> users) ---
    op.create_table(
        "edit_proposals",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("item_type", sa.String(20), nullable=False),
        sa.Column("item_id", sa.String(36), nullable=False),
        sa.Column("proposed_changes", sa.JSON(), nullable=False),
        sa.Column("current_values", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("proposed_by", sa.String(36), nullable=True),
        sa.Column("moderator_id", sa.String(36), nullable=True),
        sa.Column("moderator_notes", sa.Text(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=NOW),
        sa.Column("updated_at", sa.DateTime(), server_default=NOW),
        sa.PrimaryKeyConstraint("id", name="pk_edit_proposals"),
        sa.ForeignKeyConstraint(
            ["proposed_by"], ["users.id"],
            name="fk_edit_proposals_proposed_by_users", ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["moderator_id"], ["users.id"],
            name="fk_edit_proposals_moderator_id_users", ondelete="SET NULL",
        ),
    )
    op.create_index("ix_edit_proposals_item_type", "edit_proposals", ["item_type"])
    op.create_index("ix_edit_proposals_item_id", "edit_proposals", ["item_id"])
    op.create_index("ix_edit_proposals_status", "edit_proposals", ["status"])
    op.create_index("ix_edit_proposals_proposed_by", "edit_proposals", ["proposed_by"])
    op.create_index("ix_edit_proposals_created_at", "edit_proposals", ["created_at"])

    # --- notifications (FK -> users) ---
    op.create_table(
        "notifications",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.Text(), nullable=True),
        sa.Column("is_read", sa.Boolean(), server_default=sa.false()),
        sa.Column("related_entity_type", sa.String(50), nullable=True),
        sa.Column("related_entity_id", sa.String(36), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=NOW),
        sa.PrimaryKeyConstraint("id", name="pk_notifications"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_notifications_user_id_users", ondelete="CASCADE",
        ),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_type", "notifications", ["type"])
    op.create_index("ix_notifications_is_read", "notifications", ["is_read"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("notifications")
    op.drop_table("edit_proposals")
    op.drop_table("moderation_queue")
    op.drop_table("comments")
    op.drop_table("employment_history")
    op.drop_table("employees")
    op.drop_table("establishments")
    op.drop_table("users")
