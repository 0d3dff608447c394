"""Wiring of the workflow engine onto one database session."""

from typing import Optional

from sqlalchemy.orm import Session

from moderation.core.config import Settings, get_settings
from moderation.core.workflow import RecordKind, WorkflowEngine
from moderation.mutators import build_registry

from .notifications import NotificationService
from .roles import UserRoleResolver
from .stores import EditProposalStore, ModerationQueueStore, SqlUnitOfWork

STORES = {
    RecordKind.SUBMISSION: ModerationQueueStore,
    RecordKind.EDIT_PROPOSAL: EditProposalStore,
}


def build_engine(kind: RecordKind, db: Session, settings: Optional[Settings] = None) -> WorkflowEngine:
    """Engine for one record kind whose collaborators share ``db``."""
    settings = settings or get_settings()
    return WorkflowEngine(
        kind=kind,
        store=STORES[kind](db),
        role_resolver=UserRoleResolver(db),
        mutator=build_registry(db),
        notifier=NotificationService(db, settings),
        unit_of_work=SqlUnitOfWork(db),
        auto_approve_note=settings.auto_approve_note,
    )
