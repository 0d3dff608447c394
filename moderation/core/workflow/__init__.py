"""Review workflow module.

Implements the moderation state machine, role-based auto-approval and
the engine that applies approved changes to directory entities.
"""

from .states import ReviewStatus, ReviewTransition, TransitionRule
from .machine import ReviewStateMachine
from .records import ItemType, RecordKind, ReviewRecord, SubmitResult
from .engine import WorkflowEngine

__all__ = [
    "ReviewStatus",
    "ReviewTransition",
    "TransitionRule",
    "ReviewStateMachine",
    "ItemType",
    "RecordKind",
    "ReviewRecord",
    "SubmitResult",
    "WorkflowEngine",
]
