"""Review workflow statuses and transitions.

State Machine Diagram:

                 submit (user)
    ┌──────────┐
    │ PENDING  │ ← Initial state (awaiting moderation)
    └────┬─────┘
         │
         ├──────────────────────┐
         │ approve              │ reject (notes required)
    ┌────▼─────┐          ┌─────▼────┐
    │ APPROVED │          │ REJECTED │
    └──────────┘          └──────────┘

    submit (admin/moderator) creates the record directly in APPROVED.

Both terminal statuses have no outgoing transitions: a second review of
the same record is an error, never a silent no-op.
"""

from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple


class ReviewStatus(str, Enum):
    """Statuses of a moderation queue item or an edit proposal."""

    PENDING = "pending"      # Awaiting review
    APPROVED = "approved"    # Changes applied to the target entity
    REJECTED = "rejected"    # Dismissed, target entity untouched


class ReviewTransition(str, Enum):
    """Actions that move a record out of PENDING."""

    APPROVE = "approve"
    REJECT = "reject"


class TransitionRule(NamedTuple):
    """Defines a valid status transition."""
    from_status: ReviewStatus
    to_status: ReviewStatus
    transition: ReviewTransition
    requires_notes: bool = False
    applies_changes: bool = False


TRANSITION_RULES: List[TransitionRule] = [
    TransitionRule(ReviewStatus.PENDING, ReviewStatus.APPROVED, ReviewTransition.APPROVE,
                   requires_notes=False, applies_changes=True),
    TransitionRule(ReviewStatus.PENDING, ReviewStatus.REJECTED, ReviewTransition.REJECT,
                   requires_notes=True, applies_changes=False),
]

TRANSITION_TARGETS: Dict[Tuple[ReviewStatus, ReviewTransition], TransitionRule] = {
    (rule.from_status, rule.transition): rule for rule in TRANSITION_RULES
}


def get_transition_rule(
    from_status: ReviewStatus, transition: ReviewTransition
) -> Optional[TransitionRule]:
    """Get the transition rule for a status/action combination."""
    return TRANSITION_TARGETS.get((from_status, transition))
