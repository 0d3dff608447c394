"""Review state machine implementation.

Validates a single transition of a queue item or edit proposal against
the declared transition rules.
"""

from typing import Optional

from .errors import AlreadyReviewedError, ValidationError
from .states import ReviewStatus, ReviewTransition, TransitionRule, get_transition_rule


class ReviewStateMachine:
    """
    State machine for one review record.

    The machine is built from the record's current status and resolves
    the rule a transition follows. It performs no I/O; the workflow engine
    applies the rule and persists the outcome.
    """

    def __init__(self, record_id: str, current_status: ReviewStatus):
        self.record_id = record_id
        self.status = ReviewStatus(current_status)

    def check(self, transition: ReviewTransition, *, notes: Optional[str] = None) -> TransitionRule:
        """
        Validate a transition and return its rule.

        Raises:
            AlreadyReviewedError: If the record is not in a status the
                transition starts from
            ValidationError: If the transition requires notes and none
                were given
        """
        rule = get_transition_rule(self.status, transition)
        if rule is None:
            raise AlreadyReviewedError(
                f"Cannot {transition.value} record {self.record_id} in status {self.status.value}",
                record_id=self.record_id,
                status=self.status.value,
            )

        if rule.requires_notes and not (notes and notes.strip()):
            raise ValidationError(
                f"Transition {transition.value} requires moderator notes",
                record_id=self.record_id,
            )

        return rule
