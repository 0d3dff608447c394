"""Error taxonomy of the review workflow.

Every error kind carries a fixed HTTP status and a fixed public message.
Internal detail (``detail``, ``context``) is kept for logging only and is
never shown to API callers.
"""

from typing import Any, Dict, Optional


class WorkflowError(Exception):
    """Base class for all workflow failures."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None, **context: Any):
        super().__init__(detail or self.message)
        self.detail = detail or self.message
        self.context: Dict[str, Any] = context


# Nothing happened: input or state rejected before any write

class ValidationError(WorkflowError):
    """Missing or malformed input."""
    status_code = 400
    message = "Invalid request"


class UnauthorizedError(WorkflowError):
    """No resolvable actor."""
    status_code = 401
    message = "Unauthorized"


class ForbiddenError(WorkflowError):
    """Actor resolved but not allowed to review."""
    status_code = 403
    message = "Forbidden"


class NotFoundError(WorkflowError):
    """Record absent from the store."""
    status_code = 404
    message = "Record not found"


class AlreadyReviewedError(WorkflowError):
    """Record is no longer pending."""
    status_code = 400
    message = "Record already reviewed"


# Collaborator failures

class RoleLookupError(WorkflowError):
    """The actor's role could not be resolved."""
    message = "Failed to verify user role"


class FetchError(WorkflowError):
    """The store failed while reading records."""
    message = "Failed to fetch records"


class CreateRecordError(WorkflowError):
    """The store failed to persist a new record."""
    message = "Failed to create record"


class ApplyChangesError(WorkflowError):
    """The entity mutator failed; partial state may exist."""
    message = "Failed to apply changes"


class StatusUpdateError(WorkflowError):
    """The status update failed after a successful mutation."""
    message = "Failed to update record status"


class UnsupportedEntityTypeError(WorkflowError):
    """No mutator is registered for the item type."""
    message = "Unsupported entity type"
