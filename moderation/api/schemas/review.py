"""Request and response schemas shared by the review routers."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from moderation.core.workflow import ReviewRecord


class SubmitRequest(BaseModel):
    item_type: str = Field(..., description="employee, establishment or comment")
    item_id: str = Field(..., min_length=1)
    proposed_changes: Dict[str, Any]
    current_values: Optional[Dict[str, Any]] = None


class ReviewAction(BaseModel):
    moderator_notes: Optional[str] = None


class ReviewRecordResponse(BaseModel):
    id: str
    kind: str
    item_type: str
    item_id: str
    status: str
    submitted_by: Optional[str]
    proposed_changes: Dict[str, Any]
    current_values: Optional[Dict[str, Any]] = None
    moderator_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: ReviewRecord) -> "ReviewRecordResponse":
        return cls(**record.to_dict())


class SubmitResponse(BaseModel):
    success: bool = True
    message: str
    auto_approved: bool
    record: ReviewRecordResponse


class ReviewResponse(BaseModel):
    success: bool = True
    message: str
    record: ReviewRecordResponse


class RecordListResponse(BaseModel):
    records: List[ReviewRecordResponse]
    total: int


class PendingByType(BaseModel):
    employee: int = 0
    establishment: int = 0
    comment: int = 0


class StatsResponse(BaseModel):
    total_pending: int
    total_approved: int
    total_rejected: int
    pending_by_type: PendingByType
