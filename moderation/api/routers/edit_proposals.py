"""Edit proposal endpoints: crowd-sourced changes to existing entities."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from moderation.api.deps import get_current_user, get_edit_proposal_engine, require_privileged
from moderation.api.schemas.review import (
    RecordListResponse,
    ReviewAction,
    ReviewRecordResponse,
    ReviewResponse,
    SubmitRequest,
    SubmitResponse,
)
from moderation.core.workflow import WorkflowEngine
from moderation.db.models import User

router = APIRouter(prefix="/edit-proposals", tags=["edit-proposals"])


@router.post("", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED)
async def create_proposal(
    body: SubmitRequest,
    engine: WorkflowEngine = Depends(get_edit_proposal_engine),
    current_user: User = Depends(get_current_user),
):
    """Propose changes; edits by admins and moderators apply immediately."""
    result = engine.submit(
        current_user.id,
        body.item_type,
        body.item_id,
        body.proposed_changes,
        body.current_values,
    )
    return SubmitResponse(
        message="Changes applied immediately" if result.auto_approved else "Edit proposal submitted for review",
        auto_approved=result.auto_approved,
        record=ReviewRecordResponse.from_record(result.record),
    )


@router.get("", response_model=RecordListResponse)
async def list_proposals(
    engine: WorkflowEngine = Depends(get_edit_proposal_engine),
    current_user: User = Depends(require_privileged),
    status_filter: Optional[str] = Query(None, alias="status", description="pending, approved or rejected"),
    item_type: Optional[str] = Query(None),
):
    """List edit proposals, newest first."""
    records = engine.list(status=status_filter, item_type=item_type)
    return RecordListResponse(
        records=[ReviewRecordResponse.from_record(r) for r in records],
        total=len(records),
    )


@router.get("/my", response_model=RecordListResponse)
async def list_my_proposals(
    engine: WorkflowEngine = Depends(get_edit_proposal_engine),
    current_user: User = Depends(get_current_user),
):
    """List the caller's own proposals."""
    records = engine.list_mine(current_user.id)
    return RecordListResponse(
        records=[ReviewRecordResponse.from_record(r) for r in records],
        total=len(records),
    )


@router.get("/{record_id}", response_model=ReviewRecordResponse)
async def get_proposal(
    record_id: str,
    engine: WorkflowEngine = Depends(get_edit_proposal_engine),
    current_user: User = Depends(require_privileged),
):
    return ReviewRecordResponse.from_record(engine.get(record_id))


@router.post("/{record_id}/approve", response_model=ReviewResponse)
async def approve_proposal(
    record_id: str,
    action: Optional[ReviewAction] = None,
    engine: WorkflowEngine = Depends(get_edit_proposal_engine),
    current_user: User = Depends(require_privileged),
):
    """Approve a pending proposal and apply its changes."""
    notes = action.moderator_notes if action else None
    record = engine.approve(current_user.id, record_id, notes)
    return ReviewResponse(message="Proposal approved and changes applied", record=ReviewRecordResponse.from_record(record))


@router.post("/{record_id}/reject", response_model=ReviewResponse)
async def reject_proposal(
    record_id: str,
    action: ReviewAction,
    engine: WorkflowEngine = Depends(get_edit_proposal_engine),
    current_user: User = Depends(require_privileged),
):
    """Reject a pending proposal. Moderator notes are required."""
    record = engine.reject(current_user.id, record_id, action.moderator_notes)
    return ReviewResponse(message="Proposal rejected", record=ReviewRecordResponse.from_record(record))
