"""Moderation queue endpoints: submissions of new content."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from moderation.api.deps import get_current_user, get_moderation_engine, require_privileged
from moderation.api.schemas.review import (
    RecordListResponse,
    ReviewAction,
    ReviewRecordResponse,
    ReviewResponse,
    StatsResponse,
    SubmitRequest,
    SubmitResponse,
)
from moderation.core.workflow import WorkflowEngine
from moderation.db.models import User

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.post("", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_item(
    body: SubmitRequest,
    engine: WorkflowEngine = Depends(get_moderation_engine),
    current_user: User = Depends(get_current_user),
):
    """Queue new content for review; admins and moderators publish directly."""
    result = engine.submit(current_user.id, body.item_type, body.item_id, body.proposed_changes)
    return SubmitResponse(
        message="Content published" if result.auto_approved else "Content submitted for review",
        auto_approved=result.auto_approved,
        record=ReviewRecordResponse.from_record(result.record),
    )


@router.get("", response_model=RecordListResponse)
async def list_items(
    engine: WorkflowEngine = Depends(get_moderation_engine),
    current_user: User = Depends(require_privileged),
    status_filter: Optional[str] = Query(None, alias="status", description="pending, approved or rejected"),
    item_type: Optional[str] = Query(None),
):
    """List queue items, newest first."""
    records = engine.list(status=status_filter, item_type=item_type)
    return RecordListResponse(
        records=[ReviewRecordResponse.from_record(r) for r in records],
        total=len(records),
    )


@router.get("/my", response_model=RecordListResponse)
async def list_my_items(
    engine: WorkflowEngine = Depends(get_moderation_engine),
    current_user: User = Depends(get_current_user),
):
    """List the caller's own submissions."""
    records = engine.list_mine(current_user.id)
    return RecordListResponse(
        records=[ReviewRecordResponse.from_record(r) for r in records],
        total=len(records),
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    engine: WorkflowEngine = Depends(get_moderation_engine),
    current_user: User = Depends(require_privileged),
):
    """Queue counts per status and pending counts per item type."""
    return StatsResponse(**engine.stats())


@router.get("/{record_id}", response_model=ReviewRecordResponse)
async def get_item(
    record_id: str,
    engine: WorkflowEngine = Depends(get_moderation_engine),
    current_user: User = Depends(require_privileged),
):
    return ReviewRecordResponse.from_record(engine.get(record_id))


@router.post("/{record_id}/approve", response_model=ReviewResponse)
async def approve_item(
    record_id: str,
    action: Optional[ReviewAction] = None,
    engine: WorkflowEngine = Depends(get_moderation_engine),
    current_user: User = Depends(require_privileged),
):
    """Approve a pending item and publish its content."""
    notes = action.moderator_notes if action else None
    record = engine.approve(current_user.id, record_id, notes)
    return ReviewResponse(message="Item approved successfully", record=ReviewRecordResponse.from_record(record))


@router.post("/{record_id}/reject", response_model=ReviewResponse)
async def reject_item(
    record_id: str,
    action: ReviewAction,
    engine: WorkflowEngine = Depends(get_moderation_engine),
    current_user: User = Depends(require_privileged),
):
    """Reject a pending item. Moderator notes are required."""
    record = engine.reject(current_user.id, record_id, action.moderator_notes)
    return ReviewResponse(message="Item rejected successfully", record=ReviewRecordResponse.from_record(record))
