"""Lead pipeline API routes.

Provides REST endpoints for the sales pipeline:
- List leads and the derived funnel summary
- Create, update and delete leads
- Move a lead to another stage
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status

from central_ia.api.deps import CurrentUser, Notices, RequestClock, Store
from central_ia.core.clock import Clock
from central_ia.core.exceptions import (
    CentralIAException,
    DatabaseError,
    LeadNotFoundError,
    ValidationError,
)
from central_ia.core.notices import NoticeBoard
from central_ia.db.store import DataStore
from central_ia.models.lead import (
    Lead,
    LeadCreate,
    LeadUpdate,
    PipelineSummary,
    StageMoveRequest,
)
from central_ia.services.lead_pipeline import LeadPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["leads"])


async def _loaded_pipeline(
    store: DataStore, user: Any, notices: NoticeBoard, clock: Clock
) -> LeadPipeline:
    pipeline = LeadPipeline(store=store, owner_id=user.id, notices=notices, clock=clock)
    await pipeline.fetch_leads()
    if pipeline.error is not None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Erro ao carregar leads"
        )
    return pipeline


def _failure(
    pipeline: LeadPipeline, lead_id: str, notices: NoticeBoard
) -> CentralIAException:
    """Domain error for a mutation that returned its failure sentinel.

    A lead missing from the owner's list is a 404; anything else means the
    store rejected the call.
    """
    if not any(l.id == lead_id for l in pipeline.leads):
        return LeadNotFoundError(lead_id)
    notice = notices.latest_error
    return DatabaseError(notice.message if notice else f"Failed to change lead {lead_id}")


@router.get("", response_model=list[Lead])
async def list_leads(
    current_user: CurrentUser, store: Store, notices: Notices, clock: RequestClock
) -> list[Lead]:
    """List the current user's leads, newest first."""
    pipeline = await _loaded_pipeline(store, current_user, notices, clock)
    return pipeline.leads


@router.get("/summary", response_model=PipelineSummary)
async def pipeline_summary(
    current_user: CurrentUser, store: Store, notices: Notices, clock: RequestClock
) -> PipelineSummary:
    """Funnel metrics, contact lists and totals for the current user."""
    pipeline = await _loaded_pipeline(store, current_user, notices, clock)
    return pipeline.summary()


@router.post("", response_model=Lead, status_code=status.HTTP_201_CREATED)
async def create_lead(
    data: LeadCreate,
    current_user: CurrentUser,
    store: Store,
    notices: Notices,
    clock: RequestClock,
) -> Lead:
    """Create a lead in the prospecting stage."""
    pipeline = LeadPipeline(store=store, owner_id=current_user.id, notices=notices, clock=clock)
    lead = await pipeline.create_lead(data)
    if lead is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Erro ao criar lead")
    return lead


@router.patch("/{lead_id}", response_model=Lead)
async def update_lead(
    lead_id: str,
    data: LeadUpdate,
    current_user: CurrentUser,
    store: Store,
    notices: Notices,
    clock: RequestClock,
) -> Lead:
    """Update a lead's editable fields."""
    if not data.model_fields_set:
        raise ValidationError("No fields to update", details={"lead_id": lead_id})
    pipeline = await _loaded_pipeline(store, current_user, notices, clock)
    lead = await pipeline.update_lead(lead_id, data)
    if lead is None:
        raise _failure(pipeline, lead_id, notices)
    return lead


@router.post("/{lead_id}/stage", response_model=Lead)
async def move_lead_to_stage(
    lead_id: str,
    move: StageMoveRequest,
    current_user: CurrentUser,
    store: Store,
    notices: Notices,
    clock: RequestClock,
) -> Lead:
    """Move a lead to another pipeline stage and stamp the stage date."""
    pipeline = await _loaded_pipeline(store, current_user, notices, clock)
    if not await pipeline.move_to_stage(lead_id, move.status):
        raise _failure(pipeline, lead_id, notices)
    lead = next((l for l in pipeline.leads if l.id == lead_id), None)
    if lead is None:
        raise LeadNotFoundError(lead_id)
    return lead


@router.delete("/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lead(
    lead_id: str,
    current_user: CurrentUser,
    store: Store,
    notices: Notices,
    clock: RequestClock,
) -> None:
    """Delete a lead."""
    pipeline = await _loaded_pipeline(store, current_user, notices, clock)
    if not await pipeline.delete_lead(lead_id):
        raise _failure(pipeline, lead_id, notices)
