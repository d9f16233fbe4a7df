"""Read routes for the sales rituals (RMR meetings and FIV sessions)."""

import logging

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from central_ia.api.deps import CurrentUser, Notices, Store
from central_ia.models.coaching import CoachingSession
from central_ia.models.meeting import Meeting
from central_ia.services.coaching_service import CoachingRepository
from central_ia.services.meeting_service import MeetingRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rituals"])


class CommitmentRateResponse(BaseModel):
    rate: float = Field(..., description="Percent of commitments fulfilled")
    sessions: int = Field(..., description="Sessions loaded")


@router.get("/meetings", response_model=list[Meeting])
async def list_meetings(
    current_user: CurrentUser, store: Store, notices: Notices
) -> list[Meeting]:
    """List the current user's RMR meetings, newest first."""
    repo = MeetingRepository(store=store, owner_id=current_user.id, notices=notices)
    meetings = await repo.fetch_meetings()
    if repo.error is not None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=repo.fetch_error)
    return meetings


@router.get("/coaching/sessions", response_model=list[CoachingSession])
async def list_coaching_sessions(
    current_user: CurrentUser,
    store: Store,
    notices: Notices,
    salesperson_id: str | None = Query(None, description="Only this seller's sessions"),
    week: int | None = Query(None, ge=1, le=54, description="Only this week number"),
) -> list[CoachingSession]:
    """List FIV sessions, optionally by seller and/or week."""
    repo = CoachingRepository(store=store, owner_id=current_user.id, notices=notices)
    sessions = await repo.fetch_sessions()
    if repo.error is not None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=repo.fetch_error)
    if salesperson_id is not None:
        sessions = [s for s in sessions if s.salesperson_id == salesperson_id]
    if week is not None:
        sessions = [s for s in sessions if s.week_number == week]
    return sessions


@router.get("/coaching/commitment-rate", response_model=CommitmentRateResponse)
async def get_commitment_rate(
    current_user: CurrentUser, store: Store, notices: Notices
) -> CommitmentRateResponse:
    """Share of completed FIVs whose previous commitment was met."""
    repo = CoachingRepository(store=store, owner_id=current_user.id, notices=notices)
    sessions = await repo.fetch_sessions()
    if repo.error is not None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=repo.fetch_error)
    return CommitmentRateResponse(rate=repo.commitment_rate(), sessions=len(sessions))
