"""Notification center API routes."""

import logging

from fastapi import APIRouter, Body

from central_ia.api.deps import CurrentUser, Notices, RequestClock, Store
from central_ia.models.dashboard import DashboardSnapshot
from central_ia.models.notification import NotificationSummary
from central_ia.services.coaching_service import CoachingRepository
from central_ia.services.lead_pipeline import LeadPipeline
from central_ia.services.meeting_service import MeetingRepository
from central_ia.services.notification_engine import NotificationEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/evaluate", response_model=NotificationSummary)
async def evaluate_notifications(
    current_user: CurrentUser,
    store: Store,
    notices: Notices,
    clock: RequestClock,
    snapshot: DashboardSnapshot | None = Body(None),
) -> NotificationSummary:
    """Evaluate the alert rules for the current user.

    The dashboard posts its current snapshot (monthly series and team
    roster); leads, meetings and FIV sessions are loaded here. A source
    that fails to load counts as empty.
    """
    owner_id = current_user.id
    engine = NotificationEngine(clock=clock)
    return await engine.refresh(
        pipeline=LeadPipeline(store=store, owner_id=owner_id, notices=notices, clock=clock),
        meetings=MeetingRepository(store=store, owner_id=owner_id, notices=notices),
        coaching=CoachingRepository(store=store, owner_id=owner_id, notices=notices),
        snapshot=snapshot,
    )
