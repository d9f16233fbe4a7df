"""Weekly individual coaching session (FIV) models."""

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class CoachingStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CoachingSession(BaseModel):
    """A row of ``fivi_sessions``.

    The ``ai_*`` fields are filled by the audio-analysis collaborator and
    are read-only here.
    """

    id: str
    user_id: str
    salesperson_id: str
    salesperson_name: str
    date: dt.date | None = None
    week_number: int
    weekly_commitment: float = 0
    weekly_goal: float = 0
    weekly_realized: float = 0
    previous_commitment: float | None = None
    previous_realized: float | None = None
    actions_executed: str | None = None
    improvement_ideas: str | None = None
    failed_actions: str | None = None
    support_needed: str | None = None
    notes: str | None = None
    status: CoachingStatus = CoachingStatus.COMPLETED
    ai_transcription: str | None = None
    ai_summary: str | None = None
    ai_sentiment_analysis: dict[str, Any] | None = None
    ai_commitments: list[str] | None = None
    ai_concerns: list[str] | None = None
    ai_confidence_score: float | None = None
    ai_key_points: dict[str, Any] | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class CoachingSessionCreate(BaseModel):
    salesperson_id: str
    salesperson_name: str
    date: dt.date | None = None
    week_number: int = Field(..., ge=1, le=54)
    weekly_commitment: float = 0
    weekly_goal: float = 0
    weekly_realized: float = 0
    previous_commitment: float | None = None
    previous_realized: float | None = None
    actions_executed: str | None = None
    improvement_ideas: str | None = None
    failed_actions: str | None = None
    support_needed: str | None = None
    notes: str | None = None
    status: CoachingStatus | None = None


class CoachingSessionUpdate(BaseModel):
    date: dt.date | None = None
    weekly_commitment: float | None = None
    weekly_goal: float | None = None
    weekly_realized: float | None = None
    previous_commitment: float | None = None
    previous_realized: float | None = None
    notes: str | None = None
    status: CoachingStatus | None = None
