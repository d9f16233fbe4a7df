"""Monthly goal meeting (RMR) models."""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, Field


class MeetingStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    PENDING = "pending"


class Meeting(BaseModel):
    """A row of ``rmr_meetings``."""

    id: str
    user_id: str
    date: dt.date | None = None
    month: int = Field(..., ge=1, le=12)
    year: int
    status: MeetingStatus = MeetingStatus.PENDING
    monthly_goal: float = 0
    previous_month_revenue: float = 0
    motivational_theme: str | None = None
    strategies: list[str] = Field(default_factory=list)
    notes: str | None = None
    highlighted_employee_id: str | None = None
    highlighted_employee_name: str | None = None
    highlight_reason: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class MeetingCreate(BaseModel):
    date: dt.date
    month: int = Field(..., ge=1, le=12)
    year: int
    monthly_goal: float = Field(..., ge=0)
    previous_month_revenue: float = Field(0, ge=0)
    motivational_theme: str | None = None
    strategies: list[str] | None = None
    notes: str | None = None
    highlighted_employee_id: str | None = None
    highlighted_employee_name: str | None = None
    highlight_reason: str | None = None
    status: MeetingStatus | None = None


class MeetingUpdate(BaseModel):
    date: dt.date | None = None
    status: MeetingStatus | None = None
    monthly_goal: float | None = Field(None, ge=0)
    previous_month_revenue: float | None = Field(None, ge=0)
    motivational_theme: str | None = None
    strategies: list[str] | None = None
    notes: str | None = None
    highlighted_employee_id: str | None = None
    highlighted_employee_name: str | None = None
    highlight_reason: str | None = None
