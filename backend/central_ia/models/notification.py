"""Notification models for the alerting engine.

Notifications are derived on every evaluation and never persisted.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    """Area a notification belongs to."""

    RITUAL = "ritual"
    LEAD = "lead"
    GOAL = "goal"
    INFO = "info"


class NotificationPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    NotificationPriority.HIGH: 0,
    NotificationPriority.MEDIUM: 1,
    NotificationPriority.LOW: 2,
}


class NotificationAction(BaseModel):
    label: str = Field(..., description="Button label")
    view: str = Field(..., description="Dashboard view to open")


class Notification(BaseModel):
    """A single alert produced by one rule."""

    id: str = Field(..., description="Stable rule id, e.g. 'rmr-pending'")
    type: NotificationType
    priority: NotificationPriority
    title: str
    description: str
    action: NotificationAction | None = None
    timestamp: datetime


class NotificationSummary(BaseModel):
    """Prioritized notification list with counts."""

    notifications: list[Notification] = Field(..., description="Sorted high to low priority")
    total_count: int
    high_priority_count: int
