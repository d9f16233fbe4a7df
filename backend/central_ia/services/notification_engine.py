"""Notification engine.

Runs the alert rules against current leads, meetings, coaching sessions
and the dashboard snapshot, and returns the alerts ordered by priority.
Evaluation is a pure recomputation: call it again whenever an input
changes.
"""

import asyncio
import logging
from collections.abc import Sequence

from central_ia.core.clock import Clock, system_clock
from central_ia.models.coaching import CoachingSession
from central_ia.models.dashboard import DashboardSnapshot
from central_ia.models.lead import Lead
from central_ia.models.meeting import Meeting
from central_ia.models.notification import (
    Notification,
    NotificationPriority,
    NotificationSummary,
)
from central_ia.services.alert_rules import DEFAULT_RULES, AlertContext, AlertRule
from central_ia.services.coaching_service import CoachingRepository
from central_ia.services.lead_pipeline import LeadPipeline
from central_ia.services.meeting_service import MeetingRepository

logger = logging.getLogger(__name__)


def sort_by_priority(notifications: Sequence[Notification]) -> list[Notification]:
    """High before medium before low; stable within a priority."""
    return sorted(notifications, key=lambda n: n.priority.rank)


class NotificationEngine:
    """Evaluates an ordered battery of alert rules."""

    def __init__(
        self,
        rules: Sequence[AlertRule] = DEFAULT_RULES,
        clock: Clock = system_clock,
    ) -> None:
        self._rules = tuple(rules)
        self._clock = clock

    def evaluate(
        self,
        *,
        meetings: Sequence[Meeting] = (),
        sessions: Sequence[CoachingSession] = (),
        leads: Sequence[Lead] = (),
        snapshot: DashboardSnapshot | None = None,
    ) -> NotificationSummary:
        """Run every rule once and summarize the result."""
        ctx = AlertContext(
            now=self._clock(),
            meetings=tuple(meetings),
            sessions=tuple(sessions),
            leads=tuple(leads),
            snapshot=snapshot,
        )
        alerts = [n for rule in self._rules if (n := rule.evaluate(ctx)) is not None]
        notifications = sort_by_priority(alerts)
        high = sum(1 for n in notifications if n.priority == NotificationPriority.HIGH)

        logger.debug(
            "Notifications evaluated",
            extra={"fired": [n.id for n in notifications], "high_priority_count": high},
        )
        return NotificationSummary(
            notifications=notifications,
            total_count=len(notifications),
            high_priority_count=high,
        )

    async def refresh(
        self,
        pipeline: LeadPipeline,
        meetings: MeetingRepository,
        coaching: CoachingRepository,
        snapshot: DashboardSnapshot | None = None,
    ) -> NotificationSummary:
        """Reload the three repositories concurrently, then evaluate.

        Each repository degrades to an empty list on its own failure, so
        this never raises for store errors.
        """
        await asyncio.gather(
            pipeline.fetch_leads(),
            meetings.fetch_meetings(),
            coaching.fetch_sessions(),
        )
        return self.evaluate(
            meetings=meetings.meetings,
            sessions=coaching.sessions,
            leads=pipeline.leads,
            snapshot=snapshot,
        )
