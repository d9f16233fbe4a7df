"""Derived pipeline views.

Pure functions over an already-loaded list of leads; none of them touch
the store. Percentages guard against empty denominators and yield 0.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from central_ia.models.lead import (
    ACTIVE_PIPELINE_STAGES,
    FUNNEL_STAGES,
    FunnelStageMetrics,
    Lead,
    LeadStatus,
    PipelineSummary,
)

LOST_LOOKBACK_DAYS = 30


def group_by_status(leads: Iterable[Lead]) -> dict[LeadStatus, list[Lead]]:
    """Group leads by status; every status is present, possibly empty."""
    grouped: dict[LeadStatus, list[Lead]] = {status: [] for status in LeadStatus}
    for lead in leads:
        grouped[lead.status].append(lead)
    return grouped


def today_contacts(leads: Iterable[Lead], today: date) -> list[Lead]:
    """Open leads whose next contact is scheduled for ``today``."""
    return [l for l in leads if l.next_contact_date == today and not l.is_closed]


def overdue_contacts(leads: Iterable[Lead], today: date) -> list[Lead]:
    """Open leads whose next contact date has already passed."""
    return [
        l
        for l in leads
        if l.next_contact_date is not None and l.next_contact_date < today and not l.is_closed
    ]


def funnel_metrics(grouped: dict[LeadStatus, list[Lead]]) -> list[FunnelStageMetrics]:
    """Count, value and conversion rate for each funnel stage.

    The conversion rate compares a stage with the one before it in the
    funnel; the first stage is always 100.
    """
    metrics: list[FunnelStageMetrics] = []
    for index, status in enumerate(FUNNEL_STAGES):
        stage_leads = grouped.get(status, [])
        count = len(stage_leads)
        conversion_rate = 100.0
        if index > 0:
            prev_count = len(grouped.get(FUNNEL_STAGES[index - 1], []))
            conversion_rate = (count / prev_count) * 100 if prev_count > 0 else 0.0
        metrics.append(
            FunnelStageMetrics(
                status=status,
                count=count,
                value=sum(l.value for l in stage_leads),
                conversion_rate=conversion_rate,
            )
        )
    return metrics


def total_pipeline_value(grouped: dict[LeadStatus, list[Lead]]) -> float:
    return sum(l.value for status in ACTIVE_PIPELINE_STAGES for l in grouped.get(status, []))


def total_active_leads(grouped: dict[LeadStatus, list[Lead]]) -> int:
    return sum(len(grouped.get(status, [])) for status in ACTIVE_PIPELINE_STAGES)


def lost_leads_count(grouped: dict[LeadStatus, list[Lead]], now: datetime) -> int:
    """Lost leads closed within the last 30 days."""
    cutoff = now - timedelta(days=LOST_LOOKBACK_DAYS)
    return sum(
        1
        for l in grouped.get(LeadStatus.LOST, [])
        if l.closing_date is not None and l.closing_date >= cutoff
    )


def loss_rate(grouped: dict[LeadStatus, list[Lead]]) -> float:
    """Lost / (won + lost) as a percentage."""
    won = len(grouped.get(LeadStatus.WON, []))
    lost = len(grouped.get(LeadStatus.LOST, []))
    total = won + lost
    return (lost / total) * 100 if total > 0 else 0.0


def summarize(leads: list[Lead], now: datetime) -> PipelineSummary:
    """Compute every derived view at once."""
    grouped = group_by_status(leads)
    today = now.date()
    return PipelineSummary(
        leads_by_status=grouped,
        today_contacts=today_contacts(leads, today),
        overdue_contacts=overdue_contacts(leads, today),
        funnel_metrics=funnel_metrics(grouped),
        total_pipeline_value=total_pipeline_value(grouped),
        total_active_leads=total_active_leads(grouped),
        lost_leads_count=lost_leads_count(grouped, now),
        loss_rate=loss_rate(grouped),
    )
