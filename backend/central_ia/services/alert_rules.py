"""Business rules behind the notification center.

Each rule reads the shared ``AlertContext`` and returns at most one
``Notification`` (or None). Rules never fetch anything and never raise on
missing data; a rule without the data it needs simply does not fire.
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from central_ia.models.coaching import CoachingSession
from central_ia.models.dashboard import DashboardSnapshot, TeamMember
from central_ia.models.lead import Lead
from central_ia.models.meeting import Meeting, MeetingStatus
from central_ia.models.notification import (
    Notification,
    NotificationAction,
    NotificationPriority,
    NotificationType,
)
from central_ia.services.coaching_service import pending_member_ids

MONTH_NAMES = (
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
)
SHORT_MONTH_NAMES = (
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez",
)

RMR_URGENT_AFTER_DAY = 5
COACHING_URGENT_WEEKDAY = 4  # Thursday, Sunday-based
COACHING_NAMES_SHOWN = 3
STALLED_AFTER_DAYS = 7
HIGH_VALUE_LEAD = 5000
GOAL_MONTH_DAYS = 30
GOAL_GAP_POINTS = 20
GOAL_URGENT_GAP_POINTS = 30
GOAL_GRACE_DAYS = 5
TEAM_TARGET_PERCENT = 70
TEAM_CHECK_AFTER_DAY = 15
TEAM_NAMES_SHOWN = 2


def week_number(day: date) -> int:
    """Week of the year as the dashboard counts it.

    ``ceil((days_since_jan1 + jan1_weekday + 1) / 7)`` with a Sunday=0
    weekday. This is not ISO-8601: weeks start on Sunday and week 1 is
    whatever week contains January 1st.
    """
    jan1 = date(day.year, 1, 1)
    days = (day - jan1).days
    return math.ceil((days + sunday_weekday(jan1) + 1) / 7)


def sunday_weekday(day: date) -> int:
    """Weekday with Sunday=0 ... Saturday=6."""
    return (day.weekday() + 1) % 7


def format_brl(value: float) -> str:
    """Whole-real amount with pt-BR thousands separators; halves round away from zero."""
    whole = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{whole:,}".replace(",", ".")


def _plural(count: int, suffix: str = "s") -> str:
    return suffix if count > 1 else ""


def _names(members: Sequence[TeamMember], shown: int, total: int) -> str:
    names = ", ".join(m.first_name for m in members[:shown])
    return f"{names} e +{total - shown}" if total > shown else names


@dataclass(frozen=True)
class AlertContext:
    """Read-only inputs for one evaluation."""

    now: datetime
    meetings: Sequence[Meeting] = ()
    sessions: Sequence[CoachingSession] = ()
    leads: Sequence[Lead] = ()
    snapshot: DashboardSnapshot | None = None
    today: date = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "today", self.now.date())

    @property
    def active_team(self) -> list[TeamMember]:
        if self.snapshot is None:
            return []
        return [m for m in self.snapshot.team if m.active and not m.is_placeholder]

    @property
    def open_leads(self) -> list[Lead]:
        return [l for l in self.leads if not l.is_closed]


def rmr_pending(ctx: AlertContext) -> Notification | None:
    """Monthly goal meeting missing or not finished for the current month."""
    month, year = ctx.today.month, ctx.today.year
    month_name = MONTH_NAMES[month - 1]
    meeting = next((m for m in ctx.meetings if m.month == month and m.year == year), None)

    if meeting is None:
        return Notification(
            id="rmr-pending",
            type=NotificationType.RITUAL,
            priority=(
                NotificationPriority.HIGH
                if ctx.today.day > RMR_URGENT_AFTER_DAY
                else NotificationPriority.MEDIUM
            ),
            title="RMR Pendente",
            description=f"A Reunião de Metas de {month_name} ainda não foi realizada.",
            action=NotificationAction(label="Realizar RMR", view="rmr"),
            timestamp=ctx.now,
        )
    if meeting.status != MeetingStatus.COMPLETED:
        return Notification(
            id="rmr-incomplete",
            type=NotificationType.RITUAL,
            priority=NotificationPriority.MEDIUM,
            title="RMR Incompleta",
            description=(
                f"A RMR de {month_name} está em andamento. Conclua para definir as metas."
            ),
            action=NotificationAction(label="Continuar RMR", view="rmr"),
            timestamp=ctx.now,
        )
    return None


def coaching_pending(ctx: AlertContext) -> Notification | None:
    """Active sellers without a completed FIV this week."""
    if ctx.snapshot is None:
        return None
    team = ctx.active_team
    pending_ids = set(
        pending_member_ids(ctx.sessions, [m.id for m in team], week_number(ctx.today))
    )
    if not pending_ids:
        return None

    pending = [m for m in team if m.id in pending_ids]
    count = len(pending)
    return Notification(
        id="fivi-pending",
        type=NotificationType.RITUAL,
        priority=(
            NotificationPriority.HIGH
            if sunday_weekday(ctx.today) >= COACHING_URGENT_WEEKDAY
            else NotificationPriority.MEDIUM
        ),
        title=f"{count} FIV Pendente{_plural(count)}",
        description=(
            "Vendedores sem feedback esta semana: "
            f"{_names(pending, COACHING_NAMES_SHOWN, count)}"
        ),
        action=NotificationAction(label="Realizar FIV", view="fivi"),
        timestamp=ctx.now,
    )


def leads_stalled(ctx: AlertContext) -> Notification | None:
    """Open leads without any update for more than a week."""
    cutoff = ctx.now - timedelta(days=STALLED_AFTER_DAYS)
    stalled = [
        l for l in ctx.open_leads if (l.updated_at or l.created_at or ctx.now) < cutoff
    ]
    if not stalled:
        return None

    high_value = [l for l in stalled if l.value >= HIGH_VALUE_LEAD]
    count = len(stalled)
    return Notification(
        id="leads-stalled",
        type=NotificationType.LEAD,
        priority=NotificationPriority.HIGH if high_value else NotificationPriority.MEDIUM,
        title=f"{count} Lead{_plural(count)} Parado{_plural(count)}",
        description=(
            f"{len(high_value)} de alto valor precisam de atenção urgente."
            if high_value
            else f"Leads sem movimentação há mais de {STALLED_AFTER_DAYS} dias."
        ),
        action=NotificationAction(label="Ver Pipeline", view="pipeline"),
        timestamp=ctx.now,
    )


def contacts_due(ctx: AlertContext) -> Notification | None:
    """Open leads whose next contact is today or already late."""
    due = [
        l
        for l in ctx.open_leads
        if l.next_contact_date is not None and l.next_contact_date <= ctx.today
    ]
    if not due:
        return None

    overdue = [l for l in due if l.next_contact_date < ctx.today]
    count = len(due)
    if overdue:
        late = len(overdue)
        description = f"{late} atrasado{_plural(late)}, {count - late} para hoje."
    else:
        description = "Contatos agendados para hoje."
    return Notification(
        id="contacts-due",
        type=NotificationType.LEAD,
        priority=NotificationPriority.HIGH if overdue else NotificationPriority.MEDIUM,
        title=f"{count} Contato{_plural(count)} Pendente{_plural(count)}",
        description=description,
        action=NotificationAction(label="Ver Pipeline", view="pipeline"),
        timestamp=ctx.now,
    )


def goal_at_risk(ctx: AlertContext) -> Notification | None:
    """Month revenue trailing the day-based expectation by 20+ points."""
    if ctx.snapshot is None or ctx.snapshot.kpis is None:
        return None
    short_name = SHORT_MONTH_NAMES[ctx.today.month - 1]
    current = next((d for d in ctx.snapshot.current_year_data if d.month == short_name), None)
    if current is None or current.goal <= 0:
        return None

    day = ctx.today.day
    progress = current.revenue / current.goal * 100
    expected = day / GOAL_MONTH_DAYS * 100
    if not (progress < expected - GOAL_GAP_POINTS and day > GOAL_GRACE_DAYS):
        return None

    days_left = max(GOAL_MONTH_DAYS - day, 1)
    daily_needed = (current.goal - current.revenue) / days_left
    return Notification(
        id="goal-at-risk",
        type=NotificationType.GOAL,
        priority=(
            NotificationPriority.HIGH
            if progress < expected - GOAL_URGENT_GAP_POINTS
            else NotificationPriority.MEDIUM
        ),
        title="Meta Mensal em Risco",
        description=f"{progress:.0f}% atingido. Meta diária: R$ {format_brl(daily_needed)}",
        action=NotificationAction(label="Ver Dashboard", view="dashboard"),
        timestamp=ctx.now,
    )


def team_underperforming(ctx: AlertContext) -> Notification | None:
    """Sellers under 70% of their monthly goal after mid-month."""
    if ctx.today.day <= TEAM_CHECK_AFTER_DAY:
        return None
    under = [
        m
        for m in ctx.active_team
        if m.monthly_goal > 0 and m.total_revenue / m.monthly_goal * 100 < TEAM_TARGET_PERCENT
    ]
    if not under:
        return None

    count = len(under)
    return Notification(
        id="team-underperforming",
        type=NotificationType.GOAL,
        priority=(
            NotificationPriority.HIGH if count > TEAM_NAMES_SHOWN else NotificationPriority.MEDIUM
        ),
        title=f"{count} Vendedor{_plural(count, 'es')} Abaixo de {TEAM_TARGET_PERCENT}%",
        description=f"{_names(under, TEAM_NAMES_SHOWN, count)} precisam de acompanhamento.",
        action=NotificationAction(label="Ver Equipe", view="team"),
        timestamp=ctx.now,
    )


class AlertRule(NamedTuple):
    rule_id: str
    evaluate: Callable[[AlertContext], Notification | None]


# Evaluation order; ties in priority keep this order.
DEFAULT_RULES: tuple[AlertRule, ...] = (
    AlertRule("rmr", rmr_pending),
    AlertRule("fivi-pending", coaching_pending),
    AlertRule("leads-stalled", leads_stalled),
    AlertRule("contacts-due", contacts_due),
    AlertRule("goal-at-risk", goal_at_risk),
    AlertRule("team-underperforming", team_underperforming),
)
