"""Lead and pipeline-stage models.

The stage tables below are the single place that defines the pipeline:
which timestamp column each status stamps, which stages count as
in-flight, and the order used by the funnel.
"""

from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class LeadStatus(str, Enum):
    """Pipeline stage of a lead."""

    PROSPECTING = "prospeccao"
    APPROACH = "abordagem"
    PRESENTATION = "apresentacao"
    FOLLOWUP = "followup"
    NEGOTIATION = "negociacao"
    WON = "fechado_ganho"
    LOST = "fechado_perdido"
    POST_SALE = "pos_vendas"


# Timestamp column stamped when a lead enters each status
STATUS_DATE_FIELD: dict[LeadStatus, str] = {
    LeadStatus.PROSPECTING: "prospecting_date",
    LeadStatus.APPROACH: "approach_date",
    LeadStatus.PRESENTATION: "presentation_date",
    LeadStatus.FOLLOWUP: "followup_date",
    LeadStatus.NEGOTIATION: "negotiation_date",
    LeadStatus.WON: "closing_date",
    LeadStatus.LOST: "closing_date",
    LeadStatus.POST_SALE: "post_sale_date",
}

STAGE_DATE_FIELDS: tuple[str, ...] = tuple(dict.fromkeys(STATUS_DATE_FIELD.values()))

STATUS_LABELS: dict[LeadStatus, str] = {
    LeadStatus.PROSPECTING: "Prospecção",
    LeadStatus.APPROACH: "Qualificação",
    LeadStatus.PRESENTATION: "Apresentação",
    LeadStatus.FOLLOWUP: "Follow-up",
    LeadStatus.NEGOTIATION: "Negociação",
    LeadStatus.WON: "Fechamento",
    LeadStatus.LOST: "Perdido",
    LeadStatus.POST_SALE: "Pós-vendas",
}

# In-flight stages: counted in pipeline value and active-lead totals
ACTIVE_PIPELINE_STAGES: tuple[LeadStatus, ...] = (
    LeadStatus.PROSPECTING,
    LeadStatus.APPROACH,
    LeadStatus.PRESENTATION,
    LeadStatus.FOLLOWUP,
    LeadStatus.NEGOTIATION,
)

# Funnel sequence; LOST is tracked per status but never part of the funnel
FUNNEL_STAGES: tuple[LeadStatus, ...] = (
    *ACTIVE_PIPELINE_STAGES,
    LeadStatus.WON,
    LeadStatus.POST_SALE,
)

CLOSED_STAGES: frozenset[LeadStatus] = frozenset({LeadStatus.WON, LeadStatus.LOST})


class Lead(BaseModel):
    """A lead row as stored in the ``leads`` table."""

    id: str
    user_id: str
    client_name: str
    email: str | None = None
    phone: str | None = None
    status: LeadStatus = LeadStatus.PROSPECTING
    prospecting_date: datetime | None = None
    approach_date: datetime | None = None
    presentation_date: datetime | None = None
    followup_date: datetime | None = None
    negotiation_date: datetime | None = None
    closing_date: datetime | None = None
    post_sale_date: datetime | None = None
    next_contact_date: date | None = None
    next_contact_notes: str | None = None
    salesperson_id: str | None = None
    salesperson_name: str | None = None
    estimated_value: float | None = None
    lead_source: str | None = None
    comments: str | None = None
    converted_sale_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator(
        *STAGE_DATE_FIELDS, "created_at", "updated_at", mode="after"
    )
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Treat naive timestamps from the store as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_STAGES

    @property
    def value(self) -> float:
        """Estimated value, zero when unset."""
        return self.estimated_value or 0.0

    def stage_timestamp(self, status: LeadStatus) -> datetime | None:
        return getattr(self, STATUS_DATE_FIELD[status])


class LeadCreate(BaseModel):
    """Input for creating a lead."""

    client_name: str = Field(..., min_length=1, description="Client or company name")
    email: str | None = None
    phone: str | None = None
    status: LeadStatus | None = None
    salesperson_id: str | None = None
    salesperson_name: str | None = None
    estimated_value: float | None = Field(None, ge=0)
    lead_source: str | None = None
    next_contact_date: date | None = None
    next_contact_notes: str | None = None
    comments: str | None = None


class LeadUpdate(BaseModel):
    """Partial update of a lead's editable fields."""

    client_name: str | None = Field(None, min_length=1)
    email: str | None = None
    phone: str | None = None
    status: LeadStatus | None = None
    salesperson_id: str | None = None
    salesperson_name: str | None = None
    estimated_value: float | None = Field(None, ge=0)
    lead_source: str | None = None
    next_contact_date: date | None = None
    next_contact_notes: str | None = None
    comments: str | None = None
    converted_sale_id: str | None = None


class StageMoveRequest(BaseModel):
    """Request body for moving a lead to another stage."""

    status: LeadStatus = Field(..., description="Target pipeline stage")


class FunnelStageMetrics(BaseModel):
    """Per-stage funnel numbers."""

    status: LeadStatus
    count: int
    value: float
    conversion_rate: float = Field(..., description="Percent of the previous funnel stage")


class PipelineSummary(BaseModel):
    """All derived pipeline views for one owner."""

    leads_by_status: dict[LeadStatus, list[Lead]]
    today_contacts: list[Lead]
    overdue_contacts: list[Lead]
    funnel_metrics: list[FunnelStageMetrics]
    total_pipeline_value: float
    total_active_leads: int
    lost_leads_count: int
    loss_rate: float


def stage_transition_patch(status: LeadStatus, now: datetime) -> dict[str, Any]:
    """Row patch written when a lead moves to ``status``.

    Status, ``updated_at`` and the stage's timestamp column go out as one
    update so the store applies them to the row together.
    """
    stamp = now.isoformat()
    return {
        "status": status.value,
        "updated_at": stamp,
        STATUS_DATE_FIELD[status]: stamp,
    }


def apply_lead_patch(lead: Lead, patch: dict[str, Any]) -> Lead:
    """Merge a row patch into the local copy of a lead.

    Returns a new validated ``Lead``; the original is left untouched.
    """
    return Lead.model_validate({**lead.model_dump(), **patch})
