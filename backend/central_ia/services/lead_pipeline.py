"""Lead pipeline engine.

Keeps the owner's leads in memory, applies mutations to the store and
merges successful results into the local projection, and exposes the
derived funnel views.

Usage:
    ```python
    from central_ia.db import SupabaseStore
    from central_ia.services.lead_pipeline import LeadPipeline

    pipeline = LeadPipeline(store=SupabaseStore(), owner_id=user.id)
    await pipeline.fetch_leads()
    await pipeline.move_to_stage(lead_id, LeadStatus.NEGOTIATION)
    pipeline.funnel_metrics
    ```
"""

import logging

from central_ia.core.clock import Clock, system_clock
from central_ia.core.exceptions import LeadNotFoundError
from central_ia.core.notices import NoticeBoard
from central_ia.db.store import LEADS_TABLE, OWNER_COLUMN, DataStore
from central_ia.models.lead import (
    STATUS_LABELS,
    FunnelStageMetrics,
    Lead,
    LeadCreate,
    LeadStatus,
    LeadUpdate,
    PipelineSummary,
    apply_lead_patch,
    stage_transition_patch,
)
from central_ia.services import pipeline_metrics

logger = logging.getLogger(__name__)


class LeadPipeline:
    """In-memory projection of one owner's leads.

    Every mutation is a single owner-scoped request. Failures are logged,
    reported on the notice board and turned into a ``None``/``False``
    return value; the local list only changes after the store accepted
    the call.
    """

    def __init__(
        self,
        store: DataStore,
        owner_id: str,
        notices: NoticeBoard | None = None,
        clock: Clock = system_clock,
    ) -> None:
        """Initialize the pipeline.

        Args:
            store: Data store holding the ``leads`` table.
            owner_id: Account whose leads this pipeline manages.
            notices: Board receiving user-facing notices.
            clock: Source of "now" for stamps and date views.
        """
        self._store = store
        self._owner_id = owner_id
        self._notices = notices or NoticeBoard()
        self._clock = clock
        self._leads: list[Lead] = []
        self.is_loading = False
        self.error: str | None = None

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def notices(self) -> NoticeBoard:
        return self._notices

    @property
    def leads(self) -> list[Lead]:
        return list(self._leads)

    def _scope(self, lead_id: str) -> dict[str, str]:
        return {"id": lead_id, OWNER_COLUMN: self._owner_id}

    async def fetch_leads(self) -> list[Lead]:
        """Load the owner's leads, newest first.

        On failure the previous list is kept, ``error`` is set and an
        empty list is returned.
        """
        self.is_loading = True
        self.error = None
        try:
            rows = await self._store.select(
                LEADS_TABLE,
                {OWNER_COLUMN: self._owner_id},
                order_by="created_at",
                descending=True,
            )
            self._leads = [Lead.model_validate(row) for row in rows]
            logger.debug(
                "Leads fetched", extra={"user_id": self._owner_id, "count": len(self._leads)}
            )
            return self.leads
        except Exception as e:
            logger.exception("Erro ao buscar leads", extra={"user_id": self._owner_id})
            self.error = getattr(e, "message", str(e))
            self._notices.error("Erro ao carregar leads")
            return []
        finally:
            self.is_loading = False

    async def create_lead(self, data: LeadCreate) -> Lead | None:
        """Insert a new lead in prospecting (unless another status is given).

        Returns:
            The stored lead, or None if the store rejected it.
        """
        now = self._clock()
        row = data.model_dump(mode="json")
        row.update(
            {
                OWNER_COLUMN: self._owner_id,
                "status": (data.status or LeadStatus.PROSPECTING).value,
                "prospecting_date": now.isoformat(),
            }
        )
        try:
            stored = await self._store.insert(LEADS_TABLE, row)
            lead = Lead.model_validate(stored)
        except Exception:
            logger.exception("Erro ao criar lead", extra={"user_id": self._owner_id})
            self._notices.error("Erro ao criar lead")
            return None

        self._leads = [lead, *self._leads]
        logger.info("Lead created", extra={"user_id": self._owner_id, "lead_id": lead.id})
        self._notices.success("Lead criado com sucesso!")
        return lead

    async def update_lead(self, lead_id: str, data: LeadUpdate) -> Lead | None:
        """Apply a partial update with a fresh ``updated_at``.

        A status change also stamps the new stage's timestamp, as
        ``move_to_stage`` does.

        Returns:
            The updated lead, or None on failure or unknown id.
        """
        now = self._clock()
        patch = data.model_dump(mode="json", exclude_unset=True)
        patch["updated_at"] = now.isoformat()
        if data.status is None:
            patch.pop("status", None)
        else:
            patch.update(stage_transition_patch(data.status, now))
        try:
            rows = await self._store.update(LEADS_TABLE, self._scope(lead_id), patch)
            if not rows:
                raise LeadNotFoundError(lead_id)
            updated = Lead.model_validate(rows[0])
        except Exception:
            logger.exception("Erro ao atualizar lead", extra={"lead_id": lead_id})
            self._notices.error("Erro ao atualizar lead")
            return None

        self._leads = [updated if l.id == lead_id else l for l in self._leads]
        logger.info("Lead updated", extra={"lead_id": lead_id, "fields": sorted(patch)})
        self._notices.success("Lead atualizado!")
        return updated

    async def move_to_stage(self, lead_id: str, new_status: LeadStatus) -> bool:
        """Move a lead to ``new_status`` and stamp that stage's timestamp.

        Returns:
            True if the store accepted the transition.
        """
        patch = stage_transition_patch(new_status, self._clock())
        try:
            rows = await self._store.update(LEADS_TABLE, self._scope(lead_id), patch)
            if not rows:
                raise LeadNotFoundError(lead_id)
            merged = [apply_lead_patch(l, patch) if l.id == lead_id else l for l in self._leads]
        except Exception:
            logger.exception(
                "Erro ao mover lead", extra={"lead_id": lead_id, "to_status": new_status.value}
            )
            self._notices.error("Erro ao mover lead")
            return False

        self._leads = merged
        logger.info(
            "Lead moved", extra={"lead_id": lead_id, "to_status": new_status.value}
        )
        self._notices.success(f"Lead movido para {STATUS_LABELS[new_status]}")
        return True

    async def delete_lead(self, lead_id: str) -> bool:
        """Delete a lead. Returns True if a row was removed."""
        try:
            rows = await self._store.delete(LEADS_TABLE, self._scope(lead_id))
            if not rows:
                raise LeadNotFoundError(lead_id)
        except Exception:
            logger.exception("Erro ao deletar lead", extra={"lead_id": lead_id})
            self._notices.error("Erro ao remover lead")
            return False

        self._leads = [l for l in self._leads if l.id != lead_id]
        logger.info("Lead deleted", extra={"lead_id": lead_id})
        self._notices.success("Lead removido")
        return True

    # Derived views

    @property
    def leads_by_status(self) -> dict[LeadStatus, list[Lead]]:
        return pipeline_metrics.group_by_status(self._leads)

    @property
    def today_contacts(self) -> list[Lead]:
        return pipeline_metrics.today_contacts(self._leads, self._clock().date())

    @property
    def overdue_contacts(self) -> list[Lead]:
        return pipeline_metrics.overdue_contacts(self._leads, self._clock().date())

    @property
    def funnel_metrics(self) -> list[FunnelStageMetrics]:
        return pipeline_metrics.funnel_metrics(self.leads_by_status)

    @property
    def total_pipeline_value(self) -> float:
        return pipeline_metrics.total_pipeline_value(self.leads_by_status)

    @property
    def total_active_leads(self) -> int:
        return pipeline_metrics.total_active_leads(self.leads_by_status)

    @property
    def lost_leads_count(self) -> int:
        return pipeline_metrics.lost_leads_count(self.leads_by_status, self._clock())

    @property
    def loss_rate(self) -> float:
        return pipeline_metrics.loss_rate(self.leads_by_status)

    def summary(self) -> PipelineSummary:
        return pipeline_metrics.summarize(self._leads, self._clock())
