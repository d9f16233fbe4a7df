"""Tests for the LeadPipeline engine against the in-memory store."""

from datetime import timedelta

import pytest

from central_ia.core.notices import NoticeBoard, NoticeLevel
from central_ia.db.memory import InMemoryStore
from central_ia.db.store import LEADS_TABLE
from central_ia.models.lead import (
    STAGE_DATE_FIELDS,
    LeadCreate,
    LeadStatus,
    LeadUpdate,
)
from central_ia.services.lead_pipeline import LeadPipeline
from tests.conftest import NOW, OTHER_OWNER_ID, OWNER_ID


@pytest.fixture
def seeded_store(make_lead_row) -> InMemoryStore:
    return InMemoryStore(
        {
            LEADS_TABLE: [
                make_lead_row(
                    id="lead-old", created_at=(NOW - timedelta(days=10)).isoformat()
                ),
                make_lead_row(
                    id="lead-new",
                    status="negociacao",
                    negotiation_date=(NOW - timedelta(days=1)).isoformat(),
                    created_at=(NOW - timedelta(days=1)).isoformat(),
                ),
                make_lead_row(
                    id="lead-mid", created_at=(NOW - timedelta(days=5)).isoformat()
                ),
                make_lead_row(id="lead-foreign", user_id=OTHER_OWNER_ID),
            ]
        }
    )


@pytest.fixture
def pipeline(seeded_store: InMemoryStore, notices: NoticeBoard, clock) -> LeadPipeline:
    return LeadPipeline(store=seeded_store, owner_id=OWNER_ID, notices=notices, clock=clock)


def _messages(notices: NoticeBoard) -> list[tuple[NoticeLevel, str]]:
    return [(n.level, n.message) for n in notices.notices]


@pytest.mark.asyncio
async def test_fetch_leads_returns_owned_leads_newest_first(pipeline: LeadPipeline) -> None:
    leads = await pipeline.fetch_leads()

    assert [l.id for l in leads] == ["lead-new", "lead-mid", "lead-old"]
    assert pipeline.leads == leads
    assert pipeline.error is None
    assert pipeline.is_loading is False


@pytest.mark.asyncio
async def test_fetch_leads_twice_gives_same_list(pipeline: LeadPipeline) -> None:
    first = await pipeline.fetch_leads()
    second = await pipeline.fetch_leads()

    assert first == second


@pytest.mark.asyncio
async def test_fetch_leads_failure_keeps_previous_list(
    pipeline: LeadPipeline, seeded_store: InMemoryStore, notices: NoticeBoard
) -> None:
    await pipeline.fetch_leads()
    seeded_store.fail_next("connection reset")

    result = await pipeline.fetch_leads()

    assert result == []
    assert len(pipeline.leads) == 3
    assert "connection reset" in pipeline.error
    assert pipeline.is_loading is False
    assert notices.latest_error.message == "Erro ao carregar leads"


@pytest.mark.asyncio
async def test_create_lead_defaults_to_prospecting(
    pipeline: LeadPipeline, seeded_store: InMemoryStore, notices: NoticeBoard
) -> None:
    await pipeline.fetch_leads()

    lead = await pipeline.create_lead(LeadCreate(client_name="Loja Nova", estimated_value=2500))

    assert lead is not None
    assert lead.status == LeadStatus.PROSPECTING
    assert lead.user_id == OWNER_ID
    assert lead.prospecting_date == NOW
    assert pipeline.leads[0].id == lead.id
    assert len(pipeline.leads) == 4
    stored = [r for r in seeded_store.rows(LEADS_TABLE) if r["id"] == lead.id]
    assert stored[0]["client_name"] == "Loja Nova"
    assert _messages(notices)[-1] == (NoticeLevel.SUCCESS, "Lead criado com sucesso!")


@pytest.mark.asyncio
async def test_create_lead_with_explicit_status(pipeline: LeadPipeline) -> None:
    lead = await pipeline.create_lead(
        LeadCreate(client_name="Indicação", status=LeadStatus.APPROACH)
    )

    assert lead is not None
    assert lead.status == LeadStatus.APPROACH


@pytest.mark.asyncio
async def test_create_lead_failure_returns_none(
    pipeline: LeadPipeline, seeded_store: InMemoryStore, notices: NoticeBoard
) -> None:
    await pipeline.fetch_leads()
    seeded_store.fail_next()

    lead = await pipeline.create_lead(LeadCreate(client_name="Falha"))

    assert lead is None
    assert len(pipeline.leads) == 3
    assert notices.latest_error.message == "Erro ao criar lead"


@pytest.mark.asyncio
async def test_update_lead_replaces_local_copy(
    pipeline: LeadPipeline, notices: NoticeBoard
) -> None:
    await pipeline.fetch_leads()

    updated = await pipeline.update_lead("lead-mid", LeadUpdate(estimated_value=8000))

    assert updated is not None
    assert updated.estimated_value == 8000
    assert updated.updated_at == NOW
    assert updated.client_name == "Padaria Pão Quente"
    local = {l.id: l for l in pipeline.leads}
    assert local["lead-mid"].estimated_value == 8000
    assert _messages(notices)[-1] == (NoticeLevel.SUCCESS, "Lead atualizado!")


@pytest.mark.asyncio
async def test_update_with_status_stamps_stage_timestamp(
    pipeline: LeadPipeline, seeded_store: InMemoryStore
) -> None:
    await pipeline.fetch_leads()
    before = {l.id: l for l in pipeline.leads}["lead-mid"]

    updated = await pipeline.update_lead(
        "lead-mid", LeadUpdate(status=LeadStatus.NEGOTIATION, comments="Proposta enviada")
    )

    assert updated is not None
    assert updated.status == LeadStatus.NEGOTIATION
    assert updated.negotiation_date == NOW
    assert updated.prospecting_date == before.prospecting_date
    assert updated.comments == "Proposta enviada"
    stored = [r for r in seeded_store.rows(LEADS_TABLE) if r["id"] == "lead-mid"][0]
    assert stored["negotiation_date"] == NOW.isoformat()


@pytest.mark.asyncio
async def test_update_with_null_status_keeps_stage(pipeline: LeadPipeline) -> None:
    await pipeline.fetch_leads()

    updated = await pipeline.update_lead("lead-new", LeadUpdate(status=None, comments="x"))

    assert updated is not None
    assert updated.status == LeadStatus.NEGOTIATION


@pytest.mark.asyncio
async def test_update_unknown_lead_fails(pipeline: LeadPipeline, notices: NoticeBoard) -> None:
    await pipeline.fetch_leads()
    before = pipeline.leads

    updated = await pipeline.update_lead("missing", LeadUpdate(comments="x"))

    assert updated is None
    assert pipeline.leads == before
    assert notices.latest_error.message == "Erro ao atualizar lead"


@pytest.mark.asyncio
async def test_update_cannot_touch_another_owners_lead(
    pipeline: LeadPipeline, seeded_store: InMemoryStore
) -> None:
    updated = await pipeline.update_lead("lead-foreign", LeadUpdate(comments="hijack"))

    assert updated is None
    foreign = [r for r in seeded_store.rows(LEADS_TABLE) if r["id"] == "lead-foreign"][0]
    assert "comments" not in foreign


@pytest.mark.asyncio
async def test_move_to_stage_stamps_only_target_timestamp(
    pipeline: LeadPipeline, seeded_store: InMemoryStore, notices: NoticeBoard
) -> None:
    await pipeline.fetch_leads()
    before = {l.id: l for l in pipeline.leads}["lead-mid"]

    moved = await pipeline.move_to_stage("lead-mid", LeadStatus.PRESENTATION)

    assert moved is True
    after = {l.id: l for l in pipeline.leads}["lead-mid"]
    assert after.status == LeadStatus.PRESENTATION
    assert after.presentation_date == NOW
    assert after.updated_at == NOW
    for field in STAGE_DATE_FIELDS:
        if field != "presentation_date":
            assert getattr(after, field) == getattr(before, field)
    stored = [r for r in seeded_store.rows(LEADS_TABLE) if r["id"] == "lead-mid"][0]
    assert stored["status"] == "apresentacao"
    assert stored["presentation_date"] == NOW.isoformat()
    assert _messages(notices)[-1] == (NoticeLevel.SUCCESS, "Lead movido para Apresentação")


@pytest.mark.asyncio
async def test_move_to_lost_and_won_share_closing_date(pipeline: LeadPipeline) -> None:
    await pipeline.fetch_leads()

    assert await pipeline.move_to_stage("lead-new", LeadStatus.LOST) is True

    lost = {l.id: l for l in pipeline.leads}["lead-new"]
    assert lost.closing_date == NOW
    assert lost.is_closed
    assert pipeline.lost_leads_count == 1
    assert pipeline.loss_rate == 100.0


@pytest.mark.asyncio
async def test_move_to_stage_failure_leaves_lead_unchanged(
    pipeline: LeadPipeline, seeded_store: InMemoryStore, notices: NoticeBoard
) -> None:
    await pipeline.fetch_leads()
    before = pipeline.leads
    seeded_store.fail_next()

    moved = await pipeline.move_to_stage("lead-mid", LeadStatus.FOLLOWUP)

    assert moved is False
    assert pipeline.leads == before
    assert notices.latest_error.message == "Erro ao mover lead"


@pytest.mark.asyncio
async def test_move_other_owners_lead_fails(
    pipeline: LeadPipeline, seeded_store: InMemoryStore
) -> None:
    moved = await pipeline.move_to_stage("lead-foreign", LeadStatus.WON)

    assert moved is False
    foreign = [r for r in seeded_store.rows(LEADS_TABLE) if r["id"] == "lead-foreign"][0]
    assert foreign["status"] == "prospeccao"


@pytest.mark.asyncio
async def test_delete_lead(
    pipeline: LeadPipeline, seeded_store: InMemoryStore, notices: NoticeBoard
) -> None:
    await pipeline.fetch_leads()

    assert await pipeline.delete_lead("lead-old") is True

    assert "lead-old" not in [l.id for l in pipeline.leads]
    assert "lead-old" not in [r["id"] for r in seeded_store.rows(LEADS_TABLE)]
    assert _messages(notices)[-1] == (NoticeLevel.SUCCESS, "Lead removido")


@pytest.mark.asyncio
async def test_delete_unknown_lead_fails(pipeline: LeadPipeline, notices: NoticeBoard) -> None:
    await pipeline.fetch_leads()

    assert await pipeline.delete_lead("missing") is False

    assert len(pipeline.leads) == 3
    assert notices.latest_error.message == "Erro ao remover lead"


@pytest.mark.asyncio
async def test_derived_views_follow_local_list(
    make_lead_row, notices: NoticeBoard, clock
) -> None:
    today = NOW.date()
    store = InMemoryStore(
        {
            LEADS_TABLE: [
                make_lead_row(id="a", next_contact_date=today.isoformat()),
                make_lead_row(
                    id="b",
                    status="followup",
                    next_contact_date=(today - timedelta(days=2)).isoformat(),
                ),
                make_lead_row(id="c", status="fechado_ganho", estimated_value=9000.0),
            ]
        }
    )
    pipeline = LeadPipeline(store=store, owner_id=OWNER_ID, notices=notices, clock=clock)
    await pipeline.fetch_leads()

    assert [l.id for l in pipeline.today_contacts] == ["a"]
    assert [l.id for l in pipeline.overdue_contacts] == ["b"]
    assert pipeline.total_active_leads == 2
    assert pipeline.total_pipeline_value == 2000.0
    assert pipeline.loss_rate == 0
    summary = pipeline.summary()
    assert summary.total_active_leads == 2
    assert len(summary.leads_by_status[LeadStatus.WON]) == 1
