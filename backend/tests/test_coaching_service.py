"""Tests for the FIV coaching repository and its aggregates."""

import pytest

from central_ia.core.notices import NoticeBoard
from central_ia.db.memory import InMemoryStore
from central_ia.db.store import COACHING_TABLE
from central_ia.models.coaching import (
    CoachingSession,
    CoachingSessionCreate,
    CoachingSessionUpdate,
    CoachingStatus,
)
from central_ia.services.coaching_service import (
    CoachingRepository,
    commitment_rate,
    pending_member_ids,
)
from tests.conftest import OWNER_ID


def _session(
    session_id: str,
    salesperson_id: str,
    week: int,
    status: CoachingStatus = CoachingStatus.COMPLETED,
    **kwargs,
) -> CoachingSession:
    return CoachingSession(
        id=session_id,
        user_id=OWNER_ID,
        salesperson_id=salesperson_id,
        salesperson_name=salesperson_id.title(),
        week_number=week,
        status=status,
        **kwargs,
    )


def _row(session: CoachingSession) -> dict:
    return session.model_dump(mode="json")


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore(
        {
            COACHING_TABLE: [
                _row(_session("s1", "ana", 42, date="2026-10-13")),
                _row(_session("s2", "bruno", 43, date="2026-10-19")),
                _row(_session("s3", "ana", 43, date="2026-10-20")),
            ]
        }
    )


@pytest.fixture
def repository(store: InMemoryStore, notices: NoticeBoard) -> CoachingRepository:
    return CoachingRepository(store=store, owner_id=OWNER_ID, notices=notices)


def test_commitment_rate_counts_only_complete_comparisons() -> None:
    sessions = [
        _session("a", "ana", 43, previous_commitment=1000, previous_realized=1200),
        _session("b", "bruno", 43, previous_commitment=1000, previous_realized=1000),
        _session("c", "caio", 43, previous_commitment=1000, previous_realized=500),
        _session("d", "davi", 43, previous_commitment=1000),
        _session(
            "e",
            "eva",
            43,
            status=CoachingStatus.CANCELLED,
            previous_commitment=1000,
            previous_realized=2000,
        ),
    ]

    assert commitment_rate(sessions) == pytest.approx(66.67, abs=0.01)


def test_commitment_rate_without_eligible_sessions_is_zero() -> None:
    assert commitment_rate([]) == 0
    assert commitment_rate([_session("a", "ana", 43)]) == 0


def test_pending_member_ids_keeps_roster_order() -> None:
    sessions = [
        _session("a", "ana", 43),
        _session("b", "bruno", 42),
        _session("c", "caio", 43, status=CoachingStatus.SCHEDULED),
    ]

    assert pending_member_ids(sessions, ["caio", "ana", "bruno"], 43) == ["caio", "bruno"]


@pytest.mark.asyncio
async def test_fetch_and_lookups(repository: CoachingRepository) -> None:
    sessions = await repository.fetch_sessions()

    assert [s.id for s in sessions] == ["s3", "s2", "s1"]
    assert [s.id for s in repository.sessions_by_salesperson("ana")] == ["s3", "s1"]
    assert repository.latest_session("ana").id == "s3"
    assert repository.latest_session("nobody") is None
    assert {s.id for s in repository.sessions_by_week(43)} == {"s2", "s3"}
    assert repository.pending_member_ids(["ana", "bruno", "caio"], 43) == ["caio"]


@pytest.mark.asyncio
async def test_create_session_defaults_to_completed(
    repository: CoachingRepository, notices: NoticeBoard
) -> None:
    session = await repository.create_session(
        CoachingSessionCreate(salesperson_id="caio", salesperson_name="Caio", week_number=43)
    )

    assert session is not None
    assert session.status == CoachingStatus.COMPLETED
    assert session.user_id == OWNER_ID
    assert notices.notices[-1].message == "FIV registrada com sucesso!"


@pytest.mark.asyncio
async def test_update_session_changes_commitment_rate(repository: CoachingRepository) -> None:
    await repository.fetch_sessions()
    assert repository.commitment_rate() == 0

    await repository.update_session(
        "s3", CoachingSessionUpdate(previous_commitment=500, previous_realized=800)
    )

    assert repository.commitment_rate() == 100.0


@pytest.mark.asyncio
async def test_fetch_failure_posts_notice(
    repository: CoachingRepository, store: InMemoryStore, notices: NoticeBoard
) -> None:
    store.fail_next()

    assert await repository.fetch_sessions() == []
    assert notices.latest_error.message == "Erro ao carregar FIVs"


@pytest.mark.asyncio
async def test_delete_session(repository: CoachingRepository, store: InMemoryStore) -> None:
    await repository.fetch_sessions()

    assert await repository.delete_session("s1") is True
    assert await repository.delete_session("s1") is False

    assert [s.id for s in repository.sessions] == ["s3", "s2"]
    assert len(store.rows(COACHING_TABLE)) == 2
