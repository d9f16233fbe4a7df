"""Weekly coaching session (FIV) repository."""

import logging
from collections.abc import Iterable

from central_ia.db.store import COACHING_TABLE
from central_ia.models.coaching import (
    CoachingSession,
    CoachingSessionCreate,
    CoachingSessionUpdate,
    CoachingStatus,
)
from central_ia.services.repository import OwnedRepository

logger = logging.getLogger(__name__)


def pending_member_ids(
    sessions: Iterable[CoachingSession], team_ids: Iterable[str], week: int
) -> list[str]:
    """Team members without a completed session in ``week``, in roster order."""
    completed = {
        s.salesperson_id
        for s in sessions
        if s.week_number == week and s.status == CoachingStatus.COMPLETED
    }
    return [member_id for member_id in team_ids if member_id not in completed]


def commitment_rate(sessions: Iterable[CoachingSession]) -> float:
    """Percent of completed sessions where last period's commitment was met.

    Only sessions carrying both the previous commitment and the previous
    realized amount count.
    """
    eligible = [
        s
        for s in sessions
        if s.status == CoachingStatus.COMPLETED
        and s.previous_commitment is not None
        and s.previous_realized is not None
    ]
    if not eligible:
        return 0.0
    fulfilled = sum(1 for s in eligible if s.previous_realized >= s.previous_commitment)
    return (fulfilled / len(eligible)) * 100


class CoachingRepository(OwnedRepository[CoachingSession]):
    """The owner's FIV sessions, newest first."""

    table = COACHING_TABLE
    model = CoachingSession
    resource = "FIV"

    fetch_error = "Erro ao carregar FIVs"
    create_success = "FIV registrada com sucesso!"
    create_error = "Erro ao registrar FIV"
    update_success = "FIV atualizada com sucesso!"
    update_error = "Erro ao atualizar FIV"
    delete_success = "FIV excluída com sucesso!"
    delete_error = "Erro ao excluir FIV"

    @property
    def sessions(self) -> list[CoachingSession]:
        return self.items

    async def fetch_sessions(self) -> list[CoachingSession]:
        return await self.fetch()

    async def create_session(self, data: CoachingSessionCreate) -> CoachingSession | None:
        row = data.model_dump(mode="json", exclude_none=True)
        row["status"] = (data.status or CoachingStatus.COMPLETED).value
        return await self.create(row)

    async def update_session(
        self, session_id: str, data: CoachingSessionUpdate
    ) -> CoachingSession | None:
        return await self.update(session_id, data.model_dump(mode="json", exclude_unset=True))

    async def delete_session(self, session_id: str) -> bool:
        return await self.delete(session_id)

    def sessions_by_salesperson(self, salesperson_id: str) -> list[CoachingSession]:
        return [s for s in self._items if s.salesperson_id == salesperson_id]

    def latest_session(self, salesperson_id: str) -> CoachingSession | None:
        sessions = self.sessions_by_salesperson(salesperson_id)
        return sessions[0] if sessions else None

    def sessions_by_week(self, week_number: int) -> list[CoachingSession]:
        return [s for s in self._items if s.week_number == week_number]

    def commitment_rate(self) -> float:
        return commitment_rate(self._items)

    def pending_member_ids(self, team_ids: Iterable[str], week: int) -> list[str]:
        return pending_member_ids(self._items, team_ids, week)
