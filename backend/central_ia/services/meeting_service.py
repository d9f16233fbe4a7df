"""Monthly goal meeting (RMR) repository."""

import logging
from datetime import date, timedelta

from central_ia.db.store import MEETINGS_TABLE
from central_ia.models.meeting import Meeting, MeetingCreate, MeetingStatus, MeetingUpdate
from central_ia.services.repository import OwnedRepository

logger = logging.getLogger(__name__)


def next_meeting_date(today: date) -> date:
    """First business day of the month after ``today``.

    A Saturday or Sunday first is pushed to the following Monday.
    """
    if today.month == 12:
        first = date(today.year + 1, 1, 1)
    else:
        first = date(today.year, today.month + 1, 1)
    weekday = first.weekday()
    if weekday == 5:
        return first + timedelta(days=2)
    if weekday == 6:
        return first + timedelta(days=1)
    return first


class MeetingRepository(OwnedRepository[Meeting]):
    """The owner's RMR meetings, newest first."""

    table = MEETINGS_TABLE
    model = Meeting
    resource = "RMR"

    fetch_error = "Erro ao carregar RMRs"
    create_success = "RMR criada com sucesso!"
    create_error = "Erro ao criar RMR"
    update_success = "RMR atualizada com sucesso!"
    update_error = "Erro ao atualizar RMR"
    delete_success = "RMR excluída com sucesso!"
    delete_error = "Erro ao excluir RMR"

    @property
    def meetings(self) -> list[Meeting]:
        return self.items

    async def fetch_meetings(self) -> list[Meeting]:
        return await self.fetch()

    async def create_meeting(self, data: MeetingCreate) -> Meeting | None:
        row = data.model_dump(mode="json", exclude_none=True)
        row["strategies"] = data.strategies or []
        return await self.create(row)

    async def update_meeting(self, meeting_id: str, data: MeetingUpdate) -> Meeting | None:
        return await self.update(meeting_id, data.model_dump(mode="json", exclude_unset=True))

    async def delete_meeting(self, meeting_id: str) -> bool:
        return await self.delete(meeting_id)

    def get_by_month(self, month: int, year: int) -> Meeting | None:
        return next((m for m in self._items if m.month == month and m.year == year), None)

    def get_latest_completed(self) -> Meeting | None:
        return next((m for m in self._items if m.status == MeetingStatus.COMPLETED), None)
