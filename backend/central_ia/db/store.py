"""Row-oriented data store contract shared by every repository.

All calls are owner-scoped by the caller through ``filters`` (column
equality predicates); a rejected call raises ``DatabaseError``.
"""

from typing import Any, Protocol

Row = dict[str, Any]

LEADS_TABLE = "leads"
MEETINGS_TABLE = "rmr_meetings"
COACHING_TABLE = "fivi_sessions"

OWNER_COLUMN = "user_id"


class DataStore(Protocol):
    """Async CRUD over named tables."""

    async def select(
        self,
        table: str,
        filters: Row,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]: ...

    async def insert(self, table: str, row: Row) -> Row: ...

    async def update(self, table: str, filters: Row, patch: Row) -> list[Row]: ...

    async def delete(self, table: str, filters: Row) -> list[Row]: ...
