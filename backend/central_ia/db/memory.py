"""In-memory ``DataStore`` for tests and local development."""

import copy
import logging
import uuid
from collections import defaultdict
from datetime import UTC, datetime
from typing import Any

from central_ia.core.exceptions import DatabaseError
from central_ia.db.store import Row

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Dict-of-lists store honouring the same contract as ``SupabaseStore``.

    Rows are deep-copied on the way in and out so callers never share
    state with the store. ``fail_next`` makes the next calls raise
    ``DatabaseError``, mimicking a rejected request.
    """

    def __init__(self, tables: dict[str, list[Row]] | None = None) -> None:
        self._tables: dict[str, list[Row]] = defaultdict(list)
        for table, rows in (tables or {}).items():
            self._tables[table] = copy.deepcopy(rows)
        self._pending_failures: list[str] = []
        self.calls: list[tuple[str, str]] = []

    def fail_next(self, message: str = "simulated store failure", times: int = 1) -> None:
        self._pending_failures.extend([message] * times)

    def rows(self, table: str) -> list[Row]:
        """Snapshot of a table's rows."""
        return copy.deepcopy(self._tables[table])

    def _record(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))
        if self._pending_failures:
            message = self._pending_failures.pop(0)
            raise DatabaseError(f"Failed to {operation} {table}: {message}")

    @staticmethod
    def _matches(row: Row, filters: Row) -> bool:
        return all(row.get(column) == value for column, value in filters.items())

    async def select(
        self,
        table: str,
        filters: Row,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        self._record("select", table)
        result = [copy.deepcopy(r) for r in self._tables[table] if self._matches(r, filters)]
        if order_by:
            present = [r for r in result if r.get(order_by) is not None]
            missing = [r for r in result if r.get(order_by) is None]
            present.sort(key=lambda r: _sort_key(r[order_by]), reverse=descending)
            # Postgres places NULLs first on DESC, last on ASC
            result = missing + present if descending else present + missing
        return result

    async def insert(self, table: str, row: Row) -> Row:
        self._record("insert", table)
        now = datetime.now(UTC).isoformat()
        stored = copy.deepcopy(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", now)
        stored.setdefault("updated_at", now)
        self._tables[table].append(stored)
        logger.debug("Row inserted", extra={"table": table, "row_id": stored["id"]})
        return copy.deepcopy(stored)

    async def update(self, table: str, filters: Row, patch: Row) -> list[Row]:
        self._record("update", table)
        updated = []
        for row in self._tables[table]:
            if self._matches(row, filters):
                row.update(copy.deepcopy(patch))
                updated.append(copy.deepcopy(row))
        return updated

    async def delete(self, table: str, filters: Row) -> list[Row]:
        self._record("delete", table)
        kept, deleted = [], []
        for row in self._tables[table]:
            (deleted if self._matches(row, filters) else kept).append(row)
        self._tables[table] = kept
        return deleted


def _sort_key(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
        except ValueError:
            return value
    return value
