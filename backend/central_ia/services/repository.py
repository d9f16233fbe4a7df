"""Owner-scoped CRUD repository shared by the ritual tables."""

import logging
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from central_ia.core.exceptions import NotFoundError
from central_ia.core.notices import NoticeBoard
from central_ia.db.store import OWNER_COLUMN, DataStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class OwnedRepository(Generic[ModelT]):
    """Loads and mutates one table's rows for a single owner.

    Subclasses set ``table``, ``model``, ``resource`` and the notice texts.
    Reads degrade to an empty list; writes return ``None``/``False`` on
    failure after logging and posting an error notice.
    """

    table: str
    model: type[ModelT]
    resource: str
    order_by: str = "date"

    fetch_error = "Erro ao carregar dados"
    create_success = "Registro criado com sucesso!"
    create_error = "Erro ao criar registro"
    update_success = "Registro atualizado com sucesso!"
    update_error = "Erro ao atualizar registro"
    delete_success = "Registro excluído com sucesso!"
    delete_error = "Erro ao excluir registro"

    def __init__(
        self,
        store: DataStore,
        owner_id: str,
        notices: NoticeBoard | None = None,
    ) -> None:
        self._store = store
        self._owner_id = owner_id
        self._notices = notices or NoticeBoard()
        self._items: list[ModelT] = []
        self.error: str | None = None

    @property
    def items(self) -> list[ModelT]:
        return list(self._items)

    def _scope(self, item_id: str) -> dict[str, str]:
        return {"id": item_id, OWNER_COLUMN: self._owner_id}

    async def fetch(self) -> list[ModelT]:
        """Load the owner's rows, newest first."""
        self.error = None
        try:
            rows = await self._store.select(
                self.table,
                {OWNER_COLUMN: self._owner_id},
                order_by=self.order_by,
                descending=True,
            )
            self._items = [self.model.model_validate(row) for row in rows]
        except Exception as e:
            logger.exception(
                "Error fetching %s", self.resource, extra={"user_id": self._owner_id}
            )
            self.error = getattr(e, "message", str(e))
            self._items = []
            self._notices.error(self.fetch_error)
        return self.items

    async def create(self, row: dict[str, Any]) -> ModelT | None:
        row = {**row, OWNER_COLUMN: self._owner_id}
        try:
            created = self.model.model_validate(await self._store.insert(self.table, row))
        except Exception as e:
            logger.exception("Error creating %s", self.resource, extra={"user_id": self._owner_id})
            self._notices.error(f"{self.create_error}: {getattr(e, 'message', e)}")
            return None

        self._items = [created, *self._items]
        self._notices.success(self.create_success)
        return created

    async def update(self, item_id: str, patch: dict[str, Any]) -> ModelT | None:
        try:
            rows = await self._store.update(self.table, self._scope(item_id), patch)
            if not rows:
                raise NotFoundError(self.resource, item_id)
            updated = self.model.model_validate(rows[0])
        except Exception as e:
            logger.exception("Error updating %s", self.resource, extra={"id": item_id})
            self._notices.error(f"{self.update_error}: {getattr(e, 'message', e)}")
            return None

        self._items = [
            updated if i.id == item_id else i  # type: ignore[attr-defined]
            for i in self._items
        ]
        self._notices.success(self.update_success)
        return updated

    async def delete(self, item_id: str) -> bool:
        try:
            rows = await self._store.delete(self.table, self._scope(item_id))
            if not rows:
                raise NotFoundError(self.resource, item_id)
        except Exception as e:
            logger.exception("Error deleting %s", self.resource, extra={"id": item_id})
            self._notices.error(f"{self.delete_error}: {getattr(e, 'message', e)}")
            return False

        self._items = [
            i for i in self._items if i.id != item_id  # type: ignore[attr-defined]
        ]
        self._notices.success(self.delete_success)
        return True
