"""Supabase client module for database operations."""

import logging
from typing import Any, cast

from supabase import Client, create_client

from central_ia.core.config import settings
from central_ia.core.exceptions import DatabaseError
from central_ia.db.store import Row

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Singleton Supabase client for backend operations."""

    _client: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """Get or create the Supabase client singleton.

        Returns:
            Initialized Supabase client.

        Raises:
            DatabaseError: If client initialization fails.
        """
        if cls._client is None:
            try:
                cls._client = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_ROLE_KEY.get_secret_value(),
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                logger.exception("Failed to initialize Supabase client")
                raise DatabaseError(f"Failed to initialize database connection: {e}") from e
        return cls._client

    @classmethod
    def reset_client(cls) -> None:
        """Reset the client singleton (useful for testing)."""
        cls._client = None


class SupabaseStore:
    """``DataStore`` backed by Supabase (PostgREST) tables."""

    def __init__(self, client: Client | None = None) -> None:
        """Initialize the store.

        Args:
            client: Supabase client; defaults to the shared singleton.
        """
        self._client = client

    def _get_client(self) -> Client:
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    @staticmethod
    def _apply_filters(query: Any, filters: Row) -> Any:
        for column, value in filters.items():
            query = query.eq(column, value)
        return query

    async def select(
        self,
        table: str,
        filters: Row,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        """Select all columns of the rows matching ``filters``.

        Raises:
            DatabaseError: If the query is rejected.
        """
        try:
            query = self._apply_filters(self._get_client().table(table).select("*"), filters)
            if order_by:
                query = query.order(order_by, desc=descending)
            response = query.execute()
            return cast(list[Row], response.data or [])
        except DatabaseError:
            raise
        except Exception as e:
            logger.exception("Error selecting rows", extra={"table": table})
            raise DatabaseError(f"Failed to fetch from {table}: {e}") from e

    async def insert(self, table: str, row: Row) -> Row:
        """Insert one row and return it as stored.

        Raises:
            DatabaseError: If the insert is rejected or returns nothing.
        """
        try:
            response = self._get_client().table(table).insert(row).execute()
            if response.data and len(response.data) > 0:
                return cast(Row, response.data[0])
            raise DatabaseError(f"Failed to insert into {table}")
        except DatabaseError:
            raise
        except Exception as e:
            logger.exception("Error inserting row", extra={"table": table})
            raise DatabaseError(f"Failed to insert into {table}: {e}") from e

    async def update(self, table: str, filters: Row, patch: Row) -> list[Row]:
        """Apply ``patch`` to the matching rows and return them.

        Raises:
            DatabaseError: If the update is rejected.
        """
        try:
            query = self._apply_filters(self._get_client().table(table).update(patch), filters)
            response = query.execute()
            return cast(list[Row], response.data or [])
        except Exception as e:
            logger.exception("Error updating rows", extra={"table": table})
            raise DatabaseError(f"Failed to update {table}: {e}") from e

    async def delete(self, table: str, filters: Row) -> list[Row]:
        """Delete the matching rows and return them.

        Raises:
            DatabaseError: If the delete is rejected.
        """
        try:
            query = self._apply_filters(self._get_client().table(table).delete(), filters)
            response = query.execute()
            return cast(list[Row], response.data or [])
        except Exception as e:
            logger.exception("Error deleting rows", extra={"table": table})
            raise DatabaseError(f"Failed to delete from {table}: {e}") from e
