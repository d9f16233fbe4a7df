"""Tests for the in-memory data store."""

import pytest

from central_ia.core.exceptions import DatabaseError
from central_ia.db.memory import InMemoryStore


@pytest.mark.asyncio
async def test_insert_assigns_id_and_timestamps() -> None:
    store = InMemoryStore()

    row = await store.insert("leads", {"user_id": "u1", "client_name": "Acme"})

    assert row["id"]
    assert row["created_at"]
    assert row["updated_at"]
    assert store.rows("leads") == [row]


@pytest.mark.asyncio
async def test_select_filters_by_every_column() -> None:
    store = InMemoryStore(
        {
            "leads": [
                {"id": "a", "user_id": "u1", "status": "prospeccao"},
                {"id": "b", "user_id": "u1", "status": "abordagem"},
                {"id": "c", "user_id": "u2", "status": "prospeccao"},
            ]
        }
    )

    rows = await store.select("leads", {"user_id": "u1", "status": "prospeccao"})

    assert [r["id"] for r in rows] == ["a"]


@pytest.mark.asyncio
async def test_select_orders_descending_by_timestamp() -> None:
    store = InMemoryStore(
        {
            "leads": [
                {"id": "old", "user_id": "u1", "created_at": "2026-01-01T10:00:00+00:00"},
                {"id": "new", "user_id": "u1", "created_at": "2026-03-01T10:00:00+00:00"},
                {"id": "mid", "user_id": "u1", "created_at": "2026-02-01T10:00:00+00:00"},
            ]
        }
    )

    rows = await store.select("leads", {"user_id": "u1"}, order_by="created_at", descending=True)

    assert [r["id"] for r in rows] == ["new", "mid", "old"]


@pytest.mark.asyncio
async def test_update_and_delete_return_affected_rows() -> None:
    store = InMemoryStore({"leads": [{"id": "a", "user_id": "u1", "status": "prospeccao"}]})

    updated = await store.update("leads", {"id": "a", "user_id": "u1"}, {"status": "abordagem"})
    missed = await store.update("leads", {"id": "a", "user_id": "u2"}, {"status": "negociacao"})
    deleted = await store.delete("leads", {"id": "a", "user_id": "u1"})

    assert updated[0]["status"] == "abordagem"
    assert missed == []
    assert deleted[0]["id"] == "a"
    assert store.rows("leads") == []


@pytest.mark.asyncio
async def test_returned_rows_are_copies() -> None:
    store = InMemoryStore({"leads": [{"id": "a", "user_id": "u1"}]})

    rows = await store.select("leads", {})
    rows[0]["user_id"] = "hacked"

    assert store.rows("leads")[0]["user_id"] == "u1"


@pytest.mark.asyncio
async def test_fail_next_raises_database_error_once() -> None:
    store = InMemoryStore()
    store.fail_next("connection reset")

    with pytest.raises(DatabaseError, match="connection reset"):
        await store.select("leads", {})

    assert await store.select("leads", {}) == []
