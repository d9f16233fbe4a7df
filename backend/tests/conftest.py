"""Shared fixtures for pipeline and alert tests."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from central_ia.core.clock import Clock, fixed_clock
from central_ia.core.notices import NoticeBoard
from central_ia.db.memory import InMemoryStore

TZ = ZoneInfo("America/Sao_Paulo")

# Tuesday, day 20 of October 2026 (week 43 by the dashboard's count)
NOW = datetime(2026, 10, 20, 10, 0, tzinfo=TZ)

OWNER_ID = "user-123"
OTHER_OWNER_ID = "user-999"


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> Clock:
    return fixed_clock(NOW)


@pytest.fixture
def notices() -> NoticeBoard:
    return NoticeBoard()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def make_lead_row() -> Callable[..., dict[str, Any]]:
    """Factory for ``leads`` rows owned by OWNER_ID."""

    def _make(**overrides: Any) -> dict[str, Any]:
        row: dict[str, Any] = {
            "id": f"lead-{uuid.uuid4().hex[:8]}",
            "user_id": OWNER_ID,
            "client_name": "Padaria Pão Quente",
            "status": "prospeccao",
            "prospecting_date": (NOW - timedelta(days=2)).isoformat(),
            "estimated_value": 1000.0,
            "created_at": (NOW - timedelta(days=2)).isoformat(),
            "updated_at": (NOW - timedelta(days=1)).isoformat(),
        }
        row.update(overrides)
        return row

    return _make
