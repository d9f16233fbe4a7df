"""Data-access layer: store contract and its implementations."""

from central_ia.db.memory import InMemoryStore
from central_ia.db.store import DataStore, Row
from central_ia.db.supabase import SupabaseClient, SupabaseStore

__all__ = ["DataStore", "InMemoryStore", "Row", "SupabaseClient", "SupabaseStore"]
