# roster_cache/storage/__init__.py

from .provider import SlotStore
from .providers.memory_provider import InMemorySlotStore
from .providers.sqlite_provider import SQLiteSlotStore
import os


def load_slot_store(config: dict | None = None) -> SlotStore:
    """
    Factory resolver for selecting the slot persistence backend.

    For now:
        - sqlite (default)
        - memory
    """
    config = config or {}
    provider = config.get("provider") or os.getenv("ROSTER_CACHE_STORE_PROVIDER", "sqlite")

    if provider == "memory":
        return InMemorySlotStore()

    if provider == "sqlite":
        db_path = config.get("sqlite_path") or os.getenv("ROSTER_CACHE_DB_PATH", "db/roster_cache.db")
        return SQLiteSlotStore(db_path)

    raise ValueError(f"Unknown slot store provider: {provider}")


__all__ = [
    "SlotStore",
    "InMemorySlotStore",
    "SQLiteSlotStore",
    "load_slot_store",
]
