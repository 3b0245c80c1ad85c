from __future__ import annotations
from typing import Optional
import sqlite3, os
from roster_cache.storage.provider import SlotStore
from roster_cache.utils import now_ts


class SQLiteSlotStore(SlotStore):
    """Slots in a single SQLite table. ``save`` commits before returning."""

    def __init__(self, path="db/roster_cache.db"):
        # If no directory, default to current working directory
        dir_path = os.path.dirname(path) or "."
        os.makedirs(dir_path, exist_ok=True)
        self.path = path
        self.db = sqlite3.connect(path, check_same_thread=False)

        self._init()

    def _init(self) -> None:
        self.db.execute("""CREATE TABLE IF NOT EXISTS slots(
            name TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )""")
        self.db.commit()

    def load(self, slot: str) -> Optional[str]:
        cur = self.db.execute("SELECT value FROM slots WHERE name=?", (slot,))
        row = cur.fetchone()
        if not row: return None
        return row[0]

    def save(self, slot: str, value: str) -> None:
        self.db.execute(
            "INSERT INTO slots(name,value,updated_at) VALUES(?,?,?) "
            "ON CONFLICT(name) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
            (slot, value, now_ts())
        )
        self.db.commit()

    def delete(self, slot: str) -> None:
        self.db.execute("DELETE FROM slots WHERE name=?", (slot,))
        self.db.commit()

    def close(self):
        self.db.close()
