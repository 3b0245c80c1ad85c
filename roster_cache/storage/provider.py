# roster_cache/storage/provider.py
from __future__ import annotations
from typing import Optional


class SlotStore:
    """
    Persists named string slots across process restarts.

    Values are opaque to the store: no parsing, no encryption. Providers
    document their durability window; ``save`` must not return before the
    value is durable within that window.
    """
    # Interface
    def load(self, slot: str) -> Optional[str]: ...
    def save(self, slot: str, value: str) -> None: ...
    def delete(self, slot: str) -> None: ...
    def close(self) -> None: ...
