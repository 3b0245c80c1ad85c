from typing import Dict, Optional
from roster_cache.storage.provider import SlotStore

class InMemorySlotStore(SlotStore):
    """Dict-backed slots. Durable for the lifetime of the process only."""

    def __init__(self):
        self.slots: Dict[str, str] = {}

    def load(self, slot: str) -> Optional[str]:
        return self.slots.get(slot)

    def save(self, slot: str, value: str):
        self.slots[slot] = value

    def delete(self, slot: str):
        self.slots.pop(slot, None)

    def close(self): pass
