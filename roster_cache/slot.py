# roster_cache/slot.py
from __future__ import annotations
from typing import Any, Dict, Optional
from .crypto import CipherService
from .storage import SlotStore


class EncryptedSlot:
    """
    One named slot holding a JSON object encrypted as a single blob.

    Every read decrypts the persisted value afresh, so callers never hold a
    live reference into cache state. Writes are a full
    decrypt-modify-encrypt-save cycle; two processes sharing a slot race
    with last-writer-wins semantics.
    """

    def __init__(self, cipher: CipherService, store: SlotStore, slot: str):
        self.cipher = cipher
        self.store = store
        self.slot = slot

    def _read(self) -> Optional[Dict[str, Any]]:
        blob = self.store.load(self.slot)
        if blob is None:
            return None
        return self.cipher.decrypt_json(blob)

    def _write(self, data: Dict[str, Any]) -> None:
        self.store.save(self.slot, self.cipher.encrypt_json(data))

    def exists(self) -> bool:
        return self.store.load(self.slot) is not None
