"""
roster_cache.cache
------------------
RosterCache wires the cipher, the slot store and both encrypted caches into
one object. Build it once at startup and pass it to the code that needs it.

Flows:
- ingest():          server batch + encrypted URL blob -> ordered records
- prepare_reorder(): dragged list -> relinked batch for the server
- apply_confirmed(): server's authoritative set replaces the cached one
- apply_deletion():  drop deleted records and their image URLs
"""

from __future__ import annotations
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence
from .config import CacheSettings
from .crypto import CipherService
from .logger import get_logger, set_level
from .models import Record, entries_from_dict, entries_to_dict
from .ordering import move, reconstruct, relink
from .record_map import EncryptedRecordMap
from .storage import SlotStore, load_slot_store
from .url_cache import SignedUrlCache

log = get_logger("roster_cache.Cache")


class RosterCache:

    def __init__(self, settings: CacheSettings, store: Optional[SlotStore] = None,
                 clock: Optional[Callable[[], int]] = None):
        self.settings = settings
        set_level(settings.level)
        self.cipher = CipherService(settings.secret, settings.salt_bytes)
        self.store = store if store is not None else load_slot_store(settings.store_config())
        self.records = EncryptedRecordMap(self.cipher, self.store, settings.records_slot)
        self.urls = SignedUrlCache(self.cipher, self.store, settings.urls_slot,
                                   clock=clock, default_ttl=settings.default_ttl)

    @classmethod
    def from_env(cls, store: Optional[SlotStore] = None) -> "RosterCache":
        return cls(CacheSettings.from_env(), store=store)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------
    def ingest(self, raw_records: Iterable[Dict[str, Any]], encrypted_signed_urls: Optional[str]) -> List[Record]:
        """
        Merge a server batch into the caches and return it in display order.

        The URL blob is decrypted first: a bad blob raises before any
        record is written.
        """
        batch = [Record.from_dict(raw) for raw in raw_records]

        if encrypted_signed_urls:
            entries = entries_from_dict(self.cipher.decrypt_json(encrypted_signed_urls))
            self.urls.set_many(entries)
        else:
            entries = {}

        ordered = reconstruct(batch)
        self.records.upsert_many(batch)
        log.info({
            "event": "ingest",
            "records": len(batch),
            "ordered": len(ordered),
            "signed_urls": len(entries),
        })
        return ordered

    def encrypted_signed_urls(self) -> str:
        """Live URL entries encrypted for the server, which reuses still-valid URLs."""
        return self.cipher.encrypt_json(entries_to_dict(self.urls.get_valid()))

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------
    def hydrate(self, records: Sequence[Record]) -> List[Record]:
        live = self.urls.get_valid()
        return [
            replace(
                rec,
                images=list(rec.images),
                signed_urls={key: live[key] for key in rec.images if key in live},
                extra=dict(rec.extra),
            )
            for rec in records
        ]

    def profile_url(self, record: Record) -> Optional[str]:
        if record.profile_image is None:
            return None
        return self.urls.get_one(record.profile_image)

    def ordered(self, category: Optional[str] = None) -> List[Record]:
        """Cached records, optionally filtered by category, in display order."""
        records = self.records.get_all() or {}
        batch = [
            rec for rec in records.values()
            if category is None or rec.extra.get("category") == category
        ]
        return reconstruct(batch)

    # ------------------------------------------------------------------
    # Reorder / delete
    # ------------------------------------------------------------------
    def prepare_reorder(self, sequence: Sequence[Record], source_index: Optional[int] = None,
                        destination_index: Optional[int] = None) -> List[Record]:
        if source_index is not None and destination_index is not None:
            sequence = move(sequence, source_index, destination_index)
        relinked = relink(sequence)
        log.debug(f"[REORDER] prepared {len(relinked)} records")
        return relinked

    def apply_confirmed(self, records: Iterable[Dict[str, Any] | Record],
                        category: Optional[str] = None) -> List[Record]:
        """
        Install the server's authoritative records.

        With ``category`` only that category's cached records are replaced;
        without it the whole map is.
        """
        batch = [rec if isinstance(rec, Record) else Record.from_dict(rec) for rec in records]
        if category is None:
            self.records.replace_all(batch)
        else:
            self.records.replace_category(category, batch)
        return reconstruct(batch)

    def apply_deletion(self, remaining: Iterable[Dict[str, Any] | Record],
                       deleted: Iterable[Dict[str, Any] | Record],
                       category: Optional[str] = None) -> List[Record]:
        gone = [rec if isinstance(rec, Record) else Record.from_dict(rec) for rec in deleted]
        ordered = self.apply_confirmed(remaining, category=category)
        if category is not None:
            self.records.remove(rec.id for rec in gone)
        image_keys = [key for rec in gone for key in rec.images]
        if image_keys:
            self.urls.delete_many(image_keys)
        log.info({"event": "delete", "records": len(gone), "images": len(image_keys)})
        return ordered

    def maintenance(self) -> int:
        return self.urls.prune_expired()

    def close(self) -> None:
        self.store.close()
