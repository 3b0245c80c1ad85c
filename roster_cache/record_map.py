"""
roster_cache.record_map
-----------------------
Encrypted id -> Record map persisted in one slot.

Decrypt and shape failures on read raise DecryptionError /
MalformedPayloadError; a slot that cannot be opened is never mistaken for
an empty roster.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional
from .errors import RosterCacheError
from .logger import get_logger
from .models import Record, SignedUrlEntry, records_from_dict
from .slot import EncryptedSlot

log = get_logger("roster_cache.Records")


class EncryptedRecordMap(EncryptedSlot):

    def _load(self) -> Optional[Dict[str, Record]]:
        try:
            data = self._read()
            if data is None:
                return None
            return records_from_dict(data)
        except RosterCacheError as e:
            log.error(f"[RECORDS READ] slot={self.slot} failed: {e}")
            raise

    def _store(self, records: Dict[str, Record]) -> None:
        self._write({rid: rec.to_dict() for rid, rec in records.items()})

    def upsert(self, record: Record) -> None:
        records = self._load() or {}
        records[record.id] = record
        self._store(records)
        log.debug(f"[RECORDS UPSERT] slot={self.slot} id={record.id} size={len(records)}")

    def upsert_many(self, records: Iterable[Record]) -> None:
        current = self._load() or {}
        count = 0
        for rec in records:
            current[rec.id] = rec
            count += 1
        self._store(current)
        log.debug(f"[RECORDS UPSERT] slot={self.slot} count={count} size={len(current)}")

    def get_all(self) -> Optional[Dict[str, Record]]:
        return self._load()

    def get_one(self, record_id: str) -> Optional[Record]:
        records = self._load()
        if records is None:
            return None
        return records.get(record_id)

    def replace_all(self, records: Iterable[Record]) -> None:
        fresh = {rec.id: rec for rec in records}
        self._store(fresh)
        log.info(f"[RECORDS REPLACE] slot={self.slot} size={len(fresh)}")

    def replace_category(self, category: str, records: Iterable[Record]) -> None:
        """Swap one category's records for ``records``; other categories are kept."""
        current = self._load() or {}
        kept = {rid: rec for rid, rec in current.items() if rec.extra.get("category") != category}
        dropped = len(current) - len(kept)
        for rec in records:
            kept[rec.id] = rec
        self._store(kept)
        log.info(f"[RECORDS REPLACE] slot={self.slot} category={category} dropped={dropped} size={len(kept)}")

    def remove(self, record_ids: Iterable[str]) -> List[Record]:
        records = self._load()
        if records is None:
            return []
        removed = [records.pop(rid) for rid in list(record_ids) if rid in records]
        if removed:
            self._store(records)
        log.info(f"[RECORDS REMOVE] slot={self.slot} removed={len(removed)}")
        return removed

    def signed_urls_for(self, record_id: str) -> Optional[Dict[str, SignedUrlEntry]]:
        rec = self.get_one(record_id)
        if rec is None or not rec.signed_urls:
            return None
        return dict(rec.signed_urls)
