"""
roster_cache.url_cache
----------------------
Encrypted imageKey -> {url, expiresAtEpoch} cache with TTL checks.

An entry is served only while ``now < expiresAtEpoch``. Expired entries stay
in the slot until prune_expired() or delete_many() rewrites it; lookups
report them exactly like unknown keys.
"""

from __future__ import annotations
from typing import Callable, Dict, Iterable, Optional
from .config import DEFAULT_TTL_SECONDS
from .crypto import CipherService
from .errors import RosterCacheError
from .logger import get_logger
from .models import SignedUrlEntry, entries_from_dict, entries_to_dict
from .slot import EncryptedSlot
from .storage import SlotStore
from .utils import now_ms

log = get_logger("roster_cache.SignedUrls")


class SignedUrlCache(EncryptedSlot):

    def __init__(self, cipher: CipherService, store: SlotStore, slot: str,
                 clock: Optional[Callable[[], int]] = None, default_ttl: int = DEFAULT_TTL_SECONDS):
        super().__init__(cipher, store, slot)
        self.clock = clock or now_ms
        self.default_ttl = default_ttl

    def _load(self) -> Optional[Dict[str, SignedUrlEntry]]:
        try:
            data = self._read()
            if data is None:
                return None
            return entries_from_dict(data)
        except RosterCacheError as e:
            log.error(f"[URLS READ] slot={self.slot} failed: {e}")
            raise

    def _store(self, entries: Dict[str, SignedUrlEntry]) -> None:
        self._write(entries_to_dict(entries))

    def set_one(self, image_key: str, url: str, ttl_seconds: Optional[int] = None) -> SignedUrlEntry:
        if ttl_seconds is None:
            ttl_seconds = self.default_ttl
        entry = SignedUrlEntry(url=url, expires_at=self.clock() + int(ttl_seconds * 1000))
        entries = self._load() or {}
        entries[image_key] = entry
        self._store(entries)
        log.debug(f"[URLS SET] slot={self.slot} key={image_key} expires={entry.expires_at}")
        return entry

    def set_many(self, entries: Optional[Dict[str, SignedUrlEntry]]) -> None:
        if not entries:
            return
        current = self._load() or {}
        current.update(entries)
        self._store(current)
        log.debug(f"[URLS SET] slot={self.slot} count={len(entries)} size={len(current)}")

    def get_one(self, image_key: str) -> Optional[str]:
        entries = self._load()
        if not entries:
            return None
        entry = entries.get(image_key)
        if entry is None or entry.is_expired(self.clock()):
            return None
        return entry.url

    def get_all(self) -> Optional[Dict[str, SignedUrlEntry]]:
        return self._load()

    def get_valid(self) -> Dict[str, SignedUrlEntry]:
        now = self.clock()
        return {k: e for k, e in (self._load() or {}).items() if not e.is_expired(now)}

    def prune_expired(self) -> int:
        entries = self._load()
        if entries is None:
            return 0
        now = self.clock()
        live = {k: e for k, e in entries.items() if not e.is_expired(now)}
        self._store(live)
        removed = len(entries) - len(live)
        log.info(f"[URLS PRUNE] slot={self.slot} removed={removed} kept={len(live)}")
        return removed

    def delete_many(self, image_keys: Iterable[str]) -> int:
        entries = self._load()
        if entries is None:
            return 0
        removed = 0
        for key in image_keys:
            if entries.pop(key, None) is not None:
                removed += 1
        if removed:
            self._store(entries)
        log.info(f"[URLS DELETE] slot={self.slot} removed={removed}")
        return removed
