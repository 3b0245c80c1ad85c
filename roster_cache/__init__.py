"""
Roster Cache Package
====================
Client-side cache for roster records and their signed image URLs.

Provides:
- AES-GCM cipher with an HKDF-derived key
- Encrypted record map and signed-URL TTL cache over pluggable slot storage
- Display-order reconstruction from prevId/nextId links, and relinking after a reorder
"""

from .cache import RosterCache
from .config import CacheSettings
from .crypto import CipherService
from .errors import ConfigError, DecryptionError, MalformedPayloadError, RosterCacheError
from .models import Record, SignedUrlEntry
from .ordering import move, reconstruct, relink
from .record_map import EncryptedRecordMap
from .url_cache import SignedUrlCache

__all__ = [
    "RosterCache",
    "CacheSettings",
    "CipherService",
    "ConfigError",
    "DecryptionError",
    "MalformedPayloadError",
    "RosterCacheError",
    "Record",
    "SignedUrlEntry",
    "move",
    "reconstruct",
    "relink",
    "EncryptedRecordMap",
    "SignedUrlCache",
]
