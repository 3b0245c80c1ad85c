# roster_cache/config.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging, os
from .errors import ConfigError

DEFAULT_TTL_SECONDS = 60 * 60  # signed URLs are issued for one hour


@dataclass
class CacheSettings:
    secret: str
    salt: Optional[str] = None
    store_provider: str = "sqlite"
    sqlite_path: str = "db/roster_cache.db"
    records_slot: str = "records"
    urls_slot: str = "signed_urls"
    default_ttl: int = DEFAULT_TTL_SECONDS
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.secret:
            raise ConfigError("ROSTER_CACHE_SECRET is required")
        if self.records_slot == self.urls_slot:
            raise ConfigError(f"records and signed url slots must differ (both {self.records_slot!r})")
        if self.default_ttl <= 0:
            raise ConfigError("default_ttl must be positive")

    @property
    def salt_bytes(self) -> Optional[bytes]:
        return self.salt.encode("utf-8") if self.salt else None

    @property
    def level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO

    def store_config(self) -> dict:
        return {"provider": self.store_provider, "sqlite_path": self.sqlite_path}

    @classmethod
    def from_env(cls) -> "CacheSettings":
        ttl = os.getenv("ROSTER_CACHE_DEFAULT_TTL", str(DEFAULT_TTL_SECONDS))
        try:
            ttl_seconds = int(ttl)
        except ValueError as e:
            raise ConfigError(f"ROSTER_CACHE_DEFAULT_TTL must be an integer, got {ttl!r}") from e

        return cls(
            secret=os.getenv("ROSTER_CACHE_SECRET", ""),
            salt=os.getenv("ROSTER_CACHE_SALT") or None,
            store_provider=os.getenv("ROSTER_CACHE_STORE_PROVIDER", "sqlite").lower(),
            sqlite_path=os.getenv("ROSTER_CACHE_DB_PATH", "db/roster_cache.db"),
            records_slot=os.getenv("ROSTER_CACHE_RECORDS_SLOT", "records"),
            urls_slot=os.getenv("ROSTER_CACHE_URLS_SLOT", "signed_urls"),
            default_ttl=ttl_seconds,
            log_level=os.getenv("ROSTER_CACHE_LOG_LEVEL", "INFO"),
        )
