# roster_cache/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from .errors import MalformedPayloadError

# Link field names written by older clients
LEGACY_LINK_KEYS = {"prevId": "prevModel", "nextId": "nextModel"}
RECORD_KEYS = ("id", "prevId", "nextId", "images", "signedUrls", "prevModel", "nextModel")


def _expect(cond: bool, msg: str) -> None:
    if not cond:
        raise MalformedPayloadError(msg)


@dataclass(frozen=True)
class SignedUrlEntry:
    url: str
    expires_at: int  # epoch milliseconds

    def is_expired(self, now: int) -> bool:
        # The boundary instant counts as expired
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "expiresAtEpoch": self.expires_at}

    @classmethod
    def from_dict(cls, data: Any) -> "SignedUrlEntry":
        _expect(isinstance(data, dict), "signed url entry must be an object")
        url = data.get("url")
        expires = data.get("expiresAtEpoch", data.get("expires"))
        _expect(isinstance(url, str) and bool(url), "signed url entry needs a non-empty 'url'")
        _expect(
            isinstance(expires, int) and not isinstance(expires, bool),
            "signed url entry needs an integer 'expiresAtEpoch'",
        )
        return cls(url=url, expires_at=expires)


def entries_from_dict(data: Any) -> Dict[str, SignedUrlEntry]:
    """Validate an imageKey -> entry mapping."""
    _expect(isinstance(data, dict), "signed url map must be an object")
    return {key: SignedUrlEntry.from_dict(value) for key, value in data.items()}


def entries_to_dict(entries: Dict[str, SignedUrlEntry]) -> Dict[str, Any]:
    return {key: entry.to_dict() for key, entry in entries.items()}


@dataclass
class Record:
    """
    One roster entry.

    ``prev_id``/``next_id`` are ids into the same category's record set,
    never object references. ``signed_urls`` is a display copy filled from
    the URL cache. Fields the cache does not interpret (name, category,
    social links, ...) ride along in ``extra``.
    """
    id: str
    prev_id: Optional[str] = None
    next_id: Optional[str] = None
    images: List[str] = field(default_factory=list)
    signed_urls: Dict[str, SignedUrlEntry] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def profile_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    def to_dict(self) -> Dict[str, Any]:
        d = dict(self.extra)
        d.update({
            "id": self.id,
            "prevId": self.prev_id,
            "nextId": self.next_id,
            "images": list(self.images),
            "signedUrls": entries_to_dict(self.signed_urls),
        })
        return d

    @classmethod
    def from_dict(cls, data: Any) -> "Record":
        _expect(isinstance(data, dict), "record must be an object")
        rec_id = data.get("id")
        _expect(isinstance(rec_id, str) and bool(rec_id), "record needs a non-empty string 'id'")

        links = {}
        for key, legacy in LEGACY_LINK_KEYS.items():
            value = data[key] if key in data else data.get(legacy)
            _expect(value is None or isinstance(value, str), f"record {rec_id}: '{key}' must be a string or null")
            links[key] = value or None

        images = data.get("images") or []
        _expect(
            isinstance(images, list) and all(isinstance(i, str) for i in images),
            f"record {rec_id}: 'images' must be a list of strings",
        )
        signed = data.get("signedUrls") or {}

        return cls(
            id=rec_id,
            prev_id=links["prevId"],
            next_id=links["nextId"],
            images=list(images),
            signed_urls=entries_from_dict(signed),
            extra={k: v for k, v in data.items() if k not in RECORD_KEYS},
        )


def records_from_dict(data: Any) -> Dict[str, Record]:
    """Validate an id -> record mapping as stored in the records slot."""
    _expect(isinstance(data, dict), "record map must be an object")
    out = {}
    for key, value in data.items():
        rec = Record.from_dict(value)
        _expect(rec.id == key, f"record map key {key!r} does not match record id {rec.id!r}")
        out[key] = rec
    return out
