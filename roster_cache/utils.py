"""
roster_cache.utils
------------------
Lightweight helpers for epoch-millisecond timestamps, base64 utilities, and canonical JSON serialization.
Canonical JSON keeps encrypted slot plaintext stable for identical cache state.
"""

from __future__ import annotations
import base64, json, time
from typing import Any, Dict

def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"), validate=True)

def now_ms() -> int:
    # Milliseconds since the Unix epoch, wall clock
    return int(time.time() * 1000)

def now_ts() -> str:
    # RFC3339 / ISO 8601 in UTC, second precision
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())

def canonical_json(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
