"""
roster_cache.ordering
---------------------
Display order for a category's records.

Records link to each other through ``prev_id``/``next_id`` ids only. These
helpers index the records by id and follow the links as lookups:

- reconstruct(): links -> ordered list
- relink():      ordered list -> links
- move():        drag-and-drop splice of an ordered list

Inconsistent link data never raises. The walk stops at a dangling or
repeated id and returns what it has so far; the next authoritative fetch
corrects it.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Dict, List, Sequence, TypeVar
from .logger import get_logger
from .models import Record

log = get_logger("roster_cache.Ordering")

T = TypeVar("T")


def find_heads(records: Sequence[Record]) -> List[Record]:
    return [rec for rec in records if rec.prev_id is None]


def reconstruct(records: Sequence[Record]) -> List[Record]:
    heads = find_heads(records)
    if not heads:
        if records:
            log.warning(f"[ORDER] no head among {len(records)} records")
        return []
    if len(heads) > 1:
        log.warning(f"[ORDER] {len(heads)} heads, following {heads[0].id}")

    index: Dict[str, Record] = {}
    for rec in records:
        index.setdefault(rec.id, rec)

    order = []
    seen = set()
    current = heads[0]
    while True:
        order.append(current)
        seen.add(current.id)
        next_id = current.next_id
        if next_id is None:
            break
        if next_id not in index:
            log.warning(f"[ORDER] dangling next id after {current.id}")
            break
        if next_id in seen:
            log.warning(f"[ORDER] cycle at {next_id}")
            break
        current = index[next_id]

    if len(order) < len(records):
        log.debug(f"[ORDER] partial order {len(order)}/{len(records)}")
    return order


def relink(sequence: Sequence[Record]) -> List[Record]:
    last = len(sequence) - 1
    return [
        replace(
            rec,
            prev_id=sequence[i - 1].id if i > 0 else None,
            next_id=sequence[i + 1].id if i < last else None,
            images=list(rec.images),
            signed_urls=dict(rec.signed_urls),
            extra=dict(rec.extra),
        )
        for i, rec in enumerate(sequence)
    ]


def move(sequence: Sequence[T], source_index: int, destination_index: int) -> List[T]:
    items = list(sequence)
    item = items.pop(source_index)
    items.insert(destination_index, item)
    return items
