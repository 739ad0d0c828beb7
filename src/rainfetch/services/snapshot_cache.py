"""Per-category TTL cache of the most recent metric snapshots.

The app's message loop is the only writer. Views read through `read`, which
never blocks and returns ``None`` until a category has been resolved once.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace

from .snapshots import CATEGORIES, CacheCategory, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_TTLS_S: Mapping[CacheCategory, float] = {
    "system": 10.0,
    "network": 10.0,
    "hardware": 10.0,
    "process": 10.0,
    "weather": 30.0,
}


@dataclass(frozen=True)
class CacheEntry:
    snapshot: Snapshot | None = None
    last_refreshed: float | None = None
    ttl_s: float = 10.0
    seq: int = 0


class SnapshotCache:
    def __init__(
        self,
        ttls_s: Mapping[CacheCategory, float] | None = None,
        *,
        categories: tuple[CacheCategory, ...] = CATEGORIES,
    ) -> None:
        ttls = dict(DEFAULT_TTLS_S)
        if ttls_s:
            ttls.update(ttls_s)
        self._entries: dict[CacheCategory, CacheEntry] = {
            category: CacheEntry(ttl_s=ttls[category]) for category in categories
        }
        self._dispatched: dict[CacheCategory, int] = {c: 0 for c in categories}
        self._in_flight: set[CacheCategory] = set()

    @property
    def categories(self) -> tuple[CacheCategory, ...]:
        return tuple(self._entries)

    def entry(self, category: CacheCategory) -> CacheEntry:
        return self._entries[category]

    def read(self, category: CacheCategory) -> Snapshot | None:
        entry = self._entries.get(category)
        return entry.snapshot if entry is not None else None

    def should_refresh(self, category: CacheCategory, now: float) -> bool:
        entry = self._entries[category]
        if entry.last_refreshed is None:
            return True
        return now - entry.last_refreshed > entry.ttl_s

    def in_flight(self, category: CacheCategory) -> bool:
        return category in self._in_flight

    def due_categories(self, now: float) -> list[CacheCategory]:
        return [
            category
            for category in self._entries
            if category not in self._in_flight and self.should_refresh(category, now)
        ]

    def begin_refresh(self, category: CacheCategory) -> int:
        """Mark ``category`` in flight and return its dispatch sequence number."""
        seq = self._dispatched[category] + 1
        self._dispatched[category] = seq
        self._in_flight.add(category)
        return seq

    def apply(
        self,
        category: CacheCategory,
        seq: int,
        snapshot: Snapshot,
        completed_at: float,
    ) -> bool:
        """Store a collector result; completions older than the stored one lose."""
        if seq >= self._dispatched.get(category, 0):
            self._in_flight.discard(category)
        entry = self._entries[category]
        if seq <= entry.seq:
            logger.debug(
                "Dropping stale '%s' snapshot (seq %d <= %d)",
                category,
                seq,
                entry.seq,
                extra={"event": "snapshot_stale", "category": category},
            )
            return False
        self._entries[category] = replace(
            entry, snapshot=snapshot, last_refreshed=completed_at, seq=seq
        )
        return True
