"""Messages that carry off-loop results back onto the app's message loop.

Workers never touch the cache or the playback engine directly; they post one
of these and the app applies it in arrival order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.message import Message

if TYPE_CHECKING:
    from rainfetch.frames.loader import FrameSourceResult
    from rainfetch.services.snapshots import CacheCategory, Snapshot


class SnapshotCollected(Message):
    """A collector finished (or failed) for one cache category."""

    def __init__(
        self,
        category: CacheCategory,
        seq: int,
        snapshot: Snapshot,
        completed_at: float,
        ok: bool = True,
    ) -> None:
        super().__init__()
        self.category = category
        self.seq = seq
        self.snapshot = snapshot
        self.completed_at = completed_at
        self.ok = ok


class FramesLoaded(Message):
    """Frame source resolution finished; the sequence may be ``None``."""

    def __init__(self, result: FrameSourceResult, *, reload: bool = False) -> None:
        super().__init__()
        self.result = result
        self.reload = reload
