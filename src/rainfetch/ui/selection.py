"""Clamped list cursor used by views that support up/down navigation."""

from __future__ import annotations


class SelectionCursor:
    def __init__(self, index: int = 0) -> None:
        self._index = max(0, index)

    @property
    def index(self) -> int:
        return self._index

    def move(self, delta: int, count: int) -> int:
        if count <= 0:
            self._index = 0
            return self._index
        self._index = max(0, min(count - 1, self._index + delta))
        return self._index

    def clamp(self, count: int) -> int:
        """Pull the cursor back inside a list that may have shrunk."""
        return self.move(0, count)

    def reset(self) -> None:
        self._index = 0
