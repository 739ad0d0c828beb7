"""Playback engine: advances, loops or freezes a `FrameSequence` on ticks."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Literal

from rich.text import Text

from rainfetch.frames.model import Frame, FrameSequence, rich_color

from .palette import STATIC_ROWS, palette_colors, render_palette
from .rain import DEFAULT_RAIN_ROWS, render_cloud

logger = logging.getLogger(__name__)

PlaybackMode = Literal["no_sequence", "playing", "frozen_at_last", "one_shot"]
DEFAULT_RATE_S = 0.2


@dataclass(frozen=True)
class PlaybackState:
    """Position and policy of playback.

    ``frozen`` means one-shot: render the current frame once and request no
    further ticks.
    """

    index: int = 0
    rate_s: float = DEFAULT_RATE_S
    loop: bool = True
    frozen: bool = False


class PlaybackEngine:
    """Owns the active frame sequence (or none) and its playback state."""

    def __init__(
        self,
        sequence: FrameSequence | None = None,
        *,
        rate_s: float = DEFAULT_RATE_S,
        loop: bool = True,
        one_shot: bool = False,
        rain_rows: int = DEFAULT_RAIN_ROWS,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sequence = sequence
        self._state = PlaybackState(
            index=0, rate_s=max(0.001, rate_s), loop=loop, frozen=one_shot
        )
        self._rain_rows = rain_rows
        self._rng = rng
        self._clock = clock
        self._started_s = clock()

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def sequence(self) -> FrameSequence | None:
        return self._sequence

    @property
    def index(self) -> int:
        return self._state.index

    @property
    def mode(self) -> PlaybackMode:
        if self._state.frozen:
            return "one_shot"
        if self._sequence is None:
            return "no_sequence"
        if not self._state.loop and self._state.index >= self._sequence.count - 1:
            return "frozen_at_last"
        return "playing"

    def load(self, sequence: FrameSequence | None) -> None:
        """Swap in a new sequence, rewinding and clearing the one-shot flag."""
        self._sequence = sequence
        self._state = replace(self._state, index=0, frozen=False)
        logger.debug(
            "Playback sequence replaced",
            extra={
                "event": "playback_loaded",
                "frame_count": sequence.count if sequence is not None else 0,
            },
        )

    def set_one_shot(self, enabled: bool = True) -> None:
        self._state = replace(self._state, frozen=enabled)

    def tick(self) -> bool:
        """Advance one step; return whether another tick should be scheduled."""
        state = self._state
        if state.frozen:
            return False
        sequence = self._sequence
        if sequence is None:
            return True
        if state.loop:
            self._state = replace(state, index=(state.index + 1) % sequence.count)
        elif state.index < sequence.count - 1:
            self._state = replace(state, index=state.index + 1)
        return True

    def current_frame(self) -> Frame | None:
        if self._sequence is None:
            return None
        return self._sequence[min(self._state.index, self._sequence.count - 1)]

    def render(self) -> Text:
        """Render the current frame, or the procedural cloud when none is loaded."""
        frame = self.current_frame()
        if frame is None:
            return render_cloud(
                animated=not self._state.frozen,
                rows=self._rain_rows,
                rng=self._rng,
            )
        return Text(frame.content.rstrip("\n"), style=rich_color(frame.color))

    def render_palette(self, now_s: float | None = None) -> Text:
        """Render the swatch strip for wall-clock time since playback start."""
        if self._state.frozen:
            return render_palette(STATIC_ROWS)
        now = self._clock() if now_s is None else now_s
        return render_palette(palette_colors(max(0.0, now - self._started_s)))

    @property
    def fps(self) -> float:
        return 1.0 / self._state.rate_s
