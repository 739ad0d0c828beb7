"""Frame source resolution: first loadable candidate wins, else procedural."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from .delimited import parse_delimited_file
from .errors import FrameLoadError
from .model import FrameSequence
from .recording import (
    DEFAULT_MIN_INTERVAL_S,
    DEFAULT_MIN_VISIBLE_CHARS,
    parse_recording_file,
)

logger = logging.getLogger(__name__)

RECORDING_SUFFIX = ".cast"
PROCEDURAL_ORIGIN = "procedural"

FrameLoader = Callable[[Path], FrameSequence]


@dataclass(frozen=True)
class FrameSourceCandidate:
    """One place a frame file may come from, in priority order."""

    origin: str
    path: Path | None


@dataclass(frozen=True)
class FrameSourceResult:
    """Outcome of resolution: a sequence, or ``None`` for the procedural animation."""

    sequence: FrameSequence | None
    origin: str
    notices: tuple[str, ...] = ()

    @property
    def is_procedural(self) -> bool:
        return self.sequence is None


def load_frame_file(
    path: Path | str,
    *,
    min_interval_s: float = DEFAULT_MIN_INTERVAL_S,
    min_visible_chars: int = DEFAULT_MIN_VISIBLE_CHARS,
) -> FrameSequence:
    """Parse ``path`` with the parser its suffix selects."""
    path = Path(path)
    if path.suffix.lower() == RECORDING_SUFFIX:
        return parse_recording_file(
            path,
            min_interval_s=min_interval_s,
            min_visible_chars=min_visible_chars,
        )
    return parse_delimited_file(path)


def resolve_frame_source(
    candidates: Iterable[FrameSourceCandidate],
    *,
    loader: FrameLoader = load_frame_file,
) -> FrameSourceResult:
    """Try each candidate in order and return the first sequence that loads.

    Parse failures never propagate; each one becomes a user-facing notice and
    resolution moves on, ending at the procedural animation.
    """
    notices: list[str] = []
    for candidate in candidates:
        if candidate.path is None:
            continue
        try:
            sequence = loader(candidate.path)
        except FrameLoadError as exc:
            logger.warning(
                "Frame file from %s failed to load: %s",
                candidate.origin,
                exc,
                extra={
                    "event": "frame_source_failed",
                    "origin": candidate.origin,
                    "path": str(candidate.path),
                    "error_type": type(exc).__name__,
                },
            )
            notices.append(f"{exc}; falling back.")
            continue
        logger.info(
            "Loaded %d frames from %s",
            sequence.count,
            candidate.path,
            extra={
                "event": "frame_source_loaded",
                "origin": candidate.origin,
                "kind": sequence.kind,
            },
        )
        return FrameSourceResult(sequence, candidate.origin, tuple(notices))
    return FrameSourceResult(None, PROCEDURAL_ORIGIN, tuple(notices))
