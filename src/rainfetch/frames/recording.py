"""Parser for asciinema-style terminal recordings (``.cast`` files).

Line one is a JSON header object; every later line is a JSON event
``[seconds, kind, data]``. Only output (``"o"``) events carry visible text.
The event stream is re-sampled into discrete frames: output accumulates in a
buffer that is cut into a frame whenever at least ``min_interval_s`` has passed
since the previous cut, so frame rate and frame count stay bounded however
dense the recording is.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .ansi import strip_control_sequences
from .errors import EmptyResultError, FileAccessError, FormatError
from .limits import (
    MAX_FILE_BYTES,
    MAX_FRAMES,
    MAX_LINES,
    append_frame,
    check_line_count,
    check_source_file,
    decode_line,
)
from .model import DEFAULT_COLOR, Frame, FrameSequence

logger = logging.getLogger(__name__)

OUTPUT_EVENT = "o"
DEFAULT_MIN_INTERVAL_S = 0.1
DEFAULT_MIN_VISIBLE_CHARS = 5


@dataclass(frozen=True)
class RecordingHeader:
    version: int = 0
    width: int = 0
    height: int = 0
    timestamp: int = 0
    env: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RecordingEvent:
    timestamp: float
    kind: str
    data: str


def parse_header(path: Path, line: str) -> RecordingHeader:
    """Decode the header line; any structural problem is a `FormatError`."""
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise FormatError(path, f"invalid recording header: {exc}") from exc
    if not isinstance(data, dict):
        raise FormatError(path, "invalid recording header: expected a JSON object")

    def _int(key: str) -> int:
        value = data.get(key, 0)
        if value is None:
            return 0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise FormatError(path, f"invalid recording header: '{key}' is not a number")
        return int(value)

    env_raw: Any = data.get("env") or {}
    if not isinstance(env_raw, dict):
        raise FormatError(path, "invalid recording header: 'env' is not an object")
    env = {str(key): str(value) for key, value in env_raw.items()}
    return RecordingHeader(
        version=_int("version"),
        width=_int("width"),
        height=_int("height"),
        timestamp=_int("timestamp"),
        env=env,
    )


def parse_event(line: str) -> RecordingEvent | None:
    """Decode one event line, or return ``None`` if it is not a valid 3-tuple."""
    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, list) or len(data) != 3:
        return None
    timestamp, kind, payload = data
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return None
    if not isinstance(kind, str) or not isinstance(payload, str):
        return None
    # Lone surrogates from JSON \u escapes become "?".
    payload = payload.encode("utf-8", errors="replace").decode("utf-8")
    return RecordingEvent(timestamp=float(timestamp), kind=kind, data=payload)


class _FrameCutter:
    """Accumulates output text and turns it into accepted frames."""

    def __init__(
        self, path: Path, *, min_visible_chars: int, max_frames: int
    ) -> None:
        self._path = path
        self._min_visible_chars = min_visible_chars
        self._max_frames = max_frames
        self._buffer: list[str] = []
        self.frames: list[Frame] = []
        self.output_bytes = 0
        self.discarded = 0

    def feed(self, data: str) -> None:
        self._buffer.append(data)
        self.output_bytes += len(data.encode("utf-8", errors="replace"))

    def cut(self) -> None:
        if not self._buffer:
            return
        content = strip_control_sequences("".join(self._buffer))
        self._buffer.clear()
        if len(content.strip()) <= self._min_visible_chars:
            self.discarded += 1
            return
        append_frame(
            self._path,
            self.frames,
            Frame(content, DEFAULT_COLOR),
            max_frames=self._max_frames,
        )


def parse_recording_file(
    path: Path | str,
    *,
    min_interval_s: float = DEFAULT_MIN_INTERVAL_S,
    min_visible_chars: int = DEFAULT_MIN_VISIBLE_CHARS,
    max_bytes: int = MAX_FILE_BYTES,
    max_lines: int = MAX_LINES,
    max_frames: int = MAX_FRAMES,
) -> FrameSequence:
    """Read a terminal recording into a re-sampled `FrameSequence`.

    Raises `FileAccessError`, `FormatError`, `LimitExceededError` or
    `EmptyResultError`.
    """
    path = Path(path)
    check_source_file(path, max_bytes=max_bytes)

    cutter = _FrameCutter(
        path, min_visible_chars=min_visible_chars, max_frames=max_frames
    )
    last_cut_s = 0.0
    line_count = 0
    try:
        with path.open("rb") as handle:
            first = handle.readline()
            if not first:
                raise FormatError(path, f"file {path} has no header line")
            header = parse_header(path, decode_line(first))
            for raw in handle:
                line_count += 1
                check_line_count(path, line_count, max_lines=max_lines)
                event = parse_event(decode_line(raw))
                if event is None or event.kind != OUTPUT_EVENT:
                    continue
                cutter.feed(event.data)
                if event.timestamp - last_cut_s >= min_interval_s:
                    cutter.cut()
                    last_cut_s = event.timestamp
    except OSError as exc:
        raise FileAccessError(path, f"error reading file {path}: {exc}") from exc

    cutter.cut()
    if not cutter.frames:
        raise EmptyResultError(path, f"no frames found in recording {path}")

    logger.debug(
        "Parsed recording file",
        extra={
            "event": "frames_parsed",
            "kind": "recording",
            "path": str(path),
            "frame_count": len(cutter.frames),
            "discarded_frames": cutter.discarded,
            "output_bytes": cutter.output_bytes,
            "line_count": line_count,
            "recording_version": header.version,
            "recording_size": f"{header.width}x{header.height}",
        },
    )
    return FrameSequence(frames=tuple(cutter.frames), kind="recording", source=str(path))
