"""Parser for the sentinel-delimited ASCII-art frame format.

Frames are blocks of lines separated by a ``---FRAME---`` line. The extended
form ``---FRAME:RED---`` also closes the block, tagging it with a colour::

     (o o)
    ---FRAME:CYAN---
     (- -)
    ---FRAME---
"""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import EmptyResultError, FileAccessError
from .limits import (
    MAX_FILE_BYTES,
    MAX_FRAMES,
    MAX_LINES,
    append_frame,
    check_line_count,
    check_source_file,
    decode_line,
)
from .model import DEFAULT_COLOR, ColorTag, Frame, FrameSequence, color_from_name

logger = logging.getLogger(__name__)

SENTINEL = "---FRAME---"
COLOR_SENTINEL_PREFIX = "---FRAME:"
_SENTINEL_SUFFIX = "---"


def parse_sentinel(line: str) -> ColorTag | None:
    """Return the colour a sentinel line assigns, or ``None`` for content lines."""
    if line == SENTINEL:
        return DEFAULT_COLOR
    if not line.startswith(COLOR_SENTINEL_PREFIX):
        return None
    name = line[len(COLOR_SENTINEL_PREFIX) :].split(":", 1)[0]
    if name.endswith(_SENTINEL_SUFFIX):
        name = name[: -len(_SENTINEL_SUFFIX)]
    return color_from_name(name)


def parse_delimited_file(
    path: Path | str,
    *,
    max_bytes: int = MAX_FILE_BYTES,
    max_lines: int = MAX_LINES,
    max_frames: int = MAX_FRAMES,
) -> FrameSequence:
    """Read a delimited frame file into a `FrameSequence`.

    Raises `FileAccessError`, `LimitExceededError` or `EmptyResultError`.
    """
    path = Path(path)
    check_source_file(path, max_bytes=max_bytes)

    frames: list[Frame] = []
    buffer: list[str] = []
    line_count = 0
    try:
        with path.open("rb") as handle:
            for raw in handle:
                line_count += 1
                check_line_count(path, line_count, max_lines=max_lines)
                line = decode_line(raw)
                color = parse_sentinel(line)
                if color is None:
                    buffer.append(line + "\n")
                    continue
                if buffer:
                    append_frame(
                        path, frames, Frame("".join(buffer), color), max_frames=max_frames
                    )
                    buffer.clear()
    except OSError as exc:
        raise FileAccessError(path, f"error reading file {path}: {exc}") from exc

    if buffer:
        append_frame(
            path, frames, Frame("".join(buffer), DEFAULT_COLOR), max_frames=max_frames
        )
    if not frames:
        raise EmptyResultError(path, f"no frames found in file {path}")

    logger.debug(
        "Parsed delimited frame file",
        extra={
            "event": "frames_parsed",
            "kind": "delimited",
            "path": str(path),
            "frame_count": len(frames),
            "line_count": line_count,
        },
    )
    return FrameSequence(frames=tuple(frames), kind="delimited", source=str(path))
