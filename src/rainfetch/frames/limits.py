"""Resource bounds and pre-read checks shared by the frame-file parsers."""

from __future__ import annotations

from pathlib import Path

from .errors import FileAccessError, LimitExceededError
from .model import Frame

MAX_FILE_BYTES = 50 * 1024 * 1024
MAX_LINES = 100_000
MAX_FRAMES = 10_000


def check_source_file(path: Path, *, max_bytes: int = MAX_FILE_BYTES) -> int:
    """Validate that ``path`` is a readable, non-empty, bounded regular file.

    Returns the file size in bytes.
    """
    try:
        stat = path.stat()
    except FileNotFoundError as exc:
        raise FileAccessError(path, f"cannot access file {path}: not found") from exc
    except OSError as exc:
        raise FileAccessError(path, f"cannot access file {path}: {exc}") from exc
    if path.is_dir():
        raise FileAccessError(path, f"{path} is a directory, not a file")
    if not path.is_file():
        raise FileAccessError(path, f"{path} is not a regular file")
    if stat.st_size == 0:
        raise FileAccessError(path, f"file {path} is empty")
    if stat.st_size > max_bytes:
        raise FileAccessError(
            path, f"file {path} is too large ({stat.st_size} > {max_bytes} bytes)"
        )
    return stat.st_size


def check_line_count(path: Path, line_count: int, *, max_lines: int = MAX_LINES) -> None:
    if line_count > max_lines:
        raise LimitExceededError(
            path, f"file {path} has too many lines (>{max_lines:,})"
        )


def append_frame(
    path: Path, frames: list[Frame], frame: Frame, *, max_frames: int = MAX_FRAMES
) -> None:
    """Append ``frame``, failing once the sequence would exceed ``max_frames``."""
    if len(frames) >= max_frames:
        raise LimitExceededError(
            path, f"too many frames in {path} (>{max_frames:,})"
        )
    frames.append(frame)


def decode_line(raw: bytes) -> str:
    """Decode one raw line, dropping its LF/CRLF terminator."""
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw.decode("utf-8", errors="replace")
