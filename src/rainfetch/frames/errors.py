"""Typed failures raised while turning a frame file into a `FrameSequence`."""

from __future__ import annotations

from pathlib import Path


class FrameLoadError(Exception):
    """Base class for every frame-file parse failure."""

    def __init__(self, path: Path | str | None, message: str) -> None:
        super().__init__(message)
        self.path = None if path is None else Path(path)


class FileAccessError(FrameLoadError):
    """Path is missing, a directory, empty, oversize or unreadable."""


class FormatError(FrameLoadError):
    """The file's structure cannot be parsed (e.g. a bad recording header)."""


class LimitExceededError(FrameLoadError):
    """Line or frame count went past the safety bound."""


class EmptyResultError(FrameLoadError):
    """Parsing finished without producing a single frame."""
