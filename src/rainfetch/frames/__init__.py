"""Frame-file parsing: delimited ASCII art and terminal recordings."""

from .ansi import strip_control_sequences
from .delimited import parse_delimited_file
from .errors import (
    EmptyResultError,
    FileAccessError,
    FormatError,
    FrameLoadError,
    LimitExceededError,
)
from .loader import (
    FrameSourceCandidate,
    FrameSourceResult,
    load_frame_file,
    resolve_frame_source,
)
from .model import ColorTag, Frame, FrameSequence
from .recording import parse_recording_file

__all__ = [
    "ColorTag",
    "EmptyResultError",
    "FileAccessError",
    "FormatError",
    "Frame",
    "FrameLoadError",
    "FrameSequence",
    "FrameSourceCandidate",
    "FrameSourceResult",
    "LimitExceededError",
    "load_frame_file",
    "parse_delimited_file",
    "parse_recording_file",
    "resolve_frame_source",
    "strip_control_sequences",
]
