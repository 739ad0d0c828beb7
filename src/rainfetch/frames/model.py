"""Frame and frame-sequence value types shared by both frame-file parsers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .errors import EmptyResultError

ColorTag = Literal[
    "default",
    "red",
    "green",
    "blue",
    "yellow",
    "cyan",
    "magenta",
    "white",
    "bright_blue",
    "bright_green",
    "bright_red",
]
SequenceKind = Literal["delimited", "recording"]

DEFAULT_COLOR: ColorTag = "default"

# xterm-256 palette indices for each tag.
_COLOR_INDEX: dict[ColorTag, int] = {
    "default": 252,
    "red": 196,
    "green": 82,
    "blue": 39,
    "yellow": 226,
    "cyan": 86,
    "magenta": 213,
    "white": 252,
    "bright_blue": 75,
    "bright_green": 118,
    "bright_red": 203,
}

_COLOR_NAMES: dict[str, ColorTag] = {
    "RED": "red",
    "GREEN": "green",
    "BLUE": "blue",
    "YELLOW": "yellow",
    "CYAN": "cyan",
    "MAGENTA": "magenta",
    "WHITE": "white",
    "BRIGHTBLUE": "bright_blue",
    "BRIGHTGREEN": "bright_green",
    "BRIGHTRED": "bright_red",
}


def color_from_name(name: str) -> ColorTag:
    """Resolve a frame-file colour name; unknown names map to the default."""
    return _COLOR_NAMES.get(name.strip().upper(), DEFAULT_COLOR)


def rich_color(tag: ColorTag) -> str:
    """Return the rich colour spec for a tag."""
    return f"color({_COLOR_INDEX.get(tag, _COLOR_INDEX[DEFAULT_COLOR])})"


@dataclass(frozen=True)
class Frame:
    """One renderable unit: a newline-delimited text block and its colour."""

    content: str
    color: ColorTag = DEFAULT_COLOR

    @property
    def lines(self) -> list[str]:
        return self.content.split("\n")

    @property
    def width(self) -> int:
        return max((len(line) for line in self.lines), default=0)


@dataclass(frozen=True)
class FrameSequence:
    """Ordered, non-empty run of frames parsed from one source file."""

    frames: tuple[Frame, ...]
    kind: SequenceKind
    source: str | None = None

    def __post_init__(self) -> None:
        if not self.frames:
            raise EmptyResultError(self.source, "frame sequence must not be empty")

    @property
    def count(self) -> int:
        return len(self.frames)

    def __len__(self) -> int:
        return len(self.frames)

    def __getitem__(self, index: int) -> Frame:
        return self.frames[index]
