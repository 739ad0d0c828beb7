"""Animation playback and procedural fallback generators."""

from .engine import PlaybackEngine, PlaybackMode, PlaybackState
from .palette import palette_colors, render_palette
from .rain import cloud_lines, render_cloud

__all__ = [
    "PlaybackEngine",
    "PlaybackMode",
    "PlaybackState",
    "cloud_lines",
    "palette_colors",
    "render_cloud",
    "render_palette",
]
