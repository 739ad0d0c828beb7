"""Runtime configuration normalization helpers.

These helpers keep CLI flag interpretation deterministic across entrypoints.
"""

from __future__ import annotations

import re

VIEW_IDS = ("standard", "network", "hardware", "processes", "weather")
FRAME_FILE_SUFFIXES = (".txt", ".frames", ".cast")
FPS_MIN = 1
FPS_MAX = 60
DEFAULT_FPS = 5

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)\s*(ms|s|m)?\s*$")
_DURATION_SCALE = {"ms": 0.001, "s": 1.0, "m": 60.0}


def resolve_log_level(*, verbose: bool, quiet: bool) -> str:
    """Resolve effective log level from CLI flags.

    Precedence is deterministic: --quiet overrides --verbose.
    """
    if quiet:
        return "WARNING"
    if verbose:
        return "DEBUG"
    return "INFO"


def clamp_fps(value: int) -> int:
    return max(FPS_MIN, min(value, FPS_MAX))


def fps_to_rate_s(fps: int) -> float:
    """Return the per-frame interval for an FPS setting (clamped)."""
    return 1.0 / clamp_fps(fps)


def parse_frame_rate(value: str) -> float | None:
    """Parse a frame interval such as ``200ms``, ``0.5s`` or ``1m``.

    A bare number is read as seconds. Returns ``None`` for anything that is not
    a positive duration.
    """
    match = _DURATION_RE.match(value)
    if match is None:
        return None
    amount = float(match.group(1)) * _DURATION_SCALE[match.group(2) or "s"]
    if amount <= 0:
        return None
    return amount


def looks_like_frame_file(value: str) -> bool:
    """Return whether a positional argument names a frame file."""
    return any(suffix in value for suffix in FRAME_FILE_SUFFIXES)


def normalize_view_ids(values: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Lowercase, de-duplicate and drop unknown view ids, preserving order."""
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        normalized = value.strip().lower()
        if normalized not in VIEW_IDS or normalized in seen:
            continue
        seen.add(normalized)
        ordered.append(normalized)
    return tuple(ordered)
