"""Colour swatch strip whose colours are a pure function of elapsed time.

Two rows of eight swatches ride counter-rotating sine waves; each swatch's
wave intensity picks one of three colour tables.
"""

from __future__ import annotations

import math

from rich.text import Text

SWATCHES = 8
SWATCH = "   "

_ROW1_LOW = (1, 2, 3, 4, 5, 6, 8, 9)
_ROW1_HIGH = (10, 11, 12, 13, 14, 15, 9, 10)
_ROW2_LOW = (8, 9, 10, 11, 12, 13, 14, 15)
_ROW2_MID = (11, 12, 13, 14, 15, 9, 10, 11)
_ROW2_HIGH = (2, 3, 4, 5, 6, 8, 9, 1)
STATIC_ROWS = (
    (1, 2, 3, 4, 5, 6, 7, 8),
    (9, 10, 11, 12, 13, 14, 15, 16),
)

Rows = tuple[tuple[int, ...], tuple[int, ...]]


def _intensity(position: float) -> float:
    return (math.sin(position * 2 * math.pi) + 1) / 2


def palette_colors(elapsed_s: float) -> Rows:
    """Return the 256-colour indices for both rows at ``elapsed_s``."""
    if not math.isfinite(elapsed_s):
        elapsed_s = 0.0
    phase = math.sin(elapsed_s * 1.5) * 0.5 + 0.5
    first: list[int] = []
    second: list[int] = []
    for i in range(SWATCHES):
        level = _intensity(i / SWATCHES + phase)
        if level < 0.33:
            first.append(_ROW1_LOW[i])
        elif level < 0.66:
            first.append(8 + i)
        else:
            first.append(_ROW1_HIGH[i])

        level = _intensity((SWATCHES - 1 - i) / SWATCHES + phase * 1.3 + 0.7)
        if level < 0.33:
            second.append(_ROW2_LOW[i])
        elif level < 0.66:
            second.append(_ROW2_MID[i])
        else:
            second.append(_ROW2_HIGH[i])
    return tuple(first), tuple(second)


def render_palette(rows: Rows) -> Text:
    text = Text()
    for row_idx, row in enumerate(rows):
        if row_idx:
            text.append("\n")
        for color in row:
            text.append(SWATCH, style=f"on color({color})")
    return text
