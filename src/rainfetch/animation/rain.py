"""Procedural cloud-and-rain animation used when no frame file is loaded."""

from __future__ import annotations

import random

from rich.text import Text

CLOUD = (
    "  (   ).  ",
    " (___(__) ",
)
RAIN_CHARS = ("'", "`", "|", ".", "˙")
RAIN_PROBABILITY = 0.6
DEFAULT_RAIN_ROWS = 6
CLOUD_STYLE = "bright_white"
RAIN_STYLE = "blue"


def rain_rows(
    *,
    animated: bool,
    rows: int = DEFAULT_RAIN_ROWS,
    rng: random.Random | None = None,
) -> list[str]:
    """Build the rain region below the cloud.

    Animated rows draw each cell independently with `RAIN_PROBABILITY`; static
    rows use a fixed diagonal pattern so one-shot output is reproducible.
    """
    width = len(CLOUD[0])
    source = rng if rng is not None else random
    lines: list[str] = []
    for offset in range(max(0, rows)):
        row = len(CLOUD) + offset
        chars: list[str] = []
        for col in range(width):
            if animated:
                if source.random() < RAIN_PROBABILITY:
                    chars.append(source.choice(RAIN_CHARS))
                else:
                    chars.append(" ")
            elif (row + col) % 3 == 0:
                chars.append(RAIN_CHARS[0])
            else:
                chars.append(" ")
        lines.append("".join(chars))
    return lines


def cloud_lines(
    *,
    animated: bool,
    rows: int = DEFAULT_RAIN_ROWS,
    rng: random.Random | None = None,
) -> list[str]:
    return [*CLOUD, *rain_rows(animated=animated, rows=rows, rng=rng)]


def render_cloud(
    *,
    animated: bool,
    rows: int = DEFAULT_RAIN_ROWS,
    rng: random.Random | None = None,
) -> Text:
    text = Text()
    for line in CLOUD:
        text.append(line, style=CLOUD_STYLE)
        text.append("\n")
    rain = rain_rows(animated=animated, rows=rows, rng=rng)
    for idx, line in enumerate(rain):
        text.append(line, style=RAIN_STYLE)
        if idx < len(rain) - 1:
            text.append("\n")
    return text
