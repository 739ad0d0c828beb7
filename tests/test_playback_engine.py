"""Tests for the playback state machine and procedural fallback."""

from __future__ import annotations

import random

from rainfetch.animation.engine import PlaybackEngine
from rainfetch.animation.palette import STATIC_ROWS, palette_colors
from rainfetch.animation.rain import CLOUD, RAIN_CHARS, cloud_lines
from rainfetch.frames.model import Frame, FrameSequence


def _sequence(count: int) -> FrameSequence:
    return FrameSequence(
        frames=tuple(Frame(f"frame {i}\n") for i in range(count)), kind="delimited"
    )


def test_no_loop_freezes_at_last_frame() -> None:
    engine = PlaybackEngine(_sequence(3), loop=False)
    seen = []
    for _ in range(4):
        assert engine.tick() is True
        seen.append(engine.index)

    assert seen == [1, 2, 2, 2]
    assert engine.mode == "frozen_at_last"


def test_loop_wraps_around() -> None:
    engine = PlaybackEngine(_sequence(3), loop=True)
    seen = []
    for _ in range(4):
        engine.tick()
        seen.append(engine.index)

    assert seen == [1, 2, 0, 1]
    assert engine.mode == "playing"


def test_one_shot_does_not_advance_or_reschedule() -> None:
    engine = PlaybackEngine(_sequence(3), one_shot=True)

    assert engine.tick() is False
    assert engine.index == 0
    assert engine.mode == "one_shot"


def test_load_rewinds_and_clears_one_shot() -> None:
    engine = PlaybackEngine(_sequence(3))
    engine.tick()
    engine.set_one_shot(True)

    engine.load(_sequence(2))

    assert engine.index == 0
    assert engine.state.frozen is False
    assert engine.tick() is True
    assert engine.index == 1


def test_without_sequence_renders_cloud() -> None:
    engine = PlaybackEngine(rng=random.Random(7))

    assert engine.mode == "no_sequence"
    assert engine.tick() is True
    rendered = engine.render().plain.split("\n")
    assert rendered[:2] == list(CLOUD)
    assert len(rendered) == 8


def test_render_uses_frame_colour() -> None:
    sequence = FrameSequence(frames=(Frame("hi\n", "red"),), kind="delimited")
    engine = PlaybackEngine(sequence)

    text = engine.render()

    assert text.plain == "hi"
    assert str(text.style) == "color(196)"


def test_static_rain_is_deterministic_diagonal() -> None:
    lines = cloud_lines(animated=False)

    assert lines == cloud_lines(animated=False)
    for offset, line in enumerate(lines[len(CLOUD) :]):
        row = len(CLOUD) + offset
        for col, char in enumerate(line):
            assert char == ("'" if (row + col) % 3 == 0 else " ")


def test_animated_rain_uses_rain_alphabet() -> None:
    lines = cloud_lines(animated=True, rng=random.Random(3))

    assert lines[: len(CLOUD)] == list(CLOUD)
    assert set("".join(lines[len(CLOUD) :])) <= set(RAIN_CHARS) | {" "}
    assert lines == cloud_lines(animated=True, rng=random.Random(3))


def test_palette_is_pure_function_of_elapsed_time() -> None:
    first, second = palette_colors(2.5)

    assert (first, second) == palette_colors(2.5)
    assert len(first) == len(second) == 8


def test_frozen_engine_uses_static_palette() -> None:
    clock_values = iter([0.0, 3.0])
    engine = PlaybackEngine(one_shot=True, clock=lambda: next(clock_values))

    assert engine.render_palette().plain.count("   ") == 16
    assert [span.style for span in engine.render_palette().spans][:8] == [
        f"on color({color})" for color in STATIC_ROWS[0]
    ]


def test_animated_palette_follows_clock() -> None:
    engine = PlaybackEngine(clock=lambda: 10.0)

    expected = palette_colors(1.5)
    spans = engine.render_palette(now_s=11.5).spans
    assert [span.style for span in spans][:8] == [
        f"on color({color})" for color in expected[0]
    ]
