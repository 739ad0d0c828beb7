"""Tests for the terminal-recording frame parser."""

from __future__ import annotations

import json

import pytest

from rainfetch.frames.errors import (
    EmptyResultError,
    FileAccessError,
    FormatError,
    LimitExceededError,
)
from rainfetch.frames.limits import MAX_FILE_BYTES
from rainfetch.frames.recording import parse_event, parse_header, parse_recording_file

HEADER = {"version": 2, "width": 80, "height": 24, "timestamp": 1700000000, "env": {}}


def _write_cast(path, events, header=HEADER):
    lines = [json.dumps(header) if isinstance(header, dict) else header]
    lines.extend(json.dumps(event) if not isinstance(event, str) else event for event in events)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_output_events_are_cut_on_interval(tmp_path) -> None:
    path = _write_cast(
        tmp_path / "demo.cast",
        [
            [0.05, "o", "\x1b[2Jhello world"],
            [0.10, "o", "\x1b[31msecond frame\x1b[0m"],
            [0.15, "o", "third "],
            [0.30, "o", "frame here"],
        ],
    )

    sequence = parse_recording_file(path)

    assert sequence.kind == "recording"
    assert [frame.content for frame in sequence.frames] == [
        "hello worldsecond frame",
        "third frame here",
    ]


def test_non_output_events_never_contribute(tmp_path) -> None:
    path = _write_cast(
        tmp_path / "input.cast",
        [
            [0.2, "i", "SECRET-INPUT"],
            [0.3, "r", "80x24"],
            [0.4, "o", "visible output"],
        ],
    )

    sequence = parse_recording_file(path)

    assert all("SECRET" not in frame.content for frame in sequence.frames)
    assert all("80x24" not in frame.content for frame in sequence.frames)
    assert sequence.frames[0].content == "visible output"


def test_short_frames_are_discarded(tmp_path) -> None:
    path = _write_cast(
        tmp_path / "short.cast",
        [
            [0.2, "o", "\x1b[1m  abcde  \x1b[0m"],
            [0.4, "o", "abcdef"],
        ],
    )

    sequence = parse_recording_file(path)

    assert [frame.content for frame in sequence.frames] == ["abcdef"]


def test_only_short_frames_is_empty_result(tmp_path) -> None:
    path = _write_cast(tmp_path / "tiny.cast", [[0.2, "o", "abc"], [0.4, "o", "\x1b[H"]])

    with pytest.raises(EmptyResultError):
        parse_recording_file(path)


def test_thresholds_are_tunable(tmp_path) -> None:
    path = _write_cast(
        tmp_path / "tune.cast",
        [[0.2, "o", "ab"], [0.25, "o", "cd"], [0.9, "o", "efgh"]],
    )

    sequence = parse_recording_file(path, min_interval_s=0.5, min_visible_chars=1)

    assert [frame.content for frame in sequence.frames] == ["abcdefgh"]


def test_malformed_event_lines_are_skipped(tmp_path) -> None:
    path = _write_cast(
        tmp_path / "mixed.cast",
        [
            "not json",
            [0.1, "o"],
            ["0.1", "o", "string timestamp"],
            [True, "o", "bool timestamp"],
            [0.2, "o", 42],
            [0.3, "o", "the real frame"],
        ],
    )

    sequence = parse_recording_file(path)

    assert [frame.content for frame in sequence.frames] == ["the real frame"]


@pytest.mark.parametrize(
    "header",
    [
        "{not json",
        "[1, 2, 3]",
        json.dumps({"version": "two"}),
        json.dumps({"width": True}),
        json.dumps({"env": ["TERM"]}),
    ],
)
def test_bad_header_is_format_error(tmp_path, header: str) -> None:
    path = _write_cast(tmp_path / "bad.cast", [[0.5, "o", "frame content"]], header=header)

    with pytest.raises(FormatError):
        parse_recording_file(path)


def test_header_with_missing_fields_uses_defaults(tmp_path) -> None:
    header = parse_header(tmp_path / "x.cast", json.dumps({"version": 2}))

    assert header.version == 2
    assert header.width == 0
    assert header.env == {}


def test_event_line_limit_counts_only_events(tmp_path) -> None:
    events = [[0.2 * (i + 1), "o", f"frame number {i}"] for i in range(4)]
    path = _write_cast(tmp_path / "limit.cast", events)

    assert parse_recording_file(path, max_lines=4).count == 4
    with pytest.raises(LimitExceededError):
        parse_recording_file(path, max_lines=3)


def test_parse_event_requires_number_and_strings() -> None:
    event = parse_event('[1.5, "o", "data"]')

    assert event is not None
    assert (event.timestamp, event.kind, event.data) == (1.5, "o", "data")
    assert parse_event('[1.5, "o", "data", "extra"]') is None
    assert parse_event('{"t": 1}') is None


def test_lone_surrogates_are_replaced(tmp_path) -> None:
    path = tmp_path / "emoji.cast"
    path.write_text(
        '{"version": 2}\n[0.2, "o", "hello world \\ud83d"]\n', encoding="utf-8"
    )

    sequence = parse_recording_file(path)

    content = sequence.frames[0].content
    assert content == "hello world ?"
    content.encode("utf-8")


def test_frame_limit_fails(tmp_path) -> None:
    events = [[0.2 * (i + 1), "o", f"frame number {i}"] for i in range(3)]
    path = _write_cast(tmp_path / "many.cast", events)

    assert parse_recording_file(path, max_frames=3).count == 3
    with pytest.raises(LimitExceededError):
        parse_recording_file(path, max_frames=2)


@pytest.mark.parametrize("kind", ["missing", "directory", "empty"])
def test_unusable_paths_raise_file_access_error(tmp_path, kind: str) -> None:
    path = tmp_path / "target.cast"
    if kind == "directory":
        path.mkdir()
    elif kind == "empty":
        path.write_bytes(b"")

    with pytest.raises(FileAccessError) as excinfo:
        parse_recording_file(path)
    assert excinfo.value.path == path


def test_size_limit_is_checked_before_reading(tmp_path) -> None:
    path = _write_cast(tmp_path / "big.cast", [[0.5, "o", "frame content"]])
    size = path.stat().st_size

    assert parse_recording_file(path, max_bytes=size).count == 1
    with pytest.raises(FileAccessError, match="too large"):
        parse_recording_file(path, max_bytes=size - 1)


def test_default_size_limit_is_fifty_mebibytes(tmp_path) -> None:
    path = tmp_path / "sparse.cast"
    with path.open("wb") as handle:
        handle.truncate(MAX_FILE_BYTES + 1)

    with pytest.raises(FileAccessError, match="too large"):
        parse_recording_file(path)
