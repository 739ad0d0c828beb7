"""Command-line frame-file inspector for rainfetch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from . import __version__
from .frames.errors import FrameLoadError
from .frames.loader import load_frame_file
from .frames.model import rich_color
from .frames.recording import DEFAULT_MIN_INTERVAL_S, DEFAULT_MIN_VISIBLE_CHARS
from .logging_utils import setup_logging
from .paths import log_dir
from .runtime_config import resolve_log_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rainfetch-frames",
        description="Inspect a rainfetch frame file (.txt, .frames or .cast).",
    )
    parser.add_argument("path", help="Frame file to parse")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--quiet", action="store_true", help="Only show warnings and errors"
    )
    parser.add_argument("--log-file", help="Write logs to a file path")
    parser.add_argument(
        "--print",
        dest="print_index",
        type=int,
        metavar="N",
        help="Print frame N (1-based) after the summary.",
    )
    parser.add_argument(
        "--min-interval",
        type=float,
        default=DEFAULT_MIN_INTERVAL_S,
        help="Recording resample interval in seconds.",
    )
    parser.add_argument(
        "--min-visible",
        type=int,
        default=DEFAULT_MIN_VISIBLE_CHARS,
        help="Recording frames need more visible characters than this.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = logging.getLogger(__name__)
    try:
        level = resolve_log_level(verbose=args.verbose, quiet=args.quiet)
        setup_logging(
            log_dir=log_dir(),
            level=level,
            log_file=Path(args.log_file) if args.log_file else None,
        )
        try:
            sequence = load_frame_file(
                Path(args.path),
                min_interval_s=args.min_interval,
                min_visible_chars=args.min_visible,
            )
        except FrameLoadError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 2
        widest = max(frame.width for frame in sequence.frames)
        print(
            f"{args.path}: {sequence.count} frames ({sequence.kind}), "
            f"{widest} columns wide"
        )
        if args.print_index is not None:
            index = args.print_index - 1
            if not 0 <= index < sequence.count:
                print(
                    f"Frame {args.print_index} out of range (1-{sequence.count}).",
                    file=sys.stderr,
                )
                return 2
            frame = sequence[index]
            Console().print(
                frame.content.rstrip("\n"),
                style=rich_color(frame.color),
                highlight=False,
                markup=False,
            )
        return 0
    except Exception as exc:  # pragma: no cover - top-level safety net
        logger.exception("Unhandled error: %s", exc)
        print("Unexpected error. Re-run with --verbose for details.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
