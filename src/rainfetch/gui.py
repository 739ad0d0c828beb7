"""Dashboard process entrypoint for the Textual application.

Responsibilities here are intentionally narrow: parse runtime options, load
the config file, set up logging, instantiate `RainfetchApp`, and return an
exit-code contract that distinguishes a clean run from fatal startup failure.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path

from . import __version__
from .app import RainfetchApp
from .config_store import DashboardConfig, load_config_with_notice
from .doctor import render_report, run_doctor
from .logging_utils import setup_logging
from .paths import config_path, log_dir
from .runtime_config import (
    clamp_fps,
    fps_to_rate_s,
    looks_like_frame_file,
    parse_frame_rate,
    resolve_log_level,
)
from .version import build_help_epilog


@dataclass(frozen=True)
class LaunchArgs:
    """Positional arguments after frame-file/frame-rate disambiguation."""

    frame_path: Path | None = None
    rate_s: float | None = None
    notices: tuple[str, ...] = ()


def build_parser() -> argparse.ArgumentParser:
    """Build parser for dashboard launch and playback overrides."""
    parser = argparse.ArgumentParser(
        prog="rainfetch",
        description="Terminal system dashboard with ASCII animation.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=build_help_epilog(),
    )
    parser.add_argument(
        "positionals",
        nargs="*",
        metavar="FRAME_FILE|FRAME_RATE",
        help=(
            "Optional frame file (.txt, .frames or .cast) followed by an "
            "optional frame rate such as 200ms or 0.5s."
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--quiet", action="store_true", help="Only show warnings and errors"
    )
    parser.add_argument("--log-file", help="Write logs to a file path")
    parser.add_argument("--config", help="Config file path (JSON)")
    parser.add_argument(
        "--static",
        action="store_true",
        help="Render one frame and stop animating.",
    )
    parser.add_argument(
        "--no-loop",
        action="store_true",
        help="Stop on the last frame instead of looping.",
    )
    parser.add_argument(
        "--fps",
        type=int,
        help="Animation frame rate (clamped to 1-60 FPS).",
    )
    parser.add_argument(
        "--doctor",
        action="store_true",
        help="Print environment diagnostics and exit.",
    )
    return parser


def interpret_positionals(values: list[str]) -> LaunchArgs:
    """Split positionals into frame file and frame rate.

    The first value is a frame file when it names one of the known suffixes,
    otherwise it is read as the frame rate. Unparseable rates are ignored with
    a notice.
    """
    if not values:
        return LaunchArgs()
    notices: list[str] = []
    frame_path: Path | None = None
    rate_text: str | None = None
    first, rest = values[0], values[1:]
    if looks_like_frame_file(first):
        frame_path = Path(first).expanduser()
        rate_text = rest[0] if rest else None
        rest = rest[1:]
    else:
        rate_text = first
    rate_s = None
    if rate_text is not None:
        rate_s = parse_frame_rate(rate_text)
        if rate_s is None:
            notices.append(f"Ignoring invalid frame rate '{rate_text}'.")
    if rest:
        notices.append(f"Ignoring extra arguments: {' '.join(rest)}")
    return LaunchArgs(frame_path=frame_path, rate_s=rate_s, notices=tuple(notices))


def apply_overrides(config: DashboardConfig, args: argparse.Namespace) -> DashboardConfig:
    """Command-line flags win over the config file."""
    if args.static:
        config = replace(config, static_mode=True)
    if args.no_loop:
        config = replace(config, loop_animation=False)
    if args.fps is not None:
        config = replace(config, fps=clamp_fps(args.fps))
    return config


def main(argv: list[str] | None = None) -> int:
    """Run dashboard entrypoint and translate startup outcome to exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.doctor:
        report = run_doctor(
            Path(args.config).expanduser() if args.config else config_path()
        )
        print(render_report(report))
        return report.exit_code
    try:
        level = resolve_log_level(verbose=args.verbose, quiet=args.quiet)
        setup_logging(
            log_dir=log_dir(),
            level=level,
            log_file=Path(args.log_file) if args.log_file else None,
            console=False,
        )
        logger = logging.getLogger(__name__)
        logger.info("Starting rainfetch dashboard")
        path = Path(args.config).expanduser() if args.config else config_path()
        config, config_notice = load_config_with_notice(path)
        config = apply_overrides(config, args)
        launch = interpret_positionals(args.positionals)
        notices = list(launch.notices)
        if config_notice:
            notices.append(config_notice)
        app = RainfetchApp(
            config=config,
            frame_path=launch.frame_path,
            rate_s=launch.rate_s
            if launch.rate_s is not None
            else fps_to_rate_s(config.fps),
            notices=tuple(notices),
        )
        app.run()
        return 0
    except Exception as exc:  # pragma: no cover - top-level safety net
        logging.getLogger(__name__).exception("Fatal dashboard startup error: %s", exc)
        print(
            "Dashboard startup failed. Verify config/log paths and re-run with --verbose.",
            file=sys.stderr,
        )
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
