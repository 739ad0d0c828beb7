"""Textual TUI app for rainfetch."""

from __future__ import annotations

import logging
import random
import time
from collections import deque
from collections.abc import Callable, Mapping
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.timer import Timer
from textual.widgets import Footer, Header, Static

from .animation.engine import PlaybackEngine
from .config_store import DashboardConfig
from .events import FramesLoaded, SnapshotCollected
from .frames.loader import (
    PROCEDURAL_ORIGIN,
    FrameSourceCandidate,
    FrameSourceResult,
    resolve_frame_source,
)
from .runtime_config import fps_to_rate_s
from .services.collectors import Collector, run_collector
from .services.snapshot_cache import SnapshotCache
from .services.snapshots import CacheCategory, WeatherSnapshot
from .services.system_metrics import (
    collect_hardware,
    collect_network,
    collect_processes,
    collect_system,
)
from .services.weather_client import WeatherClient
from .ui.tab_bar import TabBar
from .ui.view_scheduler import ViewScheduler, build_views
from .ui.views import StandardView
from .utils.async_utils import run_blocking

logger = logging.getLogger(__name__)

REFRESH_INTERVAL_S = 1.0
MAX_NOTICES = 20
CLI_ORIGIN = "command line"
CONFIG_ORIGIN = "config"


def default_collectors() -> dict[CacheCategory, Collector]:
    return {
        "system": collect_system,
        "network": collect_network,
        "hardware": collect_hardware,
        "process": collect_processes,
        "weather": WeatherClient().fetch,
    }


class RainfetchApp(App):
    TITLE = "rainfetch"
    CSS = """
    Screen {
        layout: vertical;
    }

    #main {
        height: 1fr;
    }

    #animation-pane {
        width: auto;
        min-width: 24;
        max-width: 60%;
        border: solid $primary;
        padding: 0 1;
        layout: vertical;
    }

    #animation {
        height: 1fr;
    }

    #palette {
        height: 2;
    }

    #info-pane {
        width: 1fr;
        border: solid $primary;
        padding: 0 1;
        layout: vertical;
    }

    #view-body {
        height: 1fr;
        overflow: hidden;
    }

    #status-line {
        height: 1;
        width: 1fr;
        overflow: hidden;
        padding: 0 1;
    }
    """
    BINDINGS = [
        Binding("tab", "next_view", "Next view", priority=True),
        Binding("shift+tab", "prev_view", "Prev view", priority=True),
        ("1", "jump_view(0)", "View 1"),
        ("2", "jump_view(1)", "View 2"),
        ("3", "jump_view(2)", "View 3"),
        ("4", "jump_view(3)", "View 4"),
        ("5", "jump_view(4)", "View 5"),
        ("up", "cursor_up", "Up"),
        ("k", "cursor_up", "Up"),
        ("down", "cursor_down", "Down"),
        ("j", "cursor_down", "Down"),
        ("r", "reload_frames", "Reload"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        config: DashboardConfig | None = None,
        frame_path: Path | None = None,
        rate_s: float | None = None,
        collectors: Mapping[CacheCategory, Collector] | None = None,
        notices: tuple[str, ...] = (),
        auto_refresh: bool = True,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self.config = config or DashboardConfig()
        self._frame_path = frame_path
        self._clock = clock
        self._auto_refresh = auto_refresh
        self._collectors: dict[CacheCategory, Collector] = dict(
            collectors if collectors is not None else default_collectors()
        )
        self.engine = PlaybackEngine(
            rate_s=rate_s if rate_s is not None else fps_to_rate_s(self.config.fps),
            loop=self.config.loop_animation,
            one_shot=self.config.static_mode,
            rng=rng,
            clock=clock,
        )
        self.scheduler = self._build_scheduler()
        categories = list(self.scheduler.categories())
        if self._shows_weather_line() and "weather" not in categories:
            categories.append("weather")
        self.cache = SnapshotCache(
            categories=tuple(c for c in categories if c in self._collectors)
        )
        self.frame_origin: str | None = None
        self._notices: deque[str] = deque(notices, maxlen=MAX_NOTICES)
        self._playback_timer: Timer | None = None
        self._refresh_timer: Timer | None = None
        self._failed_categories: set[CacheCategory] = set()
        self._shown_status = Text()

    def _build_scheduler(self) -> ViewScheduler:
        config = self.config
        standard = StandardView(
            show_cpu=config.show_cpu,
            show_memory=config.show_memory,
            show_disk=config.show_disk,
            show_uptime=config.show_uptime,
            show_kernel=config.show_kernel,
            show_os=config.show_os,
            show_hostname=config.show_hostname,
        )
        if not config.enable_tabs:
            return build_views(("standard",), ("standard",), standard=standard)
        return build_views(
            config.tab_order,
            config.visible_tabs,
            config.default_tab,
            standard=standard,
        )

    def _shows_weather_line(self) -> bool:
        return not self.config.enable_tabs and self.config.show_weather

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Static("", id="animation"),
                Static("", id="palette"),
                id="animation-pane",
            ),
            Vertical(
                TabBar("", id="tab-bar"),
                Static("", id="view-body"),
                id="info-pane",
            ),
            id="main",
        )
        yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        if self.config.hide_animation:
            self.query_one("#animation-pane").display = False
        if not self.config.enable_tabs:
            self.query_one(TabBar).display = False
        self._render_animation()
        self._render_view()
        self._render_status()
        self._load_frames(reload=False)
        if not self.engine.state.frozen:
            self._start_playback()
        if self._auto_refresh:
            self.dispatch_due_collectors()
            # Static mode collects each category once.
            if not self.config.static_mode:
                self._refresh_timer = self.set_interval(
                    REFRESH_INTERVAL_S, self.dispatch_due_collectors
                )

    def on_unmount(self) -> None:
        self._stop_playback()
        if self._refresh_timer is not None:
            self._refresh_timer.stop()
            self._refresh_timer = None

    def frame_candidates(self) -> list[FrameSourceCandidate]:
        candidates = [FrameSourceCandidate(CLI_ORIGIN, self._frame_path)]
        if self.config.frame_file:
            candidates.append(
                FrameSourceCandidate(
                    CONFIG_ORIGIN, Path(self.config.frame_file).expanduser()
                )
            )
        return candidates

    def _load_frames(self, *, reload: bool) -> None:
        candidates = self.frame_candidates()
        if all(candidate.path is None for candidate in candidates):
            self.frame_origin = PROCEDURAL_ORIGIN
            return
        self.run_worker(
            self._resolve_frames(candidates, reload=reload),
            group="frames",
            exclusive=True,
        )

    async def _resolve_frames(
        self, candidates: list[FrameSourceCandidate], *, reload: bool
    ) -> None:
        try:
            result = await run_blocking(resolve_frame_source, candidates)
        except Exception as exc:  # pragma: no cover - UI safety net
            logger.exception("Frame source resolution failed: %s", exc)
            result = FrameSourceResult(None, PROCEDURAL_ORIGIN, (str(exc),))
        self.post_message(FramesLoaded(result, reload=reload))

    def on_frames_loaded(self, message: FramesLoaded) -> None:
        result = message.result
        self.frame_origin = result.origin
        self.engine.load(result.sequence)
        if self.config.static_mode:
            self.engine.set_one_shot(True)
        for notice in result.notices:
            self.add_notice(notice)
        if message.reload and result.sequence is not None:
            self.add_notice(f"Reloaded {result.sequence.count} frames.")
        self._render_animation()
        self._render_status()

    def _start_playback(self) -> None:
        self._stop_playback()
        self._playback_timer = self.set_interval(
            self.engine.state.rate_s, self._on_playback_tick
        )

    def _stop_playback(self) -> None:
        if self._playback_timer is not None:
            self._playback_timer.stop()
            self._playback_timer = None

    def _on_playback_tick(self) -> None:
        if not self.engine.tick():
            self._stop_playback()
        self._render_animation()
        if self.config.show_fps_counter or self.engine.sequence is not None:
            self._render_status()

    def dispatch_due_collectors(self) -> list[CacheCategory]:
        """Start one worker per due category that has no collector in flight."""
        due = self.cache.due_categories(self._clock())
        for category in due:
            seq = self.cache.begin_refresh(category)
            self.run_worker(
                self._collect(category, seq),
                group=f"collector-{category}",
                exclusive=False,
            )
        return due

    async def _collect(self, category: CacheCategory, seq: int) -> None:
        outcome = await run_collector(category, self._collectors[category])
        self.post_message(
            SnapshotCollected(
                category,
                seq,
                outcome.snapshot,
                completed_at=self._clock(),
                ok=outcome.ok,
            )
        )

    def on_snapshot_collected(self, message: SnapshotCollected) -> None:
        applied = self.cache.apply(
            message.category, message.seq, message.snapshot, message.completed_at
        )
        if not applied:
            return
        if message.ok:
            self._failed_categories.discard(message.category)
        else:
            self._failed_categories.add(message.category)
        self._render_status()
        view = self.scheduler.active_view
        if (view is not None and view.category == message.category) or (
            message.category == "weather" and self._shows_weather_line()
        ):
            self._render_view()

    def add_notice(self, notice: str) -> None:
        self._notices.append(notice)
        self._render_status()

    def action_next_view(self) -> None:
        self.scheduler.next()
        self._render_view()

    def action_prev_view(self) -> None:
        self.scheduler.prev()
        self._render_view()

    def action_jump_view(self, index: int) -> None:
        self.scheduler.jump_to(index)
        self._render_view()

    def action_cursor_up(self) -> None:
        if self.scheduler.move_selection(-1):
            self._render_view()

    def action_cursor_down(self) -> None:
        if self.scheduler.move_selection(1):
            self._render_view()

    def action_reload_frames(self) -> None:
        self._load_frames(reload=True)

    async def action_quit(self) -> None:
        self.exit()

    def _render_animation(self) -> None:
        if self.config.hide_animation:
            return
        self.query_one("#animation", Static).update(self.engine.render())
        self.query_one("#palette", Static).update(self.engine.render_palette())

    def _render_view(self) -> None:
        body = self.query_one("#view-body", Static)
        width = max(1, body.size.width or 80)
        height = max(1, body.size.height or 24)
        text = self.scheduler.render(width, height, self.cache)
        if self._shows_weather_line():
            weather = self.cache.read("weather")
            line = weather.current if isinstance(weather, WeatherSnapshot) else "N/A"
            text.append("\n")
            text.append("Weather: ", style="bold #7FB3D5")
            text.append(line)
        body.update(text)
        if self.config.enable_tabs:
            self.query_one(TabBar).show_scheduler(self.scheduler)

    def status_text(self) -> Text:
        """Status line: FPS, frame counter, failing categories, latest notice."""
        parts: list[str] = []
        if self.config.show_fps_counter:
            parts.append(f"FPS: {self.engine.fps:.1f}")
        sequence = self.engine.sequence
        if sequence is not None:
            parts.append(f"Frame {self.engine.index + 1}/{sequence.count}")
        if self._failed_categories:
            parts.append(f"Unavailable: {', '.join(sorted(self._failed_categories))}")
        if self._notices:
            parts.append(self._notices[-1].splitlines()[0])
        return Text(" | ".join(parts), style="dim")

    def _render_status(self) -> None:
        self._shown_status = self.status_text()
        self.query_one("#status-line", Static).update(self._shown_status)

    @property
    def shown_status(self) -> str:
        """Plain text of the status line as last drawn."""
        return self._shown_status.plain

    @property
    def notices(self) -> tuple[str, ...]:
        return tuple(self._notices)

    @property
    def failed_categories(self) -> frozenset[CacheCategory]:
        return frozenset(self._failed_categories)
