"""Active-view bookkeeping and keyboard routing for the dashboard views."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from rich.text import Text

from rainfetch.runtime_config import VIEW_IDS, normalize_view_ids
from rainfetch.services.snapshots import CacheCategory, Snapshot

from .views import (
    HardwareView,
    NetworkView,
    ProcessesView,
    StandardView,
    View,
    WeatherView,
)

logger = logging.getLogger(__name__)

ACTIVE_TAB_STYLE = "bold #1E1E1E on #7FB3D5"
INACTIVE_TAB_STYLE = "#9AA0A6"


class SnapshotReader(Protocol):
    def read(self, category: CacheCategory) -> Snapshot | None: ...


class ViewScheduler:
    def __init__(self, views: Sequence[View], active_index: int = 0) -> None:
        self._views: list[View] = list(views)
        self._active_index = active_index if 0 <= active_index < len(self._views) else 0

    @property
    def views(self) -> tuple[View, ...]:
        return tuple(self._views)

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def active_view(self) -> View | None:
        if not self._views:
            return None
        return self._views[self._active_index]

    def categories(self) -> tuple[CacheCategory, ...]:
        """Distinct cache categories read by the configured views, in view order."""
        seen: list[CacheCategory] = []
        for view in self._views:
            if view.category not in seen:
                seen.append(view.category)
        return tuple(seen)

    def next(self) -> None:
        if not self._views:
            return
        self._active_index = (self._active_index + 1) % len(self._views)

    def prev(self) -> None:
        if not self._views:
            return
        self._active_index = (self._active_index - 1) % len(self._views)

    def jump_to(self, index: int) -> None:
        if 0 <= index < len(self._views):
            self._active_index = index

    def move_selection(self, delta: int) -> bool:
        """Route up/down to the active view; False when it has no list."""
        view = self.active_view
        if view is None or not view.handles_list_navigation:
            return False
        view.move_selection(delta)
        return True

    def render(self, width: int, height: int, cache: SnapshotReader) -> Text:
        view = self.active_view
        if view is None:
            return Text("No views configured", style="dim")
        return view.render(cache.read(view.category), width, height)

    def render_tab_titles(self) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        for index, view in enumerate(self._views):
            style = ACTIVE_TAB_STYLE if index == self._active_index else INACTIVE_TAB_STYLE
            text.append(f" {index + 1}:{view.title} ", style=style)
            text.append(" ")
        return text


def _make_view(view_id: str, standard: StandardView | None) -> View:
    if view_id == "standard":
        return standard if standard is not None else StandardView()
    if view_id == "network":
        return NetworkView()
    if view_id == "hardware":
        return HardwareView()
    if view_id == "processes":
        return ProcessesView()
    return WeatherView()


def build_views(
    order: Sequence[str],
    visible: Sequence[str],
    default: str = "",
    *,
    standard: StandardView | None = None,
) -> ViewScheduler:
    """Build the scheduler from configured order, visibility and default view.

    Empty ``order`` or ``visible`` mean all views. ``default`` matches a view id
    or title, case-insensitively; no match leaves the first view active.
    """
    ordered = normalize_view_ids(list(order)) or VIEW_IDS
    shown = set(normalize_view_ids(list(visible)) or VIEW_IDS)
    views = [_make_view(view_id, standard) for view_id in ordered if view_id in shown]
    wanted = default.strip().lower()
    active = 0
    if wanted:
        for index, view in enumerate(views):
            if wanted in (view.view_id, view.title.lower()):
                active = index
                break
        else:
            logger.debug(
                "Default view '%s' is not visible; using first view.",
                default,
                extra={"event": "default_view_missing"},
            )
    return ViewScheduler(views, active)
