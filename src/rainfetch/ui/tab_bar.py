"""One-line tab strip above the active view."""

from __future__ import annotations

from textual.widgets import Static

from .view_scheduler import ViewScheduler


class TabBar(Static):
    DEFAULT_CSS = """
    TabBar {
        height: 1;
        width: 1fr;
        overflow: hidden;
    }
    """

    def show_scheduler(self, scheduler: ViewScheduler) -> None:
        self.update(scheduler.render_tab_titles())
