"""Dashboard views: pure renderers from a cached snapshot to rich text.

Each view declares the cache category it reads. Rendering never blocks; a
missing snapshot renders a loading line, an `Unavailable` one its reason.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Protocol, runtime_checkable

from rich.text import Text

from rainfetch.services.snapshots import (
    NOT_AVAILABLE,
    CacheCategory,
    HardwareSnapshot,
    NetworkSnapshot,
    ProcessSnapshot,
    Snapshot,
    SystemSnapshot,
    Unavailable,
    WeatherSnapshot,
)

from .selection import SelectionCursor

HEADING_STYLE = "bold #F2C94C"
RULE_STYLE = "color(240)"
LABEL_STYLE = "bold #7FB3D5"
VALUE_STYLE = "#E6E6E6"
MUTED_STYLE = "dim"
SELECTED_STYLE = "reverse"
RULE = "─" * 21
LOADING_TEXT = "Loading..."
FORECAST_DAYS = 3


@runtime_checkable
class View(Protocol):
    view_id: str
    title: str
    category: CacheCategory
    handles_list_navigation: bool

    def render(self, snapshot: Snapshot | None, width: int, height: int) -> Text:
        """Return the view body for the given terminal area."""

    def move_selection(self, delta: int) -> None:
        """Move the list cursor; views without a list ignore it."""


def _heading(text: Text, title: str) -> None:
    text.append(title, style=HEADING_STYLE)
    text.append("\n")
    text.append(RULE, style=RULE_STYLE)
    text.append("\n\n")


def _row(text: Text, label: str, value: str) -> None:
    text.append(f"{label}: ", style=LABEL_STYLE)
    text.append(value or NOT_AVAILABLE, style=VALUE_STYLE)
    text.append("\n")


def _placeholder(text: Text, snapshot: Snapshot | None) -> bool:
    """Write the loading/unavailable line; True when nothing else should render."""
    if snapshot is None:
        text.append(LOADING_TEXT, style=MUTED_STYLE)
        return True
    if isinstance(snapshot, Unavailable):
        text.append(f"Unavailable: {snapshot.reason}", style=MUTED_STYLE)
        return True
    return False


def _format_bytes(value: int | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    size = float(value)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def _format_uptime(boot_time_s: float | None, now_s: float) -> str:
    if boot_time_s is None:
        return NOT_AVAILABLE
    total = max(0, int(now_s - boot_time_s))
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes = rem // 60
    if days:
        return f"{days}d {hours}h {minutes}m"
    return f"{hours}h {minutes}m"


@dataclass
class StandardView:
    show_cpu: bool = True
    show_memory: bool = True
    show_disk: bool = True
    show_uptime: bool = True
    show_kernel: bool = True
    show_os: bool = True
    show_hostname: bool = True
    clock: Callable[[], float] = time.time
    view_id: str = "standard"
    title: str = "Standard"
    category: CacheCategory = "system"
    handles_list_navigation: bool = False

    def render(self, snapshot: Snapshot | None, width: int, height: int) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        _heading(text, "System Information")
        if _placeholder(text, snapshot):
            return text
        assert isinstance(snapshot, SystemSnapshot)
        if self.show_os:
            _row(text, "OS", f"{snapshot.os_name} ({snapshot.architecture})")
        if self.show_hostname:
            _row(text, "Host", snapshot.hostname)
        if self.show_kernel:
            _row(text, "Kernel", snapshot.kernel)
        _row(text, "User", snapshot.username)
        if self.show_cpu:
            _row(text, "CPU", f"{snapshot.cpu_count} cores")
        if self.show_memory:
            _row(text, "Memory", snapshot.memory)
        _row(text, "Python", snapshot.python_version)
        if snapshot.process_count > 0:
            _row(text, "Processes", str(snapshot.process_count))
        if snapshot.load_average != NOT_AVAILABLE:
            _row(text, "Load", snapshot.load_average)
        if self.show_disk:
            _row(text, "Disk", snapshot.disk)
        now = self.clock()
        if self.show_uptime:
            _row(text, "Uptime", _format_uptime(snapshot.boot_time_s, now))
        text.append("\n")
        _heading(text, "Runtime Information")
        _row(text, "Time", time.strftime("%H:%M:%S", time.localtime(now)))
        return text

    def move_selection(self, delta: int) -> None:
        return None


@dataclass
class NetworkView:
    view_id: str = "network"
    title: str = "Network"
    category: CacheCategory = "network"
    handles_list_navigation: bool = False

    def render(self, snapshot: Snapshot | None, width: int, height: int) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        _heading(text, "Network Information")
        if _placeholder(text, snapshot):
            return text
        assert isinstance(snapshot, NetworkSnapshot)
        _row(text, "IP Addresses", ", ".join(snapshot.ip_addresses))
        _row(text, "Sent", _format_bytes(snapshot.bytes_sent))
        _row(text, "Received", _format_bytes(snapshot.bytes_recv))
        connections = snapshot.connections
        _row(
            text,
            "Active Connections",
            str(connections) if connections is not None else NOT_AVAILABLE,
        )
        _row(text, "Active Ports", ", ".join(snapshot.listening_ports))
        return text

    def move_selection(self, delta: int) -> None:
        return None


@dataclass
class HardwareView:
    view_id: str = "hardware"
    title: str = "Hardware"
    category: CacheCategory = "hardware"
    handles_list_navigation: bool = False

    def render(self, snapshot: Snapshot | None, width: int, height: int) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        _heading(text, "Hardware Information")
        if _placeholder(text, snapshot):
            return text
        assert isinstance(snapshot, HardwareSnapshot)
        _row(text, "GPU", snapshot.gpu)
        _row(text, "Temperature", snapshot.temperature)
        _row(text, "Fan Speed", snapshot.fan_speed)
        _row(text, "Battery Status", snapshot.battery_status)
        _row(text, "Battery Level", snapshot.battery_level)
        return text

    def move_selection(self, delta: int) -> None:
        return None


@dataclass
class ProcessesView:
    view_id: str = "processes"
    title: str = "Processes"
    category: CacheCategory = "process"
    handles_list_navigation: bool = True
    cursor: SelectionCursor = field(default_factory=SelectionCursor)
    _item_count: int = field(default=0, init=False, repr=False)

    def render(self, snapshot: Snapshot | None, width: int, height: int) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        _heading(text, "Process Information")
        if _placeholder(text, snapshot):
            self._item_count = 0
            return text
        assert isinstance(snapshot, ProcessSnapshot)
        # Four heading lines, the total, a blank and the column header.
        room = max(1, height - 7)
        visible = snapshot.top[:room]
        self._item_count = len(visible)
        selected = self.cursor.clamp(self._item_count)
        _row(text, "Total Processes", str(snapshot.total))
        text.append("\n")
        text.append(f"{'PID':>7}  {'CPU%':>6}  {'MEM MB':>8}  NAME\n", style=LABEL_STYLE)
        for index, entry in enumerate(visible):
            line = (
                f"{entry.pid:>7}  {entry.cpu_percent:>6.1f}  "
                f"{entry.memory_mb:>8.1f}  {entry.name}"
            )
            style = SELECTED_STYLE if index == selected else VALUE_STYLE
            text.append(line[: max(1, width)], style=style)
            text.append("\n")
        if not snapshot.top:
            text.append("No processes reported", style=MUTED_STYLE)
        return text

    @property
    def selected_index(self) -> int:
        return self.cursor.index

    def move_selection(self, delta: int) -> None:
        self.cursor.move(delta, self._item_count)


@dataclass
class WeatherView:
    view_id: str = "weather"
    title: str = "Weather"
    category: CacheCategory = "weather"
    handles_list_navigation: bool = False

    def render(self, snapshot: Snapshot | None, width: int, height: int) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        _heading(text, "Weather Information")
        if _placeholder(text, snapshot):
            return text
        assert isinstance(snapshot, WeatherSnapshot)
        _row(text, "Current", snapshot.current)
        _row(text, "Location", snapshot.location)
        text.append("\n")
        _heading(text, "Today's Forecast")
        if not snapshot.forecast:
            text.append("No forecast data available", style=MUTED_STYLE)
            return text
        for day in snapshot.forecast[:FORECAST_DAYS]:
            text.append(day, style=VALUE_STYLE)
            text.append("\n")
        return text

    def move_selection(self, delta: int) -> None:
        return None
