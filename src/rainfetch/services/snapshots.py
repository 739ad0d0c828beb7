"""Value types produced by the metric collectors, one per cache category."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

CacheCategory = Literal["system", "network", "hardware", "process", "weather"]
CATEGORIES: tuple[CacheCategory, ...] = (
    "system",
    "network",
    "hardware",
    "process",
    "weather",
)
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class Unavailable:
    """Stored in place of a snapshot when its collector failed or timed out."""

    reason: str


@dataclass(frozen=True)
class SystemSnapshot:
    os_name: str
    hostname: str
    kernel: str
    architecture: str
    cpu_count: int
    python_version: str
    memory: str
    disk: str
    load_average: str
    username: str
    process_count: int
    boot_time_s: float | None = None


@dataclass(frozen=True)
class NetworkSnapshot:
    ip_addresses: tuple[str, ...]
    bytes_sent: int | None
    bytes_recv: int | None
    connections: int | None
    listening_ports: tuple[str, ...] = ()


@dataclass(frozen=True)
class HardwareSnapshot:
    gpu: str = NOT_AVAILABLE
    temperature: str = NOT_AVAILABLE
    fan_speed: str = NOT_AVAILABLE
    battery_status: str = NOT_AVAILABLE
    battery_level: str = NOT_AVAILABLE


@dataclass(frozen=True)
class ProcessEntry:
    pid: int
    name: str
    cpu_percent: float
    memory_mb: float
    command: str = ""


@dataclass(frozen=True)
class ProcessSnapshot:
    top: tuple[ProcessEntry, ...]
    total: int


@dataclass(frozen=True)
class WeatherSnapshot:
    current: str
    location: str
    forecast: tuple[str, ...] = field(default_factory=tuple)


Snapshot = Union[
    SystemSnapshot,
    NetworkSnapshot,
    HardwareSnapshot,
    ProcessSnapshot,
    WeatherSnapshot,
    Unavailable,
]
