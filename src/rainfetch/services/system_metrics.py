"""Blocking metric collectors backed by psutil and short-lived subprocesses.

Every function here is meant to run on the IO executor through
`run_collector`; none of them touch UI state. Individual probes degrade to
``"N/A"`` rather than raising. A failure of psutil itself surfaces as
`CollectionError`.
"""

from __future__ import annotations

import getpass
import logging
import os
import platform
import socket
import subprocess
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import TypeVar

import psutil

from .collectors import CollectionError
from .snapshots import (
    NOT_AVAILABLE,
    HardwareSnapshot,
    NetworkSnapshot,
    ProcessEntry,
    ProcessSnapshot,
    SystemSnapshot,
)

logger = logging.getLogger(__name__)

SUBPROCESS_TIMEOUT_S = 2.0
TOP_PROCESS_COUNT = 5
MAX_LISTENING_PORTS = 10
_MB = 1024 * 1024
_GB = 1024 * _MB
_TEMPERATURE_CHIPS = ("coretemp", "k10temp", "cpu_thermal", "acpitz")

T = TypeVar("T")


def _psutil_failures(func: Callable[..., T]) -> Callable[..., T]:
    @wraps(func)
    def wrapper(*args, **kwargs) -> T:
        try:
            return func(*args, **kwargs)
        except (psutil.Error, OSError) as exc:
            raise CollectionError(
                f"{func.__name__} failed: {str(exc) or type(exc).__name__}"
            ) from exc

    return wrapper


def _run_command(args: list[str]) -> str | None:
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=SUBPROCESS_TIMEOUT_S,
            check=False,
        )
    except (FileNotFoundError, PermissionError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout


@_psutil_failures
def collect_system() -> SystemSnapshot:
    uname = platform.uname()
    memory = psutil.virtual_memory()
    return SystemSnapshot(
        os_name=f"{uname.system} {uname.release}".strip() or platform.system(),
        hostname=socket.gethostname(),
        kernel=uname.version or uname.release or NOT_AVAILABLE,
        architecture=uname.machine or NOT_AVAILABLE,
        cpu_count=psutil.cpu_count() or os.cpu_count() or 1,
        python_version=platform.python_version(),
        memory=(
            f"{memory.used / _GB:.1f} GB / {memory.total / _GB:.1f} GB "
            f"({memory.percent:.0f}%)"
        ),
        disk=_disk_usage(),
        load_average=_load_average(),
        username=_username(),
        process_count=len(psutil.pids()),
        boot_time_s=_boot_time(),
    )


def _disk_usage() -> str:
    root = Path.home().anchor or "/"
    try:
        usage = psutil.disk_usage(root)
    except OSError:
        return NOT_AVAILABLE
    return f"{usage.used / _GB:.1f} GB / {usage.total / _GB:.1f} GB ({usage.percent:.0f}%)"


def _load_average() -> str:
    try:
        one, five, fifteen = psutil.getloadavg()
    except (AttributeError, OSError):
        return NOT_AVAILABLE
    return f"{one:.2f} {five:.2f} {fifteen:.2f}"


def _username() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        pass
    # Termux and some containers have no passwd entry for the uid.
    for var in ("USER", "LOGNAME", "USERNAME"):
        value = os.environ.get(var)
        if value:
            return value
    return "unknown"


def _boot_time() -> float | None:
    try:
        return float(psutil.boot_time())
    except (OSError, RuntimeError):
        return None


@_psutil_failures
def collect_network() -> NetworkSnapshot:
    counters = psutil.net_io_counters()
    return NetworkSnapshot(
        ip_addresses=_ip_addresses(),
        bytes_sent=counters.bytes_sent if counters is not None else None,
        bytes_recv=counters.bytes_recv if counters is not None else None,
        connections=_connection_count(),
        listening_ports=_listening_ports(),
    )


def _ip_addresses() -> tuple[str, ...]:
    addresses: list[str] = []
    for nic_addresses in psutil.net_if_addrs().values():
        for address in nic_addresses:
            if address.family != socket.AF_INET:
                continue
            if address.address.startswith("127."):
                continue
            addresses.append(address.address)
    return tuple(addresses) or ("127.0.0.1",)


def _connection_count() -> int | None:
    try:
        return len(psutil.net_connections(kind="inet"))
    except (psutil.AccessDenied, OSError):
        return None


def _listening_ports() -> tuple[str, ...]:
    try:
        connections = psutil.net_connections(kind="inet")
    except (psutil.AccessDenied, OSError):
        return ()
    ports: list[str] = []
    for conn in connections:
        if conn.status != psutil.CONN_LISTEN or not conn.laddr:
            continue
        port = str(conn.laddr.port)
        if port not in ports:
            ports.append(port)
        if len(ports) >= MAX_LISTENING_PORTS:
            break
    return tuple(ports)


@_psutil_failures
def collect_hardware() -> HardwareSnapshot:
    status, level = _battery()
    return HardwareSnapshot(
        gpu=_gpu_name(),
        temperature=_temperature(),
        fan_speed=_fan_speed(),
        battery_status=status,
        battery_level=level,
    )


def _gpu_name() -> str:
    output = _run_command(
        ["nvidia-smi", "--query-gpu=name", "--format=csv,noheader,nounits"]
    )
    if output and output.strip():
        return output.strip().splitlines()[0]
    output = _run_command(["lspci"])
    if output:
        for line in output.splitlines():
            lowered = line.lower()
            if "vga" in lowered or "display" in lowered:
                return line.strip()
    return NOT_AVAILABLE


def _temperature() -> str:
    sensors = getattr(psutil, "sensors_temperatures", None)
    if sensors is None:
        return NOT_AVAILABLE
    try:
        temps = sensors()
    except (OSError, RuntimeError):
        return NOT_AVAILABLE
    if not temps:
        return NOT_AVAILABLE
    for chip in _TEMPERATURE_CHIPS:
        if temps.get(chip):
            return f"{temps[chip][0].current:.1f}°C"
    for entries in temps.values():
        if entries:
            return f"{entries[0].current:.1f}°C"
    return NOT_AVAILABLE


def _fan_speed() -> str:
    sensors = getattr(psutil, "sensors_fans", None)
    if sensors is None:
        return NOT_AVAILABLE
    try:
        fans = sensors()
    except (OSError, RuntimeError):
        return NOT_AVAILABLE
    for entries in (fans or {}).values():
        if entries:
            return f"{entries[0].current} RPM"
    return NOT_AVAILABLE


def _battery() -> tuple[str, str]:
    sensors = getattr(psutil, "sensors_battery", None)
    if sensors is None:
        return NOT_AVAILABLE, NOT_AVAILABLE
    try:
        battery = sensors()
    except (OSError, RuntimeError):
        return NOT_AVAILABLE, NOT_AVAILABLE
    if battery is None:
        return NOT_AVAILABLE, NOT_AVAILABLE
    status = "Charging" if battery.power_plugged else "Discharging"
    return status, f"{battery.percent:.0f}%"


@_psutil_failures
def collect_processes(limit: int = TOP_PROCESS_COUNT) -> ProcessSnapshot:
    """Top ``limit`` processes by CPU usage, plus the total process count."""
    entries: list[ProcessEntry] = []
    total = 0
    for proc in psutil.process_iter(
        ["pid", "name", "cpu_percent", "memory_info", "cmdline"]
    ):
        total += 1
        try:
            info = proc.info
            memory_info = info.get("memory_info")
            cmdline = info.get("cmdline") or []
            entries.append(
                ProcessEntry(
                    pid=int(info.get("pid") or 0),
                    name=info.get("name") or "?",
                    cpu_percent=float(info.get("cpu_percent") or 0.0),
                    memory_mb=(memory_info.rss / _MB) if memory_info else 0.0,
                    command=" ".join(cmdline),
                )
            )
        except (psutil.NoSuchProcess, psutil.AccessDenied, AttributeError):
            continue
    entries.sort(key=lambda entry: entry.cpu_percent, reverse=True)
    logger.debug(
        "Collected %d processes",
        total,
        extra={"event": "processes_collected", "total": total},
    )
    return ProcessSnapshot(top=tuple(entries[:limit]), total=total)
