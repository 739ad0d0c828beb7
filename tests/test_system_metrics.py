"""Tests for the psutil-backed metric collectors."""

from __future__ import annotations

import socket
import subprocess
from types import SimpleNamespace

import psutil
import pytest

import rainfetch.services.system_metrics as metrics
from rainfetch.services.collectors import CollectionError
from rainfetch.services.snapshots import NOT_AVAILABLE


def _proc(pid: int, name: str, cpu: float, rss: int = 10 * 1024 * 1024):
    return SimpleNamespace(
        info={
            "pid": pid,
            "name": name,
            "cpu_percent": cpu,
            "memory_info": SimpleNamespace(rss=rss),
            "cmdline": [name, "--flag"],
        }
    )


class _VanishingProcess:
    @property
    def info(self):
        raise psutil.NoSuchProcess(99)


def test_collect_processes_sorts_by_cpu_and_limits(monkeypatch) -> None:
    procs = [
        _proc(1, "init", 0.1),
        _proc(2, "busy", 80.0),
        _VanishingProcess(),
        _proc(3, "medium", 12.5),
        _proc(4, "idle", 0.0),
    ]
    monkeypatch.setattr(metrics.psutil, "process_iter", lambda attrs=None: iter(procs))

    snapshot = metrics.collect_processes(limit=2)

    assert [entry.name for entry in snapshot.top] == ["busy", "medium"]
    assert snapshot.top[0].memory_mb == 10.0
    assert snapshot.top[0].command == "busy --flag"
    assert snapshot.total == 5


def test_collect_network_skips_loopback(monkeypatch) -> None:
    addrs = {
        "lo": [SimpleNamespace(family=socket.AF_INET, address="127.0.0.1")],
        "eth0": [
            SimpleNamespace(family=socket.AF_INET, address="192.168.1.20"),
            SimpleNamespace(family=socket.AF_INET6, address="fe80::1"),
        ],
    }
    connections = [
        SimpleNamespace(status=psutil.CONN_LISTEN, laddr=SimpleNamespace(port=22)),
        SimpleNamespace(status=psutil.CONN_ESTABLISHED, laddr=SimpleNamespace(port=5555)),
        SimpleNamespace(status=psutil.CONN_LISTEN, laddr=SimpleNamespace(port=22)),
    ]
    monkeypatch.setattr(metrics.psutil, "net_if_addrs", lambda: addrs)
    monkeypatch.setattr(
        metrics.psutil,
        "net_io_counters",
        lambda: SimpleNamespace(bytes_sent=100, bytes_recv=200),
    )
    monkeypatch.setattr(metrics.psutil, "net_connections", lambda kind="inet": connections)

    snapshot = metrics.collect_network()

    assert snapshot.ip_addresses == ("192.168.1.20",)
    assert (snapshot.bytes_sent, snapshot.bytes_recv) == (100, 200)
    assert snapshot.connections == 3
    assert snapshot.listening_ports == ("22",)


def test_collect_network_tolerates_access_denied(monkeypatch) -> None:
    def _denied(kind="inet"):
        raise psutil.AccessDenied()

    monkeypatch.setattr(metrics.psutil, "net_if_addrs", lambda: {})
    monkeypatch.setattr(metrics.psutil, "net_io_counters", lambda: None)
    monkeypatch.setattr(metrics.psutil, "net_connections", _denied)

    snapshot = metrics.collect_network()

    assert snapshot.ip_addresses == ("127.0.0.1",)
    assert snapshot.bytes_sent is None
    assert snapshot.connections is None
    assert snapshot.listening_ports == ()


def test_gpu_name_prefers_nvidia_smi(monkeypatch) -> None:
    calls: list[list[str]] = []

    def fake_run(args, **kwargs):
        calls.append(args)
        assert kwargs["timeout"] == metrics.SUBPROCESS_TIMEOUT_S
        return SimpleNamespace(returncode=0, stdout="NVIDIA GeForce RTX 4070\n")

    monkeypatch.setattr(metrics.subprocess, "run", fake_run)

    assert metrics._gpu_name() == "NVIDIA GeForce RTX 4070"
    assert calls[0][0] == "nvidia-smi"


def test_gpu_name_falls_back_to_lspci(monkeypatch) -> None:
    def fake_run(args, **kwargs):
        if args[0] == "nvidia-smi":
            raise FileNotFoundError(args[0])
        return SimpleNamespace(
            returncode=0,
            stdout="00:01.0 Bridge\n00:02.0 VGA compatible controller: Intel UHD\n",
        )

    monkeypatch.setattr(metrics.subprocess, "run", fake_run)

    assert metrics._gpu_name() == "00:02.0 VGA compatible controller: Intel UHD"


def test_gpu_name_unavailable_on_timeout(monkeypatch) -> None:
    def fake_run(args, **kwargs):
        raise subprocess.TimeoutExpired(args, kwargs["timeout"])

    monkeypatch.setattr(metrics.subprocess, "run", fake_run)

    assert metrics._gpu_name() == NOT_AVAILABLE


def test_collect_hardware_reads_sensors(monkeypatch) -> None:
    monkeypatch.setattr(metrics, "_gpu_name", lambda: "GPU")
    monkeypatch.setattr(
        metrics.psutil,
        "sensors_temperatures",
        lambda: {"coretemp": [SimpleNamespace(current=48.25)]},
        raising=False,
    )
    monkeypatch.setattr(
        metrics.psutil,
        "sensors_fans",
        lambda: {"thinkpad": [SimpleNamespace(current=2100)]},
        raising=False,
    )
    monkeypatch.setattr(
        metrics.psutil,
        "sensors_battery",
        lambda: SimpleNamespace(percent=81.4, power_plugged=True),
        raising=False,
    )

    snapshot = metrics.collect_hardware()

    assert snapshot.gpu == "GPU"
    assert snapshot.temperature == "48.2°C"
    assert snapshot.fan_speed == "2100 RPM"
    assert (snapshot.battery_status, snapshot.battery_level) == ("Charging", "81%")


def test_collect_hardware_without_battery(monkeypatch) -> None:
    monkeypatch.setattr(metrics, "_gpu_name", lambda: NOT_AVAILABLE)
    monkeypatch.setattr(metrics.psutil, "sensors_temperatures", lambda: {}, raising=False)
    monkeypatch.setattr(metrics.psutil, "sensors_fans", lambda: {}, raising=False)
    monkeypatch.setattr(metrics.psutil, "sensors_battery", lambda: None, raising=False)

    snapshot = metrics.collect_hardware()

    assert snapshot.temperature == NOT_AVAILABLE
    assert snapshot.battery_status == NOT_AVAILABLE


def test_collect_system_summarizes_host(monkeypatch) -> None:
    gb = 1024**3
    monkeypatch.setattr(
        metrics.psutil,
        "virtual_memory",
        lambda: SimpleNamespace(used=4 * gb, total=16 * gb, percent=25.0),
    )
    monkeypatch.setattr(
        metrics.psutil,
        "disk_usage",
        lambda _root: SimpleNamespace(used=100 * gb, total=400 * gb, percent=25.0),
    )
    monkeypatch.setattr(metrics.psutil, "getloadavg", lambda: (0.5, 0.25, 0.125))
    monkeypatch.setattr(metrics.psutil, "pids", lambda: [1, 2, 3])
    monkeypatch.setattr(metrics.psutil, "boot_time", lambda: 1000.0)
    monkeypatch.setattr(metrics.psutil, "cpu_count", lambda: 8)
    monkeypatch.setattr(metrics.getpass, "getuser", lambda: "alex")

    snapshot = metrics.collect_system()

    assert snapshot.memory == "4.0 GB / 16.0 GB (25%)"
    assert snapshot.disk == "100.0 GB / 400.0 GB (25%)"
    assert snapshot.load_average == "0.50 0.25 0.12"
    assert snapshot.process_count == 3
    assert snapshot.cpu_count == 8
    assert snapshot.username == "alex"
    assert snapshot.boot_time_s == 1000.0


def test_psutil_failure_becomes_collection_error(monkeypatch) -> None:
    def denied():
        raise psutil.AccessDenied(1)

    monkeypatch.setattr(metrics.psutil, "virtual_memory", denied)

    with pytest.raises(CollectionError, match="collect_system failed"):
        metrics.collect_system()
