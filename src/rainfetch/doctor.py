"""Diagnostics for the sources behind each dashboard view.

``rainfetch --doctor`` answers "why does my Hardware view say N/A?" without
starting the TUI: it checks the metric libraries, the psutil sensor APIs the
current platform exposes, the hardware-probing binaries and the config file.
"""

from __future__ import annotations

import importlib
import json
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

DoctorStatus = Literal["ok", "missing", "error"]

TOOL_TIMEOUT_S = 2.0
_SENSOR_APIS = (
    ("temperature", "sensors_temperatures"),
    ("fan speed", "sensors_fans"),
    ("battery", "sensors_battery"),
    ("load average", "getloadavg"),
)
_STATUS_TOKENS: dict[DoctorStatus, str] = {
    "ok": "[OK]",
    "missing": "[MISS]",
    "error": "[ERR]",
}


@dataclass(frozen=True)
class DoctorCheck:
    """Result of probing one metric source."""

    name: str
    status: DoctorStatus
    required: bool
    detail: str
    hint: str | None = None

    @property
    def failed(self) -> bool:
        return self.required and self.status != "ok"


@dataclass(frozen=True)
class DoctorReport:
    checks: list[DoctorCheck]

    @property
    def exit_code(self) -> int:
        return 2 if any(check.failed for check in self.checks) else 0


def run_doctor(config_file: Path | None = None) -> DoctorReport:
    checks = [
        probe_module("psutil", required=True),
        probe_module("requests", required=False),
        probe_sensors(),
        probe_tool("nvidia-smi", ["--version"]),
        probe_tool("lspci", ["--version"]),
    ]
    if config_file is not None:
        checks.append(probe_config(config_file))
    return DoctorReport(checks=checks)


def render_report(report: DoctorReport) -> str:
    lines = ["rainfetch doctor", ""]
    for check in report.checks:
        scope = "required" if check.required else "optional"
        lines.append(
            f"{_STATUS_TOKENS[check.status]} {check.name:<11} [{scope}] {check.detail}"
        )
        if check.hint:
            lines.append(f"      hint: {check.hint}")
    lines.append("")
    lines.append("Result: FAIL" if report.exit_code else "Result: OK")
    return "\n".join(lines)


def probe_module(name: str, *, required: bool) -> DoctorCheck:
    """Check that a metric library imports and report its version."""
    try:
        module = importlib.import_module(name)
    except Exception as exc:
        return DoctorCheck(
            name=name,
            status="missing",
            required=required,
            detail=f"not importable ({type(exc).__name__})",
            hint=f"pip install {name}",
        )
    version = getattr(module, "__version__", None)
    return DoctorCheck(
        name=name,
        status="ok",
        required=required,
        detail=f"version {version}" if version else "importable",
    )


def probe_sensors() -> DoctorCheck:
    """List which psutil sensor APIs exist on this platform."""
    try:
        psutil = importlib.import_module("psutil")
    except Exception:
        return DoctorCheck(
            name="sensors",
            status="missing",
            required=False,
            detail="psutil unavailable",
        )
    present = [label for label, attr in _SENSOR_APIS if hasattr(psutil, attr)]
    absent = [label for label, attr in _SENSOR_APIS if not hasattr(psutil, attr)]
    if not absent:
        return DoctorCheck(
            name="sensors",
            status="ok",
            required=False,
            detail="all sensor APIs present",
        )
    return DoctorCheck(
        name="sensors",
        status="missing",
        required=False,
        detail=f"present: {', '.join(present) or 'none'}",
        hint=f"{', '.join(absent)} will show as N/A on this platform.",
    )


def probe_tool(name: str, args: list[str], *, required: bool = False) -> DoctorCheck:
    """Run a hardware-probing binary once and keep the first line it prints."""
    binary = shutil.which(name)
    if binary is None:
        return DoctorCheck(
            name=name,
            status="missing",
            required=required,
            detail="not on PATH",
            hint="The Hardware view falls back to N/A for what this tool reports.",
        )
    try:
        proc = subprocess.run(
            [binary, *args],
            capture_output=True,
            text=True,
            timeout=TOOL_TIMEOUT_S,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        return DoctorCheck(
            name=name,
            status="error",
            required=required,
            detail=f"launch failed ({type(exc).__name__})",
        )
    if proc.returncode != 0:
        return DoctorCheck(
            name=name,
            status="error",
            required=required,
            detail=f"exited with {proc.returncode}",
        )
    output = proc.stdout.strip()
    first_line = output.splitlines()[0] if output else f"found at {binary}"
    return DoctorCheck(name=name, status="ok", required=required, detail=first_line)


def probe_config(path: Path) -> DoctorCheck:
    """Check that the config file, when present, is a readable JSON object."""
    if not path.exists():
        return DoctorCheck(
            name="config",
            status="ok",
            required=False,
            detail=f"{path} absent; defaults apply",
        )
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        return DoctorCheck(
            name="config",
            status="error",
            required=False,
            detail=f"{path} unreadable ({type(exc).__name__})",
            hint="Repair or remove the file; the dashboard starts with defaults.",
        )
    if not isinstance(data, dict):
        return DoctorCheck(
            name="config",
            status="error",
            required=False,
            detail=f"{path} is not a JSON object",
            hint="Repair or remove the file; the dashboard starts with defaults.",
        )
    return DoctorCheck(name="config", status="ok", required=False, detail=str(path))
