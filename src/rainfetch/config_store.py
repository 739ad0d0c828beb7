"""JSON persistence for the dashboard configuration file.

Loading is tolerant of invalid/missing values so a hand-edited or partially
written file degrades to safe defaults instead of aborting startup.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import suppress
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any
from uuid import uuid4

from .runtime_config import DEFAULT_FPS, VIEW_IDS, clamp_fps, normalize_view_ids

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardConfig:
    """User-editable dashboard settings."""

    fps: int = DEFAULT_FPS
    color_scheme: str = "blue"
    show_cpu: bool = True
    show_memory: bool = True
    show_disk: bool = True
    show_uptime: bool = True
    show_kernel: bool = True
    show_os: bool = True
    show_hostname: bool = True
    frame_file: str | None = None
    loop_animation: bool = True
    static_mode: bool = False
    hide_animation: bool = False
    show_fps_counter: bool = False
    show_weather: bool = False
    enable_tabs: bool = True
    visible_tabs: tuple[str, ...] = VIEW_IDS
    default_tab: str = "standard"
    tab_order: tuple[str, ...] = VIEW_IDS


def _coerce_config(data: dict[str, Any]) -> DashboardConfig:
    """Coerce an untyped JSON object into a validated `DashboardConfig`.

    Older files stored ``"default"`` as the frame file to mean "no file"; that
    value is mapped to ``None``.
    """
    defaults = DashboardConfig()

    def _bool(key: str) -> bool:
        value = data.get(key)
        if isinstance(value, bool):
            return value
        return bool(getattr(defaults, key))

    def _str(key: str) -> str:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
        return str(getattr(defaults, key))

    def _views(key: str) -> tuple[str, ...]:
        value = data.get(key)
        if not isinstance(value, list):
            return tuple(getattr(defaults, key))
        normalized = normalize_view_ids([item for item in value if isinstance(item, str)])
        return normalized or tuple(getattr(defaults, key))

    fps_raw = data.get("fps")
    fps = (
        clamp_fps(fps_raw)
        if isinstance(fps_raw, int) and not isinstance(fps_raw, bool)
        else defaults.fps
    )
    frame_file_raw = data.get("frame_file")
    frame_file = (
        frame_file_raw.strip()
        if isinstance(frame_file_raw, str)
        and frame_file_raw.strip()
        and frame_file_raw.strip().lower() != "default"
        else None
    )
    default_tab = _str("default_tab").lower()
    if default_tab not in VIEW_IDS:
        default_tab = defaults.default_tab

    return DashboardConfig(
        fps=fps,
        color_scheme=_str("color_scheme"),
        show_cpu=_bool("show_cpu"),
        show_memory=_bool("show_memory"),
        show_disk=_bool("show_disk"),
        show_uptime=_bool("show_uptime"),
        show_kernel=_bool("show_kernel"),
        show_os=_bool("show_os"),
        show_hostname=_bool("show_hostname"),
        frame_file=frame_file,
        loop_animation=_bool("loop_animation"),
        static_mode=_bool("static_mode"),
        hide_animation=_bool("hide_animation"),
        show_fps_counter=_bool("show_fps_counter"),
        show_weather=_bool("show_weather"),
        enable_tabs=_bool("enable_tabs"),
        visible_tabs=_views("visible_tabs"),
        default_tab=default_tab,
        tab_order=_views("tab_order"),
    )


def load_config_with_notice(
    path: Path, *, create_if_missing: bool = True
) -> tuple[DashboardConfig, str | None]:
    """Load config and return an optional user-facing notice.

    A missing file is replaced by a freshly written default config when
    ``create_if_missing`` is set.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        config = DashboardConfig()
        if not create_if_missing:
            return config, None
        try:
            save_config(path, config)
        except OSError as exc:
            logger.warning("Failed to write default config %s: %s", path, exc)
            return config, None
        logger.info("Created default config file at %s", path)
        return config, None
    except OSError as exc:
        logger.warning("Failed to read config %s: %s; using defaults.", path, exc)
        return (
            DashboardConfig(),
            "Dashboard settings were reset to defaults.\n"
            "Likely cause: config file is unreadable due to permissions or IO issues.\n"
            f"Next step: verify access to '{path}' and restart.",
        )

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Config file at %s is invalid JSON; using defaults.", path)
        return (
            DashboardConfig(),
            "Dashboard settings were reset to defaults.\n"
            "Likely cause: config file is corrupt or partially written.\n"
            f"Next step: remove or repair '{path}' and restart.",
        )

    if not isinstance(data, dict):
        logger.warning("Config file at %s is not a JSON object; using defaults.", path)
        return (
            DashboardConfig(),
            "Dashboard settings were reset to defaults.\n"
            "Likely cause: config file format is invalid for this version.\n"
            f"Next step: remove '{path}' and restart.",
        )

    return _coerce_config(data), None


def load_config(path: Path) -> DashboardConfig:
    """Load the dashboard config from disk, falling back to defaults."""
    config, _notice = load_config_with_notice(path, create_if_missing=False)
    return config


def save_config(path: Path, config: DashboardConfig) -> None:
    """Persist config atomically to disk via write-then-replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.{uuid4().hex}.tmp")
    payload = asdict(config)
    text = json.dumps(payload, indent=2, sort_keys=True)
    delay_s = 0.02
    try:
        for attempt in range(4):
            tmp_path.write_text(text, encoding="utf-8")
            try:
                tmp_path.replace(path)
                return
            except OSError as exc:
                if not _is_retryable_windows_replace_error(exc) or attempt >= 3:
                    raise
                time.sleep(delay_s)
                delay_s = min(0.25, delay_s * 2.0)
    finally:
        with suppress(OSError):
            tmp_path.unlink()


def _is_retryable_windows_replace_error(exc: OSError) -> bool:
    """Return whether an atomic replace failure is likely transient on Windows."""
    winerror = getattr(exc, "winerror", None)
    if winerror in {32, 5, 2}:
        return True
    errno = getattr(exc, "errno", None)
    if errno in {13, 16}:
        return True
    text = str(exc).lower()
    return "used by another process" in text or "permission denied" in text
