"""Project version source of truth."""

from __future__ import annotations

import platform

from .runtime_config import FRAME_FILE_SUFFIXES

__all__ = ["__version__", "build_help_epilog"]

# Manually updated for each release.
__version__ = "0.3.0"


def build_help_epilog() -> str:
    return (
        f"Frame files: {', '.join(FRAME_FILE_SUFFIXES)}\n"
        f"Platform: {platform.platform()}\n"
        f"Version: {__version__}"
    )
