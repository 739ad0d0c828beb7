"""Terminal control-sequence stripping for recorded output."""

from __future__ import annotations

import re

ESC = "\x1b"
BEL = "\x07"

# Applied in order; each pattern requires an ESC, so a fully stripped string is
# a fixed point of every pass.
_PATTERNS = tuple(
    re.compile(pattern)
    for pattern in (
        r"\x1b\[[0-9;]*m",  # colour / attributes
        r"\x1b\[[0-9]*[ABCDFGHK]",  # cursor movement
        r"\x1b\[[0-9]*[JK]",  # screen / line clear
        r"\x1b\[[?0-9;]*[hlnpqr]",  # mode set/reset and queries
        r"\x1b\][0-9]*;[^\x07\x1b]*(?:\x07|\x1b\\)",  # OSC, BEL or ST terminated
        r"\x1b\[[?0-9;]*[a-zA-Z]",  # remaining private CSI
        r"\x1b\[[0-9]*n",  # device status
    )
)
_LEFTOVER = re.compile(r"\x1b\[?")


def strip_control_sequences(text: str) -> str:
    """Remove ANSI/VT control sequences and bell characters from ``text``.

    Truncated or unknown sequences lose their introducer bytes rather than
    raising, and the result never contains ESC or BEL.
    """
    result = text
    for pattern in _PATTERNS:
        result = pattern.sub("", result)
    result = _LEFTOVER.sub("", result)
    return result.replace(BEL, "")
