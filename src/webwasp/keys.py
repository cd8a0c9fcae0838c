"""Byte codes and key names for raw terminal input.

The console reads one byte at a time with the terminal in raw mode, so
control keys arrive as their ASCII control codes and arrow keys arrive as
three-byte ``ESC [ <final>`` sequences.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str


def ctrl_code(key: str) -> int:
    """Return the control code produced by ``ctrl+<key>``."""
    return ord(key) & 0x1F


# ---------------------------------------------------------------------------
# Byte codes
# ---------------------------------------------------------------------------

CTRL_A = ctrl_code("a")
CTRL_C = ctrl_code("c")
CTRL_E = ctrl_code("e")
CTRL_H = ctrl_code("h")
CTRL_L = ctrl_code("l")
TAB = 9
LINE_FEED = 10
ENTER = 13
ESCAPE = 27
BACKSPACE = 127

CSI_INTRODUCER = ord("[")

ARROW_UP = ord("A")
ARROW_DOWN = ord("B")
ARROW_RIGHT = ord("C")
ARROW_LEFT = ord("D")

PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E


# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named keys produced by the input decoder."""

    char = "char"
    enter = "enter"
    tab = "tab"
    backspace = "backspace"
    interrupt = "ctrl+c"
    line_start = "ctrl+a"
    line_end = "ctrl+e"
    redraw = "ctrl+l"
    up = "up"
    down = "down"
    left = "left"
    right = "right"


CONTROL_KEYS: dict[int, KeyId] = {
    CTRL_C: Key.interrupt,
    ENTER: Key.enter,
    LINE_FEED: Key.enter,
    BACKSPACE: Key.backspace,
    CTRL_H: Key.backspace,
    TAB: Key.tab,
    CTRL_A: Key.line_start,
    CTRL_E: Key.line_end,
    CTRL_L: Key.redraw,
}

ARROW_KEYS: dict[int, KeyId] = {
    ARROW_UP: Key.up,
    ARROW_DOWN: Key.down,
    ARROW_RIGHT: Key.right,
    ARROW_LEFT: Key.left,
}


def is_printable(byte: int) -> bool:
    """Return True for bytes that are inserted into the line as-is."""
    return PRINTABLE_MIN <= byte <= PRINTABLE_MAX


def describe_byte(byte: int) -> str:
    """Human readable form of a byte, used in debug logging."""
    if is_printable(byte):
        return repr(chr(byte))
    if byte == ESCAPE:
        return "ESC"
    if byte < PRINTABLE_MIN:
        return f"^{chr(byte + 0x40)}"
    return f"0x{byte:02x}"
