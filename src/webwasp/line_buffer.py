"""Cursor-addressed edit buffer for a single command line.

Every mutating operation returns the terminal output that brings the
visible line in step with the buffer. The output assumes the terminal
cursor sits at the buffer cursor's column before the call, and uses only
backspace (``\\b``) to move left, rewritten characters to move right and
spaces to blank a cell.
"""

from __future__ import annotations

from dataclasses import dataclass

from webwasp.errors import BufferFull

DEFAULT_CAPACITY = 1024

_BACK = "\b"


@dataclass
class _LineState:
    text: str = ""
    cursor: int = 0


class EditBuffer:
    """Fixed-capacity line buffer with ``0 <= cursor <= len <= capacity``."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._state = _LineState()

    # -- accessors ------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._state.text

    @property
    def cursor(self) -> int:
        return self._state.cursor

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._state.text)

    @property
    def is_full(self) -> bool:
        return len(self._state.text) >= self._capacity

    # -- editing --------------------------------------------------------------

    def insert(self, ch: str) -> str:
        """Insert a single character at the cursor.

        Raises :class:`BufferFull` when the buffer is at capacity.
        """
        if len(ch) != 1:
            raise ValueError(f"insert expects one character, got {ch!r}")
        if self.is_full:
            raise BufferFull(f"line is limited to {self._capacity} characters")

        text, cursor = self._state.text, self._state.cursor
        tail = text[cursor:]
        self._state.text = text[:cursor] + ch + tail
        self._state.cursor = cursor + 1
        return ch + tail + _BACK * len(tail)

    def delete_before_cursor(self) -> str:
        """Remove the character left of the cursor (backspace)."""
        text, cursor = self._state.text, self._state.cursor
        if cursor == 0:
            return ""

        tail = text[cursor:]
        self._state.text = text[: cursor - 1] + tail
        self._state.cursor = cursor - 1
        # Step back, shift the tail left, blank the stale last cell, return.
        return _BACK + tail + " " + _BACK * (len(tail) + 1)

    def move_cursor(self, delta: int) -> str:
        """Move the cursor by *delta* columns, clamped to ``[0, len]``."""
        text, cursor = self._state.text, self._state.cursor
        target = max(0, min(len(text), cursor + delta))
        self._state.cursor = target
        if target < cursor:
            return _BACK * (cursor - target)
        return text[cursor:target]

    def move_to_start(self) -> str:
        return self.move_cursor(-self._state.cursor)

    def move_to_end(self) -> str:
        return self.move_cursor(len(self._state.text) - self._state.cursor)

    def replace_all(self, text: str) -> str:
        """Replace the whole line, truncated to capacity; cursor goes to the end."""
        old_text, old_cursor = self._state.text, self._state.cursor
        new_text = text[: self._capacity]
        self._state.text = new_text
        self._state.cursor = len(new_text)

        old_len = len(old_text)
        return (
            _BACK * old_cursor
            + " " * old_len
            + _BACK * old_len
            + new_text
        )

    def clear(self) -> str:
        """Reset to an empty line and return the previous text.

        Emits nothing: callers clear once the line has been submitted or
        abandoned and the terminal has moved on.
        """
        text = self._state.text
        self._state = _LineState()
        return text

    def paint(self) -> str:
        """Draw the line starting from its first column, e.g. after a new prompt."""
        text, cursor = self._state.text, self._state.cursor
        return text + _BACK * (len(text) - cursor)

    def redraw(self) -> str:
        """Repaint the whole line, leaving the cursor where it was."""
        return _BACK * self._state.cursor + self.paint()
