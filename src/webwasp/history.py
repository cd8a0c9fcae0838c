"""Bounded command history with up/down recall."""

from __future__ import annotations

import logging
from collections.abc import Iterator

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_MAX = 20


class CommandHistory:
    """Most-recent-first store of submitted lines.

    Index 0 is the newest line. Pushing past capacity evicts the oldest.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_MAX) -> None:
        if capacity <= 0:
            raise ValueError(f"history capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._lines: list[str] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return len(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def push(self, line: str) -> None:
        """Record a submitted line. Empty lines are ignored; duplicates are kept."""
        if not line:
            return
        self._lines.insert(0, line)
        logger.debug("history push %r", line)
        if len(self._lines) > self._capacity:
            evicted = self._lines.pop()
            logger.debug("history full, evicted %r", evicted)

    def get(self, index: int) -> str | None:
        """Return the line at recency *index*, or None when out of range."""
        if 0 <= index < len(self._lines):
            return self._lines[index]
        return None

    def clear(self) -> None:
        self._lines.clear()


class HistoryRecall:
    """Browsing state for one line edit.

    ``index`` is -1 while editing the live draft, otherwise the recency
    index of the line currently shown. The draft is saved when browsing
    starts and handed back when the user returns past the newest entry.
    """

    def __init__(self, history: CommandHistory) -> None:
        self._history = history
        self._index: int = -1
        self._draft: str = ""

    @property
    def index(self) -> int:
        return self._index

    @property
    def draft(self) -> str:
        return self._draft

    @property
    def active(self) -> bool:
        return self._index != -1

    def older(self, current: str) -> str | None:
        """Step to an older line. Returns the text to show, or None for no-op."""
        new_index = self._index + 1
        if new_index >= self._history.size:
            return None

        # Capture the live line when first entering browsing mode
        if self._index == -1:
            self._draft = current

        self._index = new_index
        return self._history.get(new_index)

    def newer(self) -> str | None:
        """Step to a newer line, ending at the saved draft."""
        if self._index == -1:
            return None

        self._index -= 1
        if self._index == -1:
            draft = self._draft
            self._draft = ""
            return draft
        return self._history.get(self._index)

    def reset(self) -> None:
        """Leave browsing mode, keeping whatever is in the buffer as the draft."""
        self._index = -1
        self._draft = ""
