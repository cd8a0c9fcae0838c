"""Tests for CommandHistory and HistoryRecall."""

from __future__ import annotations

import pytest

from webwasp.history import DEFAULT_HISTORY_MAX, CommandHistory, HistoryRecall


def filled(*lines: str, capacity: int = DEFAULT_HISTORY_MAX) -> CommandHistory:
    history = CommandHistory(capacity)
    for line in lines:
        history.push(line)
    return history


class TestCommandHistory:
    """Most-recent-first storage with a fixed bound."""

    def test_default_capacity(self) -> None:
        assert CommandHistory().capacity == 20

    def test_rejects_non_positive_capacity(self) -> None:
        with pytest.raises(ValueError):
            CommandHistory(0)

    def test_newest_first(self) -> None:
        history = filled("a", "b", "c")
        assert list(history) == ["c", "b", "a"]
        assert history.get(0) == "c"
        assert history.get(2) == "a"

    def test_get_out_of_range(self) -> None:
        history = filled("a")
        assert history.get(1) is None
        assert history.get(-1) is None

    def test_evicts_oldest_past_capacity(self) -> None:
        history = filled("a", "b", "c", "d", capacity=3)
        assert list(history) == ["d", "c", "b"]
        assert history.size == 3

    def test_size_never_exceeds_capacity(self) -> None:
        history = CommandHistory(5)
        for i in range(50):
            history.push(f"cmd {i}")
            assert len(history) <= 5
        assert history.get(0) == "cmd 49"

    def test_empty_line_ignored(self) -> None:
        history = filled("a", "")
        assert list(history) == ["a"]

    def test_duplicates_kept(self) -> None:
        history = filled("show all", "show all")
        assert list(history) == ["show all", "show all"]

    def test_clear(self) -> None:
        history = filled("a", "b")
        history.clear()
        assert history.size == 0


class TestHistoryRecall:
    """Up/down browsing with the live draft saved and restored."""

    def test_older_on_empty_history_is_noop(self) -> None:
        recall = HistoryRecall(CommandHistory())
        assert recall.older("draft") is None
        assert recall.index == -1
        assert not recall.active

    def test_newer_when_not_browsing_is_noop(self) -> None:
        recall = HistoryRecall(filled("a"))
        assert recall.newer() is None

    def test_walk_back_and_forth(self) -> None:
        recall = HistoryRecall(filled("one", "two", "three"))
        assert recall.older("") == "three"
        assert recall.older("three") == "two"
        assert recall.older("two") == "one"
        assert recall.older("one") is None
        assert recall.index == 2
        assert recall.newer() == "two"
        assert recall.newer() == "three"

    def test_draft_round_trip(self) -> None:
        recall = HistoryRecall(filled("x", "y"))
        assert recall.older("abc") == "y"
        assert recall.draft == "abc"
        assert recall.active
        assert recall.newer() == "abc"
        assert recall.index == -1
        assert recall.draft == ""
        assert recall.newer() is None

    def test_draft_captured_only_on_first_step(self) -> None:
        recall = HistoryRecall(filled("x", "y"))
        recall.older("abc")
        recall.older("y")
        assert recall.draft == "abc"

    def test_reset(self) -> None:
        recall = HistoryRecall(filled("x"))
        recall.older("draft")
        recall.reset()
        assert recall.index == -1
        assert recall.draft == ""

    def test_sees_lines_pushed_later(self) -> None:
        history = CommandHistory()
        recall = HistoryRecall(history)
        history.push("late")
        assert recall.older("") == "late"
