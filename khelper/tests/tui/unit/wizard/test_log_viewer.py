"""Tests for the log viewer and its text helpers."""

from __future__ import annotations

import pytest

from khelper.keyboard.wizard import (
    KEY_CLEAR_SEARCH,
    KEY_DOWN,
    KEY_END,
    KEY_ENTER,
    KEY_HOME,
    KEY_PAGE_DOWN,
    KEY_TAB,
    KEY_UP,
)
from khelper.wizard.log_viewer import LogViewer, find_occurrences, truncate, word_wrap


def _viewer(lines: list[str], *, streaming: bool = False) -> LogViewer:
    viewer = LogViewer("pod/app")
    viewer.set_size(80, 40)
    viewer.set_streaming(streaming)
    viewer.set_static_content("\n".join(lines))
    return viewer


# =============================================================================
# Helpers
# =============================================================================


@pytest.mark.unit
@pytest.mark.fast
class TestTextHelpers:
    """Tests for find_occurrences, truncate and word_wrap."""

    def test_find_occurrences_case_insensitive(self) -> None:
        assert find_occurrences("Error error ERROR", "error") == [(0, 5), (6, 11), (12, 17)]

    def test_find_occurrences_non_overlapping(self) -> None:
        assert find_occurrences("aaaa", "aa") == [(0, 2), (2, 4)]

    def test_find_occurrences_empty_query(self) -> None:
        assert find_occurrences("text", "") == []

    def test_find_occurrences_after_expanding_lowercase(self) -> None:
        """Spans index the original line even when lowercasing would lengthen it."""
        line = "/home/İlker/.kube/config"
        spans = find_occurrences(line, "config")
        assert spans == [(18, 24)]
        assert [line[start:end] for start, end in spans] == ["config"]

    def test_truncate(self) -> None:
        assert truncate("abcdef", 3) == "abc..."
        assert truncate("abc", 3) == "abc"

    def test_word_wrap_short_line(self) -> None:
        assert word_wrap("short", 20) == ["short"]

    def test_word_wrap_breaks_after_space(self) -> None:
        lines = word_wrap("hello world again", 12)
        assert lines == ["hello world ", "again"]

    def test_word_wrap_hard_cut(self) -> None:
        """Without a break character the line is cut at the width."""
        assert word_wrap("a" * 25, 10) == ["a" * 10, "a" * 10, "a" * 5]

    def test_word_wrap_preserves_text(self) -> None:
        text = "key=value, other=thing; more: data and words"
        assert "".join(word_wrap(text, 11)) == text


# =============================================================================
# Filtering and navigation
# =============================================================================


@pytest.mark.unit
@pytest.mark.fast
class TestLogViewerFilter:
    """Tests for search filtering."""

    def test_static_content(self) -> None:
        viewer = _viewer(["one", "two", "three"])
        assert viewer.all_lines == ["one", "two", "three"]
        assert viewer.filtered_lines == viewer.all_lines
        assert viewer.selected_line() == "one"

    def test_search_filters_lines(self) -> None:
        viewer = _viewer(["INFO start", "ERROR boom", "info done"])
        for key in "info":
            viewer.handle_key(key)
        assert viewer.filtered_lines == ["INFO start", "info done"]

    def test_search_resets_selection_and_details(self) -> None:
        viewer = _viewer(["connect ok", "error: timeout", "retry ok"])
        viewer.handle_key(KEY_END)
        for key in "error":
            viewer.handle_key(key)
        assert viewer.filtered_lines == ["error: timeout"]
        assert viewer.selected_index == 0
        assert viewer.detail_lines() == ["error: timeout"]
        assert find_occurrences(viewer.selected_line(), viewer.search_query()) == [(0, 5)]

    def test_clear_search(self) -> None:
        viewer = _viewer(["a", "b"])
        viewer.handle_key("a")
        assert len(viewer.filtered_lines) == 1
        viewer.handle_key(KEY_CLEAR_SEARCH)
        assert viewer.search_query() == ""
        assert len(viewer.filtered_lines) == 2

    def test_selection_reset_when_filtered_out(self) -> None:
        viewer = _viewer(["alpha", "beta", "gamma"])
        viewer.handle_key(KEY_DOWN)
        viewer.handle_key(KEY_DOWN)
        for key in "alpha":
            viewer.handle_key(key)
        assert viewer.selected_index == 0
        assert viewer.selected_line() == "alpha"

    def test_empty_log(self) -> None:
        viewer = _viewer([])
        viewer.handle_key(KEY_DOWN)
        assert viewer.selected_line() is None
        assert viewer.detail_lines() == []


@pytest.mark.unit
@pytest.mark.fast
class TestLogViewerKeys:
    """Tests for focus and navigation keys."""

    def test_search_focused_by_default(self) -> None:
        assert LogViewer().search_focused is True

    def test_enter_unfocuses_search(self) -> None:
        viewer = _viewer(["a"])
        viewer.handle_key(KEY_ENTER)
        assert viewer.search_focused is False

    def test_tab_toggles_focus(self) -> None:
        viewer = _viewer(["a"])
        viewer.handle_key(KEY_TAB)
        assert viewer.search_focused is False
        viewer.handle_key(KEY_TAB)
        assert viewer.search_focused is True

    def test_slash_focuses_search(self) -> None:
        viewer = _viewer(["a"])
        viewer.handle_key(KEY_ENTER)
        viewer.handle_key("/")
        assert viewer.search_focused is True

    def test_vi_keys_only_when_unfocused(self) -> None:
        """j and k type into the search while it is focused."""
        viewer = _viewer(["jar", "kit", "other"])
        viewer.handle_key("j")
        assert viewer.search_query() == "j"
        viewer.handle_key(KEY_CLEAR_SEARCH)
        viewer.handle_key(KEY_ENTER)
        viewer.handle_key("j")
        assert viewer.selected_index == 1
        viewer.handle_key("k")
        assert viewer.selected_index == 0

    def test_home_and_end(self) -> None:
        viewer = _viewer([f"line {i}" for i in range(50)])
        viewer.handle_key(KEY_END)
        assert viewer.selected_index == 49
        viewer.handle_key(KEY_HOME)
        assert viewer.selected_index == 0

    def test_g_keys_when_unfocused(self) -> None:
        viewer = _viewer([f"line {i}" for i in range(50)])
        viewer.handle_key(KEY_ENTER)
        viewer.handle_key("G")
        assert viewer.selected_index == 49
        viewer.handle_key("g")
        assert viewer.selected_index == 0

    def test_page_down_moves_half_list(self) -> None:
        viewer = _viewer([f"line {i}" for i in range(100)])
        viewer.handle_key(KEY_PAGE_DOWN)
        assert viewer.selected_index == max(1, viewer.list_height // 2)

    def test_window_follows_selection(self) -> None:
        viewer = _viewer([f"line {i}" for i in range(100)])
        viewer.handle_key(KEY_END)
        indices = [index for index, _ in viewer.visible_lines()]
        assert indices[-1] == 99
        assert len(indices) == viewer.list_height


# =============================================================================
# Streaming
# =============================================================================


@pytest.mark.unit
@pytest.mark.fast
class TestLogViewerStreaming:
    """Tests for follow mode."""

    def test_auto_follow_tracks_new_lines(self) -> None:
        viewer = _viewer([], streaming=True)
        for i in range(5):
            viewer.append_line(f"line {i}")
        assert viewer.selected_index == 4

    def test_moving_up_stops_following(self) -> None:
        viewer = _viewer([], streaming=True)
        for i in range(5):
            viewer.append_line(f"line {i}")
        viewer.handle_key(KEY_UP)
        assert viewer.auto_follow is False
        viewer.append_line("line 5")
        assert viewer.selected_index == 3

    def test_returning_to_last_line_resumes_following(self) -> None:
        viewer = _viewer([], streaming=True)
        for i in range(5):
            viewer.append_line(f"line {i}")
        viewer.handle_key(KEY_UP)
        viewer.handle_key(KEY_DOWN)
        assert viewer.auto_follow is True
        viewer.append_line("line 5")
        assert viewer.selected_index == 5

    def test_append_respects_filter(self) -> None:
        viewer = _viewer([], streaming=True)
        for key in "err":
            viewer.handle_key(key)
        viewer.append_line("info ok")
        viewer.append_line("error bad")
        assert viewer.all_lines == ["info ok", "error bad"]
        assert viewer.filtered_lines == ["error bad"]

    def test_detail_lines_wrap_selected(self) -> None:
        viewer = _viewer(["word " * 40])
        lines = viewer.detail_lines()
        assert len(lines) > 1
        assert all(len(line) <= 80 for line in lines)
