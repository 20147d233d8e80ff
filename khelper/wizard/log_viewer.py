"""Searchable two-pane log browser.

The upper pane lists filtered lines (truncated), the lower pane shows the
selected line in full, word-wrapped. Content is either set once from a
fetched log or appended line by line from a follow stream.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from khelper.constants.limits import (
    DEFAULT_VIEWPORT_HEIGHT,
    DEFAULT_VIEWPORT_WIDTH,
    LOG_CHROME_HEIGHT,
    LOG_DETAIL_MIN_HEIGHT,
    LOG_LIST_MIN_HEIGHT,
    LOG_PANE_MARGIN,
    LOG_TRUNCATE_MARGIN,
    LOG_WRAP_MARGIN,
    SEARCH_CHAR_LIMIT,
)
from khelper.constants.values import (
    SEARCH_PLACEHOLDER,
    TRUNCATION_SUFFIX,
    WRAP_BREAK_CHARS,
)
from khelper.keyboard.wizard import (
    KEY_CLEAR_SEARCH,
    KEY_DOWN,
    KEY_END,
    KEY_ENTER,
    KEY_HALF_PAGE_DOWN,
    KEY_HALF_PAGE_UP,
    KEY_HOME,
    KEY_PAGE_DOWN,
    KEY_PAGE_UP,
    KEY_TAB,
    KEY_UP,
)
from khelper.wizard.query import TextQuery

_UP_KEYS = frozenset({KEY_UP})
_DOWN_KEYS = frozenset({KEY_DOWN})
_VI_UP, _VI_DOWN = "k", "j"
_PAGE_UP_KEYS = frozenset({KEY_PAGE_UP, KEY_HALF_PAGE_UP})
_PAGE_DOWN_KEYS = frozenset({KEY_PAGE_DOWN, KEY_HALF_PAGE_DOWN})
_VI_HOME, _VI_END = "g", "G"
_FOCUS_KEY = "/"


def find_occurrences(text: str, query: str) -> list[tuple[int, int]]:
    """Non-overlapping ``(start, end)`` spans of ``query`` in ``text``, ignoring case."""
    if not query:
        return []
    return [match.span() for match in re.finditer(re.escape(query), text, re.IGNORECASE)]


def truncate(text: str, max_len: int) -> str:
    if max_len > 0 and len(text) > max_len:
        return text[:max_len] + TRUNCATION_SUFFIX
    return text


def word_wrap(text: str, width: int) -> list[str]:
    """Wrap ``text`` at ``width`` columns.

    A break is placed after a space or punctuation mark found in the last
    half of the line; without one the line is cut at ``width``.
    """
    if width <= 0 or len(text) <= width:
        return [text]
    lines = []
    while len(text) > width:
        break_at = width
        for i in range(width - 1, width // 2, -1):
            if text[i] in WRAP_BREAK_CHARS:
                break_at = i + 1
                break
        lines.append(text[:break_at])
        text = text[break_at:]
    if text:
        lines.append(text)
    return lines


class LogViewer:
    """Log line buffer with a substring filter and a selected line."""

    def __init__(self, title: str = "") -> None:
        self.title = title
        self.search = TextQuery(SEARCH_CHAR_LIMIT, SEARCH_PLACEHOLDER)
        self.search_focused = True
        self.all_lines: list[str] = []
        self.filtered_lines: list[str] = []
        self.selected_index = 0
        self.list_offset = 0
        self.streaming = False
        self.auto_follow = False
        self.recent_searches: list[str] = []
        self.note: str | None = None
        self.width = DEFAULT_VIEWPORT_WIDTH
        self.height = DEFAULT_VIEWPORT_HEIGHT

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._scroll_to_selection()

    @property
    def list_height(self) -> int:
        return max(LOG_LIST_MIN_HEIGHT, (self.height - LOG_CHROME_HEIGHT) * 6 // 10)

    @property
    def detail_height(self) -> int:
        return max(LOG_DETAIL_MIN_HEIGHT, (self.height - LOG_CHROME_HEIGHT) - self.list_height)

    @property
    def pane_width(self) -> int:
        return max(1, self.width - LOG_PANE_MARGIN)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def set_static_content(self, text: str) -> None:
        self.all_lines = text.splitlines()
        self.apply_filter()

    def append_line(self, line: str) -> None:
        self.all_lines.append(line)
        self.apply_filter()
        if self.streaming and self.auto_follow and self.filtered_lines:
            self.selected_index = len(self.filtered_lines) - 1
            self._scroll_to_selection()

    def set_streaming(self, streaming: bool) -> None:
        self.streaming = streaming
        self.auto_follow = streaming

    def set_recent_searches(self, searches: Sequence[str]) -> None:
        self.recent_searches = list(searches)

    def search_query(self) -> str:
        return self.search.value

    def apply_filter(self) -> None:
        query = self.search.value.lower()
        if query:
            self.filtered_lines = [line for line in self.all_lines if query in line.lower()]
        else:
            self.filtered_lines = list(self.all_lines)
        if self.selected_index >= len(self.filtered_lines):
            self.selected_index = 0
        self._scroll_to_selection()

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> None:
        half_page = max(1, self.list_height // 2)
        unfocused = not self.search_focused
        if key in _UP_KEYS or (unfocused and key == _VI_UP):
            self._move_to(self.selected_index - 1)
        elif key in _DOWN_KEYS or (unfocused and key == _VI_DOWN):
            self._move_to(self.selected_index + 1)
        elif key in _PAGE_UP_KEYS:
            self._move_to(self.selected_index - half_page)
        elif key in _PAGE_DOWN_KEYS:
            self._move_to(self.selected_index + half_page)
        elif key == KEY_HOME or (unfocused and key == _VI_HOME):
            self._move_to(0)
        elif key == KEY_END or (unfocused and key == _VI_END):
            self._move_to(len(self.filtered_lines) - 1)
        elif unfocused and key == _FOCUS_KEY:
            self.search_focused = True
        elif key == KEY_TAB:
            self.search_focused = not self.search_focused
        elif key == KEY_ENTER:
            self.search_focused = False
        elif key == KEY_CLEAR_SEARCH:
            self.search.clear()
            self.apply_filter()
        elif self.search_focused and self.search.handle_key(key):
            self.apply_filter()

    def _move_to(self, index: int) -> None:
        if not self.filtered_lines:
            return
        last = len(self.filtered_lines) - 1
        self.selected_index = max(0, min(index, last))
        if self.streaming:
            self.auto_follow = self.selected_index == last
        self._scroll_to_selection()

    def _scroll_to_selection(self) -> None:
        height = self.list_height
        if self.selected_index < self.list_offset:
            self.list_offset = self.selected_index
        elif self.selected_index >= self.list_offset + height:
            self.list_offset = self.selected_index - height + 1
        max_offset = max(0, len(self.filtered_lines) - height)
        self.list_offset = max(0, min(self.list_offset, max_offset))

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def selected_line(self) -> str | None:
        if 0 <= self.selected_index < len(self.filtered_lines):
            return self.filtered_lines[self.selected_index]
        return None

    def visible_lines(self) -> list[tuple[int, str]]:
        """``(index, truncated line)`` pairs inside the list window."""
        max_len = self.width - LOG_TRUNCATE_MARGIN
        end = min(len(self.filtered_lines), self.list_offset + self.list_height)
        return [
            (index, truncate(self.filtered_lines[index], max_len))
            for index in range(self.list_offset, end)
        ]

    def detail_lines(self) -> list[str]:
        line = self.selected_line()
        if line is None:
            return []
        return word_wrap(line, self.width - LOG_WRAP_MARGIN)


__all__ = ["LogViewer", "find_occurrences", "truncate", "word_wrap"]
