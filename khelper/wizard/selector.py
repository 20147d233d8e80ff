"""Filterable single-select list with a recent section."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from khelper.constants.limits import MAX_VISIBLE_ITEMS, QUERY_CHAR_LIMIT
from khelper.constants.values import FILTER_PLACEHOLDER
from khelper.keyboard.wizard import (
    KEY_DOWN,
    KEY_PAGE_DOWN,
    KEY_PAGE_UP,
    KEY_PREV,
    KEY_UP,
)
from khelper.wizard import fuzzy
from khelper.wizard.fuzzy import Match
from khelper.wizard.query import TextQuery


@dataclass(frozen=True)
class VisibleRow:
    """One row of the scrolled window."""

    match: Match
    position: int
    is_recent: bool
    selected: bool
    recent_header: bool = False
    all_header: bool = False


class FuzzySelector:
    """Two-section fuzzy list.

    Recent items are filtered separately and listed first; the ``all``
    section never repeats an item shown as recent. A single cursor spans
    both sections and a fixed-height window follows it.
    """

    def __init__(self, title: str, *, max_visible: int = MAX_VISIBLE_ITEMS) -> None:
        self.title = title
        self.max_visible = max_visible
        self.query = TextQuery(QUERY_CHAR_LIMIT, FILTER_PLACEHOLDER)
        self.items: list[str] = []
        self.recent: list[str] = []
        self.filtered_recent: list[Match] = []
        self.filtered: list[Match] = []
        self.cursor = 0
        self.scroll_offset = 0
        self.in_recent_section = True
        self.loading = True
        self.error: Exception | str | None = None

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def set_candidates(self, items: Sequence[str]) -> None:
        self.items = list(items)
        self.loading = False
        self.error = None
        self.filter()

    def set_recent(self, items: Sequence[str]) -> None:
        self.recent = list(items)
        self.filter()

    def set_error(self, error: Exception | str) -> None:
        self.error = error
        self.loading = False

    def set_loading(self, loading: bool = True) -> None:
        self.loading = loading
        if loading:
            self.error = None

    def reset(self) -> None:
        """Clear the query and move to the top of the list."""
        self.query.clear()
        self.cursor = 0
        self.scroll_offset = 0
        self.in_recent_section = True
        self.filter()

    def clear_query(self) -> None:
        self.query.clear()
        self.filter()

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    @property
    def total(self) -> int:
        return len(self.filtered_recent) + len(self.filtered)

    @property
    def entries(self) -> list[Match]:
        return self.filtered_recent + self.filtered

    def filter(self) -> None:
        recent_set = set(self.recent)
        remaining = [item for item in self.items if item not in recent_set]
        query = self.query.value
        self.filtered_recent = fuzzy.find(query, self.recent)
        self.filtered = fuzzy.find(query, remaining)
        if self.cursor >= self.total:
            self.cursor = 0
        self.in_recent_section = self.cursor < len(self.filtered_recent)
        self._scroll_to_cursor()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> None:
        if key in (KEY_UP, KEY_PREV):
            self._move_to(self.cursor - 1)
        elif key == KEY_DOWN:
            self._move_to(self.cursor + 1)
        elif key == KEY_PAGE_UP:
            self._move_to(self.cursor - self.max_visible)
        elif key == KEY_PAGE_DOWN:
            self._move_to(self.cursor + self.max_visible)
        elif self.query.handle_key(key):
            self.filter()

    def _move_to(self, position: int) -> None:
        if self.total == 0:
            return
        self.cursor = max(0, min(position, self.total - 1))
        self.in_recent_section = self.cursor < len(self.filtered_recent)
        self._scroll_to_cursor()

    def _scroll_to_cursor(self) -> None:
        if self.cursor < self.scroll_offset:
            self.scroll_offset = self.cursor
        elif self.cursor >= self.scroll_offset + self.max_visible:
            self.scroll_offset = self.cursor - self.max_visible + 1
        max_offset = max(0, self.total - self.max_visible)
        self.scroll_offset = max(0, min(self.scroll_offset, max_offset))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_selection(self) -> str:
        if self.in_recent_section:
            if 0 <= self.cursor < len(self.filtered_recent):
                return self.filtered_recent[self.cursor].text
            return ""
        index = self.cursor - len(self.filtered_recent)
        if 0 <= index < len(self.filtered):
            return self.filtered[index].text
        return ""

    def visible_rows(self) -> list[VisibleRow]:
        """Rows inside the scroll window, with section header markers."""
        recent_count = len(self.filtered_recent)
        rows: list[VisibleRow] = []
        all_header_shown = False
        end = min(self.total, self.scroll_offset + self.max_visible)
        entries = self.entries
        for position in range(self.scroll_offset, end):
            is_recent = position < recent_count
            rows.append(
                VisibleRow(
                    match=entries[position],
                    position=position,
                    is_recent=is_recent,
                    selected=position == self.cursor,
                    recent_header=is_recent and position == self.scroll_offset,
                    all_header=not is_recent and not all_header_shown,
                )
            )
            if not is_recent:
                all_header_shown = True
        return rows


__all__ = ["FuzzySelector", "VisibleRow"]
