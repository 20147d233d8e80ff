"""Limit and threshold constants for the TUI.

All limit values, thresholds, and layout margins.
"""

from typing import Final

# ============================================================================
# Selector limits
# ============================================================================

MAX_VISIBLE_ITEMS: Final = 10
MAX_RECENT_ITEMS: Final = 5
QUERY_CHAR_LIMIT: Final = 100
SEARCH_CHAR_LIMIT: Final = 200
INPUT_CHAR_LIMIT: Final = 512

# ============================================================================
# Log viewer layout
# ============================================================================

LOG_CHROME_HEIGHT: Final = 10
LOG_LIST_MIN_HEIGHT: Final = 5
LOG_DETAIL_MIN_HEIGHT: Final = 3
LOG_PANE_MARGIN: Final = 4
LOG_TRUNCATE_MARGIN: Final = 10
LOG_WRAP_MARGIN: Final = 6
DEFAULT_VIEWPORT_WIDTH: Final = 120
DEFAULT_VIEWPORT_HEIGHT: Final = 40

__all__ = [
    "DEFAULT_VIEWPORT_HEIGHT",
    "DEFAULT_VIEWPORT_WIDTH",
    "INPUT_CHAR_LIMIT",
    "LOG_CHROME_HEIGHT",
    "LOG_DETAIL_MIN_HEIGHT",
    "LOG_LIST_MIN_HEIGHT",
    "LOG_PANE_MARGIN",
    "LOG_TRUNCATE_MARGIN",
    "LOG_WRAP_MARGIN",
    "MAX_RECENT_ITEMS",
    "MAX_VISIBLE_ITEMS",
    "QUERY_CHAR_LIMIT",
    "SEARCH_CHAR_LIMIT",
]
