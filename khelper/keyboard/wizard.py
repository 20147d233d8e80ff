"""Wizard key names and per-step help.

Textual reports named keys (``up``, ``ctrl+k``, ``slash``). The wizard core
works on normalized keys: printable characters are passed as the character
itself, everything else keeps its Textual name.
"""

from typing import Annotated, Final

# ============================================================================
# Key names
# ============================================================================

KEY_UP: Final = "up"
KEY_DOWN: Final = "down"
KEY_PAGE_UP: Final = "pageup"
KEY_PAGE_DOWN: Final = "pagedown"
KEY_HOME: Final = "home"
KEY_END: Final = "end"
KEY_ENTER: Final = "enter"
KEY_TAB: Final = "tab"
KEY_ESCAPE: Final = "escape"
KEY_BACKSPACE: Final = "backspace"
KEY_PREV: Final = "ctrl+p"
KEY_HALF_PAGE_UP: Final = "ctrl+u"
KEY_HALF_PAGE_DOWN: Final = "ctrl+d"
KEY_CLEAR_LINE: Final = "ctrl+u"
KEY_DELETE_WORD: Final = "ctrl+w"
KEY_CLEAR_SEARCH: Final = "ctrl+l"
KEY_QUIT: Final = "ctrl+c"
KEY_CHANGE_CONFIG: Final = "ctrl+k"
KEY_CHANGE_NAMESPACE: Final = "ctrl+n"

CONFIRM_KEYS: Final = frozenset({KEY_ENTER, KEY_TAB})

_NAMED_PRINTABLE: Final = {"space": " "}


def normalize_key(key: str, character: str | None = None) -> str:
    """Map a Textual key event to the wizard's key vocabulary."""
    if key in _NAMED_PRINTABLE:
        return _NAMED_PRINTABLE[key]
    if character and len(character) == 1 and character.isprintable():
        return character
    return key


# ============================================================================
# Help lines
# ============================================================================

SELECTOR_HELP: list[Annotated[tuple[str, str], "keys, description"]] = [
    ("↑/↓", "navigate"),
    ("enter", "select"),
    ("esc", "back"),
    ("ctrl+k", "kubeconfig"),
    ("ctrl+n", "namespace"),
    ("ctrl+c", "quit"),
]

INPUT_HELP: list[Annotated[tuple[str, str], "keys, description"]] = [
    ("enter", "confirm"),
    ("esc", "back"),
    ("ctrl+c", "quit"),
]

RESULT_HELP: list[Annotated[tuple[str, str], "keys, description"]] = [
    ("enter", "continue"),
    ("esc", "back"),
    ("q", "quit"),
]

LOG_VIEWER_HELP: list[Annotated[tuple[str, str], "keys, description"]] = [
    ("↑/↓", "navigate"),
    ("pgup/pgdn", "page"),
    ("/", "search"),
    ("tab", "toggle focus"),
    ("ctrl+l", "clear"),
    ("esc", "back"),
]

__all__ = [
    "CONFIRM_KEYS",
    "INPUT_HELP",
    "KEY_BACKSPACE",
    "KEY_CHANGE_CONFIG",
    "KEY_CHANGE_NAMESPACE",
    "KEY_CLEAR_LINE",
    "KEY_CLEAR_SEARCH",
    "KEY_DELETE_WORD",
    "KEY_DOWN",
    "KEY_END",
    "KEY_ENTER",
    "KEY_ESCAPE",
    "KEY_HALF_PAGE_DOWN",
    "KEY_HALF_PAGE_UP",
    "KEY_HOME",
    "KEY_PAGE_DOWN",
    "KEY_PAGE_UP",
    "KEY_PREV",
    "KEY_QUIT",
    "KEY_TAB",
    "KEY_UP",
    "LOG_VIEWER_HELP",
    "RESULT_HELP",
    "SELECTOR_HELP",
    "normalize_key",
]
