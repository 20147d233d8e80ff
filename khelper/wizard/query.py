"""Single-line text buffer used by filter, search and value prompts."""

from __future__ import annotations

from khelper.keyboard.wizard import KEY_BACKSPACE, KEY_CLEAR_LINE, KEY_DELETE_WORD


def is_text_key(key: str) -> bool:
    """Printable characters arrive as themselves; named keys are longer."""
    return len(key) == 1 and key.isprintable()


class TextQuery:
    """Append-only editing: characters, backspace, delete word, clear line."""

    def __init__(self, char_limit: int, placeholder: str = "") -> None:
        self.char_limit = char_limit
        self.placeholder = placeholder
        self.value = ""

    def __bool__(self) -> bool:
        return bool(self.value)

    def clear(self) -> None:
        self.value = ""

    def set(self, value: str) -> None:
        self.value = value[: self.char_limit]

    def handle_key(self, key: str) -> bool:
        """Apply an editing key. Returns True when the value changed."""
        before = self.value
        if key == KEY_BACKSPACE:
            self.value = self.value[:-1]
        elif key == KEY_CLEAR_LINE:
            self.value = ""
        elif key == KEY_DELETE_WORD:
            self.value = self.value.rstrip().rpartition(" ")[0]
            if self.value:
                self.value += " "
        elif is_text_key(key) and len(self.value) < self.char_limit:
            self.value += key
        return self.value != before


__all__ = ["TextQuery", "is_text_key"]
