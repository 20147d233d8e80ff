"""Keyboard bindings module.

This module provides all keyboard handling for the khelper TUI:

- app: App-level bindings (APP_BINDINGS)
- wizard: Key names, key normalization and per-step help lines
"""

from khelper.keyboard.app import APP_BINDINGS
from khelper.keyboard.wizard import normalize_key

__all__ = [
    "APP_BINDINGS",
    "normalize_key",
]
