"""App-level keyboard bindings.

This module contains Textual Binding objects for app-level bindings
that work from any screen. Everything else is routed to the wizard as
plain key events.
"""

from textual.binding import Binding

# ============================================================================
# Textual Binding objects for app-level bindings
# ============================================================================

APP_BINDINGS: list[Binding] = [
    Binding("ctrl+c", "quit", "Quit", priority=True, show=False),
    Binding("ctrl+q", "quit", "Quit", priority=True, show=False),
]

__all__ = [
    "APP_BINDINGS",
]
