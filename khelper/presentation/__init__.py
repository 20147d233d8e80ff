"""Rendering of wizard state into Rich renderables."""

from khelper.presentation.renderer import WizardRenderer
from khelper.presentation.theme import DARK_THEME, LIGHT_THEME, Theme, get_theme

__all__ = ["DARK_THEME", "LIGHT_THEME", "Theme", "WizardRenderer", "get_theme"]
