"""Colour themes.

A ``Theme`` is an immutable set of colours; every style the renderer uses is
derived from it. Themes are chosen once at startup and handed to the
renderer, never looked up globally.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.style import Style

from khelper.constants.enums import ThemeMode


@dataclass(frozen=True)
class Theme:
    name: str
    primary: str
    secondary: str
    accent: str
    error: str
    warning: str
    muted: str
    text: str
    highlight_bg: str

    @property
    def title(self) -> Style:
        return Style(color=self.primary, bold=True)

    @property
    def label(self) -> Style:
        return Style(color=self.secondary, bold=True)

    @property
    def value(self) -> Style:
        return Style(color=self.text)

    @property
    def info(self) -> Style:
        return Style(color=self.muted, italic=True)

    @property
    def warning_style(self) -> Style:
        return Style(color=self.warning, bold=True)

    @property
    def error_style(self) -> Style:
        return Style(color=self.error, bold=True)

    @property
    def success(self) -> Style:
        return Style(color=self.secondary, bold=True)

    @property
    def item(self) -> Style:
        return Style(color=self.text)

    @property
    def selected(self) -> Style:
        return Style(color=self.primary, bold=True)

    @property
    def match(self) -> Style:
        return Style(color=self.accent, bold=True)

    @property
    def help(self) -> Style:
        return Style(color=self.muted)

    @property
    def status_bar(self) -> Style:
        return Style(color=self.text, bgcolor=self.highlight_bg)

    @property
    def live(self) -> Style:
        return Style(color=self.error, bold=True)

    @property
    def placeholder(self) -> Style:
        return Style(color=self.muted)


DARK_THEME = Theme(
    name=ThemeMode.DARK.value,
    primary="#7C3AED",
    secondary="#10B981",
    accent="#F59E0B",
    error="#EF4444",
    warning="#F59E0B",
    muted="#6B7280",
    text="#F3F4F6",
    highlight_bg="#374151",
)

LIGHT_THEME = Theme(
    name=ThemeMode.LIGHT.value,
    primary="#6D28D9",
    secondary="#047857",
    accent="#B45309",
    error="#B91C1C",
    warning="#B45309",
    muted="#6B7280",
    text="#111827",
    highlight_bg="#E5E7EB",
)

_THEMES = {theme.name: theme for theme in (DARK_THEME, LIGHT_THEME)}


def get_theme(name: str) -> Theme:
    """Theme by name; unknown names fall back to the dark theme."""
    return _THEMES.get(str(name or "").strip().lower(), DARK_THEME)


__all__ = ["DARK_THEME", "LIGHT_THEME", "Theme", "get_theme"]
