"""WizardPanel widget - the single display surface of the wizard screen.

CSS Classes: widget-wizard-panel
"""

from __future__ import annotations

from rich.console import RenderableType
from textual.widgets import Static


class WizardPanel(Static):
    """Static surface that shows whatever the renderer produced last.

    CSS Classes: widget-wizard-panel
    """

    DEFAULT_CSS = """
    WizardPanel {
        width: 1fr;
        height: 1fr;
        background: $background;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__("", id=id, classes="widget-wizard-panel", expand=True)

    def show(self, renderable: RenderableType) -> None:
        self.update(renderable)


__all__ = ["WizardPanel"]
