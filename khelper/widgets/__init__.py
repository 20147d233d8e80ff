"""Widgets module for the khelper TUI.

- display: Display widgets (WizardPanel)
"""

from khelper.widgets.display import WizardPanel

__all__ = ["WizardPanel"]
