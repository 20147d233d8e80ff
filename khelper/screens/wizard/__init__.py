"""Wizard screen package."""

from khelper.screens.wizard.presenter import WizardPresenter
from khelper.screens.wizard.wizard_screen import WizardEvent, WizardScreen

__all__ = ["WizardEvent", "WizardPresenter", "WizardScreen"]
