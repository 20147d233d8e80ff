"""Interactive selection engine: fuzzy lists, log viewer and the wizard state machine."""

from khelper.wizard.controller import WizardController
from khelper.wizard.log_viewer import LogViewer
from khelper.wizard.selector import FuzzySelector

__all__ = ["FuzzySelector", "LogViewer", "WizardController"]
