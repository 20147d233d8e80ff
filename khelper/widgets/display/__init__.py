"""Display widgets.

- WizardPanel: Full-screen surface for rendered wizard views
"""

from khelper.widgets.display.wizard_panel import WizardPanel

__all__ = ["WizardPanel"]
