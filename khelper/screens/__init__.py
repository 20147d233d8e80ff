"""khelper TUI screens.

Domain Structure:
    - wizard/  - The kubeconfig-to-action wizard and its effect runner
    - mixins/  - Reusable screen mixins
"""

from __future__ import annotations

from khelper.screens.wizard import WizardPresenter, WizardScreen

__all__ = ["WizardPresenter", "WizardScreen"]
