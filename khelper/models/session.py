"""Values describing what the wizard is operating on and how it ended."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from khelper.constants.values import POD_PHASE_SEPARATOR

if TYPE_CHECKING:
    from khelper.models.actions import ActionDescriptor


def strip_pod_phase(display: str) -> str:
    """``"web-1 (Running)"`` -> ``"web-1"``."""
    name, _, _ = display.partition(POD_PHASE_SEPARATOR)
    return name


@dataclass(frozen=True)
class Target:
    """Resolved selection path, filled in step by step."""

    namespace: str = ""
    resource: str = ""
    instance: str = ""
    subresource: str = ""
    folder: str = ""

    @property
    def pod_name(self) -> str:
        return strip_pod_phase(self.instance)

    def with_values(self, **changes: str) -> Target:
        return replace(self, **changes)


@dataclass(frozen=True)
class WizardOutcome:
    """Terminal report handed back to the host when the session ends.

    ``handoff`` is set when the chosen action needs the terminal after the
    UI has released it (interactive shell, port-forward).
    """

    action: ActionDescriptor | None = None
    target: Target = Target()
    value: str | None = None
    handoff: bool = False
    error: Exception | None = None


__all__ = ["Target", "WizardOutcome", "strip_pod_phase"]
