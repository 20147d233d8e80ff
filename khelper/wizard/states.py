"""Wizard states."""

from __future__ import annotations

from dataclasses import dataclass

from khelper.constants.enums import ContextKind, Step, SubtargetKind


@dataclass(frozen=True)
class WizardState:
    """A step, qualified by a kind for context and subtarget selection."""

    step: Step
    kind: ContextKind | SubtargetKind | None = None

    @property
    def is_selection(self) -> bool:
        return self.step in _SELECTION_STEPS

    @property
    def is_context(self) -> bool:
        return self.step is Step.SELECT_CONTEXT

    def __str__(self) -> str:
        if self.kind is None:
            return self.step.value
        return f"{self.step.value}:{self.kind.value}"


_SELECTION_STEPS = frozenset({
    Step.SELECT_CONTEXT,
    Step.SELECT_RESOURCE,
    Step.SELECT_ACTION,
    Step.SELECT_SUBTARGET,
})

SELECT_CONFIG = WizardState(Step.SELECT_CONTEXT, ContextKind.CONFIG)
SELECT_NAMESPACE = WizardState(Step.SELECT_CONTEXT, ContextKind.NAMESPACE)
SELECT_RESOURCE = WizardState(Step.SELECT_RESOURCE)
SELECT_ACTION = WizardState(Step.SELECT_ACTION)
SELECT_POD = WizardState(Step.SELECT_SUBTARGET, SubtargetKind.POD)
SELECT_CONTAINER = WizardState(Step.SELECT_SUBTARGET, SubtargetKind.CONTAINER)
SELECT_ASSET_FOLDER = WizardState(Step.SELECT_SUBTARGET, SubtargetKind.ASSET_FOLDER)
AWAIT_INPUT = WizardState(Step.AWAIT_INPUT)
EXECUTING = WizardState(Step.EXECUTING)
SHOW_RESULT = WizardState(Step.SHOW_RESULT)
VIEW_LOGS = WizardState(Step.VIEW_LOGS)

SELECTION_STATES = (
    SELECT_CONFIG,
    SELECT_NAMESPACE,
    SELECT_RESOURCE,
    SELECT_ACTION,
    SELECT_POD,
    SELECT_CONTAINER,
    SELECT_ASSET_FOLDER,
)

__all__ = [
    "AWAIT_INPUT",
    "EXECUTING",
    "SELECTION_STATES",
    "SELECT_ACTION",
    "SELECT_ASSET_FOLDER",
    "SELECT_CONFIG",
    "SELECT_CONTAINER",
    "SELECT_NAMESPACE",
    "SELECT_POD",
    "SELECT_RESOURCE",
    "SHOW_RESULT",
    "VIEW_LOGS",
    "WizardState",
]
