"""Work the wizard asks its host to perform.

The controller never calls a client. It answers each key and message with
a list of effects; the host runs loads and executions in the background and
reports back with a ``khelper.wizard.messages`` payload.
"""

from __future__ import annotations

from dataclasses import dataclass

from khelper.models.session import Target, WizardOutcome


class Effect:
    """Marker base class."""


@dataclass(frozen=True)
class LoadContexts(Effect):
    pass


@dataclass(frozen=True)
class ConnectContext(Effect):
    path: str


@dataclass(frozen=True)
class LoadNamespaces(Effect):
    pass


@dataclass(frozen=True)
class LoadResources(Effect):
    namespace: str


@dataclass(frozen=True)
class LoadInstances(Effect):
    target: Target


@dataclass(frozen=True)
class LoadSubresources(Effect):
    """Load containers of ``target.instance``, or of the first instance when unset."""

    target: Target


@dataclass(frozen=True)
class LoadFolders(Effect):
    target: Target
    base_path: str


@dataclass(frozen=True)
class FetchLog(Effect):
    target: Target
    tail_lines: int


@dataclass(frozen=True)
class StartLogStream(Effect):
    target: Target
    tail_lines: int
    generation: int


@dataclass(frozen=True)
class CancelLogStream(Effect):
    generation: int


@dataclass(frozen=True)
class InvokeAction(Effect):
    name: str
    target: Target
    value: str | None = None


@dataclass(frozen=True)
class Exit(Effect):
    outcome: WizardOutcome


__all__ = [
    "CancelLogStream",
    "ConnectContext",
    "Effect",
    "Exit",
    "FetchLog",
    "InvokeAction",
    "LoadContexts",
    "LoadFolders",
    "LoadInstances",
    "LoadNamespaces",
    "LoadResources",
    "LoadSubresources",
    "StartLogStream",
]
