"""Completions delivered to the wizard from background work.

Each payload is an immutable value carrying either a result or an error.
Workers produce them; only ``WizardController.dispatch`` consumes them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class ItemsLoaded:
    items: tuple[str, ...] = ()
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ContextsLoaded(ItemsLoaded):
    pass


@dataclass(frozen=True)
class NamespacesLoaded(ItemsLoaded):
    pass


@dataclass(frozen=True)
class ResourcesLoaded(ItemsLoaded):
    namespace: str = ""


@dataclass(frozen=True)
class InstancesLoaded(ItemsLoaded):
    resource: str = ""


@dataclass(frozen=True)
class SubresourcesLoaded(ItemsLoaded):
    """Containers of ``instance``; the instance is the one actually used."""

    instance: str = ""


@dataclass(frozen=True)
class FoldersLoaded(ItemsLoaded):
    pass


@dataclass(frozen=True)
class ContextConnected:
    """A client for ``path`` was created, or could not be."""

    path: str
    client: Any = None
    error: Exception | None = None


@dataclass(frozen=True)
class ExecutionFinished:
    result: str | None = None
    error: Exception | None = None


@dataclass(frozen=True)
class LogsFetched:
    text: str = ""
    error: Exception | None = None


@dataclass(frozen=True)
class LogLineReceived:
    generation: int
    line: str


@dataclass(frozen=True)
class LogStreamEnded:
    generation: int
    error: Exception | None = None


WizardMessage = Union[
    ContextsLoaded,
    NamespacesLoaded,
    ResourcesLoaded,
    InstancesLoaded,
    SubresourcesLoaded,
    FoldersLoaded,
    ContextConnected,
    ExecutionFinished,
    LogsFetched,
    LogLineReceived,
    LogStreamEnded,
]

__all__ = [
    "ContextConnected",
    "ContextsLoaded",
    "ExecutionFinished",
    "FoldersLoaded",
    "InstancesLoaded",
    "ItemsLoaded",
    "LogLineReceived",
    "LogStreamEnded",
    "LogsFetched",
    "NamespacesLoaded",
    "ResourcesLoaded",
    "SubresourcesLoaded",
    "WizardMessage",
]
