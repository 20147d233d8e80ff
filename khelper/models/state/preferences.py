"""Persistent recents and last-used context values."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Final

from khelper.models.state.app_settings import AppSettings, ConfigSaveError
from khelper.models.state.config_manager import ConfigManager

logger = logging.getLogger(__name__)

# ============================================================================
# Recent categories
# ============================================================================

RECENT_CONTEXTS: Final = "contexts"
RECENT_RESOURCES: Final = "resources"
RECENT_ACTIONS: Final = "actions"
RECENT_INSTANCES: Final = "instances"
RECENT_LOG_SEARCHES: Final = "log_searches"

_SCOPED_FIELDS: Final = {
    RECENT_RESOURCES: "recent_deployments",
    RECENT_INSTANCES: "recent_pods",
}
_FLAT_FIELDS: Final = {
    RECENT_CONTEXTS: "recent_kubeconfigs",
    RECENT_ACTIONS: "recent_commands",
    RECENT_LOG_SEARCHES: "recent_log_searches",
}


def add_to_recent(items: list[str], value: str, limit: int) -> list[str]:
    """Return ``items`` with ``value`` moved to the front, capped at ``limit``."""
    updated = [value] + [item for item in items if item != value]
    return updated[:limit]


class PreferenceStore(ABC):
    """Bounded most-recent-first lists plus the last used context."""

    @abstractmethod
    def recent_for(self, category: str, scope_key: str = "") -> list[str]:
        """Recent values of ``category``; ``scope_key`` selects a sub-list."""

    @abstractmethod
    def record_recent(self, category: str, scope_key: str, value: str) -> None:
        """Move ``value`` to the front of its list."""

    @abstractmethod
    def last_namespace(self) -> str: ...

    @abstractmethod
    def set_last_namespace(self, namespace: str) -> None: ...

    @abstractmethod
    def last_context_path(self) -> str: ...

    @abstractmethod
    def set_last_context_path(self, path: str) -> None: ...


class SettingsPreferenceStore(PreferenceStore):
    """PreferenceStore backed by ``AppSettings`` and saved through ConfigManager.

    Every mutation is written immediately. Write failures are logged and do
    not interrupt the session.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        path: Path | None = None,
        *,
        autosave: bool = True,
    ) -> None:
        self.settings = settings or AppSettings()
        self._path = path
        self._autosave = autosave

    def recent_for(self, category: str, scope_key: str = "") -> list[str]:
        if category in _SCOPED_FIELDS:
            scoped: dict[str, list[str]] = getattr(self.settings, _SCOPED_FIELDS[category])
            return list(scoped.get(scope_key, []))
        if category in _FLAT_FIELDS:
            return list(getattr(self.settings, _FLAT_FIELDS[category]))
        raise KeyError(f"unknown recent category: {category}")

    def record_recent(self, category: str, scope_key: str, value: str) -> None:
        if not value:
            return
        limit = self.settings.max_recent_items
        if category in _SCOPED_FIELDS:
            scoped: dict[str, list[str]] = getattr(self.settings, _SCOPED_FIELDS[category])
            scoped[scope_key] = add_to_recent(scoped.get(scope_key, []), value, limit)
        elif category in _FLAT_FIELDS:
            field_name = _FLAT_FIELDS[category]
            current: list[str] = getattr(self.settings, field_name)
            setattr(self.settings, field_name, add_to_recent(current, value, limit))
        else:
            raise KeyError(f"unknown recent category: {category}")
        self._persist()

    def last_namespace(self) -> str:
        return self.settings.last_namespace

    def set_last_namespace(self, namespace: str) -> None:
        self.settings.last_namespace = namespace
        self._persist()

    def last_context_path(self) -> str:
        return self.settings.kubeconfig

    def set_last_context_path(self, path: str) -> None:
        self.settings.kubeconfig = path
        self.settings.recent_kubeconfigs = add_to_recent(
            self.settings.recent_kubeconfigs, path, self.settings.max_recent_items
        )
        self._persist()

    def save(self) -> None:
        """Write settings now.

        Raises:
            ConfigSaveError: The settings file cannot be written.
        """
        ConfigManager.save(self.settings, self._path)

    def _persist(self) -> None:
        if not self._autosave:
            return
        try:
            self.save()
        except ConfigSaveError as exc:
            logger.warning("Failed to save preferences: %s", exc)


__all__ = [
    "RECENT_ACTIONS",
    "RECENT_CONTEXTS",
    "RECENT_INSTANCES",
    "RECENT_LOG_SEARCHES",
    "RECENT_RESOURCES",
    "PreferenceStore",
    "SettingsPreferenceStore",
    "add_to_recent",
]
