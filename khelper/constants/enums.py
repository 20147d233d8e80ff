"""All enum definitions for the TUI.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum

# =============================================================================
# Wizard Enums
# =============================================================================

class Step(Enum):
    """Wizard steps. Selection steps are qualified by a kind."""

    SELECT_CONTEXT = "select_context"
    SELECT_RESOURCE = "select_resource"
    SELECT_ACTION = "select_action"
    SELECT_SUBTARGET = "select_subtarget"
    AWAIT_INPUT = "await_input"
    EXECUTING = "executing"
    SHOW_RESULT = "show_result"
    VIEW_LOGS = "view_logs"


class ContextKind(Enum):
    """Cluster-context selections that can also be entered as detours."""

    CONFIG = "config"
    NAMESPACE = "namespace"


class SubtargetKind(Enum):
    """Selections that narrow an action down to a concrete target."""

    POD = "pod"
    CONTAINER = "container"
    ASSET_FOLDER = "asset_folder"


class Requirement(Enum):
    """Next missing piece of information before an action can run."""

    INSTANCE = "instance"
    SUBRESOURCE = "subresource"
    FOLDER = "folder"
    INPUT = "input"
    EXECUTE = "execute"


class LogMode(Enum):
    """How an action produces log output."""

    FETCH = "fetch"
    FOLLOW = "follow"


# =============================================================================
# Theme Enums
# =============================================================================

class ThemeMode(Enum):
    """Theme mode values."""

    DARK = "dark"
    LIGHT = "light"


__all__ = [
    "ContextKind",
    "LogMode",
    "Requirement",
    "Step",
    "SubtargetKind",
    "ThemeMode",
]
