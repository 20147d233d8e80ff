"""Constants module for the khelper TUI.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (strings, paths, labels)
- timeouts.py: Timeout values (seconds)
- limits.py: Limit values and layout margins
- defaults.py: Default values for settings

Note: Keyboard bindings are defined in khelper.keyboard module.
"""

from khelper.constants.defaults import (
    LOG_TAIL_LINES_DEFAULT,
    STREAM_TAIL_LINES_DEFAULT,
    THEME_DEFAULT,
)
from khelper.constants.enums import (
    ContextKind,
    LogMode,
    Requirement,
    Step,
    SubtargetKind,
    ThemeMode,
)
from khelper.constants.limits import (
    MAX_RECENT_ITEMS,
    MAX_VISIBLE_ITEMS,
)
from khelper.constants.timeouts import (
    KUBECTL_COMMAND_TIMEOUT,
)
from khelper.constants.values import (
    APP_TITLE,
)

__all__ = [
    "APP_TITLE",
    "KUBECTL_COMMAND_TIMEOUT",
    "LOG_TAIL_LINES_DEFAULT",
    "MAX_RECENT_ITEMS",
    "MAX_VISIBLE_ITEMS",
    "STREAM_TAIL_LINES_DEFAULT",
    "THEME_DEFAULT",
    "ContextKind",
    "LogMode",
    "Requirement",
    "Step",
    "SubtargetKind",
    "ThemeMode",
]
