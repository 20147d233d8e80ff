"""Default values for settings.

All default values used in AppSettings model and the command line.
"""

from typing import Final

# ============================================================================
# UI defaults
# ============================================================================

THEME_DEFAULT: Final = "dark"

# ============================================================================
# Log defaults
# ============================================================================

LOG_TAIL_LINES_DEFAULT: Final = 500
STREAM_TAIL_LINES_DEFAULT: Final = 100

# ============================================================================
# Command line defaults
# ============================================================================

CLI_TAIL_LINES_DEFAULT: Final = 100
CLI_SHELL_DEFAULT: Final = "/bin/sh"
CLI_LOCAL_PORT_DEFAULT: Final = 8080
CLI_REMOTE_PORT_DEFAULT: Final = 80

__all__ = [
    "CLI_LOCAL_PORT_DEFAULT",
    "CLI_REMOTE_PORT_DEFAULT",
    "CLI_SHELL_DEFAULT",
    "CLI_TAIL_LINES_DEFAULT",
    "LOG_TAIL_LINES_DEFAULT",
    "STREAM_TAIL_LINES_DEFAULT",
    "THEME_DEFAULT",
]
