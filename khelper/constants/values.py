"""Scalar constants for the TUI.

All application-level constants with proper type hints using Final.
"""

from typing import Final

# ============================================================================
# Application
# ============================================================================

APP_TITLE: Final = "khelper"
APP_SUBTITLE: Final = "Kubernetes deployment helper"

# ============================================================================
# Paths and environment
# ============================================================================

CONFIG_DIR_NAME: Final = ".khelper"
CONFIG_FILE_NAME: Final = "config.yml"
LOG_FILE_NAME: Final = "khelper.log"
CONFIG_PATH_ENV: Final = "KHELPER_CONFIG"
KUBECONFIG_ENV: Final = "KUBECONFIG"
DEFAULT_KUBECONFIG: Final = "~/.kube/config"
ASSET_BASE_PATH: Final = "/app/assets"
KUBECTL_BINARY: Final = "kubectl"
REVISION_ANNOTATION: Final = "deployment.kubernetes.io/revision"
SHELL_CANDIDATES: Final = ("/bin/bash", "/bin/sh", "/bin/ash", "sh", "ash")

# ============================================================================
# Selector text
# ============================================================================

NEW_KUBECONFIG_OPTION: Final = "+ Enter new kubeconfig path..."
KUBECONFIG_PATH_PROMPT: Final = "Enter kubeconfig file path:"
ACTION_LABEL_SEPARATOR: Final = " - "
POD_PHASE_SEPARATOR: Final = " ("
FILTER_PLACEHOLDER: Final = "Type to filter..."
SEARCH_PLACEHOLDER: Final = "Type to search..."
MSG_LOADING: Final = "Loading..."
MSG_NO_ITEMS: Final = "No items available"
MSG_NO_MATCHES: Final = "No matches found"
MSG_NO_LOG_SELECTED: Final = "No log entry selected"
MSG_NO_KUBECONFIG: Final = "No kubeconfig found. Press Enter to select one."
HEADER_RECENT: Final = "⏱ Recent"
HEADER_ALL: Final = "📋 All"
CURSOR_MARKER: Final = "▸ "
TRUNCATION_SUFFIX: Final = "..."
WRAP_BREAK_CHARS: Final = " ,;:"

# ============================================================================
# Step titles
# ============================================================================

TITLE_KUBECONFIG: Final = "Select Kubeconfig"
TITLE_NAMESPACE: Final = "Select Namespace"
TITLE_DEPLOYMENT: Final = "Select Deployment"
TITLE_ACTION: Final = "Select Command"
TITLE_POD: Final = "Select Pod"
TITLE_CONTAINER: Final = "Select Container"
TITLE_ASSET_FOLDER: Final = "Select Asset Folder"

__all__ = [
    "ACTION_LABEL_SEPARATOR",
    "APP_SUBTITLE",
    "APP_TITLE",
    "ASSET_BASE_PATH",
    "KUBECTL_BINARY",
    "REVISION_ANNOTATION",
    "CONFIG_DIR_NAME",
    "CONFIG_FILE_NAME",
    "CONFIG_PATH_ENV",
    "CURSOR_MARKER",
    "DEFAULT_KUBECONFIG",
    "FILTER_PLACEHOLDER",
    "HEADER_ALL",
    "HEADER_RECENT",
    "KUBECONFIG_ENV",
    "KUBECONFIG_PATH_PROMPT",
    "LOG_FILE_NAME",
    "MSG_LOADING",
    "MSG_NO_ITEMS",
    "MSG_NO_KUBECONFIG",
    "MSG_NO_LOG_SELECTED",
    "MSG_NO_MATCHES",
    "NEW_KUBECONFIG_OPTION",
    "POD_PHASE_SEPARATOR",
    "SEARCH_PLACEHOLDER",
    "SHELL_CANDIDATES",
    "TITLE_ACTION",
    "TITLE_ASSET_FOLDER",
    "TITLE_CONTAINER",
    "TITLE_DEPLOYMENT",
    "TITLE_KUBECONFIG",
    "TITLE_NAMESPACE",
    "TITLE_POD",
    "TRUNCATION_SUFFIX",
    "WRAP_BREAK_CHARS",
]
