"""Parsers for kubectl output."""

from khelper.controllers.kubectl.parsers.error_parser import (
    classify_kubectl_error,
    summarize_kubectl_error,
)
from khelper.controllers.kubectl.parsers.result_formatter import (
    find_container,
    format_deployment,
    format_env_vars,
    format_ingresses,
    format_pods,
    format_revisions,
)

__all__ = [
    "classify_kubectl_error",
    "find_container",
    "format_deployment",
    "format_env_vars",
    "format_ingresses",
    "format_pods",
    "format_revisions",
    "summarize_kubectl_error",
]
