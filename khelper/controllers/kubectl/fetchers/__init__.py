"""Fetchers for kubectl-backed cluster data."""

from khelper.controllers.kubectl.fetchers.log_fetcher import LogFetcher, log_args
from khelper.controllers.kubectl.fetchers.workload_fetcher import (
    WorkloadFetcher,
    format_label_selector,
)

__all__ = ["LogFetcher", "WorkloadFetcher", "format_label_selector", "log_args"]
