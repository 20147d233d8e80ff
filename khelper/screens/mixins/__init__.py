"""Reusable screen mixins."""

from khelper.screens.mixins.worker_mixin import WorkerMixin

__all__ = ["WorkerMixin"]
