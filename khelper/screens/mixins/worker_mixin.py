"""WorkerMixin - Worker lifecycle management for background kubectl calls.

Screens run every slow operation as a Textual worker. Workers never mutate
screen state themselves; they post messages that the screen applies on the
UI thread.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import Any

from textual._context import NoActiveAppError
from textual.worker import Worker, WorkerState

logger = logging.getLogger(__name__)


class WorkerMixin:
    """Mixin providing standardized Worker lifecycle management.

    - `start_worker()`: worker creation, optionally exclusive within a group
    - `cancel_group()`: cancel the workers of one group
    - `cancel_workers()`: cancel everything (also done on unmount)
    - `on_worker_state_changed()`: logs completion, cancellation and errors

    Note:
        This mixin uses Textual's `self.workers` (WorkerManager) for all worker
        lifecycle management. No manual worker tracking is required.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._worker_started_at: dict[str, float] = {}

    def start_worker(
        self,
        worker_func: Callable[..., Awaitable[Any]],
        *,
        group: str = "default",
        exclusive: bool = False,
        name: str | None = None,
    ) -> Worker[Any]:
        """Start an async worker.

        Args:
            worker_func: Coroutine function or awaitable to run
            group: Worker group, used for exclusive runs and cancellation
            exclusive: If True, cancel running workers of the same group first
            name: Optional worker name for debugging

        Returns:
            The Worker instance
        """
        worker_name = name or group
        self._worker_started_at[worker_name] = time.monotonic()
        return self.run_worker(  # type: ignore[attr-defined]
            worker_func,
            name=worker_name,
            group=group,
            exclusive=exclusive,
            exit_on_error=False,
        )

    def cancel_group(self, group: str) -> None:
        with suppress(NoActiveAppError):
            self.workers.cancel_group(self, group)  # type: ignore[attr-defined]

    def cancel_workers(self) -> None:
        """Cancel all running workers of this node."""
        with suppress(NoActiveAppError):
            self.workers.cancel_node(self)  # type: ignore[attr-defined]

    def on_unmount(self) -> None:
        """Cancel all workers when the screen is unmounted."""
        self.cancel_workers()

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        name = event.worker.name
        if event.state not in (WorkerState.SUCCESS, WorkerState.CANCELLED, WorkerState.ERROR):
            return
        started = self._worker_started_at.pop(name, None)
        duration_ms = (time.monotonic() - started) * 1000 if started is not None else 0.0

        if event.state == WorkerState.CANCELLED:
            logger.debug("Worker '%s' was cancelled (%.2fms)", name, duration_ms)
        elif event.state == WorkerState.ERROR:
            logger.error("Worker '%s' error: %s (%.2fms)", name, event.worker.error, duration_ms)
        else:
            logger.debug("Worker '%s' completed successfully (%.2fms)", name, duration_ms)


__all__ = ["WorkerMixin"]
