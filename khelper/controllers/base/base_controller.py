"""Base interface for cluster clients used by the wizard.

The wizard never calls a client directly. Background workers call these
methods and report the results back as wizard messages, which keeps the UI
responsive during kubectl operations.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from khelper.models.session import Target

logger = logging.getLogger(__name__)


class ResourceClient(ABC):
    """Cluster access bound to one kubeconfig.

    Every method may raise a ``khelper.errors.ClientError`` subclass.
    """

    @classmethod
    @abstractmethod
    def from_kubeconfig(cls, path: str | None) -> ResourceClient:
        """Create a client for ``path``, or for the default kubeconfig.

        Raises:
            ClientConfigError: No usable kubeconfig was found.
        """

    @staticmethod
    @abstractmethod
    def discover_contexts() -> list[str]:
        """Kubeconfig paths known without a client."""

    @property
    @abstractmethod
    def context_path(self) -> str: ...

    def list_contexts(self) -> list[str]:
        """Known kubeconfig paths, current one included."""
        paths = self.discover_contexts()
        if self.context_path and self.context_path not in paths:
            paths.insert(0, self.context_path)
        return paths

    @abstractmethod
    async def check_connection(self) -> bool:
        """Check if the cluster is reachable with this kubeconfig.

        Returns:
            True if connection is available, False otherwise
        """

    @abstractmethod
    async def list_namespaces(self) -> list[str]: ...

    @abstractmethod
    async def list_resources(self, namespace: str) -> list[str]:
        """Deployment names in ``namespace``, sorted."""

    @abstractmethod
    async def list_instances(self, namespace: str, resource: str) -> list[str]:
        """Pods of ``resource`` as ``"name (Phase)"``."""

    @abstractmethod
    async def list_subresources(self, namespace: str, instance: str) -> list[str]:
        """Container names of pod ``instance``."""

    @abstractmethod
    async def list_nested_folders(self, target: Target, base_path: str) -> list[str]:
        """Directory names directly under ``base_path`` inside the container."""

    @abstractmethod
    async def fetch_log(self, target: Target, tail_lines: int) -> str: ...

    @abstractmethod
    def stream_log(self, target: Target, tail_lines: int) -> AsyncIterator[str]:
        """Follow the container log line by line.

        Cancelling the consuming task stops the underlying stream.
        """

    @abstractmethod
    async def invoke_action(self, name: str, target: Target, value: str | None) -> str | None:
        """Run a catalog action.

        Returns:
            Text to display, or None when the action continues outside the
            UI (interactive shell, port-forward).
        """


__all__ = ["ResourceClient"]
