"""kubectl-backed cluster client.

``KubectlClient`` binds every kubectl call to one kubeconfig file and
delegates to the fetchers for reads and to ``ActionRunner`` for mutations.
"""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from collections.abc import AsyncIterator
from pathlib import Path

import yaml

from khelper.constants.timeouts import (
    CLUSTER_CHECK_TIMEOUT,
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
)
from khelper.constants.values import DEFAULT_KUBECONFIG, KUBECONFIG_ENV, KUBECTL_BINARY
from khelper.controllers.base import ResourceClient
from khelper.controllers.kubectl.actions import ActionRunner
from khelper.controllers.kubectl.fetchers import LogFetcher, WorkloadFetcher
from khelper.controllers.kubectl.parsers import classify_kubectl_error
from khelper.errors import ClientConfigError, ClientError, TransportError
from khelper.models.session import Target, strip_pod_phase

logger = logging.getLogger(__name__)


def default_kubeconfig() -> str:
    return str(Path(DEFAULT_KUBECONFIG).expanduser())


def kubeconfig_env_paths() -> list[str]:
    """Entries of ``$KUBECONFIG``, expanded, in order."""
    raw = os.environ.get(KUBECONFIG_ENV, "")
    return [str(Path(entry).expanduser()) for entry in raw.split(os.pathsep) if entry.strip()]


def validate_kubeconfig(path: str) -> str:
    """Return the expanded path of a readable kubeconfig file.

    Raises:
        ClientConfigError: The file is missing, unreadable or not a
            kubeconfig mapping.
    """
    expanded = Path(path).expanduser()
    if not expanded.is_file():
        raise ClientConfigError(f"kubeconfig not found: {expanded}")
    try:
        with expanded.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        raise ClientConfigError(f"cannot read kubeconfig {expanded}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ClientConfigError(f"invalid kubeconfig {expanded}: {exc}") from exc
    if not isinstance(data, dict):
        raise ClientConfigError(f"invalid kubeconfig {expanded}: not a mapping")
    return str(expanded)


def resolve_kubeconfig(path: str | None = None) -> str:
    """Pick the kubeconfig to use.

    An explicit path wins. Otherwise the first existing ``$KUBECONFIG``
    entry is used, then ``~/.kube/config``.
    """
    if path:
        return validate_kubeconfig(path)
    for candidate in kubeconfig_env_paths():
        if Path(candidate).is_file():
            return validate_kubeconfig(candidate)
    return validate_kubeconfig(default_kubeconfig())


class KubectlClient(ResourceClient):
    """Cluster client running ``kubectl --kubeconfig <path>``."""

    def __init__(self, kubeconfig: str) -> None:
        self._kubeconfig = kubeconfig
        self._workload_fetcher = WorkloadFetcher(self._run_kubectl)
        self._log_fetcher = LogFetcher(self._run_kubectl, self.build_command)
        self._action_runner = ActionRunner(self._run_kubectl, self._workload_fetcher)

    @classmethod
    def from_kubeconfig(cls, path: str | None) -> KubectlClient:
        resolved = resolve_kubeconfig(path)
        logger.info("Using kubeconfig %s", resolved)
        return cls(resolved)

    @staticmethod
    def discover_contexts() -> list[str]:
        paths = [default_kubeconfig()]
        for candidate in kubeconfig_env_paths():
            if candidate not in paths and Path(candidate).is_file():
                paths.append(candidate)
        return paths

    @property
    def context_path(self) -> str:
        return self._kubeconfig

    # ------------------------------------------------------------------
    # kubectl execution
    # ------------------------------------------------------------------

    def build_command(self, args: tuple[str, ...]) -> list[str]:
        return [KUBECTL_BINARY, "--kubeconfig", self._kubeconfig, *args]

    def _run_kubectl_sync(
        self,
        args: tuple[str, ...],
        timeout: int = KUBECTL_COMMAND_TIMEOUT,
    ) -> str:
        """Run a kubectl command synchronously (thread-safe wrapper target)."""
        cmd = self.build_command(args)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except FileNotFoundError as exc:
            raise TransportError("kubectl not found on PATH") from exc
        except subprocess.TimeoutExpired as exc:
            raise TransportError(f"kubectl {args[0]} timed out after {timeout}s") from exc
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            logger.debug("kubectl %s failed: %s", " ".join(args), stderr)
            raise classify_kubectl_error(stderr)
        return result.stdout

    async def _run_kubectl(
        self,
        args: tuple[str, ...],
        timeout: int = KUBECTL_COMMAND_TIMEOUT,
    ) -> str:
        return await asyncio.to_thread(self._run_kubectl_sync, args, timeout)

    # ------------------------------------------------------------------
    # ResourceClient
    # ------------------------------------------------------------------

    async def check_connection(self) -> bool:
        try:
            await asyncio.wait_for(
                self._run_kubectl(
                    ("get", "--raw", "/version", f"--request-timeout={CLUSTER_REQUEST_TIMEOUT}")
                ),
                timeout=CLUSTER_CHECK_TIMEOUT,
            )
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Cluster connection check failed for %s: %s", self._kubeconfig, exc)
            return False
        return True

    async def list_namespaces(self) -> list[str]:
        return await self._workload_fetcher.list_namespaces()

    async def list_resources(self, namespace: str) -> list[str]:
        return await self._workload_fetcher.list_deployments(namespace)

    async def list_instances(self, namespace: str, resource: str) -> list[str]:
        return await self._workload_fetcher.list_pod_names(namespace, resource)

    async def list_subresources(self, namespace: str, instance: str) -> list[str]:
        return await self._workload_fetcher.list_containers(namespace, strip_pod_phase(instance))

    async def list_nested_folders(self, target: Target, base_path: str) -> list[str]:
        return await self._workload_fetcher.list_directories(
            target.namespace, target.pod_name, target.subresource, base_path
        )

    async def fetch_log(self, target: Target, tail_lines: int) -> str:
        return await self._log_fetcher.fetch_logs(
            target.namespace, target.pod_name, target.subresource, tail_lines
        )

    def stream_log(self, target: Target, tail_lines: int) -> AsyncIterator[str]:
        return self._log_fetcher.stream_logs(
            target.namespace, target.pod_name, target.subresource, tail_lines
        )

    async def invoke_action(self, name: str, target: Target, value: str | None) -> str | None:
        return await self._action_runner.run(name, target, value)


__all__ = [
    "KubectlClient",
    "default_kubeconfig",
    "kubeconfig_env_paths",
    "resolve_kubeconfig",
    "validate_kubeconfig",
]
