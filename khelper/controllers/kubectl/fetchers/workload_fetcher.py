"""Workload fetcher - namespaces, deployments, pods and containers via kubectl."""

from __future__ import annotations

import json
import logging
import shlex
from typing import Any

from khelper.constants.timeouts import CLUSTER_REQUEST_TIMEOUT
from khelper.errors import ClientError, NotFoundError, TransportError

logger = logging.getLogger(__name__)


def format_label_selector(selector: dict[str, Any]) -> str:
    """Render a Kubernetes label selector as a ``-l`` argument."""
    parts = [f"{key}={value}" for key, value in sorted((selector.get("matchLabels") or {}).items())]
    for expression in selector.get("matchExpressions") or []:
        key = expression.get("key", "")
        operator = expression.get("operator", "")
        values = ",".join(expression.get("values") or [])
        if operator == "In":
            parts.append(f"{key} in ({values})")
        elif operator == "NotIn":
            parts.append(f"{key} notin ({values})")
        elif operator == "Exists":
            parts.append(key)
        elif operator == "DoesNotExist":
            parts.append(f"!{key}")
    return ",".join(parts)


class WorkloadFetcher:
    """Fetches workload objects from the cluster."""

    _REQUEST_TIMEOUT = CLUSTER_REQUEST_TIMEOUT
    _MISSING_PATH_TOKENS = ("no such file or directory", "not found")

    def __init__(self, run_kubectl_func: Any) -> None:
        """Initialize with kubectl runner function.

        Args:
            run_kubectl_func: Async function to run kubectl commands
        """
        self._run_kubectl = run_kubectl_func

    async def _get_json(self, args: tuple[str, ...]) -> dict[str, Any]:
        output = await self._run_kubectl(
            (*args, "-o", "json", f"--request-timeout={self._REQUEST_TIMEOUT}")
        )
        try:
            data = json.loads(output or "{}")
        except json.JSONDecodeError as exc:
            logger.exception("Error parsing kubectl JSON for %s", " ".join(args))
            raise TransportError(f"unexpected kubectl output for {' '.join(args)}") from exc
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _names(data: dict[str, Any]) -> list[str]:
        return sorted(
            item.get("metadata", {}).get("name", "")
            for item in data.get("items", [])
            if item.get("metadata", {}).get("name")
        )

    async def list_namespaces(self) -> list[str]:
        return self._names(await self._get_json(("get", "namespaces")))

    async def list_deployments(self, namespace: str) -> list[str]:
        return self._names(await self._get_json(("get", "deployments", "-n", namespace)))

    async def get_deployment(self, namespace: str, name: str) -> dict[str, Any]:
        return await self._get_json(("get", "deployment", name, "-n", namespace))

    async def _selector_for(self, namespace: str, deployment: str) -> str:
        spec = (await self.get_deployment(namespace, deployment)).get("spec", {})
        selector = format_label_selector(spec.get("selector") or {})
        if not selector:
            raise NotFoundError(f"deployment {deployment} has no label selector")
        return selector

    async def list_pods(self, namespace: str, deployment: str) -> list[dict[str, Any]]:
        """Pods matched by the deployment's selector."""
        selector = await self._selector_for(namespace, deployment)
        data = await self._get_json(("get", "pods", "-n", namespace, "-l", selector))
        return list(data.get("items", []))

    async def list_pod_names(self, namespace: str, deployment: str) -> list[str]:
        """Pods as ``"name (Phase)"``."""
        names = []
        for pod in await self.list_pods(namespace, deployment):
            name = pod.get("metadata", {}).get("name", "")
            phase = pod.get("status", {}).get("phase", "Unknown")
            if name:
                names.append(f"{name} ({phase})")
        return names

    async def list_containers(self, namespace: str, pod: str) -> list[str]:
        data = await self._get_json(("get", "pod", pod, "-n", namespace))
        containers = data.get("spec", {}).get("containers", [])
        return [c.get("name", "") for c in containers if c.get("name")]

    async def list_replica_sets(self, namespace: str, deployment: str) -> list[dict[str, Any]]:
        selector = await self._selector_for(namespace, deployment)
        data = await self._get_json(("get", "replicasets", "-n", namespace, "-l", selector))
        return list(data.get("items", []))

    async def list_ingresses(self, namespace: str) -> list[dict[str, Any]]:
        data = await self._get_json(("get", "ingresses", "-n", namespace))
        return list(data.get("items", []))

    def _exec_args(self, namespace: str, pod: str, container: str, script: str) -> tuple[str, ...]:
        return ("exec", pod, "-n", namespace, "-c", container, "--", "sh", "-c", script)

    async def list_directories(
        self, namespace: str, pod: str, container: str, path: str
    ) -> list[str]:
        """Names of directories directly under ``path`` inside the container.

        Uses ``find`` and falls back to ``ls`` for images without it.
        """
        quoted = shlex.quote(path.rstrip("/") or "/")
        scripts = (
            f"find {quoted} -mindepth 1 -maxdepth 1 -type d -exec basename {{}} \\;",
            f"ls -d {quoted}/*/ | xargs -n1 basename",
        )
        last_error: ClientError | None = None
        for script in scripts:
            try:
                output = await self._run_kubectl(self._exec_args(namespace, pod, container, script))
            except ClientError as exc:
                last_error = exc
                logger.debug("Directory listing with %r failed: %s", script, exc)
                continue
            return sorted(line.strip() for line in output.splitlines() if line.strip())
        message = str(last_error).lower() if last_error else ""
        if any(token in message for token in self._MISSING_PATH_TOKENS):
            raise NotFoundError(
                f"this pod doesn't appear to be a fragment-loader pod (path {path} not found)"
            )
        raise last_error or NotFoundError(f"path {path} not found")


__all__ = ["WorkloadFetcher", "format_label_selector"]
