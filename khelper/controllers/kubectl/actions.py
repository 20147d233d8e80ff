"""Action runner - executes catalog actions with kubectl."""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
from pathlib import Path
from typing import Any

from khelper.constants.timeouts import KUBECTL_COPY_TIMEOUT
from khelper.constants.values import SHELL_CANDIDATES
from khelper.controllers.kubectl.fetchers import WorkloadFetcher
from khelper.controllers.kubectl.parsers import (
    find_container,
    format_deployment,
    format_env_vars,
    format_ingresses,
    format_pods,
    format_revisions,
)
from khelper.errors import ClientError, ExecutionError, NotFoundError
from khelper.models.actions import find_action
from khelper.models.session import Target

logger = logging.getLogger(__name__)

NO_SHELL_MESSAGE = (
    "no shell available in container.\n\n"
    "This container appears to be a minimal/distroless image without a shell.\n"
    "You can still use 'logs' to view container output.\n\n"
    "Tried shells: {shells}"
)


def count_files(path: Path) -> int:
    return sum(len(files) for _, _, files in os.walk(path))


def resolve_local_dir(value: str) -> Path:
    """Expand ``~`` and require an existing directory."""
    local = Path(value).expanduser()
    if not local.exists():
        raise ExecutionError(f"local path error: {local} does not exist")
    if not local.is_dir():
        raise ExecutionError(f"local path is not a directory: {local}")
    return local


class ActionRunner:
    """Runs actions against one deployment target.

    Each handler receives the target and the parsed input value and returns
    text for the result screen, or None when the action continues in the
    terminal after the UI exits.
    """

    _HANDLERS = {
        "shell": "_shell",
        "fast-deploy": "_fast_deploy",
        "scale": "_scale",
        "update-image": "_update_image",
        "port-forward": "_port_forward",
        "rollback": "_rollback",
        "set-env": "_set_env",
        "list-env": "_list_env",
        "list-pods": "_list_pods",
        "list-revisions": "_list_revisions",
        "ingress": "_ingress",
        "describe": "_describe",
    }

    def __init__(self, run_kubectl_func: Any, workload_fetcher: WorkloadFetcher) -> None:
        self._run_kubectl = run_kubectl_func
        self._workloads = workload_fetcher

    async def run(self, name: str, target: Target, value: str | None) -> str | None:
        descriptor = find_action(name)
        handler_name = self._HANDLERS.get(name)
        if descriptor is None or handler_name is None:
            raise ExecutionError(f"unsupported action: {name}")
        parsed = descriptor.validate(value)
        logger.info("Running %s on %s/%s", name, target.namespace, target.resource)
        return await getattr(self, handler_name)(target, parsed)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def _scale(self, target: Target, replicas: int) -> str:
        await self._run_kubectl(
            ("scale", f"deployment/{target.resource}", "-n", target.namespace, f"--replicas={replicas}")
        )
        return f"Scaled {target.resource} to {replicas} replicas"

    async def _update_image(self, target: Target, image: str) -> str:
        await self._run_kubectl(
            (
                "set",
                "image",
                f"deployment/{target.resource}",
                f"{target.subresource}={image}",
                "-n",
                target.namespace,
            )
        )
        return f"Updated {target.subresource} image to {image}"

    async def _rollback(self, target: Target, revision: int) -> str:
        await self._run_kubectl(
            (
                "rollout",
                "undo",
                f"deployment/{target.resource}",
                "-n",
                target.namespace,
                f"--to-revision={revision}",
            )
        )
        return f"Rolled back {target.resource} to revision {revision}"

    async def _set_env(self, target: Target, assignment: tuple[str, str]) -> str:
        key, env_value = assignment
        await self._run_kubectl(
            (
                "set",
                "env",
                f"deployment/{target.resource}",
                "-n",
                target.namespace,
                "-c",
                target.subresource,
                f"{key}={env_value}",
            )
        )
        return f"Set {key}={env_value} on {target.subresource}"

    async def _fast_deploy(self, target: Target, local_path: str) -> str:
        """Replace the contents of an asset folder with a local directory."""
        local = resolve_local_dir(local_path)
        descriptor = find_action("fast-deploy")
        base_path = descriptor.folder_base_path if descriptor else ""
        remote = f"{base_path}/{target.folder}"
        quoted = shlex.quote(remote)
        try:
            await self._exec(
                target,
                f"mkdir -p {quoted} && rm -rf {quoted}/* {quoted}/.[!.]* {quoted}/..?* 2>/dev/null; true",
            )
        except ClientError as exc:
            raise ExecutionError(f"failed to clear target directory: {exc}") from exc
        try:
            await self._run_kubectl(
                (
                    "cp",
                    f"{local}/.",
                    f"{target.namespace}/{target.pod_name}:{remote}",
                    "-c",
                    target.subresource,
                ),
                KUBECTL_COPY_TIMEOUT,
            )
        except ClientError as exc:
            raise ExecutionError(f"failed to upload files: {exc}") from exc
        count = await asyncio.to_thread(count_files, local)
        return f"Successfully deployed {count} files to {remote}"

    # ------------------------------------------------------------------
    # Hand-off actions
    # ------------------------------------------------------------------

    async def _shell(self, target: Target, _value: Any) -> None:
        """Fail early when the container has no shell; otherwise hand off."""
        await self.find_shell(target)
        return None

    async def _port_forward(self, target: Target, ports: tuple[int, int]) -> None:
        # Fail before the UI exits when the pod is gone.
        await self._run_kubectl(("get", "pod", target.pod_name, "-n", target.namespace, "-o", "name"))
        logger.info("Port-forward %s:%s requested for %s", ports[0], ports[1], target.pod_name)
        return None

    async def find_shell(self, target: Target) -> str:
        for shell in SHELL_CANDIDATES:
            try:
                await self._run_kubectl(self._exec_args(target, shell, "-c", "exit 0"))
            except ClientError as exc:
                logger.debug("Shell %s unavailable: %s", shell, exc)
                continue
            return shell
        raise ExecutionError(NO_SHELL_MESSAGE.format(shells=", ".join(SHELL_CANDIDATES)))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def _list_env(self, target: Target, _value: Any) -> str:
        deployment = await self._workloads.get_deployment(target.namespace, target.resource)
        container = find_container(deployment, target.subresource)
        if container is None:
            raise NotFoundError(
                f"container {target.subresource} not found in deployment {target.resource}"
            )
        return format_env_vars(target.subresource, container.get("env") or [])

    async def _list_pods(self, target: Target, _value: Any) -> str:
        pods = await self._workloads.list_pods(target.namespace, target.resource)
        return format_pods(target.resource, pods)

    async def _list_revisions(self, target: Target, _value: Any) -> str:
        replica_sets = await self._workloads.list_replica_sets(target.namespace, target.resource)
        return format_revisions(target.resource, replica_sets)

    async def _ingress(self, target: Target, _value: Any) -> str:
        ingresses = await self._workloads.list_ingresses(target.namespace)
        return format_ingresses(target.namespace, ingresses)

    async def _describe(self, target: Target, _value: Any) -> str:
        deployment = await self._workloads.get_deployment(target.namespace, target.resource)
        return format_deployment(deployment)

    @staticmethod
    def _exec_args(target: Target, *command: str) -> tuple[str, ...]:
        return ("exec", target.pod_name, "-n", target.namespace, "-c", target.subresource, "--", *command)

    async def _exec(self, target: Target, script: str) -> str:
        return await self._run_kubectl(self._exec_args(target, "sh", "-c", script))


__all__ = ["ActionRunner", "NO_SHELL_MESSAGE", "count_files", "resolve_local_dir"]
