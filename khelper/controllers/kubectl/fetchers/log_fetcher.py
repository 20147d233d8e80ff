"""Log fetcher - container logs, once or followed, via kubectl."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from typing import Any

from khelper.constants.timeouts import STREAM_TERMINATE_TIMEOUT
from khelper.controllers.kubectl.parsers.error_parser import classify_kubectl_error
from khelper.errors import TransportError

logger = logging.getLogger(__name__)


def log_args(
    namespace: str, pod: str, container: str, tail_lines: int, *, follow: bool = False
) -> tuple[str, ...]:
    args = ["logs", pod, "-n", namespace, "-c", container, f"--tail={tail_lines}"]
    if follow:
        args.append("-f")
    return tuple(args)


class LogFetcher:
    """Fetches container logs."""

    def __init__(
        self,
        run_kubectl_func: Any,
        build_command_func: Callable[[tuple[str, ...]], list[str]],
    ) -> None:
        """Initialize with kubectl runner functions.

        Args:
            run_kubectl_func: Async function to run kubectl commands
            build_command_func: Builds the full kubectl argv for streaming
        """
        self._run_kubectl = run_kubectl_func
        self._build_command = build_command_func

    async def fetch_logs(self, namespace: str, pod: str, container: str, tail_lines: int) -> str:
        return await self._run_kubectl(log_args(namespace, pod, container, tail_lines))

    async def stream_logs(
        self, namespace: str, pod: str, container: str, tail_lines: int
    ) -> AsyncIterator[str]:
        """Yield log lines as ``kubectl logs -f`` prints them.

        The kubectl process is terminated when the consumer stops iterating
        or its task is cancelled.
        """
        cmd = self._build_command(log_args(namespace, pod, container, tail_lines, follow=True))
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise TransportError("kubectl not found on PATH") from exc

        logger.debug("Started log stream for %s/%s/%s", namespace, pod, container)
        try:
            assert process.stdout is not None
            async for raw in process.stdout:
                yield raw.decode("utf-8", errors="replace").rstrip("\r\n")
            returncode = await process.wait()
            if returncode != 0:
                assert process.stderr is not None
                stderr = (await process.stderr.read()).decode("utf-8", errors="replace")
                raise classify_kubectl_error(stderr)
        finally:
            await self._terminate(process)

    @staticmethod
    async def _terminate(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.terminate()
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(process.wait(), timeout=STREAM_TERMINATE_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning("kubectl log stream did not exit, killing it")
            process.kill()


__all__ = ["LogFetcher", "log_args"]
