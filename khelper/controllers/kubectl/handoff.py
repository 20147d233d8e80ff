"""Interactive kubectl commands run after the UI has released the terminal."""

from __future__ import annotations

import logging
import subprocess

from khelper.constants.values import KUBECTL_BINARY
from khelper.controllers.kubectl.fetchers import log_args
from khelper.errors import TransportError
from khelper.models.session import Target

logger = logging.getLogger(__name__)

# Prefer bash, fall back to whatever sh the image ships.
SHELL_LAUNCHER = "if command -v bash >/dev/null 2>&1; then exec bash; else exec sh; fi"


def _base(kubeconfig: str | None) -> list[str]:
    cmd = [KUBECTL_BINARY]
    if kubeconfig:
        cmd.extend(["--kubeconfig", kubeconfig])
    return cmd


def shell_command(kubeconfig: str | None, target: Target, shell: str | None = None) -> list[str]:
    cmd = _base(kubeconfig)
    cmd.extend(
        ["exec", "-it", target.pod_name, "-n", target.namespace, "-c", target.subresource, "--"]
    )
    if shell:
        cmd.append(shell)
    else:
        cmd.extend(["sh", "-c", SHELL_LAUNCHER])
    return cmd


def port_forward_command(
    kubeconfig: str | None, target: Target, local_port: int, remote_port: int
) -> list[str]:
    return [
        *_base(kubeconfig),
        "port-forward",
        f"pod/{target.pod_name}",
        f"{local_port}:{remote_port}",
        "-n",
        target.namespace,
    ]


def logs_command(
    kubeconfig: str | None, target: Target, tail_lines: int, *, follow: bool = False
) -> list[str]:
    args = log_args(target.namespace, target.pod_name, target.subresource, tail_lines, follow=follow)
    return [*_base(kubeconfig), *args]


def _run_attached(cmd: list[str]) -> int:
    """Run with inherited stdio; Ctrl+C ends the command, not the caller."""
    logger.info("Handing terminal to: %s", " ".join(cmd))
    try:
        return subprocess.run(cmd, check=False).returncode
    except FileNotFoundError as exc:
        raise TransportError("kubectl not found on PATH") from exc
    except KeyboardInterrupt:
        return 0


def run_shell(kubeconfig: str | None, target: Target, shell: str | None = None) -> int:
    return _run_attached(shell_command(kubeconfig, target, shell))


def run_port_forward(
    kubeconfig: str | None, target: Target, local_port: int, remote_port: int
) -> int:
    return _run_attached(port_forward_command(kubeconfig, target, local_port, remote_port))


def run_logs(
    kubeconfig: str | None, target: Target, tail_lines: int, *, follow: bool = False
) -> int:
    return _run_attached(logs_command(kubeconfig, target, tail_lines, follow=follow))


__all__ = [
    "logs_command",
    "port_forward_command",
    "run_logs",
    "run_port_forward",
    "run_shell",
    "shell_command",
]
