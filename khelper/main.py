"""
Command-line interface for khelper.

Without a subcommand the interactive wizard starts. The subcommands run a
single kubectl operation directly.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, Optional

import typer

from khelper import __version__
from khelper.constants.defaults import (
    CLI_LOCAL_PORT_DEFAULT,
    CLI_REMOTE_PORT_DEFAULT,
    CLI_SHELL_DEFAULT,
    CLI_TAIL_LINES_DEFAULT,
)
from khelper.constants.enums import ThemeMode
from khelper.constants.values import LOG_FILE_NAME
from khelper.controllers.kubectl import KubectlClient
from khelper.controllers.kubectl.handoff import run_logs, run_port_forward, run_shell
from khelper.errors import FatalStartupError, KHelperError
from khelper.models.actions import parse_port_mapping
from khelper.models.session import Target, WizardOutcome
from khelper.models.state.app_settings import ConfigLoadError
from khelper.models.state.config_manager import ConfigManager

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = typer.Typer(
    help="Interactive Kubernetes deployment helper.",
    add_completion=False,
)


@dataclass
class CliOptions:
    """Global options shared by the wizard and the subcommands."""

    namespace: Optional[str] = None
    deployment: Optional[str] = None
    pod: Optional[str] = None
    container: Optional[str] = None
    kubeconfig: Optional[str] = None
    theme: Optional[str] = None

    def target(self) -> Target:
        return Target(
            namespace=self.namespace or "",
            resource=self.deployment or "",
            instance=self.pod or "",
            subresource=self.container or "",
        )


def setup_logging(log_file: Optional[Path] = None, verbose: bool = False) -> Optional[Path]:
    """Send khelper logs to a file; the terminal belongs to the TUI.

    Returns the log file path, or None when it could not be opened.
    """
    package_logger = logging.getLogger("khelper")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    package_logger.propagate = False

    path = log_file or ConfigManager.config_dir() / LOG_FILE_NAME
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as exc:
        typer.secho(f"Warning: cannot write log file {path}: {exc}", err=True, fg=typer.colors.YELLOW)
        package_logger.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    return path


def _fail(message: str) -> NoReturn:
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(1)


def _options(ctx: typer.Context) -> CliOptions:
    return ctx.obj if isinstance(ctx.obj, CliOptions) else CliOptions()


def _require(opts: CliOptions, *names: str) -> None:
    if all(getattr(opts, name) for name in names):
        return
    if len(names) == 1:
        _fail(f"{names[0]} is required")
    _fail(f"{', '.join(names[:-1])} and {names[-1]} are required")


def _stored_kubeconfig() -> Optional[str]:
    try:
        return ConfigManager.load().kubeconfig or None
    except ConfigLoadError as exc:
        logger.warning("Ignoring unreadable settings: %s", exc)
        return None


def _client(opts: CliOptions) -> KubectlClient:
    try:
        return KubectlClient.from_kubeconfig(opts.kubeconfig or _stored_kubeconfig())
    except KHelperError as exc:
        _fail(str(exc))


# ============================================================================
# Interactive wizard
# ============================================================================


def run_handoff(outcome: WizardOutcome, kubeconfig: Optional[str]) -> int:
    """Run the terminal command an outcome asks for. Returns its exit code."""
    if not outcome.handoff or outcome.action is None:
        return 0
    name = outcome.action.name
    if name == "shell":
        return run_shell(kubeconfig, outcome.target)
    if name == "port-forward":
        local_port, remote_port = parse_port_mapping(outcome.value or "")
        typer.echo(
            f"Forwarding localhost:{local_port} -> {outcome.target.pod_name}:{remote_port}"
            " (Ctrl+C to stop)"
        )
        return run_port_forward(kubeconfig, outcome.target, local_port, remote_port)
    logger.warning("No hand-off defined for action %s", name)
    return 0


def run_interactive(opts: CliOptions) -> None:
    from khelper.app import KHelperApp

    tui = KHelperApp(
        kubeconfig=opts.kubeconfig,
        namespace=opts.namespace,
        deployment=opts.deployment,
        pod=opts.pod,
        theme_name=opts.theme,
    )
    outcome = tui.run()
    if outcome is None:
        return
    if isinstance(outcome.error, FatalStartupError):
        _fail(str(outcome.error))
    try:
        code = run_handoff(outcome, tui.store.last_context_path() or opts.kubeconfig)
    except KHelperError as exc:
        _fail(str(exc))
    if code:
        raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def entry(
    ctx: typer.Context,
    namespace: Optional[str] = typer.Option(None, "--namespace", "-n", help="Kubernetes namespace"),
    deployment: Optional[str] = typer.Option(None, "--deployment", "-d", help="Deployment name"),
    pod: Optional[str] = typer.Option(None, "--pod", "-p", help="Pod name"),
    container: Optional[str] = typer.Option(None, "--container", "-c", help="Container name"),
    kubeconfig: Optional[str] = typer.Option(None, "--kubeconfig", help="Kubeconfig file to use"),
    theme: Optional[ThemeMode] = typer.Option(None, "--theme", case_sensitive=False, help="Color theme"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Write logs to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
    version: bool = typer.Option(False, "--version", help="Show the version and exit"),
) -> None:
    """Interactive Kubernetes deployment helper."""
    if version:
        typer.echo(f"khelper {__version__}")
        raise typer.Exit()
    setup_logging(log_file, verbose)
    opts = CliOptions(
        namespace=namespace,
        deployment=deployment,
        pod=pod,
        container=container,
        kubeconfig=kubeconfig,
        theme=theme.value if theme else None,
    )
    ctx.obj = opts
    if ctx.invoked_subcommand is None:
        run_interactive(opts)


# ============================================================================
# Subcommands
# ============================================================================


@app.command("logs")
def logs_command(
    ctx: typer.Context,
    follow: bool = typer.Option(False, "--follow", "-f", help="Follow log output"),
    tail: int = typer.Option(CLI_TAIL_LINES_DEFAULT, "--tail", "-t", min=0, help="Number of lines to show"),
) -> None:
    """View container logs."""
    opts = _options(ctx)
    _require(opts, "namespace", "pod", "container")
    client = _client(opts)
    raise typer.Exit(run_logs(client.context_path, opts.target(), tail, follow=follow))


@app.command("shell")
def shell_command(
    ctx: typer.Context,
    shell: str = typer.Option(CLI_SHELL_DEFAULT, "--shell", "-s", help="Shell to use"),
) -> None:
    """Open a shell in a container."""
    opts = _options(ctx)
    _require(opts, "namespace", "pod", "container")
    client = _client(opts)
    raise typer.Exit(run_shell(client.context_path, opts.target(), shell))


@app.command("scale")
def scale_command(
    ctx: typer.Context,
    replicas: int = typer.Option(..., "--replicas", "-r", min=0, help="Number of replicas"),
) -> None:
    """Scale a deployment."""
    opts = _options(ctx)
    _require(opts, "namespace", "deployment")
    client = _client(opts)
    try:
        result = asyncio.run(client.invoke_action("scale", opts.target(), str(replicas)))
    except KHelperError as exc:
        _fail(str(exc))
    typer.echo(result)


@app.command("port-forward")
def port_forward_command(
    ctx: typer.Context,
    local: int = typer.Option(CLI_LOCAL_PORT_DEFAULT, "--local", "-l", min=1, max=65535, help="Local port"),
    remote: int = typer.Option(CLI_REMOTE_PORT_DEFAULT, "--remote", "-r", min=1, max=65535, help="Remote port"),
) -> None:
    """Forward a local port to a pod."""
    opts = _options(ctx)
    _require(opts, "namespace", "pod")
    client = _client(opts)
    typer.echo(f"Forwarding localhost:{local} -> {opts.pod}:{remote} (Ctrl+C to stop)")
    raise typer.Exit(run_port_forward(client.context_path, opts.target(), local, remote))


@app.command("update-image")
def update_image_command(
    ctx: typer.Context,
    image: str = typer.Option(..., "--image", "-i", help="New image"),
) -> None:
    """Update a container image."""
    opts = _options(ctx)
    _require(opts, "namespace", "deployment", "container")
    client = _client(opts)
    try:
        result = asyncio.run(client.invoke_action("update-image", opts.target(), image))
    except KHelperError as exc:
        _fail(str(exc))
    typer.echo(result)


def run() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    run()
