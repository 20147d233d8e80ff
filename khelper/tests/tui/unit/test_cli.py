"""Tests for the typer command-line interface."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from typer.testing import CliRunner

from khelper import __version__, main
from khelper.errors import NotFoundError
from khelper.models.actions import find_action
from khelper.models.session import Target, WizardOutcome

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Keep settings and logs out of the real home directory."""
    monkeypatch.setenv("KHELPER_CONFIG", str(tmp_path / "settings.yaml"))
    monkeypatch.setenv("HOME", str(tmp_path))
    yield tmp_path
    for handler in list(logging.getLogger("khelper").handlers):
        logging.getLogger("khelper").removeHandler(handler)
        handler.close()


def _fake_client(result: str = "") -> MagicMock:
    client = MagicMock()
    client.context_path = "/kc"
    client.invoke_action = AsyncMock(return_value=result)
    return client


# =============================================================================
# Global options
# =============================================================================


@pytest.mark.unit
class TestGlobalOptions:
    """Tests for the callback options."""

    def test_version(self) -> None:
        result = runner.invoke(main.app, ["--version"])
        assert result.exit_code == 0
        assert f"khelper {__version__}" in result.output

    def test_help_lists_subcommands(self) -> None:
        result = runner.invoke(main.app, ["--help"])
        assert result.exit_code == 0
        for name in ("logs", "shell", "scale", "port-forward", "update-image"):
            assert name in result.output

    def test_invalid_theme(self) -> None:
        result = runner.invoke(main.app, ["--theme", "neon", "scale", "-r", "1"])
        assert result.exit_code != 0

    def test_setup_logging_writes_file(self, tmp_path: Path) -> None:
        path = main.setup_logging(tmp_path / "logs" / "khelper.log", verbose=True)
        assert path == tmp_path / "logs" / "khelper.log"
        logging.getLogger("khelper.test").debug("hello")
        assert path.exists()
        assert logging.getLogger("khelper").level == logging.DEBUG


# =============================================================================
# Subcommands
# =============================================================================


@pytest.mark.unit
class TestSubcommands:
    """Tests for the direct subcommands."""

    def test_scale_requires_deployment(self, tmp_path: Path) -> None:
        result = runner.invoke(
            main.app, ["-n", "default", "--log-file", str(tmp_path / "k.log"), "scale", "-r", "2"]
        )
        assert result.exit_code == 1
        assert "namespace and deployment are required" in result.output

    def test_logs_requires_pod_and_container(self, tmp_path: Path) -> None:
        result = runner.invoke(
            main.app, ["-n", "default", "--log-file", str(tmp_path / "k.log"), "logs"]
        )
        assert result.exit_code == 1
        assert "namespace, pod and container are required" in result.output

    def test_scale(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        client = _fake_client("Scaled web to 2 replicas")
        monkeypatch.setattr(main, "_client", lambda opts: client)
        result = runner.invoke(
            main.app,
            ["-n", "default", "-d", "web", "--log-file", str(tmp_path / "k.log"), "scale", "-r", "2"],
        )
        assert result.exit_code == 0
        assert "Scaled web to 2 replicas" in result.output
        name, target, value = client.invoke_action.await_args.args
        assert (name, target.namespace, target.resource, value) == ("scale", "default", "web", "2")

    def test_negative_replicas_rejected(self, tmp_path: Path) -> None:
        result = runner.invoke(
            main.app,
            ["-n", "default", "-d", "web", "--log-file", str(tmp_path / "k.log"), "scale", "-r", "-1"],
        )
        assert result.exit_code != 0

    def test_update_image_failure(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        client = _fake_client()
        client.invoke_action.side_effect = NotFoundError('deployments.apps "web" not found')
        monkeypatch.setattr(main, "_client", lambda opts: client)
        result = runner.invoke(
            main.app,
            [
                "-n", "default", "-d", "web", "-c", "app",
                "--log-file", str(tmp_path / "k.log"),
                "update-image", "-i", "web:2",
            ],
        )
        assert result.exit_code == 1
        assert 'deployments.apps "web" not found' in result.output

    def test_shell_uses_requested_shell(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(main, "_client", lambda opts: _fake_client())
        run_shell = MagicMock(return_value=0)
        monkeypatch.setattr(main, "run_shell", run_shell)
        result = runner.invoke(
            main.app,
            [
                "-n", "default", "-p", "web-1", "-c", "app",
                "--log-file", str(tmp_path / "k.log"),
                "shell", "-s", "/bin/bash",
            ],
        )
        assert result.exit_code == 0
        kubeconfig, target, shell = run_shell.call_args.args
        assert kubeconfig == "/kc"
        assert target.pod_name == "web-1"
        assert shell == "/bin/bash"

    def test_logs_exit_code_propagates(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(main, "_client", lambda opts: _fake_client())
        run_logs = MagicMock(return_value=2)
        monkeypatch.setattr(main, "run_logs", run_logs)
        result = runner.invoke(
            main.app,
            [
                "-n", "default", "-p", "web-1", "-c", "app",
                "--log-file", str(tmp_path / "k.log"),
                "logs", "-f", "-t", "20",
            ],
        )
        assert result.exit_code == 2
        assert run_logs.call_args.args[2] == 20
        assert run_logs.call_args.kwargs == {"follow": True}

    def test_missing_kubeconfig(self, tmp_path: Path) -> None:
        result = runner.invoke(
            main.app,
            [
                "-n", "default", "-d", "web",
                "--kubeconfig", str(tmp_path / "nope"),
                "--log-file", str(tmp_path / "k.log"),
                "scale", "-r", "1",
            ],
        )
        assert result.exit_code == 1
        assert "kubeconfig not found" in result.output


# =============================================================================
# Hand-off after the wizard
# =============================================================================

TARGET = Target(namespace="default", resource="web", instance="web-1 (Running)", subresource="app")


@pytest.mark.unit
@pytest.mark.fast
class TestRunHandoff:
    """Tests for run_handoff."""

    def test_no_handoff(self) -> None:
        assert main.run_handoff(WizardOutcome(action=find_action("scale"), target=TARGET), "/kc") == 0

    def test_shell(self, monkeypatch: pytest.MonkeyPatch) -> None:
        run_shell = MagicMock(return_value=0)
        monkeypatch.setattr(main, "run_shell", run_shell)
        outcome = WizardOutcome(action=find_action("shell"), target=TARGET, handoff=True)
        assert main.run_handoff(outcome, "/kc") == 0
        run_shell.assert_called_once_with("/kc", TARGET)

    def test_port_forward(self, monkeypatch: pytest.MonkeyPatch) -> None:
        run_port_forward = MagicMock(return_value=0)
        monkeypatch.setattr(main, "run_port_forward", run_port_forward)
        outcome = WizardOutcome(
            action=find_action("port-forward"), target=TARGET, value="8080:80", handoff=True
        )
        main.run_handoff(outcome, "/kc")
        run_port_forward.assert_called_once_with("/kc", TARGET, 8080, 80)
