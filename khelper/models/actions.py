"""Action catalog.

Every action the wizard offers is described by an ``ActionDescriptor``. The
descriptor flags drive which selections are collected before execution; the
controller never branches on action names.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from khelper.constants.enums import LogMode
from khelper.constants.values import ACTION_LABEL_SEPARATOR, ASSET_BASE_PATH
from khelper.errors import InvalidInputError

# ============================================================================
# Input parsers
# ============================================================================


def parse_replica_count(value: str) -> int:
    """Parse a non-negative replica count."""
    try:
        replicas = int(value.strip())
    except ValueError:
        raise InvalidInputError(f"invalid replica count: {value}") from None
    if replicas < 0:
        raise InvalidInputError(f"invalid replica count: {value}")
    return replicas


def parse_revision(value: str) -> int:
    try:
        revision = int(value.strip())
    except ValueError:
        raise InvalidInputError(f"invalid revision number: {value}") from None
    if revision < 1:
        raise InvalidInputError(f"invalid revision number: {value}")
    return revision


def parse_port_mapping(value: str) -> tuple[int, int]:
    """Parse ``local:remote`` into a pair of valid TCP ports."""
    parts = value.strip().split(":")
    if len(parts) != 2:
        raise InvalidInputError("invalid port format, use local:remote")
    try:
        local, remote = int(parts[0]), int(parts[1])
    except ValueError:
        raise InvalidInputError("invalid port format, use local:remote") from None
    if not (0 < local < 65536 and 0 < remote < 65536):
        raise InvalidInputError("invalid port format, use local:remote")
    return local, remote


def parse_env_assignment(value: str) -> tuple[str, str]:
    key, sep, env_value = value.partition("=")
    key = key.strip()
    if not sep or not key:
        raise InvalidInputError("invalid format, use KEY=VALUE")
    return key, env_value


def parse_image(value: str) -> str:
    image = value.strip()
    if not image or any(ch.isspace() for ch in image):
        raise InvalidInputError(f"invalid image reference: {value}")
    return image


def parse_local_path(value: str) -> str:
    path = value.strip()
    if not path:
        raise InvalidInputError("local path must not be empty")
    return path


# ============================================================================
# Descriptor and catalog
# ============================================================================


@dataclass(frozen=True)
class ActionDescriptor:
    """Static description of one action.

    Attributes:
        requires_instance: a pod must be chosen.
        requires_subresource: a container must be chosen. Without
            ``requires_instance`` the first pod of the deployment is used.
        requires_input: a free-form value is prompted with ``input_prompt``.
        folder_base_path: a nested folder under this path must be chosen.
        log_mode: the action opens the log viewer instead of a result.
        handoff: a successful run ends the session and hands the terminal
            to an external command.
    """

    name: str
    description: str
    requires_instance: bool = False
    requires_subresource: bool = False
    requires_input: bool = False
    input_prompt: str = ""
    folder_base_path: str | None = None
    log_mode: LogMode | None = None
    handoff: bool = False
    input_parser: Callable[[str], Any] | None = None

    @property
    def label(self) -> str:
        return f"{self.name}{ACTION_LABEL_SEPARATOR}{self.description}"

    def validate(self, value: str | None) -> Any:
        """Parse ``value`` for this action.

        Raises:
            InvalidInputError: The value is rejected.
        """
        if not self.requires_input:
            return None
        if self.input_parser is None:
            return value
        return self.input_parser(value or "")


ACTION_CATALOG: tuple[ActionDescriptor, ...] = (
    ActionDescriptor(
        "logs", "View container logs",
        requires_instance=True, requires_subresource=True,
        log_mode=LogMode.FETCH,
    ),
    ActionDescriptor(
        "logs-follow", "Follow container logs",
        requires_instance=True, requires_subresource=True,
        log_mode=LogMode.FOLLOW,
    ),
    ActionDescriptor(
        "shell", "Open shell (auto-detects bash/sh/ash)",
        requires_instance=True, requires_subresource=True,
        handoff=True,
    ),
    ActionDescriptor(
        "fast-deploy", f"Deploy local dist to {ASSET_BASE_PATH}",
        requires_instance=True, requires_subresource=True,
        requires_input=True,
        input_prompt="Enter local dist folder path (e.g., ~/project/dist):",
        folder_base_path=ASSET_BASE_PATH,
        input_parser=parse_local_path,
    ),
    ActionDescriptor(
        "scale", "Scale deployment",
        requires_input=True, input_prompt="Enter replica count:",
        input_parser=parse_replica_count,
    ),
    ActionDescriptor(
        "update-image", "Update container image",
        requires_subresource=True,
        requires_input=True, input_prompt="Enter new image:",
        input_parser=parse_image,
    ),
    ActionDescriptor(
        "port-forward", "Forward port to pod",
        requires_instance=True,
        requires_input=True, input_prompt="Enter ports (local:remote):",
        handoff=True,
        input_parser=parse_port_mapping,
    ),
    ActionDescriptor(
        "rollback", "Rollback deployment",
        requires_input=True, input_prompt="Enter revision number:",
        input_parser=parse_revision,
    ),
    ActionDescriptor(
        "set-env", "Set environment variable",
        requires_subresource=True,
        requires_input=True, input_prompt="Enter KEY=VALUE:",
        input_parser=parse_env_assignment,
    ),
    ActionDescriptor(
        "list-env", "List environment variables", requires_subresource=True,
    ),
    ActionDescriptor("list-pods", "List all pods"),
    ActionDescriptor("list-revisions", "List deployment revisions"),
    ActionDescriptor("ingress", "Show related ingresses"),
    ActionDescriptor("describe", "Describe deployment"),
)

_BY_NAME: dict[str, ActionDescriptor] = {action.name: action for action in ACTION_CATALOG}


def action_labels() -> list[str]:
    """Display labels in catalog order."""
    return [action.label for action in ACTION_CATALOG]


def find_action(name: str) -> ActionDescriptor | None:
    return _BY_NAME.get(name)


def parse_action_label(label: str) -> ActionDescriptor | None:
    """Resolve a ``"name - description"`` label back to its descriptor."""
    name, _, _ = label.partition(ACTION_LABEL_SEPARATOR)
    return find_action(name.strip())


__all__ = [
    "ACTION_CATALOG",
    "ActionDescriptor",
    "action_labels",
    "find_action",
    "parse_action_label",
    "parse_env_assignment",
    "parse_image",
    "parse_local_path",
    "parse_port_mapping",
    "parse_replica_count",
    "parse_revision",
]
