"""Error parser for kubectl - turns stderr text into client errors."""

from __future__ import annotations

from khelper.errors import (
    ClientError,
    NotFoundError,
    PermissionDeniedError,
    TransportError,
)

_GENERIC_MESSAGE = "kubectl command failed"
_MAX_MESSAGE_LENGTH = 160

_PREFERRED_TOKENS = (
    "unable to connect to the server",
    "you must be logged in",
    "context deadline exceeded",
    "timed out",
    "certificate",
    "no such host",
    "forbidden",
    "unauthorized",
    "not found",
)
_NOT_FOUND_TOKENS = ("notfound", "not found", "no such file or directory")
_PERMISSION_TOKENS = ("forbidden", "unauthorized", "you must be logged in")


def summarize_kubectl_error(message: str) -> str:
    """Pick the most telling line of kubectl stderr output."""
    lines = [line.strip() for line in message.splitlines() if line.strip()]
    if not lines:
        return _GENERIC_MESSAGE

    selected_line = lines[-1]
    for line in reversed(lines):
        lower_line = line.lower()
        if line.startswith("error:") or any(token in lower_line for token in _PREFERRED_TOKENS):
            selected_line = line
            break

    cleaned = selected_line.removeprefix("error:").strip()
    if cleaned.startswith("Error from server"):
        # "Error from server (NotFound): deployments.apps "x" not found"
        cleaned = cleaned.partition(": ")[2].strip() or cleaned
    if len(cleaned) > _MAX_MESSAGE_LENGTH:
        return f"{cleaned[:_MAX_MESSAGE_LENGTH - 3].rstrip()}..."
    return cleaned or _GENERIC_MESSAGE


def classify_kubectl_error(stderr: str) -> ClientError:
    """Map kubectl stderr to the matching ``ClientError`` subclass."""
    summary = summarize_kubectl_error(stderr)
    lowered = stderr.lower()
    if any(token in lowered for token in _PERMISSION_TOKENS):
        return PermissionDeniedError(summary)
    if any(token in lowered for token in _NOT_FOUND_TOKENS):
        return NotFoundError(summary)
    return TransportError(summary)


__all__ = ["classify_kubectl_error", "summarize_kubectl_error"]
