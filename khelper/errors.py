"""Error taxonomy shared by the wizard and its collaborators.

Client errors are raised by ``ResourceClient`` implementations. The worker
runner converts them into the wizard-facing kinds (``LoadError``,
``ExecutionError``, ``StreamError``) before they reach the controller.
"""

from __future__ import annotations


class KHelperError(Exception):
    """Base class for all khelper errors."""


# ============================================================================
# Client errors
# ============================================================================


class ClientError(KHelperError):
    """A remote call failed."""


class ClientConfigError(ClientError):
    """A kubeconfig could not be resolved or is unusable."""


class TransportError(ClientError):
    """The cluster could not be reached or kubectl could not run."""


class NotFoundError(ClientError):
    """The requested object does not exist."""


class PermissionDeniedError(ClientError):
    """The cluster refused the request."""


# ============================================================================
# Wizard errors
# ============================================================================


class LoadError(KHelperError):
    """Populating a selection list failed. Shown inline; never fatal."""


class ExecutionError(KHelperError):
    """Running an action failed. Always shown on the result screen."""


class InvalidInputError(ExecutionError):
    """Free-form input was rejected before any remote call."""


class StreamError(KHelperError):
    """A follow-mode log stream ended with an error."""


class FatalStartupError(KHelperError):
    """The session ended without ever reaching a usable cluster context."""


__all__ = [
    "ClientConfigError",
    "ClientError",
    "ExecutionError",
    "FatalStartupError",
    "InvalidInputError",
    "KHelperError",
    "LoadError",
    "NotFoundError",
    "PermissionDeniedError",
    "StreamError",
    "TransportError",
]
