"""Controllers module for khelper.

This module provides the cluster client interface used by the wizard and its
kubectl implementation.
"""

from __future__ import annotations

# Base classes
from khelper.controllers.base import ResourceClient

# kubectl implementation
from khelper.controllers.kubectl import KubectlClient, resolve_kubeconfig

__all__ = [
    "KubectlClient",
    "ResourceClient",
    "resolve_kubeconfig",
]
