"""kubectl implementation of the cluster client."""

from khelper.controllers.kubectl.actions import ActionRunner
from khelper.controllers.kubectl.controller import (
    KubectlClient,
    default_kubeconfig,
    resolve_kubeconfig,
)

__all__ = ["ActionRunner", "KubectlClient", "default_kubeconfig", "resolve_kubeconfig"]
