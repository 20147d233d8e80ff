"""Result formatter - renders kubectl JSON objects as result screen text."""

from __future__ import annotations

from typing import Any

from khelper.constants.values import REVISION_ANNOTATION


def _name(obj: dict[str, Any]) -> str:
    return obj.get("metadata", {}).get("name", "")


def find_container(deployment: dict[str, Any], container: str) -> dict[str, Any] | None:
    containers = deployment.get("spec", {}).get("template", {}).get("spec", {}).get("containers", [])
    for entry in containers:
        if entry.get("name") == container:
            return entry
    return None


def format_env_vars(container: str, env: list[dict[str, Any]]) -> str:
    """Literal values are shown; references only by their source."""
    lines = [f"Environment variables for {container}:", ""]
    for var in env:
        name = var.get("name", "")
        if var.get("value"):
            lines.append(f"  {name}={var['value']}")
        elif var.get("valueFrom"):
            lines.append(f"  {name}=(from secret/configmap)")
    return "\n".join(lines) + "\n"


def format_pods(deployment: str, pods: list[dict[str, Any]]) -> str:
    lines = [f"Pods for {deployment}:", ""]
    for pod in pods:
        status = pod.get("status", {})
        statuses = status.get("containerStatuses") or []
        ready = sum(1 for cs in statuses if cs.get("ready"))
        lines.append(f"  {_name(pod)}  {status.get('phase', 'Unknown')}  {ready}/{len(statuses)}")
    return "\n".join(lines) + "\n"


def _revision_key(replica_set: dict[str, Any]) -> int:
    annotations = replica_set.get("metadata", {}).get("annotations") or {}
    try:
        return int(annotations.get(REVISION_ANNOTATION, "0"))
    except ValueError:
        return 0


def format_revisions(deployment: str, replica_sets: list[dict[str, Any]]) -> str:
    """One line per revision, oldest first."""
    lines = [f"Revisions for {deployment}:", ""]
    for replica_set in sorted(replica_sets, key=_revision_key):
        annotations = replica_set.get("metadata", {}).get("annotations") or {}
        revision = annotations.get(REVISION_ANNOTATION, "?")
        replicas = replica_set.get("spec", {}).get("replicas", 0)
        lines.append(f"  Revision {revision}: {replicas} replicas")
    return "\n".join(lines) + "\n"


def format_ingresses(namespace: str, ingresses: list[dict[str, Any]]) -> str:
    lines = [f"Ingresses in {namespace}:", ""]
    for ingress in ingresses:
        lines.append(f"  {_name(ingress)}:")
        for rule in ingress.get("spec", {}).get("rules") or []:
            lines.append(f"    Host: {rule.get('host') or '*'}")
            for path in (rule.get("http") or {}).get("paths") or []:
                service = path.get("backend", {}).get("service", {})
                port = service.get("port", {})
                port_text = port.get("number") or port.get("name") or 0
                lines.append(f"      {path.get('path', '/')} -> {service.get('name', '')}:{port_text}")
    return "\n".join(lines) + "\n"


def format_deployment(deployment: dict[str, Any]) -> str:
    metadata = deployment.get("metadata", {})
    spec = deployment.get("spec", {})
    status = deployment.get("status", {})
    lines = [
        f"Deployment: {metadata.get('name', '')}",
        f"Namespace: {metadata.get('namespace', '')}",
        f"Replicas: {status.get('readyReplicas', 0)}/{spec.get('replicas', 0)}",
        f"Strategy: {spec.get('strategy', {}).get('type', '')}",
        "",
        "Containers:",
    ]
    for container in spec.get("template", {}).get("spec", {}).get("containers", []):
        lines.append(f"  {container.get('name', '')}:")
        lines.append(f"    Image: {container.get('image', '')}")
        ports = container.get("ports") or []
        if ports:
            rendered = ", ".join(
                f"{port.get('containerPort', 0)}/{port.get('protocol', 'TCP')}" for port in ports
            )
            lines.append(f"    Ports: {rendered}")
    return "\n".join(lines) + "\n"


__all__ = [
    "find_container",
    "format_deployment",
    "format_env_vars",
    "format_ingresses",
    "format_pods",
    "format_revisions",
]
