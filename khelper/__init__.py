"""khelper - interactive Kubernetes deployment helper."""

__version__ = "0.3.0"
