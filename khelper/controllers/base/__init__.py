"""Base controller interfaces."""

from khelper.controllers.base.base_controller import ResourceClient

__all__ = ["ResourceClient"]
