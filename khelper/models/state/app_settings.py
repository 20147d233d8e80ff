"""Application settings models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from khelper.constants.defaults import (
    LOG_TAIL_LINES_DEFAULT,
    STREAM_TAIL_LINES_DEFAULT,
    THEME_DEFAULT,
)
from khelper.constants.enums import ThemeMode
from khelper.constants.limits import MAX_RECENT_ITEMS


class AppSettings(BaseModel):
    """Application settings model with validation.

    Field names match the keys of ``~/.khelper/config.yml`` so files written
    by earlier releases keep loading.
    """

    model_config = ConfigDict(populate_by_name=True)

    # Cluster context
    last_namespace: str = ""
    kubeconfig: str = ""

    # Recent selections, most recent first
    recent_kubeconfigs: list[str] = Field(default_factory=list)
    recent_deployments: dict[str, list[str]] = Field(default_factory=dict)
    recent_commands: list[str] = Field(default_factory=list)
    recent_pods: dict[str, list[str]] = Field(default_factory=dict)
    recent_log_searches: list[str] = Field(default_factory=list)

    # UI preferences
    theme: str = THEME_DEFAULT

    # Log retrieval
    log_tail_lines: int = Field(default=LOG_TAIL_LINES_DEFAULT, ge=1)
    stream_tail_lines: int = Field(default=STREAM_TAIL_LINES_DEFAULT, ge=0)
    max_recent_items: int = Field(default=MAX_RECENT_ITEMS, ge=1)

    @field_validator("theme")
    @classmethod
    def _known_theme(cls, value: str) -> str:
        normalized = str(value or "").strip().lower()
        if normalized not in {mode.value for mode in ThemeMode}:
            return THEME_DEFAULT
        return normalized


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


class ConfigSaveError(ConfigError):
    """Raised when settings fail to save."""
