"""Load and save application settings as YAML."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from khelper.constants.values import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    CONFIG_PATH_ENV,
)
from khelper.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """Reads and writes ``AppSettings`` at a single YAML path."""

    @staticmethod
    def config_dir() -> Path:
        return Path.home() / CONFIG_DIR_NAME

    @classmethod
    def config_path(cls) -> Path:
        """Settings file path, honouring ``KHELPER_CONFIG``."""
        override = os.environ.get(CONFIG_PATH_ENV, "").strip()
        if override:
            return Path(override).expanduser()
        return cls.config_dir() / CONFIG_FILE_NAME

    @classmethod
    def load(cls, path: Path | None = None) -> AppSettings:
        """Load settings; a missing file yields defaults.

        Raises:
            ConfigLoadError: The file exists but cannot be read or parsed.
        """
        target = path or cls.config_path()
        if not target.exists():
            return AppSettings()
        try:
            raw = yaml.safe_load(target.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(f"cannot read {target}: {exc}") from exc
        if raw is None:
            return AppSettings()
        if not isinstance(raw, dict):
            raise ConfigLoadError(f"{target} does not contain a mapping")
        try:
            return AppSettings.model_validate(raw)
        except ValidationError as exc:
            raise ConfigLoadError(f"invalid settings in {target}: {exc}") from exc

    @classmethod
    def save(cls, settings: AppSettings, path: Path | None = None) -> None:
        """Write settings, creating the directory when needed.

        Raises:
            ConfigSaveError: The file cannot be written.
        """
        target = path or cls.config_path()
        data = settings.model_dump(mode="json")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(
                yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
                encoding="utf-8",
            )
        except OSError as exc:
            raise ConfigSaveError(f"cannot write {target}: {exc}") from exc
        logger.debug("Saved settings to %s", target)

    @classmethod
    def reset(cls, path: Path | None = None) -> AppSettings:
        """Overwrite the settings file with defaults and return them."""
        settings = AppSettings()
        cls.save(settings, path)
        return settings


__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
]
