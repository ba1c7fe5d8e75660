"""
Configuration Management.

Three sources, each with a single responsibility:

Settings (YAML, bundled with the package):
    application.yaml   - App identity, API defaults, timeouts, update source
    logging.yaml       - Logging configuration

Environment (pydantic-settings):
    API_URL, API_KEY, GITHUB_REPO, MYAPI_INSTALL_DIR

Per-user store (gisph.core.store):
    apiUrl, apiKey, lastUpdateCheck, autoUpdateCheckDisabled, ...

Values the user sets in the store win over the environment, which wins
over the bundled defaults.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from gisph.core.config_schema import ApplicationSchema, LoggingSchema

SETTINGS_DIR = Path(__file__).resolve().parent.parent / "config" / "settings"
APP_DIR_NAME = "gisph"


def load_yaml_config(filename: str, settings_dir: Path | None = None) -> dict[str, Any]:
    """Load a YAML configuration file from the bundled settings directory."""
    config_path = (settings_dir or SETTINGS_DIR) / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Values read from the process environment. All optional."""

    api_url: str | None = None
    api_key: str | None = None
    github_repo: str | None = None
    myapi_install_dir: str | None = None

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str, settings_dir: Path | None = None) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename, settings_dir)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from the bundled YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self, settings_dir: Path | None = None) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml", settings_dir)
        self._logging = _load_validated(LoggingSchema, "logging.yaml", settings_dir)

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


@lru_cache
def get_settings() -> Settings:
    """Get cached environment settings."""
    return Settings()


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def user_home() -> Path:
    """Home directory from HOME, then USERPROFILE, then the platform default."""
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
    return Path(home) if home else Path.home()


def user_config_dir() -> Path:
    """
    Per-user configuration directory.

    Honors XDG_CONFIG_HOME, otherwise ~/.config/gisph.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else user_home() / ".config"
    return base / APP_DIR_NAME
