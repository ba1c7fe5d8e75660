"""
Per-user Config Store.

Durable key-value settings persisted across CLI invocations as a flat YAML
mapping in <user config dir>/config.yaml.

Well-known keys:
    apiUrl                   - API base URL override
    apiKey                   - Bearer token sent with API requests
    lastUpdateCheck          - Epoch milliseconds of the last background check
    autoUpdateCheckDisabled  - True to skip background update checks

Any other key the user sets is stored as-is. Values are never masked on
storage; use mask_sensitive() for display.
"""

import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from gisph.core.config import user_config_dir
from gisph.core.exceptions import ConfigStoreError
from gisph.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

CONFIG_FILENAME = "config.yaml"

API_URL_KEY = "apiUrl"
API_KEY_KEY = "apiKey"
LAST_UPDATE_CHECK_KEY = "lastUpdateCheck"
AUTO_UPDATE_DISABLED_KEY = "autoUpdateCheckDisabled"

SENSITIVE_MARKERS = ("apikey", "api_key", "token", "password", "secret")
NOT_SET = "(not set)"


class ConfigStore:
    """
    Flat key-value store backed by a YAML file.

    The file is re-read on every operation so that a long-lived instance
    never writes back stale data. Writes go to a temporary file that
    replaces the original.

    Usage:
        store = ConfigStore()
        store.set("apiUrl", "https://api.example.com")
        store.get("apiUrl")
        store.delete("apiUrl")
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or (user_config_dir() / CONFIG_FILENAME)

    @property
    def path(self) -> Path:
        """Location of the backing file."""
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}

        try:
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigStoreError(f"Could not read configuration file {self._path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigStoreError(f"Configuration file {self._path} is not a key-value mapping")
        # Hand-edited files may carry YAML keys like `1:` that load as ints.
        return {str(key): value for key, value in data.items()}

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".config-", suffix=".yaml")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Any:
        """Return the stored value, or None when the key is absent."""
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one."""
        data = self._read()
        data[key] = value
        self._write(data)
        log_with_source(logger, "config", "debug", "Config value set", key=key)

    def delete(self, key: str) -> None:
        """Remove a key. Deleting an absent key is not an error."""
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
        log_with_source(logger, "config", "debug", "Config value deleted", key=key)

    def list(self) -> dict[str, Any]:
        """Return a copy of every stored entry."""
        return dict(self._read())


def is_sensitive(key: str) -> bool:
    """True when the key names a credential that must be masked on display."""
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_MARKERS)


def mask_sensitive(key: str, value: Any) -> str:
    """
    Render a config value for display.

    Empty values render as "(not set)". Sensitive keys show only the last
    four characters behind "***".
    """
    if value is None or value == "":
        return NOT_SET

    text = str(value)
    if is_sensitive(key):
        return "***" + text[-4:]
    return text
