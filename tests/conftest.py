"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Every test runs against an isolated per-user config directory under
tmp_path, with the CLI's environment variables cleared, so nothing reads
or writes the developer's real ~/.config/gisph.
"""

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import httpx
import pytest
import structlog

from gisph.cli.context import AppContext
from gisph.core.config import Settings, get_app_config, get_settings
from gisph.core.store import AUTO_UPDATE_DISABLED_KEY, ConfigStore

ENV_VARS = ("API_URL", "API_KEY", "GITHUB_REPO", "MYAPI_INSTALL_DIR")


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point the per-user config directory at tmp_path and clear CLI env vars."""
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    yield config_home / "gisph"

    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Drop handlers installed by setup_logging so streams from one test don't leak."""
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)
    structlog.reset_defaults()


# =============================================================================
# Store and Context Fixtures
# =============================================================================


@pytest.fixture
def store(tmp_path: Path) -> ConfigStore:
    """Empty config store backed by a file under tmp_path."""
    return ConfigStore(tmp_path / "store" / "config.yaml")


@pytest.fixture
def make_context(store: ConfigStore) -> Callable[..., AppContext]:
    """
    Build an AppContext whose HTTP traffic goes to a mock handler.

    Background update checks are disabled unless auto_update=True.

    Usage:
        def test_something(make_context):
            app_ctx = make_context(lambda request: httpx.Response(200, json={}))
    """

    def factory(
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
        auto_update: bool = False,
        settings: Settings | None = None,
    ) -> AppContext:
        if not auto_update:
            store.set(AUTO_UPDATE_DISABLED_KEY, True)
        return AppContext(
            store=store,
            settings=settings or Settings(),
            app_config=get_app_config(),
            transport=httpx.MockTransport(handler) if handler else None,
        )

    return factory
