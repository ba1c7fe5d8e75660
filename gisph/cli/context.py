"""
Command Context.

Explicitly constructed collaborators shared by every command. The root
callback builds one AppContext per invocation and stores it on
``typer.Context.obj``; commands read it from there instead of reaching
for module-level singletons.
"""

from dataclasses import dataclass, field

import httpx

from gisph.cli.client import APIClient
from gisph.core.config import AppConfig, Settings, get_app_config, get_settings
from gisph.core.store import API_KEY_KEY, API_URL_KEY, ConfigStore
from gisph.update.checker import UpdateChecker


@dataclass
class AppContext:
    """
    Per-invocation dependencies.

    Attributes:
        store: Per-user config store.
        settings: Environment settings.
        app_config: Bundled application configuration.
        transport: Optional httpx transport, used by tests to mock the network.
    """

    store: ConfigStore = field(default_factory=ConfigStore)
    settings: Settings = field(default_factory=get_settings)
    app_config: AppConfig = field(default_factory=get_app_config)
    transport: httpx.AsyncBaseTransport | None = None

    def api_base_url(self) -> str:
        """Config store, then API_URL, then the bundled default."""
        return (
            self.store.get(API_URL_KEY)
            or self.settings.api_url
            or self.app_config.application.api.default_url
        )

    def api_key(self) -> str | None:
        """Config store, then API_KEY. There is no default key."""
        return self.store.get(API_KEY_KEY) or self.settings.api_key

    def github_repo(self) -> str:
        """GITHUB_REPO, then the bundled default repository."""
        return self.settings.github_repo or self.app_config.application.update.default_repo

    def api_client(self) -> APIClient:
        """Build an API client from the resolved URL, key and timeouts."""
        application = self.app_config.application
        return APIClient(
            self.api_base_url(),
            api_key=self.api_key(),
            timeout=application.timeouts.api,
            api_prefix=application.api.prefix,
            transport=self.transport,
        )

    def update_checker(self, timeout: float | None = None) -> UpdateChecker:
        """Build an update checker for the configured GitHub repository."""
        application = self.app_config.application
        return UpdateChecker(
            self.github_repo(),
            application.update,
            timeout=timeout if timeout is not None else application.timeouts.api,
            transport=self.transport,
        )

    def archive_url(self) -> str:
        update = self.app_config.application.update
        return update.archive_url.format(repo=self.github_repo(), branch=update.branch)
