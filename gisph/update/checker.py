"""
Update Checker.

Finds the latest published version of the CLI and compares it with the
running one. The latest release on GitHub is authoritative; repositories
without releases fall back to the version declared in pyproject.toml on
the default branch.
"""

import tomllib

import httpx
from pydantic import BaseModel

from gisph import __version__
from gisph.core.config_schema import UpdateSchema
from gisph.core.exceptions import UpdateCheckError
from gisph.core.logging import get_logger, log_with_source
from gisph.update.version import compare_versions

logger = get_logger(__name__)

USER_AGENT = f"gisph-cli/{__version__}"


class UpdateCheckResult(BaseModel):
    """Outcome of a single update check. error is set when the check failed."""

    update_available: bool
    current_version: str
    latest_version: str | None = None
    error: str | None = None


class UpdateChecker:
    """
    Release metadata lookup for a GitHub repository.

    Usage:
        checker = UpdateChecker("owner/repo", app_config.application.update)
        result = await checker.check_for_updates()
        if result.update_available:
            ...
    """

    def __init__(
        self,
        repo: str,
        update_config: UpdateSchema,
        current_version: str = __version__,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.repo = repo
        self.current_version = current_version
        self.timeout = timeout
        self._config = update_config
        self._transport = transport

    @property
    def release_url(self) -> str:
        return self._config.release_url.format(repo=self.repo, branch=self._config.branch)

    @property
    def raw_version_url(self) -> str:
        return self._config.raw_version_url.format(repo=self.repo, branch=self._config.branch)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": USER_AGENT, "Accept": "application/vnd.github+json"},
            follow_redirects=True,
            transport=self._transport,
        )

    async def fetch_latest_version(self) -> str:
        """
        Return the latest published version, without a leading "v".

        Raises:
            UpdateCheckError: When the metadata cannot be fetched or parsed
        """
        async with self._client() as client:
            try:
                response = await client.get(self.release_url)

                if response.status_code == 404:
                    log_with_source(
                        logger, "update", "debug",
                        "No published release, reading version from branch",
                        repo=self.repo,
                    )
                    return await self._version_from_branch(client)
            except httpx.HTTPError as e:
                raise UpdateCheckError(f"Failed to check version: {e}") from e

        if response.status_code != 200:
            raise UpdateCheckError(f"GitHub API returned status {response.status_code}")

        try:
            tag = response.json()["tag_name"]
        except (ValueError, KeyError, TypeError) as e:
            raise UpdateCheckError("Failed to parse GitHub response") from e

        if not isinstance(tag, str) or not tag:
            raise UpdateCheckError("Failed to parse GitHub response")
        return tag.removeprefix("v")

    async def _version_from_branch(self, client: httpx.AsyncClient) -> str:
        response = await client.get(self.raw_version_url)
        if response.status_code != 200:
            raise UpdateCheckError("Could not fetch version from GitHub")

        try:
            version = tomllib.loads(response.text)["project"]["version"]
        except (tomllib.TOMLDecodeError, KeyError, TypeError) as e:
            raise UpdateCheckError("Failed to parse pyproject.toml from GitHub") from e

        return str(version)

    async def check_for_updates(self) -> UpdateCheckResult:
        """
        Compare the latest published version with the running one.

        Never raises; failures are reported through UpdateCheckResult.error.
        """
        try:
            latest = await self.fetch_latest_version()
        except UpdateCheckError as e:
            log_with_source(logger, "update", "debug", "Update check failed", error=e.message)
            return UpdateCheckResult(
                update_available=False,
                current_version=self.current_version,
                error=e.message,
            )

        available = compare_versions(latest, self.current_version) > 0
        log_with_source(
            logger, "update", "info", "Update check complete",
            current=self.current_version, latest=latest, update_available=available,
        )
        return UpdateCheckResult(
            update_available=available,
            current_version=self.current_version,
            latest_version=latest,
        )
