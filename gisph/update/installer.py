"""
Self-Updater.

Replaces the installation directory with the latest source archive:

    1. Download the archive into a temporary directory
    2. Extract it
    3. Copy the current installation to <install_dir>.backup
    4. Replace the installation directory with the extracted tree
    5. Reinstall the package and its dependencies
    6. Remove the backup

If step 4 or 5 fails, the backup is moved back into place. When even that
fails, UpdateError.backup_path tells the user where the old installation
is. Temporary files are removed best-effort.
"""

import shutil
import subprocess
import sys
import tarfile
import tempfile
import tomllib
from collections.abc import Callable
from pathlib import Path

import httpx

from gisph import __version__
from gisph.core.exceptions import UpdateError
from gisph.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

USER_AGENT = f"gisph-cli/{__version__}"

DependencyInstaller = Callable[[Path], None]


def pip_install(project_dir: Path) -> None:
    """Install the project and its dependencies into the running interpreter."""
    subprocess.run(
        [sys.executable, "-m", "pip", "install", "--quiet", str(project_dir)],
        check=True,
        capture_output=True,
        text=True,
    )


def read_project_version(project_dir: Path) -> str:
    """Version declared in the project's pyproject.toml, or "unknown"."""
    try:
        with open(project_dir / "pyproject.toml", "rb") as f:
            return str(tomllib.load(f)["project"]["version"])
    except (OSError, tomllib.TOMLDecodeError, KeyError, TypeError):
        return "unknown"


def _describe(error: Exception) -> str:
    if isinstance(error, subprocess.CalledProcessError):
        output = (error.stderr or error.stdout or "").strip()
        last_line = output.splitlines()[-1] if output else f"exit code {error.returncode}"
        return f"Dependency installation failed: {last_line}"
    return f"Could not replace installation: {error}"


class SelfUpdater:
    """
    Applies an update to an installation directory.

    Usage:
        updater = SelfUpdater(archive_url, install_dir)
        new_version = await updater.run()
    """

    def __init__(
        self,
        archive_url: str,
        install_dir: Path,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
        install_dependencies: DependencyInstaller = pip_install,
    ) -> None:
        self.archive_url = archive_url
        # Relative paths such as "." have no name to derive the backup from.
        self.install_dir = install_dir.resolve()
        self.timeout = timeout
        self._transport = transport
        self._install_dependencies = install_dependencies

    @property
    def backup_path(self) -> Path:
        return self.install_dir.with_name(self.install_dir.name + ".backup")

    async def run(self) -> str:
        """
        Apply the update and return the newly installed version.

        Raises:
            UpdateError: When any step fails
        """
        work_dir = Path(tempfile.mkdtemp(prefix="gisph-update-"))
        try:
            archive = work_dir / "cli.tar.gz"
            await self._download(archive)
            extracted = self._extract(archive, work_dir / "extract")
            self._backup()
            self._replace(extracted)
            shutil.rmtree(self.backup_path, ignore_errors=True)
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)

        version = read_project_version(self.install_dir)
        log_with_source(logger, "update", "info", "Update applied", version=version)
        return version

    async def _download(self, destination: Path) -> None:
        log_with_source(logger, "update", "debug", "Downloading archive", url=self.archive_url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                async with client.stream("GET", self.archive_url) as response:
                    if response.status_code != 200:
                        raise UpdateError(f"Download failed with status {response.status_code}")
                    with open(destination, "wb") as f:
                        async for chunk in response.aiter_bytes():
                            f.write(chunk)
        except httpx.HTTPError as e:
            raise UpdateError(f"Failed to download update: {e}") from e
        except OSError as e:
            raise UpdateError(f"Could not save downloaded archive: {e}") from e

    def _extract(self, archive: Path, destination: Path) -> Path:
        destination.mkdir(parents=True, exist_ok=True)
        try:
            with tarfile.open(archive, "r:gz") as tar:
                tar.extractall(destination, filter="data")
        except (tarfile.TarError, OSError) as e:
            raise UpdateError(f"Downloaded archive could not be extracted: {e}") from e

        directories = sorted(p for p in destination.iterdir() if p.is_dir())
        if not directories:
            raise UpdateError("Downloaded archive contains no project directory")
        return directories[0]

    def _backup(self) -> None:
        backup = self.backup_path
        try:
            if backup.exists():
                shutil.rmtree(backup)
            shutil.copytree(self.install_dir, backup, symlinks=True)
        except OSError as e:
            shutil.rmtree(backup, ignore_errors=True)
            raise UpdateError(f"Could not back up current installation: {e}") from e

    def _replace(self, extracted: Path) -> None:
        try:
            shutil.rmtree(self.install_dir)
            shutil.move(str(extracted), str(self.install_dir))
            self._install_dependencies(self.install_dir)
        except (OSError, subprocess.CalledProcessError) as e:
            detail = _describe(e)
            if self._rollback():
                raise UpdateError(f"{detail}. The previous installation was restored.") from e
            raise UpdateError(
                f"{detail}. The previous installation is kept at {self.backup_path}",
                backup_path=self.backup_path,
            ) from e

    def _rollback(self) -> bool:
        """Move the backup back into place. Returns False if that fails."""
        try:
            if self.install_dir.exists():
                shutil.rmtree(self.install_dir)
            shutil.move(str(self.backup_path), str(self.install_dir))
        except OSError as e:
            log_with_source(logger, "update", "error", "Rollback failed", error=str(e))
            return False
        log_with_source(logger, "update", "warning", "Update rolled back", path=str(self.install_dir))
        return True
