"""
Installation Directory Discovery.

The install script can put the CLI in different places, so the directory is
found by running an ordered list of probes. Each probe returns a Path or
None; the first hit wins.

    1. Path recorded by the installer in <user config dir>/install_dir
    2. MYAPI_INSTALL_DIR environment variable
    3. Well-known directories under the home directory
    4. Symlink target of the running executable
"""

import os
import sys
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from gisph.core.config import user_config_dir, user_home
from gisph.core.exceptions import InstallDirNotFoundError
from gisph.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

INSTALL_DIR_FILENAME = "install_dir"
PROJECT_MARKER = "pyproject.toml"

Probe = Callable[[], Path | None]


def _is_project(path: Path) -> bool:
    return (path / PROJECT_MARKER).is_file()


def recorded_path_probe(record_file: Path | None = None) -> Probe:
    """Read the directory the installer recorded in the config directory."""

    def probe() -> Path | None:
        path = record_file or (user_config_dir() / INSTALL_DIR_FILENAME)
        if not path.is_file():
            return None
        recorded = path.read_text(encoding="utf-8").strip()
        if recorded and Path(recorded).exists():
            return Path(recorded)
        return None

    return probe


def env_probe(value: str | None) -> Probe:
    """Use MYAPI_INSTALL_DIR when it points at an existing path."""

    def probe() -> Path | None:
        if value and Path(value).exists():
            return Path(value)
        return None

    return probe


def well_known_probe(names: Iterable[str], home: Path | None = None) -> Probe:
    """Look for a project checkout in conventional directories under home."""

    def probe() -> Path | None:
        base = home or user_home()
        for name in names:
            candidate = base / name
            if candidate.is_dir() and _is_project(candidate):
                return candidate
        return None

    return probe


def executable_probe(executable: str | None = None) -> Probe:
    """
    Follow the symlink of the running executable.

    The installer links bin/<cli> into PATH, so the project directory sits
    two levels above the resolved target.
    """

    def probe() -> Path | None:
        raw = executable if executable is not None else (sys.argv[0] if sys.argv else "")
        if not raw:
            return None
        path = Path(raw)
        if not path.is_symlink():
            return None
        candidate = Path(os.path.realpath(path)).parent.parent
        if _is_project(candidate):
            return candidate
        return None

    return probe


def default_probes(env_install_dir: str | None, well_known_dirs: Iterable[str]) -> list[Probe]:
    """Standard probe order."""
    return [
        recorded_path_probe(),
        env_probe(env_install_dir),
        well_known_probe(list(well_known_dirs)),
        executable_probe(),
    ]


def find_install_dir(probes: Sequence[Probe]) -> Path:
    """
    Run probes in order and return the first directory found.

    Probes that fail with an OS error are skipped.

    Raises:
        InstallDirNotFoundError: When no probe finds a directory
    """
    for probe in probes:
        try:
            found = probe()
        except OSError as e:
            log_with_source(logger, "update", "debug", "Install dir probe failed", error=str(e))
            continue
        if found is not None:
            log_with_source(logger, "update", "debug", "Install dir found", path=str(found))
            return found

    raise InstallDirNotFoundError()
