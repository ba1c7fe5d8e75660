"""
Configuration Schemas.

Pydantic models defining the expected structure of each bundled YAML file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in command code.

Each top-level class corresponds to one file in gisph/config/settings/:
    ApplicationSchema  → application.yaml
    LoggingSchema      → logging.yaml
"""

from pydantic import BaseModel, ConfigDict


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ApiSchema(_StrictBase):
    default_url: str
    prefix: str


class TimeoutsSchema(_StrictBase):
    api: float
    update_check: float
    download: float


class UpdateSchema(_StrictBase):
    default_repo: str
    branch: str
    release_url: str
    raw_version_url: str
    archive_url: str
    check_interval_hours: int
    install_script_url: str
    well_known_dirs: list[str]


class ApplicationSchema(_StrictBase):
    name: str
    description: str
    api: ApiSchema
    timeouts: TimeoutsSchema
    update: UpdateSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema
