"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Every command catches ApplicationError at its boundary, prints the
message, and exits with status 1.
"""

from pathlib import Path


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ApiError(ApplicationError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.detail = message
        super().__init__(f"API Error ({status_code}): {message}", code="API_ERROR")


class NetworkError(ApplicationError):
    """Raised when no response was received from the API."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url
        super().__init__(f"Network Error: Unable to reach API at {base_url}", code="NET_UNREACHABLE")


class RequestError(ApplicationError):
    """Raised when a request could not be built or sent."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Request Error: {message}", code="REQ_INVALID")


class ConfigStoreError(ApplicationError):
    """Raised when the per-user config file cannot be read."""

    def __init__(self, message: str = "Configuration file is unreadable") -> None:
        super().__init__(message, code="CFG_UNREADABLE")


class UpdateCheckError(ApplicationError):
    """Raised when release metadata cannot be fetched or parsed."""

    def __init__(self, message: str = "Failed to check for updates") -> None:
        super().__init__(message, code="UPD_CHECK_FAILED")


class InstallDirNotFoundError(ApplicationError):
    """Raised when no installation directory can be located."""

    def __init__(self, message: str = "Could not determine installation directory") -> None:
        super().__init__(message, code="UPD_INSTALL_DIR_NOT_FOUND")


class UpdateError(ApplicationError):
    """
    Raised when applying an update fails.

    backup_path is set when a backup of the previous installation still
    exists on disk and must be restored by hand.
    """

    def __init__(self, message: str = "Update failed", backup_path: Path | None = None) -> None:
        self.backup_path = backup_path
        super().__init__(message, code="UPD_APPLY_FAILED")
