"""
Core Utilities.

Shared utility functions used across the CLI.
"""

from datetime import datetime, timezone

ONE_HOUR_MS = 60 * 60 * 1000


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime | None = None) -> int:
    """
    Milliseconds since the Unix epoch, for ``moment`` or now.

    This is the unit stored under lastUpdateCheck in the config store.
    """
    return int((moment or utc_now()).timestamp() * 1000)
