"""
Background Update Check.

Runs at most once per check interval (24h by default). The timestamp is
written before the network call so that a failing check is not retried on
every invocation. All errors are swallowed: the background check must never
change the outcome of the command the user actually ran.

Instead of printing directly, the check returns an UpdateNotice that the
CLI prints after the command's own output.
"""

from dataclasses import dataclass

from gisph.core.logging import get_logger, log_with_source
from gisph.core.store import AUTO_UPDATE_DISABLED_KEY, LAST_UPDATE_CHECK_KEY, ConfigStore
from gisph.core.utils import ONE_HOUR_MS, epoch_millis
from gisph.update.checker import UpdateChecker

logger = get_logger(__name__)


@dataclass(frozen=True)
class UpdateNotice:
    """A newer version was found and should be announced."""

    current_version: str
    latest_version: str


def disable_auto_update_check(store: ConfigStore) -> None:
    store.set(AUTO_UPDATE_DISABLED_KEY, True)


def enable_auto_update_check(store: ConfigStore) -> None:
    store.set(AUTO_UPDATE_DISABLED_KEY, False)


def is_auto_update_disabled(store: ConfigStore) -> bool:
    return store.get(AUTO_UPDATE_DISABLED_KEY) is True


def is_check_due(store: ConfigStore, now: int, interval_hours: int = 24) -> bool:
    """True when no check has run within the interval."""
    last_check = store.get(LAST_UPDATE_CHECK_KEY)
    if not isinstance(last_check, (int, float)) or isinstance(last_check, bool):
        return True
    return now - last_check >= interval_hours * ONE_HOUR_MS


async def auto_check_for_updates(
    store: ConfigStore,
    checker: UpdateChecker,
    interval_hours: int = 24,
    now: int | None = None,
) -> UpdateNotice | None:
    """
    Check for a newer version if the last check is older than the interval.

    Returns:
        UpdateNotice when a newer version exists, otherwise None. Never raises.
    """
    try:
        timestamp = now if now is not None else epoch_millis()
        if not is_check_due(store, timestamp, interval_hours):
            return None

        store.set(LAST_UPDATE_CHECK_KEY, timestamp)

        result = await checker.check_for_updates()
        if result.update_available and result.latest_version:
            return UpdateNotice(
                current_version=result.current_version,
                latest_version=result.latest_version,
            )
    except Exception as e:
        log_with_source(logger, "update", "debug", "Background update check failed", error=str(e))
    return None
