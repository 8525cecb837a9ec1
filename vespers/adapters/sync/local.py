"""In-process data sync service.

Implements SyncServicePort by loading dashboard statistics through an
injected loader and keeping the last good snapshot. Failed loads are
counted so the diagnostics can report them on the next run.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from vespers.core.models import SyncStatus
from vespers.core.ports import SyncServicePort

logger = logging.getLogger(__name__)

StatsLoader = Callable[[], Awaitable[dict[str, Any]]]


class DataSyncService(SyncServicePort):
    """Dashboard statistics sync with status reporting.

    The service is active while it is started and has a statistics
    source. ``errors`` counts consecutive failed loads and resets on the
    next successful one.
    """

    def __init__(self, stats_loader: StatsLoader | None = None):
        """Initialize the sync service.

        Args:
            stats_loader: Async callable returning dashboard statistics.
                Without one, the service is inactive and
                get_dashboard_stats() raises.
        """
        self.stats_loader = stats_loader
        self._running = True
        self._errors = 0
        self.last_stats: dict[str, Any] | None = None
        self.last_synced_at: datetime | None = None

    def stop(self) -> None:
        """Mark the service stopped; later loads are refused."""
        if self._running:
            logger.info("Data sync service stopped")
        self._running = False

    def start(self) -> None:
        self._running = True

    def get_status(self) -> SyncStatus:
        return SyncStatus(
            is_active=self._running and self.stats_loader is not None,
            errors=self._errors,
        )

    async def get_dashboard_stats(self) -> dict[str, Any]:
        """Load dashboard statistics through the configured loader.

        Raises:
            RuntimeError: If the service is stopped, no loader is
                configured, or the loader returns a non-mapping payload.
            Exception: Whatever the loader raises.
        """
        if self.stats_loader is None:
            raise RuntimeError("No dashboard statistics source configured")
        if not self._running:
            raise RuntimeError("Data sync service is stopped")

        try:
            stats = await self.stats_loader()
            if not isinstance(stats, dict):
                raise RuntimeError(
                    f"Unexpected dashboard statistics payload: {type(stats).__name__}"
                )
        except Exception as e:
            self._errors += 1
            logger.warning(
                f"Dashboard statistics load failed ({self._errors} in a row): {e}"
            )
            raise

        self._errors = 0
        self.last_stats = stats
        self.last_synced_at = datetime.now(UTC)
        return stats
