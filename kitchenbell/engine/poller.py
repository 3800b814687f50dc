"""Snapshot poller - fetches preferences and pending items each cycle."""

import logging
from typing import Protocol

import httpx

from kitchenbell.db.models import PendingSnapshot, Preferences, SnapshotError

logger = logging.getLogger(__name__)


class NotificationsSource(Protocol):
    async def get_preferences(self) -> Preferences: ...

    async def get_pending(self) -> PendingSnapshot: ...


class SnapshotPoller:
    """Fetches both documents for one poll cycle.

    There is no retry or backoff here: a failed cycle is simply skipped and
    the next tick of the fixed cadence tries again.
    """

    def __init__(self, source: NotificationsSource):
        self.source = source

    async def poll(self) -> tuple[Preferences, PendingSnapshot] | None:
        """Return (preferences, snapshot), or None if either fetch failed."""
        try:
            preferences = await self.source.get_preferences()
            snapshot = await self.source.get_pending()
        except (httpx.HTTPError, SnapshotError) as e:
            logger.warning(f"Poll skipped, could not fetch notification data: {e}")
            return None

        logger.debug(
            f"Polled snapshot: {len(snapshot.overdue)} overdue, "
            f"{len(snapshot.upcoming_today)} upcoming, "
            f"{len(snapshot.phases)} phases, "
            f"{len(snapshot.expiring_specials)} expiring specials"
        )
        return preferences, snapshot
