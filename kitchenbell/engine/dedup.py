"""Per-day "already shown" markers for alerts."""

import logging

from kitchenbell.db.kv_store import KeyValueStore
from kitchenbell.engine.clock import Clock
from kitchenbell.utils.constants import STORAGE_PREFIX
from kitchenbell.utils.time_utils import local_day

logger = logging.getLogger(__name__)


def make_tag(category: str, identity: object | None = None) -> str:
    """Build the dedup tag for a category and optional item identity.

    Examples:
        ("briefing", None) -> "briefing"
        ("task", 42) -> "task_42"
    """
    if identity is None:
        return category
    return f"{category}_{identity}"


class DedupStore:
    """Markers keyed by (tag, local calendar day) in a key-value store.

    A marker for one day never suppresses the same tag on another day.
    Markers for past days are removed by ``sweep_stale``.
    """

    def __init__(self, store: KeyValueStore, clock: Clock):
        self.store = store
        self.clock = clock

    def marker_key(self, tag: str, day: str | None = None) -> str:
        if day is None:
            day = local_day(self.clock.now())
        return f"{STORAGE_PREFIX}{tag}_{day}"

    async def was_shown(self, tag: str) -> bool:
        return await self.store.get(self.marker_key(tag)) == "1"

    async def mark_shown(self, tag: str) -> None:
        await self.store.set(self.marker_key(tag), "1")

    async def sweep_stale(self) -> int:
        """Delete markers whose day is not today. Returns how many were removed."""
        today = local_day(self.clock.now())
        stale = [
            key
            for key in await self.store.list_keys(STORAGE_PREFIX)
            if not key.endswith(f"_{today}")
        ]

        for key in stale:
            await self.store.delete(key)

        if stale:
            logger.debug(f"Swept {len(stale)} stale dedup markers")
        return len(stale)
