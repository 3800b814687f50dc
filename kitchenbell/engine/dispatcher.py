"""Dispatcher - shows one alert, at most once per tag per day."""

import logging

from kitchenbell.db.models import Alert
from kitchenbell.engine.capability import AlertHost
from kitchenbell.engine.dedup import DedupStore, make_tag

logger = logging.getLogger(__name__)


class AlertDispatcher:
    """Renders alerts through the host and commits their dedup markers."""

    def __init__(self, dedup: DedupStore, host: AlertHost):
        self.dedup = dedup
        self.host = host

    async def show(
        self,
        category: str,
        identity: object | None,
        title: str,
        body: str,
        navigation_target: str,
    ) -> bool:
        """Show an alert unless it was already shown today.

        The marker is checked here, at fire time, because a timer may have
        been created before another cycle showed the same alert. A failed
        delivery commits no marker, so the alert is retried next cycle.

        Returns:
            True if the alert was delivered
        """
        tag = make_tag(category, identity)

        if await self.dedup.was_shown(tag):
            logger.debug(f"Alert {tag} already shown today")
            return False

        alert = Alert(title=title, body=body, tag=tag, navigation_target=navigation_target)

        try:
            await self.host.notify(alert)
        except Exception as e:
            logger.error(f"Failed to deliver alert {tag}: {e}")
            return False

        await self.dedup.mark_shown(tag)
        logger.info(f"Alert shown: {tag} ({title})")
        return True
