"""Capability gate: may this session deliver alerts at all?"""

import logging
from typing import Protocol

from kitchenbell.db.models import Alert, Permission, Preferences

logger = logging.getLogger(__name__)


class AlertHost(Protocol):
    """Host platform able to show alerts to the user."""

    def is_supported(self) -> bool: ...

    async def permission(self) -> Permission: ...

    async def request_permission(self) -> Permission: ...

    async def notify(self, alert: Alert) -> None: ...


class CapabilityGate:
    """Checks the host capability and asks for permission when undecided."""

    def __init__(self, host: AlertHost):
        self.host = host

    def is_supported(self) -> bool:
        return self.host.is_supported()

    async def try_enable(self, preferences: Preferences) -> AlertHost | None:
        """Return the host handle if alerts can be delivered, else None.

        Prompts the user only while the permission is still ``default``;
        a ``denied`` host is never prompted again.
        """
        if not self.is_supported():
            logger.info("Alert host not available, reminders disabled")
            return None

        if not preferences.enabled:
            logger.info("Notifications disabled in preferences")
            return None

        permission = await self.host.permission()
        if permission == "default":
            logger.info("Requesting permission to send reminders")
            permission = await self.host.request_permission()

        if permission != "granted":
            logger.info(f"Reminder permission is {permission!r}, reminders disabled")
            return None

        return self.host
