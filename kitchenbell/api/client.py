"""HTTP client for the notification endpoints of the kitchen API."""

import logging
from typing import Any, Dict

import httpx

from kitchenbell.db.models import PendingSnapshot, Preferences, SnapshotError

logger = logging.getLogger(__name__)

PREFERENCES_PATH = "/api/notifications/preferences"
PENDING_PATH = "/api/notifications/pending"


class NotificationsClient:
    """Fetches notification preferences and the pending-items snapshot."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.headers: Dict[str, str] = {"Accept": "application/json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    async def _get_json(self, path: str) -> Any:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            response = await client.get(path)
            response.raise_for_status()
            try:
                return response.json()
            except ValueError as e:
                raise SnapshotError(f"{path} returned invalid JSON") from e

    async def get_preferences(self) -> Preferences:
        data = await self._get_json(PREFERENCES_PATH)
        return Preferences.from_dict(data)

    async def get_pending(self) -> PendingSnapshot:
        data = await self._get_json(PENDING_PATH)
        return PendingSnapshot.from_dict(data)
