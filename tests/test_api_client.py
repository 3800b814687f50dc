"""Tests for the kitchen API client and the snapshot poller."""

import httpx
import pytest

from kitchenbell.api.client import NotificationsClient
from kitchenbell.db.models import SnapshotError
from kitchenbell.engine.poller import SnapshotPoller

PREFERENCES = {
    "enabled": True,
    "daily_briefing": True,
    "daily_briefing_time": "07:30",
    "prep_reminders": True,
    "prep_lead_minutes": 20,
    "task_due_reminders": True,
    "task_lead_minutes": 5,
    "overdue_alerts": True,
    "overdue_interval_minutes": 30,
    "specials_expiring": False,
}

PENDING = {
    "date": "2026-03-15",
    "now": "08:52",
    "today_summary": {"total": 3, "completed": 1},
    "overdue": [],
    "upcoming_today": [{"id": 7, "title": "Braise short ribs", "due_time": "09:00"}],
    "phases": [],
    "expiring_specials": [],
}


def make_client(handler, token=""):
    return NotificationsClient(
        "https://kitchen.example/", token=token, transport=httpx.MockTransport(handler)
    )


def serve(preferences=PREFERENCES, pending=PENDING, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.path == "/api/notifications/preferences":
            return httpx.Response(200, json=preferences)
        if request.url.path == "/api/notifications/pending":
            return httpx.Response(200, json=pending)
        return httpx.Response(404, json={"error": "not found"})

    return handler


@pytest.mark.asyncio
async def test_get_preferences():
    seen = []
    client = make_client(serve(seen=seen), token="secret")

    prefs = await client.get_preferences()

    assert prefs.enabled is True
    assert prefs.daily_briefing_time == "07:30"
    assert prefs.task_lead_minutes == 5
    assert prefs.specials_expiring is False
    assert str(seen[0].url) == "https://kitchen.example/api/notifications/preferences"
    assert seen[0].headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_get_pending():
    client = make_client(serve())

    snapshot = await client.get_pending()

    assert snapshot.today_summary.total == 3
    assert snapshot.upcoming_today[0].due_time == "09:00"


@pytest.mark.asyncio
async def test_no_token_means_no_auth_header():
    seen = []
    client = make_client(serve(seen=seen))

    await client.get_preferences()

    assert "Authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_invalid_json_raises_snapshot_error():
    client = make_client(lambda request: httpx.Response(200, text="<html>login</html>"))

    with pytest.raises(SnapshotError):
        await client.get_pending()


@pytest.mark.asyncio
async def test_poll_returns_both_documents():
    poller = SnapshotPoller(make_client(serve()))

    result = await poller.poll()

    assert result is not None
    prefs, snapshot = result
    assert prefs.prep_lead_minutes == 20
    assert snapshot.date == "2026-03-15"


@pytest.mark.asyncio
async def test_poll_skips_on_server_error():
    def handler(request):
        if request.url.path.endswith("/pending"):
            return httpx.Response(500, json={"error": "boom"})
        return httpx.Response(200, json=PREFERENCES)

    poller = SnapshotPoller(make_client(handler))

    assert await poller.poll() is None


@pytest.mark.asyncio
async def test_poll_skips_on_connection_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    poller = SnapshotPoller(make_client(handler))

    assert await poller.poll() is None


@pytest.mark.asyncio
async def test_poll_skips_on_malformed_snapshot():
    poller = SnapshotPoller(make_client(serve(pending={"overdue": "nope"})))

    assert await poller.poll() is None
