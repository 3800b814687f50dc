"""Shared fakes and fixtures."""

import asyncio
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import httpx
import pytest

from kitchenbell.db.kv_store import MemoryKeyValueStore
from kitchenbell.db.models import PendingSnapshot, Preferences
from kitchenbell.engine.lifecycle import ReminderEngine
from kitchenbell.engine.poller import SnapshotPoller

UTC = ZoneInfo("UTC")


class FakeTimer:
    def __init__(self, fire_at, callback):
        self.fire_at = fire_at
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self):
        return not (self.cancelled or self.fired)

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Clock whose time only moves when a test calls ``advance``."""

    def __init__(self, now):
        self.current = now
        self.timers = []

    def now(self):
        return self.current

    def call_later(self, delay, callback):
        timer = FakeTimer(self.current + timedelta(seconds=max(delay, 0.0)), callback)
        self.timers.append(timer)
        return timer

    @property
    def active_timers(self):
        return [t for t in self.timers if t.active]

    async def advance(self, **kwargs):
        """Move time forward, firing due timers in order."""
        target = self.current + timedelta(**kwargs)
        while True:
            due = [t for t in self.timers if t.active and t.fire_at <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.fire_at)
            self.current = max(self.current, timer.fire_at)
            timer.fired = True
            await timer.callback()
        self.current = target


class FakeHost:
    """Alert host recording what it was asked to show."""

    def __init__(self, supported=True, permission="granted", answer="granted"):
        self.supported = supported
        self._permission = permission
        self.answer = answer
        self.requests = 0
        self.alerts = []
        self.failures = 0

    def is_supported(self):
        return self.supported

    async def permission(self):
        return self._permission

    async def request_permission(self):
        self.requests += 1
        self._permission = self.answer
        return self.answer

    async def notify(self, alert):
        if self.failures:
            self.failures -= 1
            raise RuntimeError("platform refused to show the alert")
        self.alerts.append(alert)

    @property
    def tags(self):
        return [alert.tag for alert in self.alerts]


class BlockingHost(FakeHost):
    """Host whose deliveries wait until the test calls ``release``."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.delivering = asyncio.Event()
        self.released = asyncio.Event()

    def release(self):
        self.released.set()

    async def notify(self, alert):
        self.delivering.set()
        await self.released.wait()
        await super().notify(alert)


class FakeSource:
    """Stands in for the kitchen API."""

    def __init__(self, preferences=None, pending=None):
        self.preferences = dict(preferences or {})
        self.pending = dict(pending or {})
        self.fail = False
        self.fetches = 0

    async def get_preferences(self):
        if self.fail:
            raise httpx.ConnectError("kitchen API unreachable")
        return Preferences.from_dict(self.preferences)

    async def get_pending(self):
        self.fetches += 1
        if self.fail:
            raise httpx.ConnectError("kitchen API unreachable")
        return PendingSnapshot.from_dict(self.pending)


def at(hour, minute=0, second=0, day=15):
    return datetime(2026, 3, day, hour, minute, second, tzinfo=UTC)


@pytest.fixture
def clock():
    return FakeClock(at(8, 52))


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def source():
    return FakeSource(preferences={"enabled": True})


@pytest.fixture
def engine(source, host, store, clock):
    return ReminderEngine(
        poller=SnapshotPoller(source),
        host=host,
        store=store,
        clock=clock,
        poll_interval=180,
    )
