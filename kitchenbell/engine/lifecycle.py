"""Reminder engine - start / stop / restart and the poll cadence."""

import logging
from enum import Enum

from kitchenbell.db.kv_store import KeyValueStore
from kitchenbell.db.models import PendingSnapshot, Preferences
from kitchenbell.engine.capability import AlertHost, CapabilityGate
from kitchenbell.engine.clock import Clock, TimerHandle
from kitchenbell.engine.dedup import DedupStore
from kitchenbell.engine.dispatcher import AlertDispatcher
from kitchenbell.engine.poller import SnapshotPoller
from kitchenbell.engine.scheduler import ReminderScheduler
from kitchenbell.utils.constants import DEFAULT_POLL_INTERVAL

logger = logging.getLogger(__name__)


class EngineState(Enum):
    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


class ReminderEngine:
    """Local reminder engine for one session.

    Lifecycle:
    1. ``start()`` checks the host capability, fetches the first snapshot,
       asks for permission if needed and runs the first poll cycle
    2. every ``poll_interval`` seconds a new cycle re-fetches both documents
       and rebuilds the scheduler's timers
    3. ``stop()`` cancels the poll cadence and every outstanding timer

    Dedup markers survive ``stop()`` so a restart never repeats an alert.
    """

    def __init__(
        self,
        poller: SnapshotPoller,
        host: AlertHost,
        store: KeyValueStore,
        clock: Clock,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.poller = poller
        self.gate = CapabilityGate(host)
        self.dedup = DedupStore(store, clock)
        self.clock = clock
        self.poll_interval = poll_interval

        self.state = EngineState.STOPPED
        self.preferences: Preferences | None = None
        self._scheduler: ReminderScheduler | None = None
        self._poll_timer: TimerHandle | None = None
        self._generation = 0

    @property
    def running(self) -> bool:
        return self.state is EngineState.RUNNING

    @property
    def pending_timers(self) -> int:
        """Outstanding reminder timers (the poll cadence is not counted)."""
        return self._scheduler.pending if self._scheduler else 0

    async def start(self) -> None:
        """Start the engine. No-op unless currently stopped."""
        if self.state is not EngineState.STOPPED:
            return

        self.state = EngineState.STARTING
        generation = self._generation

        # Checked before fetching so an unsupported host never hits the API
        if not self.gate.is_supported():
            logger.info("Alert host unsupported, reminder engine not started")
            self.state = EngineState.STOPPED
            return

        result = await self.poller.poll()
        if generation != self._generation:
            # stop() was called while fetching
            return
        if result is None:
            logger.warning("Could not load notification preferences, engine not started")
            self.state = EngineState.STOPPED
            return

        preferences, snapshot = result
        host = await self.gate.try_enable(preferences)
        if generation != self._generation:
            return
        if host is None:
            self.state = EngineState.STOPPED
            return

        self._scheduler = ReminderScheduler(AlertDispatcher(self.dedup, host), self.dedup, self.clock)
        self.state = EngineState.RUNNING
        logger.info(f"Reminder engine started (poll every {self.poll_interval}s)")

        self._schedule_poll()
        await self._apply(preferences, snapshot)

    def stop(self) -> None:
        """Cancel the poll cadence and every outstanding timer."""
        self._generation += 1

        if self._poll_timer:
            self._poll_timer.cancel()
            self._poll_timer = None

        if self._scheduler:
            self._scheduler.close()
            self._scheduler = None

        if self.state is not EngineState.STOPPED:
            logger.info("Reminder engine stopped")
        self.state = EngineState.STOPPED
        self.preferences = None

    async def restart(self) -> None:
        """Stop, then start again with freshly fetched preferences."""
        self.stop()
        await self.start()

    async def run_cycle(self) -> None:
        """Run one poll cycle: fetch, sweep stale markers, reschedule."""
        if not self.running:
            return

        generation = self._generation
        result = await self.poller.poll()
        if result is None or generation != self._generation:
            return

        await self._apply(*result)

    def _schedule_poll(self) -> None:
        self._poll_timer = self.clock.call_later(self.poll_interval, self._poll_tick)

    async def _poll_tick(self) -> None:
        if not self.running:
            return

        # Next tick is booked first so a slow cycle does not shift the cadence
        self._schedule_poll()

        try:
            await self.run_cycle()
        except Exception as e:
            logger.error(f"Poll cycle error: {e}")

    async def _apply(self, preferences: Preferences, snapshot: PendingSnapshot) -> None:
        # Bound to this run; stop() closes it even if we are suspended below
        scheduler = self._scheduler
        if scheduler is None or scheduler.closed:
            return

        self.preferences = preferences
        await self.dedup.sweep_stale()
        if scheduler.closed:
            return

        if not preferences.enabled:
            logger.info("Notifications disabled in preferences, no reminders scheduled")
            scheduler.cancel_all()
            return

        await scheduler.apply(preferences, snapshot)
