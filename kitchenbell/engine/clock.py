"""Wall clock and fire-once timers on the asyncio event loop."""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Protocol
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Awaitable[None]]


class TimerHandle(Protocol):
    """A cancellable fire-once timer."""

    fire_at: datetime

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Clock(Protocol):
    """Source of the current local time and of timers."""

    def now(self) -> datetime: ...

    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle: ...


class ScheduledTimer:
    """Runs an async callback once after a delay.

    Cancelling before the delay elapses drops the callback. A callback that
    is already running is left to finish, so an alert being delivered still
    commits its dedup marker.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        delay: float,
        callback: TimerCallback,
        fire_at: datetime,
    ):
        self.fire_at = fire_at
        self._callback = callback
        self._task: asyncio.Task | None = None
        self._cancelled = False
        self._handle = loop.call_later(max(delay, 0.0), self._fire)

    def _fire(self) -> None:
        self._task = asyncio.ensure_future(self._run())

    async def _run(self) -> None:
        try:
            await self._callback()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Timer callback due at {self.fire_at} failed: {e}")

    @property
    def active(self) -> bool:
        """True until the timer is cancelled or its callback has finished."""
        if self._cancelled:
            return False
        return self._task is None or not self._task.done()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()


class AsyncioClock:
    """Real clock in a fixed timezone, scheduling on the running event loop."""

    def __init__(self, timezone: str = "UTC"):
        self.tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def call_later(self, delay: float, callback: TimerCallback) -> ScheduledTimer:
        loop = asyncio.get_running_loop()
        # Add elapsed time in UTC so fire_at is right across DST changes
        fire_at = (datetime.now(ZoneInfo("UTC")) + timedelta(seconds=max(delay, 0.0))).astimezone(self.tz)
        return ScheduledTimer(loop, delay, callback, fire_at)
