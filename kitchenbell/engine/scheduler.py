"""Reminder scheduler - turns a snapshot into immediate alerts and timers."""

import logging
from datetime import datetime
from typing import Awaitable, Callable, List

from kitchenbell.bot.formatters import (
    briefing_body,
    overdue_body,
    phase_body,
    special_body,
    task_due_body,
)
from kitchenbell.db.models import PendingSnapshot, Preferences
from kitchenbell.engine.clock import Clock, TimerHandle
from kitchenbell.engine.dedup import DedupStore
from kitchenbell.engine.dispatcher import AlertDispatcher
from kitchenbell.utils.constants import (
    CATEGORY_BRIEFING,
    CATEGORY_OVERDUE,
    CATEGORY_PHASE,
    CATEGORY_SPECIAL,
    CATEGORY_TASK,
    NAV_SPECIALS,
    NAV_TODAY,
    NAV_TODOS,
)
from kitchenbell.utils.time_utils import (
    at_time_today,
    seconds_between,
    seconds_until_reminder,
)

logger = logging.getLogger(__name__)


def overdue_bucket(now: datetime, interval_minutes: int) -> int:
    """Index of the overdue-alert interval that ``now`` falls in.

    A new bucket starts every ``interval_minutes`` since the epoch, which
    makes the overdue alert eligible again once per interval.
    """
    return int(now.timestamp() // (interval_minutes * 60))


class ReminderScheduler:
    """Owns the timer set for one engine run.

    ``apply`` tears down every timer from the previous cycle and rebuilds
    the set from the new snapshot. Correctness rests on the dedup markers
    checked by the dispatcher, not on timers surviving between cycles.
    """

    def __init__(self, dispatcher: AlertDispatcher, dedup: DedupStore, clock: Clock):
        self.dispatcher = dispatcher
        self.dedup = dedup
        self.clock = clock
        self.timers: List[TimerHandle] = []
        self.closed = False

    @property
    def pending(self) -> int:
        """Number of timers that have not fired or been cancelled."""
        return sum(1 for timer in self.timers if timer.active)

    def cancel_all(self) -> None:
        for timer in self.timers:
            timer.cancel()
        self.timers = []

    def close(self) -> None:
        """Cancel every timer and refuse any further scheduling or dispatch.

        An alert already being delivered finishes and commits its marker;
        anything after it in the same cycle is dropped.
        """
        self.closed = True
        self.cancel_all()

    async def _show(self, *args) -> bool:
        if self.closed:
            return False
        return await self.dispatcher.show(*args)

    def _schedule(self, delay: float, fire: Callable[[], Awaitable[bool]]) -> None:
        if self.closed:
            return

        async def callback() -> None:
            await fire()

        self.timers.append(self.clock.call_later(delay, callback))

    async def apply(self, preferences: Preferences, snapshot: PendingSnapshot) -> None:
        """Rebuild the timer set and fire whatever is already due."""
        self.cancel_all()
        now = self.clock.now()

        steps = (
            lambda: self._schedule_briefing(preferences, snapshot, now),
            lambda: self._schedule_overdue(preferences, snapshot, now),
            lambda: self._schedule_task_due(preferences, snapshot, now),
            lambda: self._schedule_phases(preferences, snapshot, now),
            lambda: self._schedule_specials(preferences, snapshot),
        )
        for step in steps:
            # close() may run while a dispatch is awaited
            if self.closed:
                return
            await step()

        if self.timers:
            logger.debug(f"{len(self.timers)} reminder timers scheduled")

    async def _schedule_briefing(
        self, preferences: Preferences, snapshot: PendingSnapshot, now: datetime
    ) -> None:
        summary = snapshot.today_summary
        if not preferences.daily_briefing or summary.total <= 0:
            return

        # Only one briefing per day, so skip the timer once it has been shown
        if await self.dedup.was_shown(CATEGORY_BRIEFING):
            return

        briefing_at = at_time_today(now, preferences.daily_briefing_time)
        delay = seconds_between(now, briefing_at)

        if delay <= 0:
            await self._show(
                CATEGORY_BRIEFING, None, "Daily Briefing", briefing_body(summary), NAV_TODAY
            )
        else:
            body = briefing_body(summary, scheduled=True)
            self._schedule(
                delay,
                lambda: self._show(
                    CATEGORY_BRIEFING, None, "Daily Briefing", body, NAV_TODAY
                ),
            )

    async def _schedule_overdue(
        self, preferences: Preferences, snapshot: PendingSnapshot, now: datetime
    ) -> None:
        if not preferences.overdue_alerts or not snapshot.overdue:
            return

        bucket = overdue_bucket(now, preferences.overdue_interval_minutes)
        await self._show(
            CATEGORY_OVERDUE, bucket, "Overdue Tasks", overdue_body(snapshot.overdue), NAV_TODOS
        )

    async def _schedule_task_due(
        self, preferences: Preferences, snapshot: PendingSnapshot, now: datetime
    ) -> None:
        if not preferences.task_due_reminders:
            return

        lead = preferences.task_lead_minutes
        for task in snapshot.upcoming_today:
            if not task.due_time:
                continue
            try:
                due_at = at_time_today(now, task.due_time)
            except ValueError as e:
                logger.warning(f"Skipping task {task.id}: {e}")
                continue

            delay = seconds_until_reminder(now, due_at, lead)
            if delay is None:
                continue
            if delay == 0:
                await self._show(
                    CATEGORY_TASK, task.id, "Task Due Soon", task_due_body(task, lead), NAV_TODAY
                )
            else:
                body = task_due_body(task, lead, scheduled=True)
                self._schedule(
                    delay,
                    lambda task_id=task.id, body=body: self._show(
                        CATEGORY_TASK, task_id, "Task Due Soon", body, NAV_TODAY
                    ),
                )

    async def _schedule_phases(
        self, preferences: Preferences, snapshot: PendingSnapshot, now: datetime
    ) -> None:
        if not preferences.prep_reminders:
            return

        lead = preferences.prep_lead_minutes
        for phase in snapshot.phases:
            if not phase.start:
                continue
            try:
                start_at = at_time_today(now, phase.start)
            except ValueError as e:
                logger.warning(f"Skipping phase {phase.id}: {e}")
                continue

            delay = seconds_until_reminder(now, start_at, lead)
            if delay is None:
                continue
            if delay == 0:
                await self._show(
                    CATEGORY_PHASE, phase.id, "Phase Starting Soon", phase_body(phase, lead), NAV_TODAY
                )
            else:
                body = phase_body(phase, lead, scheduled=True)
                self._schedule(
                    delay,
                    lambda phase_id=phase.id, body=body: self._show(
                        CATEGORY_PHASE, phase_id, "Phase Starting Soon", body, NAV_TODAY
                    ),
                )

    async def _schedule_specials(
        self, preferences: Preferences, snapshot: PendingSnapshot
    ) -> None:
        if not preferences.specials_expiring:
            return

        for special in snapshot.expiring_specials:
            await self._show(
                CATEGORY_SPECIAL, special.id, "Special Expiring", special_body(special), NAV_SPECIALS
            )
