"""Time-of-day helpers."""

import re
from datetime import datetime, time

_HHMM = re.compile(r"^\d{2}:\d{2}$")


def is_valid_hhmm(value: object) -> bool:
    """Check that a value is an ``HH:MM`` string naming a real clock time."""
    if not isinstance(value, str) or not _HHMM.match(value):
        return False
    try:
        time.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_hhmm(value: str) -> time:
    """Parse an ``HH:MM`` string (24-hour) into a time."""
    if not is_valid_hhmm(value):
        raise ValueError(f"Invalid time of day: {value!r}")
    return time.fromisoformat(value)


def at_time_today(now: datetime, hhmm: str) -> datetime:
    """Return today's datetime for the given clock time, in now's timezone.

    Examples:
        now=2026-03-15 08:52 (Europe/Paris), "09:00" -> 2026-03-15 09:00 (Europe/Paris)
    """
    return datetime.combine(now.date(), parse_hhmm(hhmm), tzinfo=now.tzinfo)


def seconds_between(start: datetime, end: datetime) -> float:
    """Elapsed seconds from ``start`` to ``end``.

    Uses POSIX timestamps: subtracting two datetimes that share a tzinfo
    gives wall-clock time, which is off by the DST shift on transition days.
    """
    return end.timestamp() - start.timestamp()


def seconds_until_reminder(
    now: datetime, event_at: datetime, lead_minutes: int
) -> float | None:
    """Seconds to wait before reminding about an event.

    The reminder window is ``[event_at - lead, event_at)`` in elapsed time:
    - before the window: the remaining delay until it opens
    - inside the window: 0 (remind now)
    - at or after the event: None (too late to remind)
    """
    until_event = seconds_between(now, event_at)
    if until_event <= 0:
        return None

    return max(until_event - lead_minutes * 60, 0.0)


def local_day(now: datetime) -> str:
    """Calendar day of ``now`` as YYYY-MM-DD."""
    return now.date().isoformat()
