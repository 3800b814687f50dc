"""Data models."""

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from kitchenbell.utils.constants import (
    DEFAULT_PREFERENCES,
    MAX_PREFERENCE_MINUTES,
    MIN_PREFERENCE_MINUTES,
)
from kitchenbell.utils.time_utils import is_valid_hhmm

logger = logging.getLogger(__name__)


Permission = Literal["granted", "denied", "default"]


class SnapshotError(ValueError):
    """A collaborator document could not be understood."""


def _require_mapping(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise SnapshotError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _require_list(data: dict, key: str) -> list:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise SnapshotError(f"{key} must be a list")
    return value


@dataclass(frozen=True)
class Preferences:
    """Notification preferences (read-only copy of the server's document)."""

    enabled: bool = False
    prep_reminders: bool = True
    prep_lead_minutes: int = 15
    task_due_reminders: bool = True
    task_lead_minutes: int = 10
    overdue_alerts: bool = True
    overdue_interval_minutes: int = 30
    daily_briefing: bool = True
    daily_briefing_time: str = "08:00"  # HH:MM format
    specials_expiring: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> "Preferences":
        """Build preferences from the server payload.

        Missing keys take the defaults. Out-of-range minutes and malformed
        times are replaced by their defaults rather than rejected.
        """
        data = _require_mapping(data, "preferences")
        values = dict(DEFAULT_PREFERENCES)

        for key, default in DEFAULT_PREFERENCES.items():
            if key not in data or data[key] is None:
                continue
            value = data[key]

            if isinstance(default, bool):
                values[key] = bool(value)
            elif isinstance(default, int):
                if (
                    isinstance(value, bool)
                    or not isinstance(value, int)
                    or not MIN_PREFERENCE_MINUTES <= value <= MAX_PREFERENCE_MINUTES
                ):
                    logger.warning(f"Ignoring invalid {key}={value!r}, using {default}")
                    continue
                values[key] = value
            else:
                if not is_valid_hhmm(value):
                    logger.warning(f"Ignoring invalid {key}={value!r}, using {default}")
                    continue
                values[key] = value

        return cls(**values)


@dataclass(frozen=True)
class TodaySummary:
    """Today's task totals."""

    total: int = 0
    completed: int = 0

    @property
    def remaining(self) -> int:
        return self.total - self.completed


@dataclass(frozen=True)
class OverdueTask:
    id: Any
    title: str


@dataclass(frozen=True)
class UpcomingTask:
    """A task due later today."""

    id: Any
    title: str
    due_time: str | None = None  # HH:MM format
    menu_name: str | None = None


@dataclass(frozen=True)
class DayPhase:
    """A named phase of the kitchen day (prep, service, close...)."""

    id: Any
    name: str
    start: str | None = None  # HH:MM format


@dataclass(frozen=True)
class ExpiringSpecial:
    id: Any
    dish_name: str
    week_end: str  # YYYY-MM-DD


@dataclass(frozen=True)
class PendingSnapshot:
    """Point-in-time view of everything that may need a reminder."""

    today_summary: TodaySummary = field(default_factory=TodaySummary)
    overdue: tuple[OverdueTask, ...] = ()
    upcoming_today: tuple[UpcomingTask, ...] = ()
    phases: tuple[DayPhase, ...] = ()
    expiring_specials: tuple[ExpiringSpecial, ...] = ()
    date: str | None = None
    now: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "PendingSnapshot":
        """Build a snapshot from the server payload."""
        data = _require_mapping(data, "pending snapshot")

        try:
            summary = data.get("today_summary") or {}
            today_summary = TodaySummary(
                total=int(summary.get("total") or 0),
                completed=int(summary.get("completed") or 0),
            )

            overdue = tuple(
                OverdueTask(id=item["id"], title=item.get("title") or "")
                for item in _require_list(data, "overdue")
            )
            upcoming = tuple(
                UpcomingTask(
                    id=item["id"],
                    title=item.get("title") or "",
                    due_time=item.get("due_time"),
                    menu_name=item.get("menu_name"),
                )
                for item in _require_list(data, "upcoming_today")
            )
            phases = tuple(
                DayPhase(
                    id=item["id"],
                    name=item.get("name") or "",
                    start=item.get("start"),
                )
                for item in _require_list(data, "phases")
            )
            specials = tuple(
                ExpiringSpecial(
                    id=item["id"],
                    dish_name=item.get("dish_name") or "",
                    week_end=item.get("week_end") or "",
                )
                for item in _require_list(data, "expiring_specials")
            )
        except SnapshotError:
            raise
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise SnapshotError(f"Malformed pending snapshot: {e!r}") from e

        return cls(
            today_summary=today_summary,
            overdue=overdue,
            upcoming_today=upcoming,
            phases=phases,
            expiring_specials=specials,
            date=data.get("date"),
            now=data.get("now"),
        )


@dataclass(frozen=True)
class Alert:
    """A rendered reminder handed to the alert host."""

    title: str
    body: str
    tag: str  # dedup tag; hosts may replace an earlier alert with the same tag
    navigation_target: str
