"""Tests for preference and snapshot parsing."""

import pytest

from kitchenbell.db.models import PendingSnapshot, Preferences, SnapshotError


def test_preferences_defaults():
    """Empty document gives the server defaults."""
    prefs = Preferences.from_dict({})

    assert prefs.enabled is False
    assert prefs.prep_reminders is True
    assert prefs.prep_lead_minutes == 15
    assert prefs.task_lead_minutes == 10
    assert prefs.overdue_interval_minutes == 30
    assert prefs.daily_briefing_time == "08:00"
    assert prefs.specials_expiring is True


def test_preferences_merge():
    prefs = Preferences.from_dict(
        {"enabled": True, "prep_lead_minutes": 20, "daily_briefing_time": "07:30", "extra": 1}
    )

    assert prefs.enabled is True
    assert prefs.prep_lead_minutes == 20
    assert prefs.daily_briefing_time == "07:30"
    # Untouched keys keep their defaults
    assert prefs.task_lead_minutes == 10


def test_preferences_invalid_values_fall_back():
    prefs = Preferences.from_dict(
        {
            "prep_lead_minutes": 200,
            "task_lead_minutes": 0,
            "overdue_interval_minutes": "30",
            "daily_briefing_time": "8am",
        }
    )

    assert prefs.prep_lead_minutes == 15
    assert prefs.task_lead_minutes == 10
    assert prefs.overdue_interval_minutes == 30
    assert prefs.daily_briefing_time == "08:00"


def test_preferences_rejects_non_object():
    with pytest.raises(SnapshotError):
        Preferences.from_dict(["enabled"])


def test_snapshot_from_dict():
    snapshot = PendingSnapshot.from_dict(
        {
            "date": "2026-03-15",
            "now": "08:52",
            "today_summary": {"total": 8, "completed": 3},
            "overdue": [{"id": 1, "title": "Order fish", "priority": "high"}],
            "upcoming_today": [
                {"id": 7, "title": "Braise short ribs", "due_time": "09:00", "menu_name": "Dinner"},
                {"id": 8, "title": "Fold napkins", "due_time": None},
            ],
            "phases": [{"id": "prep", "name": "Prep", "start": "10:00"}],
            "expiring_specials": [{"id": 4, "dish_name": "Bouillabaisse", "week_end": "2026-03-16"}],
        }
    )

    assert snapshot.today_summary.remaining == 5
    assert snapshot.overdue[0].title == "Order fish"
    assert snapshot.upcoming_today[0].menu_name == "Dinner"
    assert snapshot.upcoming_today[1].due_time is None
    assert snapshot.phases[0].start == "10:00"
    assert snapshot.expiring_specials[0].dish_name == "Bouillabaisse"
    assert snapshot.date == "2026-03-15"


def test_snapshot_missing_sections_are_empty():
    snapshot = PendingSnapshot.from_dict({})

    assert snapshot.today_summary.total == 0
    assert snapshot.overdue == ()
    assert snapshot.phases == ()


def test_snapshot_malformed():
    with pytest.raises(SnapshotError):
        PendingSnapshot.from_dict({"overdue": [{"title": "no id"}]})

    with pytest.raises(SnapshotError):
        PendingSnapshot.from_dict({"phases": "prep"})
