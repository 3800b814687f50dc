"""Constants and default values."""

# Default notification preferences (mirrors the server's defaults)
DEFAULT_PREFERENCES = {
    "enabled": False,
    "prep_reminders": True,
    "prep_lead_minutes": 15,
    "task_due_reminders": True,
    "task_lead_minutes": 10,
    "overdue_alerts": True,
    "overdue_interval_minutes": 30,
    "daily_briefing": True,
    "daily_briefing_time": "08:00",
    "specials_expiring": True,
}

# Limits for the minute-valued preferences
MIN_PREFERENCE_MINUTES = 1
MAX_PREFERENCE_MINUTES = 120

# Reminder categories, in the order they are evaluated each poll cycle
CATEGORY_BRIEFING = "briefing"
CATEGORY_OVERDUE = "overdue"
CATEGORY_TASK = "task"
CATEGORY_PHASE = "phase"
CATEGORY_SPECIAL = "special"

# Navigation targets opened when an alert is clicked
NAV_TODAY = "#/today"
NAV_TODOS = "#/todos"
NAV_SPECIALS = "#/specials"

# Dedup markers live under this key prefix in the key-value store
STORAGE_PREFIX = "nt_shown_"
PERMISSION_KEY = "nt_permission"

# Poll cadence in seconds
DEFAULT_POLL_INTERVAL = 180

# Default timezone (decides the local calendar day for dedup markers)
DEFAULT_TIMEZONE = "UTC"
