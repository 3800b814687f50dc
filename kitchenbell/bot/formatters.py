"""Alert and message text formatters."""

from html import escape

from kitchenbell.db.models import (
    Alert,
    DayPhase,
    ExpiringSpecial,
    OverdueTask,
    TodaySummary,
    UpcomingTask,
)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def _menu_suffix(task: UpcomingTask) -> str:
    return f" ({task.menu_name})" if task.menu_name else ""


def briefing_body(summary: TodaySummary, scheduled: bool = False) -> str:
    """Body for the daily briefing.

    A briefing shown late (at or after the briefing time) also mentions how
    many tasks are already done; one fired on schedule does not.
    """
    text = f"You have {_plural(summary.remaining, 'task')} today"
    if scheduled:
        return f"{text}."
    return f"{text} ({summary.completed} already done)."


def overdue_body(overdue: tuple[OverdueTask, ...]) -> str:
    count = len(overdue)
    return (
        f"You have {_plural(count, 'overdue task')}. "
        f'The oldest: "{overdue[0].title}"'
    )


def task_due_body(task: UpcomingTask, lead_minutes: int, scheduled: bool = False) -> str:
    """Body for a task-due reminder.

    Examples:
        scheduled=False -> '"Braise short ribs" is due at 09:00 (Dinner)'
        scheduled=True  -> '"Braise short ribs" is due in 10 min (Dinner)'
    """
    if scheduled:
        return f'"{task.title}" is due in {lead_minutes} min{_menu_suffix(task)}'
    return f'"{task.title}" is due at {task.due_time}{_menu_suffix(task)}'


def phase_body(phase: DayPhase, lead_minutes: int, scheduled: bool = False) -> str:
    if scheduled:
        return f"{phase.name} starts in {lead_minutes} min"
    return f"{phase.name} starts at {phase.start}"


def special_body(special: ExpiringSpecial) -> str:
    return f'"{special.dish_name}" special ends {special.week_end}'


def format_alert_message(alert: Alert) -> str:
    """Format an alert as an HTML chat message."""
    return f"<b>{escape(alert.title)}</b>\n{escape(alert.body)}"


def format_opt_in_message() -> str:
    """Message sent once when asking to deliver reminders to a chat."""
    return (
        "🔔 <b>Kitchen reminders are on</b>\n\n"
        "This chat will get prep, task-due, overdue and specials reminders "
        "while the kitchen app is running."
    )
