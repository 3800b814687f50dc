"""Inline keyboard builders."""

from telegram import InlineKeyboardButton, InlineKeyboardMarkup


def build_app_url(app_base_url: str, navigation_target: str) -> str:
    """Join the app's base URL and an in-app route.

    Examples:
        ("https://kitchen.example", "#/today") -> "https://kitchen.example/#/today"
    """
    return f"{app_base_url.rstrip('/')}/{navigation_target.lstrip('/')}"


def open_app_keyboard(url: str) -> InlineKeyboardMarkup:
    """Keyboard for alerts: a single button opening the app at the alert's page."""
    return InlineKeyboardMarkup([[InlineKeyboardButton("Open in app", url=url)]])
