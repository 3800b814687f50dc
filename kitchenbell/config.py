"""Configuration management from environment variables."""

import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from kitchenbell.utils.constants import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEZONE

# Load .env file if it exists
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass  # python-dotenv not installed, use system env vars


class Config:
    """Application configuration loaded from environment variables."""

    # Kitchen API (preferences and pending snapshot)
    API_BASE_URL: str = os.getenv("API_BASE_URL", "")
    API_TOKEN: str = os.getenv("API_TOKEN", "")
    API_TIMEOUT: float = float(os.getenv("API_TIMEOUT", "10"))

    # Telegram (alert delivery)
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_CHAT_ID: str = os.getenv("TELEGRAM_CHAT_ID", "")

    # Where "Open in app" buttons point
    APP_BASE_URL: str = os.getenv("APP_BASE_URL", "http://localhost:3000")

    # Database (dedup markers, permission state)
    DATABASE_PATH: Path = Path(os.getenv("DATABASE_PATH", "./data/kitchenbell.db"))

    # Local calendar day for dedup markers and HH:MM times
    TIMEZONE: str = os.getenv("TIMEZONE", DEFAULT_TIMEZONE)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Engine
    POLL_INTERVAL: int = int(os.getenv("POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL)))

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        if not cls.API_BASE_URL:
            raise ValueError("API_BASE_URL environment variable is required")

        if not cls.TELEGRAM_BOT_TOKEN:
            raise ValueError("TELEGRAM_BOT_TOKEN environment variable is required")

        if not cls.TELEGRAM_CHAT_ID:
            raise ValueError("TELEGRAM_CHAT_ID environment variable is required")

        if cls.POLL_INTERVAL < 1:
            raise ValueError("POLL_INTERVAL must be at least 1 second")

        try:
            ZoneInfo(cls.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown TIMEZONE: {cls.TIMEZONE}")

        # Ensure database directory exists
        cls.DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
