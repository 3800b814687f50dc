"""Main entry point for the kitchenbell reminder engine."""

import asyncio
import logging
import signal
import sys

from telegram import Bot

from kitchenbell.api.client import NotificationsClient
from kitchenbell.bot.telegram_host import TelegramAlertHost
from kitchenbell.config import Config
from kitchenbell.db.kv_store import SqliteKeyValueStore
from kitchenbell.db.migrations import run_migrations
from kitchenbell.engine.clock import AsyncioClock
from kitchenbell.engine.lifecycle import ReminderEngine
from kitchenbell.engine.poller import SnapshotPoller

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, Config.LOG_LEVEL),
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)


async def run(reset_permission: bool = False) -> None:
    """Run the engine until SIGINT/SIGTERM. SIGHUP reloads preferences."""
    await run_migrations(Config.DATABASE_PATH)

    store = SqliteKeyValueStore(Config.DATABASE_PATH)
    await store.connect()

    bot = Bot(Config.TELEGRAM_BOT_TOKEN)
    await bot.initialize()

    host = TelegramAlertHost(bot, Config.TELEGRAM_CHAT_ID, Config.APP_BASE_URL, store)
    if reset_permission:
        await host.reset_permission()
        logger.info("Stored reminder permission cleared")

    client = NotificationsClient(
        Config.API_BASE_URL, token=Config.API_TOKEN, timeout=Config.API_TIMEOUT
    )
    engine = ReminderEngine(
        poller=SnapshotPoller(client),
        host=host,
        store=store,
        clock=AsyncioClock(Config.TIMEZONE),
        poll_interval=Config.POLL_INTERVAL,
    )

    loop = asyncio.get_running_loop()
    shutdown = asyncio.Event()
    restarts: set[asyncio.Task] = set()

    def request_restart() -> None:
        logger.info("Reloading notification preferences")
        task = asyncio.ensure_future(engine.restart())
        restarts.add(task)
        task.add_done_callback(restarts.discard)

    loop.add_signal_handler(signal.SIGINT, shutdown.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown.set)
    loop.add_signal_handler(signal.SIGHUP, request_restart)

    try:
        await engine.start()
        if not engine.running:
            logger.warning("Reminder engine is not running; send SIGHUP after changing settings")

        await shutdown.wait()
    finally:
        engine.stop()
        for task in restarts:
            task.cancel()
        await bot.shutdown()
        await store.close()
        logger.info("kitchenbell shut down")


def main() -> None:
    """Start the reminder engine."""
    # Validate configuration
    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    logger.info("Starting kitchenbell reminder engine...")
    asyncio.run(run(reset_permission="--reset-permission" in sys.argv[1:]))


if __name__ == "__main__":
    main()
