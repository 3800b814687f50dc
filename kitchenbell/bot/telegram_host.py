"""Alert host that delivers reminders to a Telegram chat."""

import logging

from telegram import Bot
from telegram.error import Forbidden, TelegramError

from kitchenbell.bot.formatters import format_alert_message, format_opt_in_message
from kitchenbell.bot.keyboards import build_app_url, open_app_keyboard
from kitchenbell.db.kv_store import KeyValueStore
from kitchenbell.db.models import Alert, Permission
from kitchenbell.utils.constants import PERMISSION_KEY

logger = logging.getLogger(__name__)


class TelegramAlertHost:
    """Sends alerts to one chat, with a button that opens the app.

    Permission is tri-state and persisted in the key-value store:
    - ``default``: never asked; the first request sends an opt-in message
    - ``granted``: the opt-in message was delivered
    - ``denied``: the bot was blocked; stays denied until the stored state
      is cleared after the user unblocks the bot
    """

    def __init__(
        self,
        bot: Bot | None,
        chat_id: int | str | None,
        app_base_url: str,
        store: KeyValueStore,
    ):
        self.bot = bot
        self.chat_id = chat_id
        self.app_base_url = app_base_url
        self.store = store

    def is_supported(self) -> bool:
        return self.bot is not None and bool(self.chat_id)

    async def permission(self) -> Permission:
        value = await self.store.get(PERMISSION_KEY)
        if value in ("granted", "denied"):
            return value  # type: ignore[return-value]
        return "default"

    async def request_permission(self) -> Permission:
        result: Permission
        try:
            await self.bot.send_message(  # type: ignore[union-attr]
                chat_id=self.chat_id,  # type: ignore[arg-type]
                text=format_opt_in_message(),
                parse_mode="HTML",
            )
            result = "granted"
        except Forbidden as e:
            logger.warning(f"Chat {self.chat_id} refused reminders: {e}")
            result = "denied"
        except TelegramError as e:
            # Undecided; the next engine start asks again
            logger.error(f"Could not ask chat {self.chat_id} for permission: {e}")
            return "default"

        await self.store.set(PERMISSION_KEY, result)
        return result

    async def reset_permission(self) -> None:
        """Forget the stored decision so the next start asks again."""
        await self.store.delete(PERMISSION_KEY)

    async def notify(self, alert: Alert) -> None:
        url = build_app_url(self.app_base_url, alert.navigation_target)

        await self.bot.send_message(  # type: ignore[union-attr]
            chat_id=self.chat_id,  # type: ignore[arg-type]
            text=format_alert_message(alert),
            parse_mode="HTML",
            reply_markup=open_app_keyboard(url),
        )

        logger.debug(f"Delivered alert {alert.tag} to chat {self.chat_id}")
