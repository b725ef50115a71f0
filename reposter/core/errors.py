"""
Process-wide error reporting.
Every handler error ends up here and is sent as text to each admin chat.
"""
import logging

from telegram import Bot, Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes
from redis.exceptions import RedisError

from reposter.store import ListName, ListStore, ReposterError

logger = logging.getLogger(__name__)


class ErrorReporter:
    """Delivers error text to the current admins."""

    def __init__(self, store: ListStore):
        self.store = store

    async def handle_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Error handler registered on the telegram Application."""
        error = context.error
        chat_id = None
        if isinstance(update, Update) and update.effective_chat:
            chat_id = update.effective_chat.id
        logger.error(f"Error while handling update in chat {chat_id}: {error}", exc_info=error)

        await self.report(context.bot, error)

    async def report(self, bot: Bot, error: BaseException) -> int:
        """Send the error text to every admin; returns how many got it.

        Delivery failures are logged and never retried.
        """
        try:
            admins = await self.store.member_ids(ListName.ADMINS)
        except (RedisError, ReposterError) as e:
            logger.error(f"Cannot load admins to report error {error!r}: {e}")
            return 0

        text = str(error) or type(error).__name__
        delivered = 0
        for admin in admins:
            try:
                await bot.send_message(chat_id=admin, text=text)
                delivered += 1
            except TelegramError as e:
                logger.error(f"Failed to report error to admin {admin}: {e}")

        return delivered
