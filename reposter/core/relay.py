"""
Relay engine that forwards source chat content to every destination.
Forwards run sequentially with a fixed pause between them.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from telegram import Bot, Message, Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from reposter.store import ChatId, ListName, ListStore
from .errors import ErrorReporter

logger = logging.getLogger(__name__)

FORWARD_DELAY = 0.1  # seconds between two forwards


@dataclass
class RelayResult:
    """Outcome of relaying one message."""
    source_chat_id: int
    message_id: int
    delivered: List[ChatId] = field(default_factory=list)
    failed: List[ChatId] = field(default_factory=list)


class RelayEngine:
    """Forwards messages posted in source chats to all destination chats."""

    def __init__(self, store: ListStore, reporter: ErrorReporter, forward_delay: float = FORWARD_DELAY):
        self.store = store
        self.reporter = reporter
        self.forward_delay = forward_delay

    async def handle_content(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Message handler for text and media in messages and channel posts."""
        message = update.effective_message
        if not message:
            return
        await self.relay(context.bot, message)

    async def relay(self, bot: Bot, message: Message) -> Optional[RelayResult]:
        """Forward a message to every destination if its chat is a source.

        Returns None when the chat is not a source. A failed forward is
        reported to the admins and the remaining destinations still get it.
        """
        source_chat_id = message.chat_id
        if not await self.store.contains(ListName.SOURCES, source_chat_id):
            return None

        destinations = await self.store.member_ids(ListName.DESTINATIONS)
        result = RelayResult(source_chat_id=source_chat_id, message_id=message.message_id)

        for dest_chat_id in destinations:
            try:
                await bot.forward_message(
                    chat_id=dest_chat_id,
                    from_chat_id=source_chat_id,
                    message_id=message.message_id,
                )
                result.delivered.append(dest_chat_id)
            except TelegramError as e:
                result.failed.append(dest_chat_id)
                logger.warning(f"Failed to forward {source_chat_id}:{message.message_id} to {dest_chat_id}: {e}")
                await self.reporter.report(bot, e)
            finally:
                await asyncio.sleep(self.forward_delay)

        logger.info(
            f"Relayed {source_chat_id}:{message.message_id} to "
            f"{len(result.delivered)} chat(s), {len(result.failed)} failed"
        )
        return result
