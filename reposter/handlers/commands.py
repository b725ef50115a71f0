"""
Command dispatcher for the reposter bot.
Registers the admin list commands, membership tracking and relay handlers.
"""
import logging
import re
from typing import List, Optional

from telegram import Update
from telegram.constants import ChatMemberStatus
from telegram.error import TelegramError
from telegram.ext import (
    Application, ChatMemberHandler, CommandHandler, ContextTypes, MessageHandler, filters
)

from redis.exceptions import RedisError

from reposter.core import ErrorReporter, RelayEngine, is_admin, is_unconfigured
from reposter.store import (
    ChatId, ChatIdDecodeError, ListName, ListStore, decode_chat_id, encode_chat_id
)
from .replies import (
    ACK_TEXT, CLEARED_TEXT, USAGE_TEXT, format_info, format_not_in_chat, reply_temporary
)

logger = logging.getLogger(__name__)

# Commands the dispatcher answers; any other slash text is relayed as content
COMMAND_NAMES = (
    "start", "setup",
    "add_admin", "add_chan", "add_chat",
    "del_admin", "del_chan", "del_chat",
    "info", "clear", "ping", "pong",
)

HANDLED_COMMAND = filters.Regex(
    re.compile(r"^/(?:%s)(?:@\w+)?(?:\s|$)" % "|".join(COMMAND_NAMES), re.IGNORECASE)
)

# Content that gets relayed: plain text and media
CONTENT_FILTER = (
    (filters.UpdateType.MESSAGE | filters.UpdateType.CHANNEL_POST)
    & (
        (filters.TEXT & ~HANDLED_COMMAND)
        | filters.PHOTO
        | filters.VIDEO
        | filters.AUDIO
        | filters.Document.ALL
        | filters.VOICE
        | filters.ANIMATION
        | filters.Sticker.ALL
        | filters.VIDEO_NOTE
    )
)

ADDED_TO_CHAT_FILTER = filters.StatusUpdate.NEW_CHAT_MEMBERS | filters.StatusUpdate.CHAT_CREATED

_PRESENT_STATUSES = (ChatMemberStatus.MEMBER, ChatMemberStatus.ADMINISTRATOR)


class CommandDispatcher:
    """Maps bot commands to handlers over the relay lists."""

    def __init__(self, store: ListStore, reporter: ErrorReporter, relay_engine: Optional[RelayEngine] = None):
        self.store = store
        self.reporter = reporter
        self.relay_engine = relay_engine or RelayEngine(store, reporter)

    def register_handlers(self, application: Application) -> None:
        """Register all handlers and the error handler with the application."""
        logger.info("Registering handlers with bot application...")

        only_messages = filters.UpdateType.MESSAGE
        commands = {
            "start": self.handle_start,
            "setup": self.handle_setup,
            "add_admin": self.handle_add_admin,
            "add_chan": self.handle_add_chan,
            "add_chat": self.handle_add_chat,
            "del_admin": self.handle_del_admin,
            "del_chan": self.handle_del_chan,
            "del_chat": self.handle_del_chat,
            "info": self.handle_info,
            "clear": self.handle_clear,
            "ping": self.handle_ping,
            "pong": self.handle_pong,
        }
        for command, callback in commands.items():
            application.add_handler(CommandHandler(command, callback, filters=only_messages))

        # Membership tracking
        application.add_handler(ChatMemberHandler(self.handle_my_chat_member, ChatMemberHandler.MY_CHAT_MEMBER))
        application.add_handler(MessageHandler(ADDED_TO_CHAT_FILTER, self.handle_added_to_chat))

        # Relay
        application.add_handler(MessageHandler(CONTENT_FILTER, self.relay_engine.handle_content))

        application.add_error_handler(self.reporter.handle_error)

        logger.info(f"Registered {len(commands)} commands")

    # Public commands
    async def handle_start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Show usage to admins, or to anyone while the bot is unconfigured."""
        chat = update.effective_chat
        if not chat:
            return

        unconfigured = await is_unconfigured(self.store)
        if unconfigured or await is_admin(self.store, chat.id):
            await update.effective_message.reply_text(USAGE_TEXT)

    async def handle_setup(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Claim the bot: the first sender becomes the only admin."""
        user = update.effective_user
        if not user:
            return

        if not await is_unconfigured(self.store):
            return

        await self.store.add(ListName.ADMINS, user.id)
        logger.info(f"Bot set up, first admin is {user.id}")
        await reply_temporary(context, update.effective_message, ACK_TEXT)

    async def handle_ping(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.effective_message.reply_text("/pong")

    async def handle_pong(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.effective_message.reply_text("/ping")

    # Admin list commands
    async def handle_add_admin(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._add(update, context, ListName.ADMINS)

    async def handle_add_chan(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._add(update, context, ListName.SOURCES, note_kind="chan")

    async def handle_add_chat(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._add(update, context, ListName.DESTINATIONS, note_kind="chat")

    async def handle_del_admin(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._remove(update, context, ListName.ADMINS)

    async def handle_del_chan(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._remove(update, context, ListName.SOURCES)

    async def handle_del_chat(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._remove(update, context, ListName.DESTINATIONS)

    async def handle_info(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """List admins, sources and destinations."""
        if not await self._is_admin_chat(update):
            return

        admins = await self.store.members(ListName.ADMINS)
        sources = await self.store.members(ListName.SOURCES)
        destinations = await self.store.members(ListName.DESTINATIONS)

        await update.effective_message.reply_text(format_info(admins, sources, destinations))

    async def handle_clear(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Delete every list. The confirmation is sent whoever asks."""
        if await self._is_admin_chat(update):
            await self.store.clear_all()
            logger.warning(f"All relay lists cleared by chat {update.effective_chat.id}")

        await update.effective_message.reply_text(CLEARED_TEXT)

    # Membership tracking
    async def handle_my_chat_member(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Record chats where the bot became a member or administrator."""
        change = update.my_chat_member
        if not change or change.new_chat_member.status not in _PRESENT_STATUSES:
            return
        await self._record_added(change.chat.id)

    async def handle_added_to_chat(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Record chats whose service message shows the bot joining."""
        message = update.effective_message
        if not message:
            return

        created = bool(
            message.group_chat_created
            or message.supergroup_chat_created
            or message.channel_chat_created
        )
        joined = any(member.id == context.bot.id for member in message.new_chat_members or ())
        if created or joined:
            await self._record_added(message.chat_id)

    # Helpers
    async def _add(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
        name: ListName,
        note_kind: Optional[str] = None,
    ) -> None:
        if not await self._is_admin_chat(update):
            return

        chat_ids = self._parse_args(context)
        message = update.effective_message

        if note_kind:
            for chat_id in chat_ids:
                await self._warn_if_not_added(message, note_kind, chat_id)

        await self.store.add(name, *chat_ids)
        logger.info(f"Chat {update.effective_chat.id} added {len(chat_ids)} chat(s) to {name.value}")
        await reply_temporary(context, message, ACK_TEXT)

    async def _remove(self, update: Update, context: ContextTypes.DEFAULT_TYPE, name: ListName) -> None:
        if not await self._is_admin_chat(update):
            return

        values = self._removal_values(context)
        await self.store.remove(name, *values)
        logger.info(f"Chat {update.effective_chat.id} removed {len(values)} chat(s) from {name.value}")
        await reply_temporary(context, update.effective_message, ACK_TEXT)

    async def _is_admin_chat(self, update: Update) -> bool:
        chat = update.effective_chat
        if not chat:
            return False
        allowed = await is_admin(self.store, chat.id)
        if not allowed:
            logger.debug(f"Ignoring admin command from chat {chat.id}")
        return allowed

    @staticmethod
    def _parse_args(context: ContextTypes.DEFAULT_TYPE) -> List[ChatId]:
        """Decode every argument before anything is written."""
        return [decode_chat_id(arg) for arg in context.args or ()]

    @staticmethod
    def _removal_values(context: ContextTypes.DEFAULT_TYPE) -> List[str]:
        """Canonical form of numeric arguments, other tokens as typed.

        Lets an admin remove elements that were never valid chat ids.
        """
        values = []
        for arg in context.args or ():
            try:
                values.append(encode_chat_id(decode_chat_id(arg)))
            except ChatIdDecodeError:
                values.append(arg)
        return values

    async def _warn_if_not_added(self, message, kind: str, chat_id: ChatId) -> None:
        """Advise that the bot does not seem to be in the chat. Never blocks the add."""
        try:
            if await self.store.contains(ListName.CHATS_ADDED, chat_id):
                return
            await message.reply_text(format_not_in_chat(kind, chat_id))
        except (RedisError, TelegramError) as e:
            logger.warning(f"Membership note for {chat_id} failed: {e}")

    async def _record_added(self, chat_id: int) -> None:
        await self.store.add(ListName.CHATS_ADDED, chat_id)
        logger.info(f"Bot added to chat {chat_id}")
