"""
Reply texts and helpers for bot commands.
"""
import asyncio
import logging
from typing import Iterable

from telegram import Message
from telegram.error import TelegramError
from telegram.ext import ContextTypes

logger = logging.getLogger(__name__)

ACK_TEXT = "+"
ACK_LIFETIME = 10.0  # seconds before an acknowledgement is deleted

CLEARED_TEXT = "cleared.\n/setup?"

USAGE_TEXT = (
    "Hiii, this bot is made for reposting your lovely channels to your comfy chats\n"
    "\n"
    "/info  -- get admins/channels/chats list\n"
    "/setup -- if you just started use this command\n"
    "/ping  -- check if the bot is online \n"
    "/clear -- remove all admins/channels/chats\n"
    "\n"
    "/add_admin, /add_chan, /add_chat <...> -- example: /add_chan 123 -456 -780\n"
    "/del_admin, /del_chan, /del_chat <...> -- remove some admins/channels/chats"
)


def format_info(admins: Iterable[str], sources: Iterable[str], destinations: Iterable[str]) -> str:
    """Format the /info listing: admins, then sources, then destinations."""
    sections = [
        ("- ADMINS:", admins),
        ("- REPOST FROM:", sources),
        ("- REPOST TO:", destinations),
    ]
    return "\n---\n".join(
        title + "\n" + "\n".join(items) for title, items in sections
    )


def format_not_in_chat(kind: str, chat_id: int) -> str:
    return f"Note: seems like bot isn't in the {kind} {chat_id}"


async def reply_temporary(
    context: ContextTypes.DEFAULT_TYPE,
    message: Message,
    text: str,
    lifetime: float = ACK_LIFETIME,
) -> Message:
    """Reply to a message and delete the reply after ``lifetime`` seconds.

    The deletion runs as a detached task; nothing waits for it and its
    failure is only logged.
    """
    reply = await message.reply_text(text)
    context.application.create_task(
        _delete_later(reply, lifetime),
        name=f"delete-ack-{reply.chat_id}-{reply.message_id}",
    )
    return reply


async def _delete_later(message: Message, lifetime: float) -> None:
    await asyncio.sleep(lifetime)
    try:
        await message.delete()
    except TelegramError as e:
        logger.debug(f"Could not delete temporary message {message.chat_id}:{message.message_id}: {e}")
