"""Bot command handlers."""

from .commands import CommandDispatcher, CONTENT_FILTER, ADDED_TO_CHAT_FILTER
from .replies import (
    ACK_TEXT, ACK_LIFETIME, CLEARED_TEXT, USAGE_TEXT,
    format_info, format_not_in_chat, reply_temporary
)

__all__ = [
    "CommandDispatcher",
    "CONTENT_FILTER",
    "ADDED_TO_CHAT_FILTER",
    "ACK_TEXT",
    "ACK_LIFETIME",
    "CLEARED_TEXT",
    "USAGE_TEXT",
    "format_info",
    "format_not_in_chat",
    "reply_temporary"
]
