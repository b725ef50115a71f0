"""Telegram client management."""

from .bot_client import BotClientManager, ALLOWED_UPDATES

__all__ = [
    "BotClientManager",
    "ALLOWED_UPDATES"
]
