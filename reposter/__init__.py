"""Telegram bot that reposts source chats to destination chats."""

__version__ = "0.1.0"
