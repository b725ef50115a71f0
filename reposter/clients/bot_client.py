"""
Bot API client manager using python-telegram-bot.
Owns the Application lifecycle: build, polling, shutdown.
"""
import logging
from typing import Optional

from telegram import Update
from telegram.ext import Application

from reposter.config import Settings

logger = logging.getLogger(__name__)

ALLOWED_UPDATES = [
    Update.MESSAGE,
    Update.CHANNEL_POST,
    Update.MY_CHAT_MEMBER,
]


class BotClientManager:
    """Manages the Telegram Bot API application."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.application: Optional[Application] = None
        self._is_running = False

    def build(self) -> Application:
        """Create the application; updates are handled one at a time."""
        logger.info("Building Bot API application...")
        self.application = (
            Application.builder()
            .token(self.settings.token)
            .concurrent_updates(False)
            .build()
        )
        return self.application

    async def start(self) -> None:
        """Start the application and begin polling."""
        if not self.application:
            self.build()

        logger.info("Starting Bot API client...")
        await self.application.initialize()
        await self.application.start()
        await self.application.updater.start_polling(
            allowed_updates=ALLOWED_UPDATES,
            drop_pending_updates=True,
        )
        self._is_running = True
        logger.info(f"Bot API client polling as @{self.application.bot.username}")

    async def stop(self) -> None:
        """Stop polling and shut the application down."""
        if self.application and self._is_running:
            logger.info("Stopping Bot API client...")
            await self.application.updater.stop()
            await self.application.stop()
            await self.application.shutdown()
            self._is_running = False
            logger.info("Bot API client stopped")

    @property
    def is_running(self) -> bool:
        """Check if bot is currently running."""
        return self._is_running
