"""
Main application entry point for the reposter bot.
Wires Redis, the relay lists and the command dispatcher into the bot client.
"""
import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional

import structlog

from reposter.config import ConfigError, Settings, load_settings
from reposter.clients import BotClientManager
from reposter.core import ErrorReporter, RelayEngine
from reposter.handlers import CommandDispatcher
from reposter.store import ListStore, init_store, close_store

logger = structlog.get_logger(__name__)


def configure_logging(level: int) -> None:
    """Configure structlog on top of stdlib logging."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler('bot.log', encoding='utf-8')
        ]
    )
    # httpx logs every polling request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING if level > logging.DEBUG else logging.DEBUG)


class ReposterApplication:
    """Main application class for the reposter bot."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.store: Optional[ListStore] = None
        self.bot_client: Optional[BotClientManager] = None
        self.dispatcher: Optional[CommandDispatcher] = None
        self._shutdown_event = asyncio.Event()
        self._running = False

    async def initialize(self) -> None:
        """Initialize all application components."""
        logger.info("Initializing reposter...")

        self.store = await init_store(self.settings)
        logger.info("Store initialized", prefix=self.settings.redis_prefix)

        reporter = ErrorReporter(self.store)
        relay_engine = RelayEngine(self.store, reporter)
        self.dispatcher = CommandDispatcher(self.store, reporter, relay_engine)

        self.bot_client = BotClientManager(self.settings)
        application = self.bot_client.build()
        self.dispatcher.register_handlers(application)
        logger.info("Handlers registered")

    async def start(self) -> None:
        """Start polling."""
        if self._running:
            return

        logger.info("Starting reposter...")
        try:
            await self.bot_client.start()
        except Exception as e:
            logger.error("Failed to start bot", error=str(e), exc_info=True)
            await self.stop()
            raise

        self._running = True
        logger.info("Reposter is now running")

    async def stop(self) -> None:
        """Stop all components."""
        logger.info("Stopping reposter...")
        self._running = False

        if self.bot_client and self.bot_client.is_running:
            await self.bot_client.stop()
        if self.store:
            await close_store(self.store)
            self.store = None

        logger.info("Reposter stopped")

    async def run(self) -> None:
        """Run the bot until a shutdown signal arrives."""
        try:
            await self.initialize()
            await self.start()
            await self._shutdown_event.wait()
        finally:
            await self.stop()

    def setup_signal_handlers(self) -> None:
        """Set the shutdown event on SIGINT/SIGTERM."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._on_signal, sig)

    def _on_signal(self, signum: int) -> None:
        logger.info(f"Received signal {signum}, initiating shutdown...")
        self._shutdown_event.set()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Telegram channel reposter bot")
    parser.add_argument("--cfg", required=True, help="Path to the JSON config file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def main(settings: Settings) -> None:
    """Create and run the bot."""
    app = ReposterApplication(settings)
    app.setup_signal_handlers()
    await app.run()


def run(argv: Optional[List[str]] = None) -> None:
    """Console entry point."""
    args = parse_args(argv)

    overrides = {"debug_mode": True} if args.debug else {}
    try:
        settings = load_settings(args.cfg, **overrides)
    except ConfigError as e:
        print(f"Configuration failed: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.logging_level)

    # Use uvloop for better performance on Unix systems
    if sys.platform != 'win32':
        import uvloop
        runner = uvloop.run
    else:
        runner = asyncio.run

    try:
        runner(main(settings))
    except KeyboardInterrupt:
        logger.info("Application terminated by user")
    except Exception as e:
        logger.error("Application terminated with error", error=str(e), exc_info=e)
        sys.exit(1)


if __name__ == "__main__":
    run()
