"""
Tests for the application entry point.
"""

import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from reposter import main as main_module
from reposter.config import Settings
from reposter.handlers import CommandDispatcher
from reposter.store import ListStore
from tests.helpers import FakeRedis


class TestParseArgs(unittest.TestCase):
    """
    Tests for the command line surface.
    """
    def test_cfg_and_debug(self):
        args = main_module.parse_args(["--cfg", "bot.json", "--debug"])
        self.assertEqual(args.cfg, "bot.json")
        self.assertTrue(args.debug)

    def test_debug_defaults_off(self):
        self.assertFalse(main_module.parse_args(["--cfg", "bot.json"]).debug)

    def test_cfg_is_required(self):
        with self.assertRaises(SystemExit):
            main_module.parse_args([])

    def test_bad_config_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            main_module.run(["--cfg", "/nonexistent/reposter.json"])
        self.assertEqual(ctx.exception.code, 1)


class TestEventLoopChoice(unittest.TestCase):
    """
    Tests for picking the event loop runner.
    """
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "config.json"
        self.config_path.write_text(json.dumps({"token": "123:abc"}), encoding="utf-8")
        logging_patch = patch.object(main_module, "configure_logging")
        logging_patch.start()
        self.addCleanup(logging_patch.stop)
        self.addCleanup(self._tmp.cleanup)

    @staticmethod
    def _close(coroutine):
        coroutine.close()

    def test_windows_uses_asyncio_run(self):
        with patch.object(main_module.sys, "platform", "win32"), \
                patch.object(main_module.asyncio, "run", side_effect=self._close) as asyncio_run:
            main_module.run(["--cfg", str(self.config_path)])

        asyncio_run.assert_called_once()

    @unittest.skipIf(sys.platform == "win32", "uvloop is not available on Windows")
    def test_unix_uses_uvloop_run(self):
        with patch("uvloop.run", side_effect=self._close) as uvloop_run, \
                patch.object(main_module.asyncio, "run") as asyncio_run:
            main_module.run(["--cfg", str(self.config_path)])

        uvloop_run.assert_called_once()
        asyncio_run.assert_not_called()


class TestReposterApplication(unittest.IsolatedAsyncioTestCase):
    """
    Tests for application wiring and shutdown.
    """
    async def asyncSetUp(self):
        self.settings = Settings(token="123:abc", redis_prefix="test")
        self.redis = FakeRedis()
        self.store = ListStore(self.redis, "test")

    async def test_initialize_wires_components(self):
        app = main_module.ReposterApplication(self.settings)

        with patch.object(main_module, "init_store", new=AsyncMock(return_value=self.store)), \
                patch.object(main_module, "BotClientManager") as manager_cls:
            await app.initialize()

        self.assertIs(app.store, self.store)
        self.assertIsInstance(app.dispatcher, CommandDispatcher)
        self.assertIs(app.dispatcher.store, self.store)
        manager_cls.assert_called_once_with(self.settings)
        application = manager_cls.return_value.build.return_value
        application.add_error_handler.assert_called_once_with(app.dispatcher.reporter.handle_error)

    async def test_failed_initialize_closes_store(self):
        app = main_module.ReposterApplication(self.settings)

        with patch.object(main_module, "init_store", new=AsyncMock(return_value=self.store)), \
                patch.object(main_module, "BotClientManager") as manager_cls:
            manager_cls.return_value.is_running = False
            manager_cls.return_value.build.side_effect = RuntimeError("bad token")
            with self.assertRaises(RuntimeError):
                await app.run()

        self.assertTrue(self.redis.closed)
        self.assertIsNone(app.store)

    async def test_stop_closes_store_and_bot(self):
        app = main_module.ReposterApplication(self.settings)
        app.store = self.store
        app.bot_client = MagicMock()
        app.bot_client.stop = AsyncMock()

        await app.stop()

        app.bot_client.stop.assert_awaited_once()
        self.assertTrue(self.redis.closed)
        self.assertIsNone(app.store)

    async def test_failed_start_cleans_up(self):
        app = main_module.ReposterApplication(self.settings)
        app.store = self.store
        app.bot_client = MagicMock()
        app.bot_client.start = AsyncMock(side_effect=RuntimeError("bad token"))
        app.bot_client.stop = AsyncMock()

        with self.assertRaises(RuntimeError):
            await app.start()

        app.bot_client.stop.assert_awaited_once()
        self.assertTrue(self.redis.closed)


if __name__ == "__main__":
    unittest.main()
