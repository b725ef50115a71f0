"""
Test doubles for Redis and Telegram objects.
"""
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

from redis.exceptions import ConnectionError as RedisConnectionError


class FakeRedis:
    """In-memory stand-in for the redis.asyncio set commands the store uses.

    Members keep insertion order so enumeration order is predictable.
    """

    def __init__(self):
        self.sets: Dict[str, Dict[str, None]] = {}
        self.calls: List[tuple] = []
        self.fail_on: Optional[str] = None
        self.closed = False

    def _check(self, command: str, *args) -> None:
        self.calls.append((command,) + args)
        if self.fail_on == command:
            raise RedisConnectionError(f"{command} failed")

    async def sadd(self, key: str, *values: str) -> int:
        self._check("sadd", key, *values)
        members = self.sets.setdefault(key, {})
        added = 0
        for value in values:
            if value not in members:
                members[value] = None
                added += 1
        return added

    async def srem(self, key: str, *values: str) -> int:
        self._check("srem", key, *values)
        members = self.sets.get(key, {})
        removed = 0
        for value in values:
            if value in members:
                del members[value]
                removed += 1
        if not members:
            self.sets.pop(key, None)
        return removed

    async def sismember(self, key: str, value: str) -> int:
        self._check("sismember", key, value)
        return int(value in self.sets.get(key, {}))

    async def smembers(self, key: str) -> List[str]:
        self._check("smembers", key)
        return list(self.sets.get(key, {}))

    async def delete(self, *keys: str) -> int:
        self._check("delete", *keys)
        return sum(1 for key in keys if self.sets.pop(key, None) is not None)

    async def ping(self) -> bool:
        self._check("ping")
        return True

    async def aclose(self) -> None:
        self.closed = True


def make_message(chat_id: int = 100, message_id: int = 1, text: str = "hello"):
    """A Message mock whose replies are themselves deletable messages."""
    message = MagicMock()
    message.chat_id = chat_id
    message.message_id = message_id
    message.text = text
    message.new_chat_members = ()
    message.group_chat_created = False
    message.supergroup_chat_created = False
    message.channel_chat_created = False

    reply = MagicMock()
    reply.chat_id = chat_id
    reply.message_id = message_id + 1
    reply.delete = AsyncMock(return_value=True)
    message.reply_text = AsyncMock(return_value=reply)
    return message


def make_update(chat_id: int = 100, user_id: int = 100, message=None):
    update = MagicMock()
    update.effective_chat.id = chat_id
    update.effective_user.id = user_id
    update.effective_message = message or make_message(chat_id=chat_id)
    update.my_chat_member = None
    return update


def make_context(args=None, bot_id: int = 999):
    """A callback context that records scheduled tasks instead of running them."""
    context = MagicMock()
    context.args = list(args or [])
    context.bot.id = bot_id
    context.bot.forward_message = AsyncMock()
    context.bot.send_message = AsyncMock()
    context.scheduled = []

    def create_task(coroutine, name=None):
        context.scheduled.append((name, coroutine))
        return MagicMock()

    context.application.create_task = MagicMock(side_effect=create_task)
    return context


def close_scheduled(context) -> None:
    """Close coroutines that were scheduled but never awaited."""
    for _, coroutine in context.scheduled:
        coroutine.close()
    context.scheduled.clear()
