"""
Redis-backed relay lists.
Persists the admin, source, destination and membership sets under one key prefix.
"""
import enum
import logging
from typing import List, Union

from redis.asyncio import Redis

from .ids import ChatId, decode_chat_ids, encode_chat_id

logger = logging.getLogger(__name__)


class ListName(enum.Enum):
    """Named sets kept per deployment; values are the key suffixes."""
    ADMINS = "admins"
    SOURCES = "src"
    DESTINATIONS = "dst"
    CHATS_ADDED = "allowed"  # chats the bot has been added to


Member = Union[int, str]


def make_key(*parts: str) -> str:
    return ":".join(parts)


class ListStore:
    """Set operations over the four relay lists.

    Every call is one or more Redis round trips; Redis errors propagate to the
    caller unchanged. Multi-value writes are applied one value at a time and
    stop at the first failure.
    """

    def __init__(self, redis: Redis, prefix: str):
        self.redis = redis
        self.prefix = prefix

    def key(self, name: ListName) -> str:
        """Full Redis key of a named set."""
        return make_key(self.prefix, name.value)

    async def add(self, name: ListName, *values: Member) -> None:
        """Add each value to the set."""
        key = self.key(name)
        for value in values:
            await self.redis.sadd(key, _encode(value))
        logger.debug(f"Added {len(values)} value(s) to {key}")

    async def remove(self, name: ListName, *values: Member) -> None:
        """Remove each value from the set."""
        key = self.key(name)
        for value in values:
            await self.redis.srem(key, _encode(value))
        logger.debug(f"Removed {len(values)} value(s) from {key}")

    async def contains(self, name: ListName, value: Member) -> bool:
        return bool(await self.redis.sismember(self.key(name), _encode(value)))

    async def members(self, name: ListName) -> List[str]:
        """Raw set elements, in Redis enumeration order."""
        raw = await self.redis.smembers(self.key(name))
        return [_as_text(item) for item in raw]

    async def member_ids(self, name: ListName) -> List[ChatId]:
        """Set elements decoded to chat ids.

        Raises ChatIdDecodeError if any element is not an integer.
        """
        return decode_chat_ids(await self.members(name))

    async def clear_all(self) -> None:
        """Delete all four sets in a single command."""
        keys = [self.key(name) for name in ListName]
        await self.redis.delete(*keys)
        logger.info(f"Cleared relay lists under prefix {self.prefix}")


def _encode(value: Member) -> str:
    if isinstance(value, str):
        return value
    return encode_chat_id(value)


def _as_text(item: Union[str, bytes]) -> str:
    if isinstance(item, bytes):
        return item.decode("utf-8")
    return item
