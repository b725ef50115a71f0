"""
Redis connection management using redis-py's asyncio client.
"""
import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

from reposter.config import Settings
from .lists import ListStore

logger = logging.getLogger(__name__)


def create_redis(settings: Settings) -> Redis:
    """Create the Redis client described by the settings."""
    return Redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=10,
    )


async def check_connection(redis: Redis) -> bool:
    """Check if the Redis connection is working."""
    try:
        await redis.ping()
        return True
    except RedisError as e:
        logger.error(f"Redis connection check failed: {e}")
        return False


async def init_store(settings: Settings) -> ListStore:
    """Connect to Redis and return the relay list store."""
    logger.info(f"Connecting to Redis at {settings.redis_address}, db {settings.redis_db_id}...")
    redis = create_redis(settings)

    if not await check_connection(redis):
        await redis.aclose()
        raise RuntimeError(f"Cannot connect to Redis at {settings.redis_address}")

    logger.info(f"Redis connected, key prefix {settings.redis_prefix}")
    return ListStore(redis, settings.redis_prefix)


async def close_store(store: ListStore) -> None:
    """Close the store's Redis connections."""
    await store.redis.aclose()
    logger.info("Redis connections closed")
