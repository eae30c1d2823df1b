"""
Redis connection management for the secondary document store
"""

import redis.asyncio as redis
import logging

from app.config import settings

logger = logging.getLogger(__name__)


def create_redis_client(redis_url: str) -> redis.Redis:
    """
    Create a Redis client; no connection is made until the first command
    """
    return redis.from_url(
        redis_url,
        decode_responses=True,
        socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
        socket_timeout=settings.REDIS_CONNECT_TIMEOUT,
    )


async def close_redis(client: redis.Redis):
    """
    Close Redis connection
    """
    await client.aclose()
    logger.info("Redis connection closed")
