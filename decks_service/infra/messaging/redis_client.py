"""
Redis client for the event bus and the response cache.
"""

import redis.asyncio as redis

from decks_service.infra.config.logging_config import get_logger


def create_redis_client(redis_url: str) -> redis.Redis:
    """Create a Redis client; connections are opened lazily on first command."""
    logger = get_logger("infra.redis")
    client = redis.from_url(redis_url, decode_responses=True)
    logger.info("redis.client.create", url=redis_url)
    return client
