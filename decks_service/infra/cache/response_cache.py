"""
Redis response cache for read actions.
"""

import json
from typing import Any, Dict, Optional

import redis.asyncio as redis

from decks_service.application.ports import CachePort
from decks_service.infra.config.logging_config import get_logger
from decks_service.infra.metrics import CACHE_LOOKUPS


class RedisResponseCache(CachePort):
    def __init__(self, redis_client: redis.Redis, prefix: str = "cache:", ttl: int = 300):
        self.redis_client = redis_client
        self.prefix = prefix
        self.ttl = ttl
        self._log = get_logger("infra.cache")

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[Any]:
        raw = await self.redis_client.get(self._key(key))
        if raw is None:
            CACHE_LOOKUPS.labels(result="miss").inc()
            return None
        CACHE_LOOKUPS.labels(result="hit").inc()
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        await self.redis_client.set(
            self._key(key), json.dumps(value), ex=ttl or self.ttl
        )

    async def clean(self, pattern: str = "**") -> int:
        """Delete matching entries. ``**`` and trailing ``.*`` match any suffix."""
        match = self._key(pattern.replace("**", "*"))
        removed = 0
        batch = []
        async for key in self.redis_client.scan_iter(match=match, count=500):
            batch.append(key)
            if len(batch) >= 500:
                removed += await self.redis_client.delete(*batch)
                batch = []
        if batch:
            removed += await self.redis_client.delete(*batch)
        self._log.info("cache.clean", pattern=pattern, removed=removed)
        return removed
