"""Redis-backed cache store."""

import json
import re
from typing import Any, Optional

import logfire
from redis.asyncio.client import Redis as AsyncRedis
from redis.exceptions import RedisError

from huddle.domain.service.cache_service import CacheStore

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")
_DELETE_BATCH = 500


def escape_glob(text: str) -> str:
    """Escape Redis MATCH glob characters so the text matches literally."""
    return _GLOB_SPECIAL.sub(r"\\\1", text)


class RedisCacheStore(CacheStore):
    """Cache store shared by every worker through Redis.

    TTL is enforced by Redis (``SET ... EX``). Prefix deletes walk the
    keyspace with ``SCAN`` so they never block the server.
    """

    def __init__(self, client: AsyncRedis) -> None:
        """Initialize store.

        Args:
            client: redis.asyncio client created with ``decode_responses=True``
        """
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheStore":
        """Build a store with its own connection pool."""
        return cls(AsyncRedis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> Optional[Any]:
        raw = await self.client.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logfire.warn("Discarding undecodable cache entry", key=key)
            await self.client.delete(key)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        await self.client.set(key, json.dumps(value), ex=max(1, ttl_seconds))

    async def delete(self, key: str) -> None:
        await self.client.delete(key)

    async def delete_prefix(self, prefix: str) -> int:
        with logfire.span("redis_cache.delete_prefix", prefix=prefix):
            removed = 0
            batch: list[str] = []
            async for key in self.client.scan_iter(
                match=f"{escape_glob(prefix)}*", count=_DELETE_BATCH
            ):
                batch.append(key)
                if len(batch) >= _DELETE_BATCH:
                    removed += await self.client.delete(*batch)
                    batch = []
            if batch:
                removed += await self.client.delete(*batch)
            return removed

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            logfire.warn("Redis ping failed", error=str(e))
            return False

    async def close(self) -> None:
        await self.client.aclose()
