"""Microcache infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire

from huddle.adapter.cache import InMemoryCacheStore, RedisCacheStore
from huddle.config import CacheSettings
from huddle.domain.service import CacheStore
from huddle.util.di.base import ProviderBase
from huddle.util.observability import instrument_redis


class CacheProvider(ProviderBase):
    """Cache component base."""

    __mock_component__ = "cache"


class ProdCacheProvider(CacheProvider):
    """Production cache provider (in-process or Redis, per settings)."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_cache_store(
        self, cache_settings: CacheSettings
    ) -> AsyncIterator[CacheStore]:
        """Provide the configured cache backend.

        The Redis connection pool is closed when the container shuts down.
        """
        if cache_settings.backend == "redis":
            instrument_redis()
            store = RedisCacheStore.from_url(cache_settings.redis_url)
            logfire.info("Using Redis cache store")
            try:
                yield store
            finally:
                await store.close()
        else:
            logfire.info("Using in-memory cache store", max_keys=cache_settings.max_keys)
            yield InMemoryCacheStore(
                max_keys=cache_settings.max_keys,
                eviction_ratio=cache_settings.eviction_ratio,
            )
