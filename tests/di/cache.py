"""Mock cache providers for testing."""

from dishka import Scope, provide

from huddle.adapter.cache import InMemoryCacheStore
from huddle.domain.service import CacheStore
from huddle.util.di.infrastructure.cache import CacheProvider


class MockCacheProvider(CacheProvider):
    """Mock cache provider using the in-process store.

    Each test builds its own container, so every test starts with an empty
    cache.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_cache_store(self) -> CacheStore:
        """Provide in-process cache store."""
        return InMemoryCacheStore(max_keys=100)
