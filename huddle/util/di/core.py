"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from huddle.config import CacheSettings, FeedSettings, PerfSettings, Settings
from huddle.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_cache_settings(self, settings: Settings) -> CacheSettings:
        """Provide microcache settings."""
        return settings.cache

    @provide(scope=Scope.APP)
    def provide_feed_settings(self, settings: Settings) -> FeedSettings:
        """Provide feed settings."""
        return settings.feed

    @provide(scope=Scope.APP)
    def provide_perf_settings(self, settings: Settings) -> PerfSettings:
        """Provide perf recorder settings."""
        return settings.perf
