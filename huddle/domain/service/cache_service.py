"""Read-through microcache.

The microcache fronts expensive feed and post reads with a short-TTL
cache. Keys are always namespaced by tenant slug; mutations invalidate the
affected tenant, group or post keys through the busters below.

There is no stampede protection: concurrent misses for the same key each
run the fetcher, and the last ``set`` wins.
"""

import hashlib
import json
import re
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

import logfire
from pydantic import BaseModel

from huddle.config import CacheSettings
from huddle.domain.model.perf import CacheEventType
from huddle.domain.value import GroupId, PostId

from .base import Service
from .perf_service import PerfRecorder

FEED_NAMESPACE = "feed"
GROUP_FEED_NAMESPACE = "groupfeed"
POST_NAMESPACE = "post"
KEY_VERSION = "v1"

_POST_PATH = re.compile(
    r"/posts/[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}/?$"
)
_FEED_SEGMENTS = {"feed", "posts"}

T = TypeVar("T")


def content_hash(obj: Any) -> str:
    """Deterministic hash of a JSON-compatible structure.

    Dict key order does not matter. Values JSON cannot represent natively
    (UUIDs, dates, enums) are hashed by their string form.

    Args:
        obj: Structure to hash

    Returns:
        Hex digest
    """
    canonical = json.dumps(obj, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha1(canonical.encode("utf-8")).hexdigest()


class CacheStore(ABC):
    """Key/value store with TTL and prefix delete.

    Values are JSON-serializable payloads. Expired entries read as absent on
    every backend.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Read a value.

        Args:
            key: Cache key

        Returns:
            The stored value, or None if absent or expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value.

        Args:
            key: Cache key
            value: JSON-serializable payload
            ttl_seconds: Time to live
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key (no-op when absent).

        Args:
            key: Cache key
        """
        pass

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> int:
        """Remove every key starting with the prefix.

        Args:
            prefix: Literal key prefix

        Returns:
            Number of removed keys
        """
        pass

    async def ping(self) -> bool:
        """Whether the backend is reachable. In-process stores always are."""
        return True

    def hash(self, obj: Any) -> str:
        """Deterministic hash used to build cache keys from filter objects."""
        return content_hash(obj)


class CacheLookup(BaseModel, Generic[T]):
    """Result of a read-through lookup."""

    from_cache: bool
    value: T


class MicrocacheService(Service):
    """Read-through cache with tenant, group and post invalidation."""

    def __init__(
        self,
        store: CacheStore,
        perf_recorder: PerfRecorder,
        cache_settings: CacheSettings,
    ) -> None:
        """Initialize microcache.

        Args:
            store: Cache backend
            perf_recorder: Sink for hit/miss/bust events
            cache_settings: TTL tiers
        """
        self.store = store
        self.perf_recorder = perf_recorder
        self.cache_settings = cache_settings

    async def get_or_set(
        self,
        key: str,
        ttl_seconds: int,
        fetcher: Callable[[], Awaitable[Any]],
    ) -> CacheLookup[Any]:
        """Return the cached value or compute, store and return it.

        Args:
            key: Cache key
            ttl_seconds: TTL for a freshly computed value
            fetcher: Async producer of the canonical value

        Returns:
            Lookup with ``from_cache`` set on hits
        """
        cached = await self.store.get(key)
        if cached is not None:
            self._emit(CacheEventType.HIT, key)
            return CacheLookup(from_cache=True, value=cached)

        value = await fetcher()
        await self.store.set(key, value, ttl_seconds)
        self._emit(CacheEventType.MISS, key)
        return CacheLookup(from_cache=False, value=value)

    def compute_ttl(self, path: str) -> int:
        """TTL tier for a request path.

        Single-post paths (ending in a post UUID) get the post tier,
        feed-like paths get the feed tier, everything else the default.

        Args:
            path: Request path

        Returns:
            TTL in seconds
        """
        if _POST_PATH.search(path):
            return self.cache_settings.post_ttl_seconds
        segments = [s for s in path.split("/") if s]
        if segments and segments[-1] in _FEED_SEGMENTS:
            return self.cache_settings.feed_ttl_seconds
        return self.cache_settings.default_ttl_seconds

    @staticmethod
    def feed_key(slug: str, digest: str) -> str:
        return f"{FEED_NAMESPACE}:{KEY_VERSION}:{slug}:{digest}"

    @staticmethod
    def group_feed_key(slug: str, group_id: GroupId, digest: str) -> str:
        return f"{GROUP_FEED_NAMESPACE}:{KEY_VERSION}:{slug}:{group_id}:{digest}"

    @staticmethod
    def post_key(slug: str, post_id: PostId) -> str:
        return f"{POST_NAMESPACE}:{KEY_VERSION}:{slug}:{post_id}"

    async def bust_tenant(self, slug: str) -> int:
        """Drop every company feed page of a tenant."""
        prefix = f"{FEED_NAMESPACE}:{KEY_VERSION}:{slug}:"
        return await self._bust_prefix(prefix)

    async def bust_group(self, slug: str, group_id: GroupId) -> int:
        """Drop every feed page of one group."""
        prefix = f"{GROUP_FEED_NAMESPACE}:{KEY_VERSION}:{slug}:{group_id}:"
        return await self._bust_prefix(prefix)

    async def bust_post(self, slug: str, post_id: PostId) -> int:
        """Drop the cached single-post view."""
        key = self.post_key(slug, post_id)
        await self.store.delete(key)
        self._emit(CacheEventType.BUST, key, 1)
        return 1

    async def _bust_prefix(self, prefix: str) -> int:
        with logfire.span("microcache.bust", prefix=prefix):
            count = await self.store.delete_prefix(prefix)
            self._emit(CacheEventType.BUST, f"{prefix}*", count)
            logfire.info("Cache busted", prefix=prefix, count=count)
            return count

    def _emit(self, type: CacheEventType, key: str, count: int = 1) -> None:
        try:
            self.perf_recorder.cache_event(type, key, count)
        except Exception as e:
            logfire.warn("Cache event not recorded", key=key, error=str(e))
