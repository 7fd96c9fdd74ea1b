"""In-process cache store."""

import json
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import logfire

from huddle.domain.service.cache_service import CacheStore


@dataclass
class _Entry:
    payload: str
    expires_at: float
    seen: int = 0


class InMemoryCacheStore(CacheStore):
    """Dict-backed cache store with lazy expiry and bounded size.

    When the store is full, the least-read entries are evicted in one go
    (``eviction_ratio`` of capacity, rounded up). None of the methods await,
    so each call runs to completion without interleaving with other
    coroutines on the loop.
    """

    def __init__(
        self,
        max_keys: int = 500,
        eviction_ratio: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize store.

        Args:
            max_keys: Capacity before eviction kicks in
            eviction_ratio: Share of capacity evicted when full
            clock: Monotonic seconds source
        """
        self.max_keys = max_keys
        self.eviction_ratio = eviction_ratio
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        entry.seen += 1
        return json.loads(entry.payload)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        payload = json.dumps(value)
        if key not in self._entries and len(self._entries) >= self.max_keys:
            self._evict()
        self._entries[key] = _Entry(
            payload=payload, expires_at=self._clock() + ttl_seconds
        )

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def delete_prefix(self, prefix: str) -> int:
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def _evict(self) -> None:
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for key in expired:
            del self._entries[key]
        if len(self._entries) < self.max_keys:
            return

        batch = max(1, math.ceil(self.max_keys * self.eviction_ratio))
        coldest = sorted(self._entries.items(), key=lambda item: item[1].seen)[:batch]
        for key, _ in coldest:
            del self._entries[key]
        logfire.debug("Cache evicted", evicted=len(coldest), expired=len(expired))
