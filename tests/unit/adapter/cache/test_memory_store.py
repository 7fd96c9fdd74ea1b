"""Unit tests for InMemoryCacheStore."""

import pytest

from huddle.adapter.cache.memory import InMemoryCacheStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestInMemoryCacheStore:
    """Tests for expiry, prefix delete and eviction."""

    @pytest.mark.asyncio
    async def test_values_round_trip_as_json(self):
        """Stored payloads come back equal but not identical."""
        store = InMemoryCacheStore()
        value = {"posts": [{"id": "a"}], "total": 1}

        await store.set("feed:v1:acme:x", value, ttl_seconds=10)
        cached = await store.get("feed:v1:acme:x")

        assert cached == value
        assert cached is not value

    @pytest.mark.asyncio
    async def test_expired_entries_read_as_absent(self):
        """An entry is gone once its TTL has elapsed."""
        # Arrange
        clock = FakeClock()
        store = InMemoryCacheStore(clock=clock)
        await store.set("k", "v", ttl_seconds=5)

        # Act
        clock.now += 4.9
        before = await store.get("k")
        clock.now += 0.1
        after = await store.get("k")

        # Assert
        assert before == "v"
        assert after is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_delete_prefix_counts_removed_keys(self):
        """Only keys under the literal prefix are removed."""
        # Arrange
        store = InMemoryCacheStore()
        await store.set("feed:v1:acme:1", 1, 10)
        await store.set("feed:v1:acme:2", 2, 10)
        await store.set("feed:v1:acme-labs:1", 3, 10)
        await store.set("post:v1:acme:1", 4, 10)

        # Act
        removed = await store.delete_prefix("feed:v1:acme:")

        # Assert
        assert removed == 2
        assert await store.get("feed:v1:acme-labs:1") == 3
        assert await store.get("post:v1:acme:1") == 4

    @pytest.mark.asyncio
    async def test_delete_missing_key_is_noop(self):
        """Deleting an absent key does not raise."""
        store = InMemoryCacheStore()

        await store.delete("nothing")

        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_full_store_evicts_least_read_entries(self):
        """A full store drops the coldest tenth of its capacity."""
        # Arrange
        store = InMemoryCacheStore(max_keys=10, eviction_ratio=0.1)
        for i in range(10):
            await store.set(f"k{i}", i, 60)
        for i in range(1, 10):
            await store.get(f"k{i}")

        # Act
        await store.set("fresh", "x", 60)

        # Assert
        assert len(store) == 10
        assert await store.get("k0") is None
        assert await store.get("fresh") == "x"

    @pytest.mark.asyncio
    async def test_eviction_prefers_expired_entries(self):
        """Expired entries are cleared before any live entry is evicted."""
        # Arrange
        clock = FakeClock()
        store = InMemoryCacheStore(max_keys=3, clock=clock)
        await store.set("short", 1, 1)
        await store.set("long-a", 2, 60)
        await store.set("long-b", 3, 60)
        clock.now += 2

        # Act
        await store.set("new", 4, 60)

        # Assert
        assert await store.get("long-a") == 2
        assert await store.get("long-b") == 3
        assert await store.get("new") == 4

    @pytest.mark.asyncio
    async def test_overwrite_does_not_evict(self):
        """Replacing an existing key never triggers eviction."""
        store = InMemoryCacheStore(max_keys=2)
        await store.set("a", 1, 60)
        await store.set("b", 2, 60)

        await store.set("a", 10, 60)

        assert await store.get("a") == 10
        assert await store.get("b") == 2
