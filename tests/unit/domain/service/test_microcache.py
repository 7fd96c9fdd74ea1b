"""Unit tests for MicrocacheService."""

from uuid import uuid4

import pytest

from huddle.adapter.cache.memory import InMemoryCacheStore
from huddle.config import CacheSettings
from huddle.domain.model.perf import CacheEventType
from huddle.domain.service import MicrocacheService, PerfRecorder
from huddle.domain.service.cache_service import content_hash
from huddle.domain.value import GroupId, PostId


@pytest.fixture
def perf_recorder():
    return PerfRecorder()


@pytest.fixture
def microcache(perf_recorder):
    return MicrocacheService(
        store=InMemoryCacheStore(),
        perf_recorder=perf_recorder,
        cache_settings=CacheSettings(),
    )


class Counter:
    """Async fetcher that counts its calls."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.value


class TestGetOrSet:
    """Tests for the read-through lookup."""

    @pytest.mark.asyncio
    async def test_miss_then_hit(self, microcache, perf_recorder):
        """The first lookup fetches, the second is served from cache."""
        # Arrange
        fetcher = Counter({"total": 3})
        key = MicrocacheService.feed_key("acme", "abc")

        # Act
        first = await microcache.get_or_set(key, 10, fetcher)
        second = await microcache.get_or_set(key, 10, fetcher)

        # Assert
        assert first.from_cache is False
        assert second.from_cache is True
        assert first.value == second.value == {"total": 3}
        assert fetcher.calls == 1
        counts = perf_recorder.cache_summary().counts
        assert (counts.hit, counts.miss) == (1, 1)
        assert counts.hit_rate == 50

    @pytest.mark.asyncio
    async def test_fetcher_errors_propagate_and_store_nothing(self, microcache):
        """A failing fetcher leaves the key empty."""

        async def broken():
            raise RuntimeError("database down")

        with pytest.raises(RuntimeError):
            await microcache.get_or_set("feed:v1:acme:x", 10, broken)

        assert await microcache.store.get("feed:v1:acme:x") is None


class TestComputeTtl:
    """Tests for TTL tiers."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            (f"/acme/posts/{uuid4()}", 15),
            (f"/acme/posts/{uuid4()}/", 15),
            ("/acme/feed", 10),
            ("/acme/posts", 10),
            (f"/acme/groups/{uuid4()}/feed", 10),
            ("/acme/admin/perf", 5),
            ("/acme/posts/not-a-uuid", 5),
        ],
    )
    def test_tiers(self, microcache, path, expected):
        """Post paths get 15s, feed-like paths 10s, the rest 5s."""
        assert microcache.compute_ttl(path) == expected


class TestKeysAndBusting:
    """Tests for key layout and invalidation."""

    def test_key_formats(self):
        """Keys are namespaced and versioned per tenant."""
        group_id = GroupId(uuid4())
        post_id = PostId(uuid4())

        assert MicrocacheService.feed_key("acme", "d1") == "feed:v1:acme:d1"
        assert (
            MicrocacheService.group_feed_key("acme", group_id, "d1")
            == f"groupfeed:v1:acme:{group_id}:d1"
        )
        assert MicrocacheService.post_key("acme", post_id) == f"post:v1:acme:{post_id}"

    def test_content_hash_ignores_key_order(self):
        """Equal structures hash equally regardless of key order."""
        assert content_hash({"a": 1, "b": [1, 2]}) == content_hash({"b": [1, 2], "a": 1})
        assert content_hash({"a": 1}) != content_hash({"a": 2})

    @pytest.mark.asyncio
    async def test_bust_tenant_leaves_other_tenants(self, microcache, perf_recorder):
        """Busting one tenant keeps other tenants' pages and post views."""
        # Arrange
        store = microcache.store
        await store.set(MicrocacheService.feed_key("acme", "p1"), 1, 10)
        await store.set(MicrocacheService.feed_key("acme", "p2"), 2, 10)
        await store.set(MicrocacheService.feed_key("globex", "p1"), 3, 10)
        post_key = MicrocacheService.post_key("acme", PostId(uuid4()))
        await store.set(post_key, 4, 15)

        # Act
        removed = await microcache.bust_tenant("acme")

        # Assert
        assert removed == 2
        assert await store.get(MicrocacheService.feed_key("globex", "p1")) == 3
        assert await store.get(post_key) == 4
        counts = perf_recorder.cache_summary().counts
        assert counts.bust == 2

    @pytest.mark.asyncio
    async def test_bust_group_only_touches_that_group(self, microcache):
        """Group busting removes that group's pages only."""
        # Arrange
        store = microcache.store
        group_a, group_b = GroupId(uuid4()), GroupId(uuid4())
        await store.set(MicrocacheService.group_feed_key("acme", group_a, "d"), 1, 10)
        await store.set(MicrocacheService.group_feed_key("acme", group_b, "d"), 2, 10)

        # Act
        removed = await microcache.bust_group("acme", group_a)

        # Assert
        assert removed == 1
        assert await store.get(MicrocacheService.group_feed_key("acme", group_b, "d")) == 2

    @pytest.mark.asyncio
    async def test_bust_post_emits_event(self, microcache, perf_recorder):
        """Busting a post view deletes the key and logs a bust."""
        post_id = PostId(uuid4())
        key = MicrocacheService.post_key("acme", post_id)
        await microcache.store.set(key, {"id": str(post_id)}, 15)

        await microcache.bust_post("acme", post_id)

        assert await microcache.store.get(key) is None
        last = perf_recorder.cache_summary().recent[0]
        assert last.type == CacheEventType.BUST
        assert last.key == key
