"""Unit tests for RedisCacheStore against a mocked redis.asyncio client."""

from unittest.mock import AsyncMock, MagicMock, call

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from huddle.adapter.cache.redis_store import RedisCacheStore, escape_glob
from huddle.domain.service import CacheStore


def mock_client(keys=()):
    """Client whose SCAN yields ``keys`` and whose DEL counts its arguments."""
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(side_effect=lambda *names: len(names))
    client.ping = AsyncMock(return_value=True)

    async def scan_iter(match=None, count=None):
        for key in keys:
            yield key

    client.scan_iter = MagicMock(side_effect=scan_iter)
    return client


class TestEscapeGlob:
    """Tests for escape_glob."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("feed:v1:acme:", "feed:v1:acme:"),
            ("feed:v1:ac*me:", "feed:v1:ac\\*me:"),
            ("a?b[c]", "a\\?b\\[c\\]"),
            ("back\\slash", "back\\\\slash"),
        ],
    )
    def test_glob_characters_are_escaped(self, text, expected):
        assert escape_glob(text) == expected


class TestRedisCacheStore:
    """Tests for RedisCacheStore."""

    def test_interface_cannot_be_instantiated(self):
        """CacheStore is abstract; backends must implement it."""
        with pytest.raises(TypeError):
            CacheStore()

    @pytest.mark.asyncio
    async def test_set_stores_json_with_ttl(self):
        """Values are JSON text; Redis needs a TTL of at least one second."""
        client = mock_client()
        store = RedisCacheStore(client)

        await store.set("post:v1:acme:1", {"title": "Hello"}, ttl_seconds=15)
        await store.set("post:v1:acme:2", {"title": "Hi"}, ttl_seconds=0)

        assert client.set.await_args_list == [
            call("post:v1:acme:1", '{"title": "Hello"}', ex=15),
            call("post:v1:acme:2", '{"title": "Hi"}', ex=1),
        ]

    @pytest.mark.asyncio
    async def test_get_decodes_json(self):
        client = mock_client()
        client.get.return_value = '{"total": 3, "posts": []}'
        store = RedisCacheStore(client)

        assert await store.get("feed:v1:acme:abc") == {"total": 3, "posts": []}
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_missing_key(self):
        store = RedisCacheStore(mock_client())

        assert await store.get("feed:v1:acme:abc") is None

    @pytest.mark.asyncio
    async def test_undecodable_entry_is_discarded(self):
        """A corrupt entry reads as a miss and is deleted."""
        # Arrange
        client = mock_client()
        client.get.return_value = "{not json"
        store = RedisCacheStore(client)

        # Act
        value = await store.get("feed:v1:acme:abc")

        # Assert
        assert value is None
        client.delete.assert_awaited_once_with("feed:v1:acme:abc")

    @pytest.mark.asyncio
    async def test_delete_prefix_scans_escaped_pattern(self):
        """The prefix is matched literally, even with glob characters in it."""
        # Arrange
        client = mock_client(keys=["feed:v1:ac*me:a", "feed:v1:ac*me:b"])
        store = RedisCacheStore(client)

        # Act
        removed = await store.delete_prefix("feed:v1:ac*me:")

        # Assert
        assert removed == 2
        client.scan_iter.assert_called_once_with(match="feed:v1:ac\\*me:*", count=500)
        client.delete.assert_awaited_once_with("feed:v1:ac*me:a", "feed:v1:ac*me:b")

    @pytest.mark.asyncio
    async def test_delete_prefix_deletes_in_batches(self):
        """Keys are deleted 500 at a time, with the remainder last."""
        # Arrange
        keys = [f"groupfeed:v1:acme:g1:{i}" for i in range(1201)]
        client = mock_client(keys=keys)
        store = RedisCacheStore(client)

        # Act
        removed = await store.delete_prefix("groupfeed:v1:acme:g1:")

        # Assert
        assert removed == 1201
        batch_sizes = [len(c.args) for c in client.delete.await_args_list]
        assert batch_sizes == [500, 500, 201]

    @pytest.mark.asyncio
    async def test_delete_prefix_without_matches(self):
        client = mock_client()
        store = RedisCacheStore(client)

        assert await store.delete_prefix("feed:v1:acme:") == 0
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ping(self):
        store = RedisCacheStore(mock_client())

        assert await store.ping() is True

    @pytest.mark.asyncio
    async def test_ping_failure_reports_unreachable(self):
        """Connection errors are reported as False instead of raised."""
        client = mock_client()
        client.ping.side_effect = RedisConnectionError("connection refused")
        store = RedisCacheStore(client)

        assert await store.ping() is False
