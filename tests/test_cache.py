"""Tests for the Redis target URL cache."""

from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from linkgate.database.cache import RedisCache


@pytest.fixture
def client():
    return AsyncMock()


@pytest.fixture
def cache(client, logger):
    return RedisCache(client=client, ttl_seconds=60, logger=logger)


@pytest.mark.asyncio
class TestRedisCache:
    """Cache calls and failure handling."""

    async def test_disabled_without_url_or_client(self):
        cache = RedisCache()

        assert not cache.enabled
        assert await cache.get_target_url("abc123") is None
        assert await cache.set_target_url("abc123", "https://a.com") is False

    async def test_get_uses_prefixed_key(self, cache, client):
        client.get.return_value = "https://example.com"

        assert await cache.get_target_url("abc123") == "https://example.com"
        client.get.assert_awaited_once_with("linkgate:target:abc123")

    async def test_set_uses_ttl(self, cache, client):
        assert await cache.set_target_url("abc123", "https://example.com")

        client.setex.assert_awaited_once_with("linkgate:target:abc123", 60, "https://example.com")

    async def test_evict(self, cache, client):
        client.delete.return_value = 1

        assert await cache.evict("abc123")
        client.delete.assert_awaited_once_with("linkgate:target:abc123")

    async def test_errors_are_misses(self, cache, client):
        client.get.side_effect = redis.ConnectionError("down")
        client.setex.side_effect = redis.ConnectionError("down")
        client.delete.side_effect = redis.ConnectionError("down")
        client.ping.side_effect = redis.ConnectionError("down")

        assert await cache.get_target_url("abc123") is None
        assert await cache.set_target_url("abc123", "https://a.com") is False
        assert await cache.evict("abc123") is False
        assert await cache.health_check() is False

    async def test_connect_failure_disables_cache(self, monkeypatch, logger):
        failing = AsyncMock()
        failing.ping.side_effect = redis.ConnectionError("refused")
        monkeypatch.setattr(redis, "from_url", lambda *args, **kwargs: failing)
        cache = RedisCache(redis_url="redis://localhost:6379/0", logger=logger)

        await cache.connect()

        assert not cache.enabled
        assert await cache.get_target_url("abc123") is None

    async def test_close(self, cache, client):
        await cache.close()

        client.aclose.assert_awaited_once()
