"""Redis cache for immutable target URLs."""

import logging
from typing import Optional

import redis.asyncio as redis


class RedisCache:
    """Redis cache mapping codes to target URLs.

    Only ``target_url`` is cached; it never changes for a code. Cache failures
    are logged and treated as misses.
    """

    KEY_PREFIX = "linkgate:target:"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 300,
        logger: Optional[logging.Logger] = None,
        client: Optional[redis.Redis] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: TTL for cached target URLs
            logger: Optional logger instance
            client: Optional pre-built client (skips ``connect``)
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.client = client
        self.enabled = client is not None or redis_url is not None

        if self.enabled:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis."""
        if not self.enabled or self.client is not None:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except (redis.RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    def get_cache_key(self, code: str) -> str:
        return f"{self.KEY_PREFIX}{code}"

    async def get_target_url(self, code: str) -> Optional[str]:
        """Get a cached target URL, or None on miss or error."""
        if not self.enabled or not self.client:
            return None

        try:
            return await self.client.get(self.get_cache_key(code))
        except (redis.RedisError, OSError) as e:
            self.logger.error(f"Cache get error: {e}")
            return None

    async def set_target_url(self, code: str, target_url: str) -> bool:
        """Cache a target URL for ``ttl_seconds``."""
        if not self.enabled or not self.client:
            return False

        try:
            await self.client.setex(self.get_cache_key(code), self.ttl_seconds, target_url)
            return True
        except (redis.RedisError, OSError) as e:
            self.logger.error(f"Cache set error: {e}")
            return False

    async def evict(self, code: str) -> bool:
        """Remove a cached target URL."""
        if not self.enabled or not self.client:
            return False

        try:
            return await self.client.delete(self.get_cache_key(code)) > 0
        except (redis.RedisError, OSError) as e:
            self.logger.error(f"Cache delete error: {e}")
            return False

    async def health_check(self) -> bool:
        if not self.enabled or not self.client:
            return False
        try:
            await self.client.ping()
            return True
        except (redis.RedisError, OSError) as e:
            self.logger.error(f"Cache health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.logger.info("Redis connection closed")
