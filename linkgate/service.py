"""Service facade over the link gateway core."""

import logging
from typing import Optional, Dict, Any, List

from .allocator import CodeAllocator
from .resolver import RedirectResolver
from .shortcode import ShortCodeGenerator
from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .database.models import Link
from .errors import NotFound


class LinkService:
    """Operations exposed to the HTTP layer and CLI."""

    def __init__(
        self,
        store: LinkStoreBase,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_allocation_attempts: int = 5,
        visit_retry_attempts: int = 2,
    ):
        """Initialize link service.

        Args:
            store: Link store instance
            cache: Optional target URL cache
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_allocation_attempts: Generated candidates tried per creation
            visit_retry_attempts: Extra attempts when the store is unavailable
        """
        self.store = store
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)
        self.allocator = CodeAllocator(
            store=store,
            generator=short_code_generator,
            max_attempts=max_allocation_attempts,
            logger=self.logger,
        )
        self.resolver = RedirectResolver(
            store=store,
            cache=cache,
            visit_retry_attempts=visit_retry_attempts,
            logger=self.logger,
        )

    async def create_link(self, target_url: str, code: Optional[str] = None) -> Link:
        """Create a link, allocating a code unless one is requested."""
        link = await self.allocator.allocate(target_url, code)

        if self.cache:
            await self.cache.set_target_url(link.code, link.target_url)

        return link

    async def list_links(self, limit: Optional[int] = None) -> List[Link]:
        """List links, newest created first.

        Raises:
            ValueError: If limit is negative
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        return await self.store.list_links(limit)

    async def get_link(self, code: str) -> Link:
        """Get a link with its current usage counters.

        Raises:
            NotFound: If no link exists for the code
        """
        link = await self.store.get_link(code)
        if link is None:
            raise NotFound(f"Code '{code}' not found")
        return link

    async def remove(self, code: str) -> bool:
        """Delete a link.

        Returns:
            True if a link was removed
        """
        removed = await self.store.delete_link(code)

        # A concurrent resolve may still re-cache the URL; the resolver evicts
        # it again when its visit update finds no row.
        if self.cache:
            await self.cache.evict(code)

        if removed:
            self.logger.info(f"Deleted link: {code}")
        return removed

    async def delete_link(self, code: str) -> None:
        """Delete a link, failing if it does not exist.

        Raises:
            NotFound: If no link exists for the code
        """
        if not await self.remove(code):
            raise NotFound(f"Code '{code}' not found")

    async def redirect(self, code: str) -> str:
        """Resolve a code to its target URL, recording the visit."""
        return await self.resolver.resolve(code)

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()

        cache_status = "disabled"
        if self.cache and self.cache.enabled:
            cache_status = "healthy" if await self.cache.health_check() else "unhealthy"

        return {
            "database": db_healthy,
            "cache": cache_status,
            "missed_visits": self.resolver.missed_visits,
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close store and cache connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()
