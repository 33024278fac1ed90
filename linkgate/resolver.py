"""Redirect resolution with visit tracking."""

import logging
from datetime import datetime, timezone
from typing import Optional

from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .errors import NotFound, StoreError, StoreUnavailable


class RedirectResolver:
    """Resolves a code to its target URL and records one visit.

    The visit is a single atomic store update, awaited before ``resolve``
    returns. When that update fails, the redirect still succeeds: the
    failure is logged and counted in ``missed_visits``.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        cache: Optional[RedisCache] = None,
        visit_retry_attempts: int = 2,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize resolver.

        Args:
            store: Link store
            cache: Optional target URL cache
            visit_retry_attempts: Extra attempts when the store is unavailable
            logger: Optional logger
        """
        self.store = store
        self.cache = cache
        self.visit_retry_attempts = visit_retry_attempts
        self.logger = logger or logging.getLogger(__name__)
        self.missed_visits = 0

    async def resolve(self, code: str) -> str:
        """Return the target URL for ``code`` and record a visit.

        Raises:
            NotFound: If no link exists for the code
            StoreError: If the lookup itself fails
        """
        target_url = None
        if self.cache:
            target_url = await self.cache.get_target_url(code)

        from_cache = target_url is not None
        if from_cache:
            self.logger.debug(f"Cache hit for {code}")
        else:
            target_url = await self.store.get_target_url(code)
            if target_url is None:
                self.logger.warning(f"Code not found: {code}")
                raise NotFound(f"Code '{code}' not found")
            if self.cache:
                await self.cache.set_target_url(code, target_url)

        recorded = await self._record_visit(code)

        if recorded is False and from_cache:
            # Cached entry outlived a concurrent delete
            await self.cache.evict(code)
            self.logger.warning(f"Code not found (stale cache entry): {code}")
            raise NotFound(f"Code '{code}' not found")

        self.logger.debug(f"Resolved {code} -> {target_url}")
        return target_url

    async def _record_visit(self, code: str) -> Optional[bool]:
        """Apply the click update.

        Only ``StoreUnavailable`` is retried: the update never reached the
        store. Any other store error may have come after the increment
        committed, so the visit is dropped rather than risk counting it twice.

        Returns:
            True if recorded, False if the link no longer exists, None if the
            visit was dropped
        """
        attempts = 1 + self.visit_retry_attempts
        for attempt in range(1, attempts + 1):
            try:
                link = await self.store.record_visit(code, datetime.now(timezone.utc))
            except StoreUnavailable as e:
                if attempt < attempts:
                    self.logger.warning(f"Visit update for {code} not sent (attempt {attempt}): {e}")
                    continue
                self._drop_visit(code, f"store unavailable after {attempts} attempts: {e}")
                return None
            except StoreError as e:
                self._drop_visit(code, f"outcome unknown: {e}")
                return None

            if link is None:
                self.logger.warning(f"Link vanished before visit was recorded: {code}")
                return False
            return True

    def _drop_visit(self, code: str, reason: str) -> None:
        self.missed_visits += 1
        self.logger.error(f"Dropped visit for {code}, {reason}")
