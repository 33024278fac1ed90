"""In-process link store for local runs and tests."""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, List, Dict

from .base import LinkStoreBase
from .models import Link
from ..errors import DuplicateCodeError


class InMemoryLinkStore(LinkStoreBase):
    """Dictionary-backed store with the same guarantees as the database.

    Every operation yields to the event loop before touching state, so
    concurrent callers interleave between round-trips the way they would
    against a networked store. Writes happen under a lock, which makes the
    uniqueness check and the counter update indivisible.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._links: Dict[str, Link] = {}
        self._lock = asyncio.Lock()

    async def _round_trip(self) -> None:
        await asyncio.sleep(0)

    async def insert_link(
        self,
        code: str,
        target_url: str,
        created_at: datetime,
    ) -> Link:
        await self._round_trip()
        async with self._lock:
            if code in self._links:
                raise DuplicateCodeError(code)
            link = Link(code=code, target_url=target_url, created_at=created_at)
            self._links[code] = link
        return replace(link)

    async def get_link(self, code: str) -> Optional[Link]:
        await self._round_trip()
        link = self._links.get(code)
        return replace(link) if link else None

    async def get_target_url(self, code: str) -> Optional[str]:
        await self._round_trip()
        link = self._links.get(code)
        return link.target_url if link else None

    async def code_exists(self, code: str) -> bool:
        await self._round_trip()
        return code in self._links

    async def record_visit(self, code: str, visited_at: datetime) -> Optional[Link]:
        await self._round_trip()
        async with self._lock:
            link = self._links.get(code)
            if link is None:
                return None
            link.clicks += 1
            if link.last_accessed is None or visited_at > link.last_accessed:
                link.last_accessed = visited_at
            return replace(link)

    async def delete_link(self, code: str) -> bool:
        await self._round_trip()
        async with self._lock:
            return self._links.pop(code, None) is not None

    async def list_links(self, limit: Optional[int] = None) -> List[Link]:
        await self._round_trip()
        # dicts keep insertion order, so reversing breaks created_at ties newest-first
        links = sorted(
            reversed(list(self._links.values())),
            key=lambda link: link.created_at,
            reverse=True,
        )
        if limit is not None:
            links = links[:limit]
        return [replace(link) for link in links]

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self._links.clear()
