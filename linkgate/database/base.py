"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import datetime

from .models import Link


class LinkStoreBase(ABC):
    """Abstract base class for link store operations.

    Implementations must enforce uniqueness of ``code`` themselves (raising
    ``DuplicateCodeError`` from ``insert_link``) and must apply
    ``record_visit`` as one indivisible update. Any other failure is raised
    as ``StoreError``, or ``StoreUnavailable`` when nothing reached the store.
    """

    @abstractmethod
    async def insert_link(
        self,
        code: str,
        target_url: str,
        created_at: datetime,
    ) -> Link:
        """Insert a new link.

        Args:
            code: The code to bind
            target_url: The target URL
            created_at: Creation timestamp (UTC)

        Returns:
            The stored link

        Raises:
            DuplicateCodeError: If the code is already taken
        """
        pass

    @abstractmethod
    async def get_link(self, code: str) -> Optional[Link]:
        """Get the full link record for a code.

        Args:
            code: The code to lookup

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_target_url(self, code: str) -> Optional[str]:
        """Get only the target URL for a code.

        Args:
            code: The code to lookup

        Returns:
            The target URL if found, None otherwise
        """
        pass

    @abstractmethod
    async def code_exists(self, code: str) -> bool:
        """Check if a code is already taken.

        Args:
            code: The code to check

        Returns:
            True if exists, False otherwise
        """
        pass

    @abstractmethod
    async def record_visit(self, code: str, visited_at: datetime) -> Optional[Link]:
        """Atomically increment ``clicks`` and stamp ``last_accessed``.

        Args:
            code: The code that was visited
            visited_at: Visit timestamp (UTC)

        Returns:
            The updated link, or None if the code does not exist
        """
        pass

    @abstractmethod
    async def delete_link(self, code: str) -> bool:
        """Delete a link.

        Args:
            code: The code to delete

        Returns:
            True if a row was removed, False if not found
        """
        pass

    @abstractmethod
    async def list_links(self, limit: Optional[int] = None) -> List[Link]:
        """List links, newest created first.

        Args:
            limit: Optional maximum number of links to return

        Returns:
            List of links
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release store resources."""
        pass
