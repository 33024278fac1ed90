"""Code allocation for new links."""

import logging
from datetime import datetime, timezone
from typing import Optional

from .database.base import LinkStoreBase
from .database.models import Link
from .errors import (
    AllocationExhausted,
    CodeConflict,
    DuplicateCodeError,
    InvalidCodeFormat,
    InvalidURL,
)
from .common.validators import is_valid_url, is_valid_code
from .shortcode import ShortCodeGenerator


class CodeAllocator:
    """Assigns a unique code to a new target URL.

    The existence pre-check only saves a failed insert on obviously taken
    codes. Two allocators can both pass it for the same code, so the store's
    uniqueness constraint decides: a ``DuplicateCodeError`` on insert becomes
    ``CodeConflict`` for requested codes and a fresh candidate for generated
    ones.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        generator: Optional[ShortCodeGenerator] = None,
        max_attempts: int = 5,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize allocator.

        Args:
            store: Link store enforcing code uniqueness
            generator: Optional short code generator
            max_attempts: Number of generated candidates to try before giving up
            logger: Optional logger
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.store = store
        self.generator = generator or ShortCodeGenerator()
        self.max_attempts = max_attempts
        self.logger = logger or logging.getLogger(__name__)

    async def allocate(self, target_url: str, requested_code: Optional[str] = None) -> Link:
        """Create a link for ``target_url``.

        Args:
            target_url: Absolute http(s) URL to redirect to
            requested_code: Optional caller-chosen code; empty means generate one

        Returns:
            The created link (clicks=0, no last_accessed)

        Raises:
            InvalidURL: If the target URL is not an absolute http(s) URL
            InvalidCodeFormat: If the requested code is not 6-8 letters/digits
            CodeConflict: If the requested code is taken
            AllocationExhausted: If every generated candidate collided
            StoreError: If the store fails
        """
        is_valid, error = is_valid_url(target_url)
        if not is_valid:
            raise InvalidURL(f"Invalid URL: {error}")

        if requested_code:
            is_valid, error = is_valid_code(requested_code)
            if not is_valid:
                raise InvalidCodeFormat(error)
            link = await self._claim_requested(requested_code, target_url)
        else:
            link = await self._claim_generated(target_url)

        self.logger.info(f"Created link: {link.code} -> {link.target_url}")
        return link

    async def _claim_requested(self, code: str, target_url: str) -> Link:
        if await self.store.code_exists(code):
            raise CodeConflict(f"Code '{code}' already exists")

        try:
            return await self.store.insert_link(code, target_url, self._now())
        except DuplicateCodeError as e:
            self.logger.info(f"Lost creation race for requested code: {code}")
            raise CodeConflict(f"Code '{code}' already exists") from e

    async def _claim_generated(self, target_url: str) -> Link:
        for attempt in range(1, self.max_attempts + 1):
            code = self.generator.generate_random()

            if await self.store.code_exists(code):
                self.logger.debug(f"Generated code taken (attempt {attempt}): {code}")
                continue

            try:
                return await self.store.insert_link(code, target_url, self._now())
            except DuplicateCodeError:
                self.logger.debug(f"Generated code lost insert race (attempt {attempt}): {code}")

        self.logger.error(f"No free code after {self.max_attempts} attempts")
        raise AllocationExhausted(
            f"Unable to allocate a unique code after {self.max_attempts} attempts"
        )

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)
