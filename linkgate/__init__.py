"""Code allocation and redirect tracking core."""

from .shortcode import ShortCodeGenerator
from .allocator import CodeAllocator
from .resolver import RedirectResolver
from .service import LinkService

__all__ = ["ShortCodeGenerator", "CodeAllocator", "RedirectResolver", "LinkService"]
