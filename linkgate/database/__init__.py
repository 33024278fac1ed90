"""Link store layer."""

from .base import LinkStoreBase
from .postgres import PostgresLinkStore
from .memory import InMemoryLinkStore
from .cache import RedisCache
from .models import Link

__all__ = ["LinkStoreBase", "PostgresLinkStore", "InMemoryLinkStore", "RedisCache", "Link"]
