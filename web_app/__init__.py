"""HTTP layer for the link gateway."""

from .app_factory import create_app

__all__ = ["create_app"]
