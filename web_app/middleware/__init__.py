"""Middleware for the link gateway web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
