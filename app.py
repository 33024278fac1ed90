#!/usr/bin/env python3
"""
Main entry point for the linkgate service.

Concurrency: requests are served concurrently on one event loop (FastAPI +
asyncpg pool + redis.asyncio). Set WORKERS > 1 for multi-process scaling; each
worker opens its own pool, and correctness rests on the database's unique
constraint and atomic UPDATE rather than on in-process state.

Usage:
    python app.py

Environment variables:
    STORE_BACKEND - 'postgres' (default) or 'memory'
    DATABASE_URL - PostgreSQL connection URL
    CREATE_TABLES - Set to 'true' to create the links table at startup
    REDIS_URL - Redis connection URL (optional)
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from linkgate.database import InMemoryLinkStore, PostgresLinkStore, RedisCache
from linkgate.database.base import LinkStoreBase
from linkgate.service import LinkService
from linkgate.shortcode import ShortCodeGenerator
from linkgate.common.logging_config import setup_logging
from web_app import create_app


def build_store(config: Config, logger: logging.Logger) -> LinkStoreBase:
    """Create the configured link store."""
    if config.store_backend == "memory":
        logger.warning("Using in-memory link store; links are lost on restart")
        return InMemoryLinkStore(logger=logger)
    
    logger.info("Using PostgreSQL link store")
    return PostgresLinkStore(
        dsn=config.database_url,
        pool_max_size=config.db_pool_max_size,
        timeout_seconds=config.store_timeout_seconds,
        create_tables=config.create_tables,
        logger=logger,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the store, cache and service on startup; close them on shutdown."""
    config = app.state.config
    logger = app.state.logger
    
    logger.info("Starting linkgate service...")
    
    store = build_store(config, logger)
    
    if config.redis_url:
        logger.info("Connecting to Redis")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")
        cache = None
    
    service = LinkService(
        store=store,
        cache=cache,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger,
        max_allocation_attempts=config.max_allocation_attempts,
        visit_retry_attempts=config.visit_retry_attempts,
    )
    
    app.state.store = store
    app.state.cache = cache
    app.state.service = service
    
    logger.info("Service started successfully")
    
    yield
    
    logger.info("Shutting down linkgate service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()
    
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )
    
    logger.info("linkgate service")
    logger.debug(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")
    
    app = create_app(
        store_instance=None,  # Set in lifespan
        cache_instance=None,
        service_instance=None,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan
    
    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=False,
    )
    
    server = uvicorn.Server(uvicorn_config)
    
    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True
    
    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)
    
    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
