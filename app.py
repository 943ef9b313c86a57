#!/usr/bin/env python3
"""
Main entry point for the short link service.

Concurrency: requests are served with async I/O (FastAPI + asyncpg pool +
redis.asyncio) in a single uvicorn process. Run several instances behind a
load balancer only with DATABASE_URL set; the in-memory store is per process.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - PostgreSQL connection URL (in-memory store if unset)
    DATABASE_CREATE_TABLES - Set to 'true' to create the schema on startup
    REDIS_URL - Redis connection URL (optional)
    BASE_DOMAIN - Base URL for short links
    CODE_LENGTH / ALPHABET - Short code shape
    DEDUP_ON_SHORTEN - Reuse codes for already shortened URLs
    PORT - Port to listen on
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortlink.factory import create_service
from shortlink.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting short link service...")

    service = await create_service(config, logger=logger)
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down short link service...")
    await service.close()
    app.state.service = None
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Short Link Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    # Service is created in the lifespan
    app = create_app(service_instance=None, config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
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
    except OSError as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
