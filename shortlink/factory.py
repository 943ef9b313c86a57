"""Build the store, cache and service from configuration."""

import logging
from typing import Optional

from .shortcode import ShortCodeGenerator
from .service import ShortenerService
from .database.base import MappingStoreBase
from .database.memory import InMemoryMappingStore
from .database.postgres import PostgresMappingStore
from .database.cache import RedisCache


def create_store(config, logger: Optional[logging.Logger] = None) -> MappingStoreBase:
    """Create the mapping store selected by ``config.database_url``.

    Args:
        config: Configuration instance
        logger: Optional logger

    Returns:
        PostgreSQL store when a database URL is configured, otherwise an
        in-memory store
    """
    logger = logger or logging.getLogger(__name__)

    if config.database_url:
        logger.info("Using PostgreSQL mapping store")
        return PostgresMappingStore(
            db_config=config.database_url,
            pool_max_size=config.db_pool_max_size,
            create_tables=config.database_create_tables,
            logger=logger,
        )

    logger.info("Using in-memory mapping store")
    return InMemoryMappingStore(logger=logger)


async def create_service(
    config,
    logger: Optional[logging.Logger] = None,
    store: Optional[MappingStoreBase] = None,
) -> ShortenerService:
    """Create a ready to use service, connecting the cache if configured.

    Args:
        config: Configuration instance
        logger: Optional logger
        store: Optional pre-built store (defaults to ``create_store(config)``)

    Returns:
        ShortenerService instance
    """
    logger = logger or logging.getLogger(__name__)
    store = store or create_store(config, logger)

    cache = None
    if config.redis_url:
        logger.info("Connecting to Redis cache")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")

    generator = ShortCodeGenerator(
        length=config.code_length,
        alphabet=config.alphabet,
    )

    return ShortenerService(
        store=store,
        short_code_generator=generator,
        cache=cache,
        logger=logger,
        dedup_on_shorten=config.dedup_on_shorten,
        max_generation_attempts=config.max_generation_attempts,
        base_domain=config.base_domain,
        path_prefix=config.path_prefix,
        default_timeout=config.request_timeout_seconds,
    )
