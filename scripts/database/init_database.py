#!/usr/bin/env python3
"""
Manually initialize the PostgreSQL schema for the short link service.

Usage:
    python init_database.py --database-url postgresql://postgres@localhost:5432/shortlink
"""

import argparse
import asyncio
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from shortlink.database.postgres import PostgresMappingStore
from shortlink.errors import StoreUnavailableError
from shortlink.common.logging_config import setup_logging


async def main():
    parser = argparse.ArgumentParser(description="Initialize short link tables")
    parser.add_argument(
        "--database-url",
        default=os.getenv("DATABASE_URL", "postgresql://postgres@localhost:5432/shortlink"),
        help="PostgreSQL connection URL"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args()

    logger = setup_logging(level="DEBUG" if args.verbose else "INFO")

    logger.info("Connecting to PostgreSQL...")
    store = PostgresMappingStore(db_config=args.database_url, logger=logger)

    try:
        await store.ensure_schema()

        if not await store.health_check():
            logger.error("Database health check failed")
            return 1

        logger.info("Database health check passed")
        return 0

    except StoreUnavailableError as e:
        logger.error(f"Error initializing tables: {e}")
        return 1

    finally:
        await store.close()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
