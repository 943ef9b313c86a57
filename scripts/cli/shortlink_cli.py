#!/usr/bin/env python3
"""
Command-line interface for the short link service.

Usage:
    python shortlink_cli.py shorten <url> [--no-dedup]
    python shortlink_cli.py resolve <code>
    python shortlink_cli.py info <code>
    python shortlink_cli.py list [--limit N]
    python shortlink_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from config import load_config
from shortlink.errors import ShortenerError
from shortlink.factory import create_service
from shortlink.common.logging_config import setup_logging


def _print_json(payload: dict, error: bool = False) -> None:
    print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)


class ShortLinkCLI:
    """Command-line interface for the short link service."""

    def __init__(self, database_url: Optional[str] = None, redis_url: Optional[str] = None, verbose: bool = False):
        """Initialize CLI."""
        overrides = {"log_level": "DEBUG" if verbose else "WARNING"}
        if database_url:
            overrides["database_url"] = database_url
        if redis_url:
            overrides["redis_url"] = redis_url

        self.config = load_config().model_copy(update=overrides)
        self.logger = setup_logging(level=self.config.log_level)
        self.service = None

    async def initialize(self):
        """Initialize store and service."""
        if not self.config.database_url:
            self.logger.warning("DATABASE_URL not set - links will not outlive this command")
        self.service = await create_service(self.config, logger=self.logger)

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    async def shorten(self, url: str, dedup: Optional[bool] = None):
        """Shorten a URL."""
        result = await self.service.shorten(url, dedup=dedup)
        _print_json({"success": True, **result.to_dict()})
        return 0

    async def resolve(self, code: str):
        """Resolve a short code, counting a click."""
        result = await self.service.resolve(code)
        _print_json({
            "success": True,
            "code": code,
            "target_url": result.target_url,
            "clicks": result.clicks,
        })
        return 0

    async def info(self, code: str):
        """Show a short link without counting a click."""
        link = await self.service.get_link(code)
        _print_json({
            "success": True,
            "short_url": self.service.short_url_for(code),
            **link.to_dict(),
        })
        return 0

    async def list_links(self, limit: int = 100):
        """List recent links."""
        links = await self.service.list_recent(limit)
        _print_json({
            "success": True,
            "count": len(links),
            "links": [link.to_dict() for link in links],
        })
        return 0

    async def health(self):
        """Check service health."""
        health_status = await self.service.health_check()
        stats = await self.service.get_statistics() if health_status["database"] else {}
        _print_json({
            "success": True,
            "health": health_status,
            "statistics": stats,
        })
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Short Link CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Always mint a new code
  %(prog)s shorten https://example.com/long/url --no-dedup

  # Resolve a code (counts a click)
  %(prog)s resolve aB3xY9

  # Show a link without counting
  %(prog)s info aB3xY9

  # List recent links
  %(prog)s list --limit 10
        """
    )

    parser.add_argument(
        "--database-url",
        default=None,
        help="PostgreSQL connection URL (default: DATABASE_URL env)"
    )
    parser.add_argument(
        "--redis-url",
        default=None,
        help="Redis connection URL (default: REDIS_URL env)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument(
        "--no-dedup",
        dest="dedup",
        action="store_false",
        default=None,
        help="Mint a new code even if the URL was shortened before"
    )

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short code")
    resolve_parser.add_argument("code", help="Short code to resolve")

    info_parser = subparsers.add_parser("info", help="Show link information")
    info_parser.add_argument("code", help="Short code to show")

    list_parser = subparsers.add_parser("list", help="List recent links")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum number to return")

    subparsers.add_parser("health", help="Check service health")

    return parser


async def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortLinkCLI(
        database_url=args.database_url,
        redis_url=args.redis_url,
        verbose=args.verbose,
    )

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.dedup)
        elif args.command == "resolve":
            return await cli.resolve(args.code)
        elif args.command == "info":
            return await cli.info(args.code)
        elif args.command == "list":
            return await cli.list_links(args.limit)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except ShortenerError as e:
        _print_json({"success": False, **e.to_dict()}, error=True)
        return 1

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
