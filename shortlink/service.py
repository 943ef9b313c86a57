"""Business logic service for the short link engine."""

import asyncio
import logging
from typing import Optional, Dict, Any, Awaitable, List, TypeVar
from datetime import datetime, timezone

from .shortcode import ShortCodeGenerator
from .database.base import MappingStoreBase
from .database.cache import RedisCache
from .database.models import (
    ShortLink,
    ShortenResult,
    ResolveResult,
    CONFLICT_TARGET,
)
from .common.validators import is_valid_url
from .common.url_builder import build_short_url
from .errors import (
    ShortenerError,
    InvalidUrlError,
    CapacityExhaustedError,
    NotFoundError,
    OperationTimeoutError,
)

T = TypeVar("T")

# Codes longer than this are rejected before any storage call
MAX_CODE_LENGTH = 64


class ShortenerService:
    """Service layer orchestrating code generation, storage and caching."""

    def __init__(
        self,
        store: MappingStoreBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        cache: Optional[RedisCache] = None,
        logger: Optional[logging.Logger] = None,
        dedup_on_shorten: bool = True,
        max_generation_attempts: int = 5,
        base_domain: str = "https://lnk.sh",
        path_prefix: str = "",
        default_timeout: Optional[float] = None,
    ):
        """Initialize shortener service.

        Args:
            store: Mapping store instance
            short_code_generator: Optional short code generator
            cache: Optional read-through cache for resolution
            logger: Optional logger
            dedup_on_shorten: Reuse an existing code for an already shortened URL
            max_generation_attempts: Code collisions tolerated per shorten
            base_domain: Base URL used to compose short URLs
            path_prefix: Optional path prefix for short URLs
            default_timeout: Seconds to wait on storage when the caller gives none
        """
        if max_generation_attempts < 1:
            raise ValueError("max_generation_attempts must be at least 1")

        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)
        self.dedup_on_shorten = dedup_on_shorten
        self.max_generation_attempts = max_generation_attempts
        self.base_domain = base_domain
        self.path_prefix = path_prefix
        self.default_timeout = default_timeout

    async def shorten(
        self,
        target_url: str,
        dedup: Optional[bool] = None,
        timeout: Optional[float] = None,
    ) -> ShortenResult:
        """Shorten a URL.

        Args:
            target_url: The URL to shorten
            dedup: Override the service dedup policy for this request
            timeout: Seconds to wait on storage before giving up

        Returns:
            ShortenResult; ``created`` is False when an existing link was reused

        Raises:
            InvalidUrlError: If the URL is not an absolute http(s) URL
            CapacityExhaustedError: If every generated code collided
            StoreUnavailableError: If the store failed
            OperationTimeoutError: If the timeout expired
        """
        is_valid, error = is_valid_url(target_url)
        if not is_valid:
            raise InvalidUrlError(f"Invalid URL: {error}")

        if dedup is None:
            dedup = self.dedup_on_shorten

        link, created = await self._with_timeout(
            self._find_or_create(target_url, dedup),
            timeout,
        )

        return ShortenResult(
            code=link.code,
            short_url=self.short_url_for(link.code),
            target_url=link.target_url,
            created_at=link.created_at,
            created=created,
        )

    async def resolve(
        self,
        code: str,
        timeout: Optional[float] = None,
    ) -> ResolveResult:
        """Resolve a short code to its target and count the click.

        The click increment is best effort: if it fails or times out the
        failure is logged and the target is still returned.

        Args:
            code: The short code to resolve
            timeout: Seconds to wait on each storage phase

        Returns:
            ResolveResult with the target and the click count

        Raises:
            NotFoundError: If the code does not exist
            StoreUnavailableError: If the lookup failed
            OperationTimeoutError: If the lookup timed out
        """
        target_url, known_clicks = await self._with_timeout(self._lookup(code), timeout)

        try:
            clicks = await self._with_timeout(self.store.increment_clicks(code), timeout)
        except ShortenerError as e:
            self.logger.warning(f"Click not counted for {code}: [{e.kind}] {e.message}")
            clicks = known_clicks

        self.logger.debug(f"Resolved {code} -> {target_url} (clicks={clicks})")
        return ResolveResult(target_url=target_url, clicks=clicks)

    async def get_link(self, code: str, timeout: Optional[float] = None) -> ShortLink:
        """Get complete information about a short link without counting a click.

        Raises:
            NotFoundError: If the code does not exist
        """
        self._check_code(code)
        link = await self._with_timeout(self.store.get(code), timeout)
        if link is None:
            raise NotFoundError(f"Short code '{code}' not found", code=code)
        return link

    async def list_recent(self, limit: int = 100) -> List[ShortLink]:
        """List recently created links."""
        return await self._with_timeout(self.store.list_recent(limit), None)

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics.

        Returns:
            Dictionary with statistics
        """
        store_stats = await self._with_timeout(self.store.get_statistics(), None)

        return {
            **store_stats,
            "cache_enabled": self.cache is not None and self.cache.enabled,
            "dedup_on_shorten": self.dedup_on_shorten,
            "code_length": self.generator.length,
            "keyspace_size": self.generator.keyspace_size,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()

        cache_healthy = True
        if self.cache and self.cache.enabled:
            cache_healthy = await self.cache.ping()

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    def short_url_for(self, code: str) -> str:
        """Compose the public short URL for a code."""
        return build_short_url(code, self.base_domain, self.path_prefix)

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()

    async def _find_or_create(self, target_url: str, dedup: bool) -> tuple:
        """Return (link, created) for a validated target URL."""
        if dedup:
            existing = await self.store.find_by_target(target_url)
            if existing:
                self.logger.debug(f"Reusing {existing.code} for {target_url}")
                return existing, False

        for attempt in range(1, self.max_generation_attempts + 1):
            code = self.generator.generate()
            result = await self.store.put_if_absent(
                code,
                target_url,
                created_at=datetime.now(timezone.utc),
                dedup_target=dedup,
            )

            if result.created:
                if self.cache:
                    await self.cache.set(self.cache.get_cache_key(code), target_url)
                self.logger.info(f"Created short link: {code} -> {target_url}")
                return result.link, True

            if result.conflict == CONFLICT_TARGET:
                # Another request created a link for this URL first
                self.logger.debug(f"Lost dedup race for {target_url}, using {result.link.code}")
                return result.link, False

            self.logger.warning(
                f"Short code collision on {code} "
                f"(attempt {attempt}/{self.max_generation_attempts})"
            )

        raise CapacityExhaustedError(
            f"Unable to generate a unique short code after "
            f"{self.max_generation_attempts} attempts"
        )

    async def _lookup(self, code: str) -> tuple:
        """Return (target_url, last known clicks) for a code."""
        self._check_code(code)

        if self.cache:
            cached_url = await self.cache.get(self.cache.get_cache_key(code))
            if cached_url:
                self.logger.debug(f"Cache hit for {code}")
                return cached_url, None

        link = await self.store.get(code)
        if link is None:
            self.logger.warning(f"Short code not found: {code}")
            raise NotFoundError(f"Short code '{code}' not found", code=code)

        if self.cache:
            await self.cache.set(self.cache.get_cache_key(code), link.target_url)

        return link.target_url, link.clicks

    def _check_code(self, code: str) -> None:
        if not code or not isinstance(code, str) or len(code) > MAX_CODE_LENGTH:
            raise NotFoundError(f"Short code '{code}' not found", code=code)

    async def _with_timeout(self, awaitable: Awaitable[T], timeout: Optional[float]) -> T:
        """Await a storage call, bounded by the request or default timeout."""
        if timeout is None:
            timeout = self.default_timeout
        if timeout is None:
            return await awaitable

        try:
            return await asyncio.wait_for(awaitable, timeout)
        except asyncio.TimeoutError as e:
            raise OperationTimeoutError(
                f"Storage did not respond within {timeout}s"
            ) from e
