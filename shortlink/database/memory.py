"""In-memory implementation of the mapping store."""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from .base import MappingStoreBase
from .models import ShortLink, PutResult, CONFLICT_CODE, CONFLICT_TARGET
from ..counter import ClickCounterBase, InMemoryClickCounter
from ..errors import StoreUnavailableError


class InMemoryMappingStore(MappingStoreBase):
    """Mapping store for a single process.

    Inserts are serialized by one map-wide lock; clicks live in a click
    counter with per-code locks so the resolve path never waits on inserts.
    State is created with the store and only dropped when the process exits.
    """

    name = "memory"

    def __init__(
        self,
        counter: Optional[ClickCounterBase] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize in-memory store.

        Args:
            counter: Optional click counter (defaults to InMemoryClickCounter)
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.counter = counter or InMemoryClickCounter(logger=self.logger)

        self._links: Dict[str, ShortLink] = {}
        # target_url -> code of the oldest link for that target
        self._by_target: Dict[str, str] = {}
        self._lock = asyncio.Lock()
        self._closed = False

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreUnavailableError("In-memory store is closed")

    async def _with_clicks(self, link: ShortLink) -> ShortLink:
        clicks = await self.counter.get(link.code)
        return replace(link, clicks=clicks or 0)

    async def put_if_absent(
        self,
        code: str,
        target_url: str,
        created_at: Optional[datetime] = None,
        dedup_target: bool = False,
    ) -> PutResult:
        self._ensure_open()

        if created_at is None:
            created_at = datetime.now(timezone.utc)

        async with self._lock:
            existing = self._links.get(code)
            if existing is not None:
                self.logger.debug(f"Short code already exists: {code}")
                return PutResult(
                    created=False,
                    link=await self._with_clicks(existing),
                    conflict=CONFLICT_CODE,
                )

            if dedup_target and target_url in self._by_target:
                existing = self._links[self._by_target[target_url]]
                return PutResult(
                    created=False,
                    link=await self._with_clicks(existing),
                    conflict=CONFLICT_TARGET,
                )

            link = ShortLink(code=code, target_url=target_url, created_at=created_at)
            await self.counter.register(code)
            self._links[code] = link
            self._by_target.setdefault(target_url, code)

        self.logger.debug(f"Stored short link: {code} -> {target_url}")
        return PutResult(created=True, link=link)

    async def find_by_target(self, target_url: str) -> Optional[ShortLink]:
        self._ensure_open()

        code = self._by_target.get(target_url)
        if code is None:
            return None
        return await self._with_clicks(self._links[code])

    async def get(self, code: str) -> Optional[ShortLink]:
        self._ensure_open()

        link = self._links.get(code)
        if link is None:
            return None
        return await self._with_clicks(link)

    async def increment_clicks(self, code: str) -> int:
        self._ensure_open()
        return await self.counter.increment(code)

    async def list_recent(self, limit: int = 100) -> List[ShortLink]:
        self._ensure_open()

        links = sorted(self._links.values(), key=lambda link: link.created_at, reverse=True)
        return [await self._with_clicks(link) for link in links[:limit]]

    async def get_statistics(self) -> Dict[str, Any]:
        self._ensure_open()

        total_clicks = 0
        for code in self._links:
            total_clicks += await self.counter.get(code) or 0

        return {
            "total_links": len(self._links),
            "total_clicks": total_clicks,
            "database": self.name,
            "status": "healthy",
        }

    async def health_check(self) -> bool:
        return not self._closed

    async def close(self) -> None:
        """Mark the store closed; later calls raise StoreUnavailableError."""
        self._closed = True
        self.logger.debug("In-memory store closed")
