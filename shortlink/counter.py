"""Per-code click counters."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .errors import NotFoundError


class ClickCounterBase(ABC):
    """Abstract base class for click counters."""

    @abstractmethod
    async def register(self, code: str) -> None:
        """Start tracking a code with a count of zero.

        Args:
            code: The short code to track
        """
        pass

    @abstractmethod
    async def increment(self, code: str) -> int:
        """Atomically add one click to a code.

        Args:
            code: The short code that was resolved

        Returns:
            The count after the increment

        Raises:
            NotFoundError: If the code is not tracked
        """
        pass

    @abstractmethod
    async def get(self, code: str) -> Optional[int]:
        """Get the current count for a code.

        Args:
            code: The short code

        Returns:
            Current count, or None if the code is not tracked
        """
        pass


class InMemoryClickCounter(ClickCounterBase):
    """Click counter holding counts in process memory.

    Each code gets its own lock, so increments on different codes never wait
    on each other while increments on the same code are serialized.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._counts: Dict[str, int] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    async def register(self, code: str) -> None:
        if code in self._counts:
            return
        self._counts[code] = 0
        self._locks[code] = asyncio.Lock()

    async def increment(self, code: str) -> int:
        lock = self._locks.get(code)
        if lock is None:
            raise NotFoundError(f"Short code '{code}' not found", code=code)

        async with lock:
            new_count = self._counts[code] + 1
            self._counts[code] = new_count

        self.logger.debug(f"Incremented clicks for {code}: {new_count}")
        return new_count

    async def get(self, code: str) -> Optional[int]:
        return self._counts.get(code)
