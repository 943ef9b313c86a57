"""Abstract base class for mapping store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from datetime import datetime

from .models import ShortLink, PutResult


class MappingStoreBase(ABC):
    """Abstract base class for short link storage.

    ``put_if_absent`` is the only way to create a link and ``increment_clicks``
    the only way to change one. Backend failures are raised as
    ``StoreUnavailableError`` and are never retried here.
    """

    name = "base"

    @abstractmethod
    async def put_if_absent(
        self,
        code: str,
        target_url: str,
        created_at: Optional[datetime] = None,
        dedup_target: bool = False,
    ) -> PutResult:
        """Atomically create a mapping unless the code is already taken.

        Args:
            code: The short code to use
            target_url: The target URL
            created_at: Optional creation timestamp (defaults to now UTC)
            dedup_target: Also refuse the insert when a link for the same
                target already exists

        Returns:
            PutResult; exactly one of several concurrent callers for the same
            code sees ``created=True``
        """
        pass

    @abstractmethod
    async def find_by_target(self, target_url: str) -> Optional[ShortLink]:
        """Find the oldest link for an exact target URL.

        Args:
            target_url: The target URL to look up

        Returns:
            ShortLink if one exists, None otherwise
        """
        pass

    @abstractmethod
    async def get(self, code: str) -> Optional[ShortLink]:
        """Get the link for a short code.

        Args:
            code: The short code to lookup

        Returns:
            ShortLink if found, None otherwise
        """
        pass

    @abstractmethod
    async def increment_clicks(self, code: str) -> int:
        """Atomically increment the click count for a short code.

        Args:
            code: The short code to update

        Returns:
            The new click count

        Raises:
            NotFoundError: If the code does not exist
        """
        pass

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> List[ShortLink]:
        """List recently created links, newest first.

        Args:
            limit: Maximum number of links to return
        """
        pass

    @abstractmethod
    async def get_statistics(self) -> Dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with total_links, total_clicks and the backend name
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is healthy."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release store resources."""
        pass
