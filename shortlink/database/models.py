"""Data models for the short link store."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class ShortLink:
    """Represents one code -> target mapping."""

    code: str
    target_url: str
    created_at: datetime
    clicks: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "target_url": self.target_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "clicks": self.clicks,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShortLink":
        """Create from dictionary or database row."""
        created_at = data["created_at"]
        if not isinstance(created_at, datetime):
            created_at = datetime.fromisoformat(created_at)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return cls(
            code=data["code"],
            target_url=data["target_url"],
            created_at=created_at,
            clicks=data.get("clicks", 0) or 0,
        )


# Values for PutResult.conflict
CONFLICT_CODE = "code"
CONFLICT_TARGET = "target"


@dataclass(frozen=True)
class PutResult:
    """Outcome of an atomic create-if-absent insert.

    ``link`` is the newly stored link when ``created`` is true, otherwise the
    link that was already stored and caused the conflict.
    """

    created: bool
    link: ShortLink
    conflict: Optional[str] = None


@dataclass(frozen=True)
class ShortenResult:
    """Result of shortening a URL."""

    code: str
    short_url: str
    target_url: str
    created_at: datetime
    created: bool

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "short_url": self.short_url,
            "target_url": self.target_url,
            "created_at": self.created_at.isoformat(),
            "created": self.created,
        }


@dataclass(frozen=True)
class ResolveResult:
    """Result of resolving a short code.

    ``clicks`` is None only when the count could not be updated and no
    earlier count was read (cache hit).
    """

    target_url: str
    clicks: Optional[int]
