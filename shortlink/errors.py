"""Error types for the short link engine.

Every failure the engine surfaces carries a ``kind`` tag so callers (the HTTP
layer, the CLI) can branch on it without parsing messages.
"""

from typing import Optional


class ShortenerError(Exception):
    """Base class for all short link errors."""
    
    kind = "error"
    
    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
    
    def to_dict(self) -> dict:
        """Convert to an error payload."""
        return {"error": self.kind, "detail": self.message}


class InvalidUrlError(ShortenerError):
    """The submitted target URL is not an absolute http(s) URL."""
    
    kind = "invalid_url"


class CapacityExhaustedError(ShortenerError):
    """Code generation kept colliding past the attempt bound."""
    
    kind = "capacity_exhausted"


class NotFoundError(ShortenerError):
    """The short code does not exist."""
    
    kind = "not_found"


class StoreUnavailableError(ShortenerError):
    """The storage backend failed; the caller decides whether to retry."""
    
    kind = "store_unavailable"


class OperationTimeoutError(ShortenerError):
    """A storage wait exceeded the caller supplied timeout."""
    
    kind = "timeout"
