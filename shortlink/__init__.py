"""Core short link engine: code generation, storage and resolution."""

from .shortcode import ShortCodeGenerator
from .service import ShortenerService
from .errors import (
    ShortenerError,
    InvalidUrlError,
    CapacityExhaustedError,
    NotFoundError,
    StoreUnavailableError,
    OperationTimeoutError,
)

__all__ = [
    "ShortCodeGenerator",
    "ShortenerService",
    "ShortenerError",
    "InvalidUrlError",
    "CapacityExhaustedError",
    "NotFoundError",
    "StoreUnavailableError",
    "OperationTimeoutError",
]
