"""Storage layer for short links."""

from .base import MappingStoreBase
from .memory import InMemoryMappingStore
from .postgres import PostgresMappingStore
from .cache import RedisCache
from .models import ShortLink, PutResult

__all__ = [
    "MappingStoreBase",
    "InMemoryMappingStore",
    "PostgresMappingStore",
    "RedisCache",
    "ShortLink",
    "PutResult",
]
