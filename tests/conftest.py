"""Pytest configuration and fixtures."""

import pytest
from typing import AsyncGenerator

from shortlink.database.memory import InMemoryMappingStore
from shortlink.service import ShortenerService
from shortlink.shortcode import ShortCodeGenerator
from shortlink.common.logging_config import setup_logging


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def store(logger) -> AsyncGenerator[InMemoryMappingStore, None]:
    """Create in-memory store instance."""
    store = InMemoryMappingStore(logger=logger)
    
    yield store
    
    await store.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(length=6)


@pytest.fixture
def service(store, short_code_generator, logger) -> ShortenerService:
    """Create service instance."""
    return ShortenerService(
        store=store,
        short_code_generator=short_code_generator,
        cache=None,
        logger=logger,
        base_domain="https://lnk.sh",
    )


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/a/b",
        "https://github.com/user/repo",
        "http://stackoverflow.com/questions/123456?tab=votes",
    ]


class FixedCodeGenerator(ShortCodeGenerator):
    """Generator that replays a fixed list of codes, for collision tests."""
    
    def __init__(self, codes, length: int = 6):
        super().__init__(length=length)
        self._codes = list(codes)
    
    def generate(self) -> str:
        return self._codes.pop(0)


@pytest.fixture
def make_service(store, logger):
    """Factory for services with custom settings.
    
    ``codes`` makes the generator replay the given codes in order.
    """
    def _make(codes=None, store_instance=None, **kwargs):
        generator = FixedCodeGenerator(codes) if codes is not None else ShortCodeGenerator()
        return ShortenerService(
            store=store_instance or store,
            short_code_generator=generator,
            logger=logger,
            **kwargs,
        )
    
    return _make
