"""Tests for configuration and service wiring."""

import pytest
from pydantic import ValidationError

from config import Config
from shortlink.database.memory import InMemoryMappingStore
from shortlink.database.postgres import PostgresMappingStore
from shortlink.factory import create_service, create_store


class TestConfig:
    """Test configuration defaults and validation."""
    
    def test_defaults(self):
        config = Config()
        
        assert config.code_length == 6
        assert len(config.alphabet) == 62
        assert config.dedup_on_shorten is True
        assert config.max_generation_attempts == 5
        assert config.database_url is None
    
    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("CODE_LENGTH", "8")
        monkeypatch.setenv("DEDUP_ON_SHORTEN", "false")
        monkeypatch.setenv("BASE_DOMAIN", "https://sho.rt/")
        
        config = Config()
        
        assert config.code_length == 8
        assert config.dedup_on_shorten is False
        assert config.base_domain == "https://sho.rt"
    
    @pytest.mark.parametrize("overrides", [
        {"alphabet": "aab"},
        {"alphabet": "a"},
        {"code_length": 0},
        {"max_generation_attempts": 0},
        {"base_domain": "lnk.sh"},
    ])
    def test_invalid(self, overrides):
        with pytest.raises(ValidationError):
            Config(**overrides)


class TestFactory:
    """Test building the store and service from configuration."""
    
    def test_memory_store_by_default(self, logger):
        assert isinstance(create_store(Config(), logger), InMemoryMappingStore)
    
    def test_postgres_store_when_configured(self, logger):
        config = Config(database_url="postgresql://user:pw@db.internal:5433/links")
        
        store = create_store(config, logger)
        
        assert isinstance(store, PostgresMappingStore)
        assert store.host == "db.internal"
        assert store.port == 5433
        assert store.database == "links"
    
    async def test_service_follows_config(self, logger):
        config = Config(
            code_length=8,
            alphabet="abcdef",
            dedup_on_shorten=False,
            base_domain="https://sho.rt",
            request_timeout_seconds=2.5,
        )
        
        service = await create_service(config, logger=logger)
        result = await service.shorten("https://example.com")
        
        assert len(result.code) == 8
        assert set(result.code) <= set("abcdef")
        assert result.short_url == f"https://sho.rt/{result.code}"
        assert service.dedup_on_shorten is False
        assert service.default_timeout == 2.5
        assert service.cache is None
        
        await service.close()
