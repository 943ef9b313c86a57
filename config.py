"""Configuration management for the short link service."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator

from shortlink.shortcode import ShortCodeGenerator


class Config(BaseSettings):
    """Application configuration."""

    # Short code settings
    code_length: int = Field(
        default=6,
        ge=1,
        le=64,
        description="Length of generated short codes"
    )

    alphabet: str = Field(
        default=ShortCodeGenerator.BASE62_CHARS,
        min_length=2,
        description="Characters short codes are drawn from"
    )

    dedup_on_shorten: bool = Field(
        default=True,
        description="Return the existing code when a URL was already shortened"
    )

    max_generation_attempts: int = Field(
        default=5,
        ge=1,
        description="Code collisions tolerated before a shorten fails"
    )

    base_domain: str = Field(
        default="https://lnk.sh",
        description="Base URL for generating short URLs"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    request_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds to wait on storage per request (no limit if unset)"
    )

    # Database settings
    database_url: Optional[str] = Field(
        default=None,
        description="PostgreSQL connection URL (in-memory store if not set)"
    )

    database_create_tables: bool = Field(
        default=False,
        description="Create the short_links table on first connection"
    )

    db_pool_max_size: int = Field(
        default=10,
        ge=1,
        description="Maximum PostgreSQL connection pool size"
    )

    # Redis settings (optional)
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL for caching"
    )

    cache_ttl_seconds: int = Field(
        default=3600,
        ge=1,
        description="Cache TTL in seconds"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=9200,
        description="Port to listen on"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @field_validator("alphabet")
    @classmethod
    def validate_alphabet(cls, v: str) -> str:
        """Reject alphabets with repeated characters."""
        if len(set(v)) != len(v):
            raise ValueError("alphabet must not contain duplicate characters")
        return v

    @field_validator("base_domain")
    @classmethod
    def validate_base_domain(cls, v: str) -> str:
        """Require an absolute http(s) base URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_domain must start with http:// or https://")
        return v.rstrip("/")


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
