"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten", min_length=1, max_length=2048)
    dedup: Optional[bool] = Field(
        None,
        description="Reuse an existing code for this URL (service default if omitted)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {"url": "https://github.com/user/repo", "dedup": False},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")
    target_url: str = Field(..., description="The original long URL")
    created_at: datetime = Field(..., description="Creation timestamp")
    created: bool = Field(..., description="False when an existing link was reused")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "aB3xY9",
                    "short_url": "https://lnk.sh/aB3xY9",
                    "target_url": "https://example.com/a/b",
                    "created_at": "2024-01-01T12:00:00Z",
                    "created": True,
                }
            ]
        }
    }


class ResolveResponse(BaseModel):
    """Response after resolving a short code."""

    target_url: str
    clicks: Optional[int] = Field(None, description="Click count after this resolution")


class LinkInfoResponse(BaseModel):
    """Response with link information."""

    code: str
    short_url: str
    target_url: str
    created_at: datetime
    clicks: int


class LinkListResponse(BaseModel):
    """Recently created links."""

    count: int
    links: List[LinkInfoResponse]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error kind")
    detail: Optional[str] = Field(None, description="Detailed error information")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    total_links: int
    total_clicks: int
    database: str
    cache_enabled: bool
    dedup_on_shorten: bool
    code_length: int
    keyspace_size: int
