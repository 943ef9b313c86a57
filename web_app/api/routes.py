"""API routes implementation."""

from fastapi import APIRouter, Request, Query
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    ResolveResponse,
    LinkInfoResponse,
    LinkListResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)

router = APIRouter()


def _link_info(service, link) -> LinkInfoResponse:
    return LinkInfoResponse(
        code=link.code,
        short_url=service.short_url_for(link.code),
        target_url=link.target_url,
        created_at=link.created_at,
        clicks=link.clicks,
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        503: {"model": ErrorResponse, "description": "Store unavailable or code space exhausted"},
        504: {"model": ErrorResponse, "description": "Storage timed out"},
    },
    summary="Create short URL",
    description="Shorten a URL. With dedup the existing code for the URL is returned.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    result = await service.shorten(body.url, dedup=body.dedup)

    return ShortenResponse(
        code=result.code,
        short_url=result.short_url,
        target_url=result.target_url,
        created_at=result.created_at,
        created=result.created,
    )


@router.get(
    "/resolve/{code}",
    response_model=ResolveResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Resolve short code",
    description="Resolve a short code to its target and count a click.",
)
async def resolve_code(request: Request, code: str):
    """Resolve a short code."""
    service = request.app.state.service

    result = await service.resolve(code)

    return ResolveResponse(target_url=result.target_url, clicks=result.clicks)


@router.get(
    "/links",
    response_model=LinkListResponse,
    summary="List recent links",
)
async def list_links(request: Request, limit: int = Query(100, ge=1, le=1000)):
    """List recently created links."""
    service = request.app.state.service

    links = await service.list_recent(limit)

    return LinkListResponse(
        count=len(links),
        links=[_link_info(service, link) for link in links],
    )


@router.get(
    "/links/{code}",
    response_model=LinkInfoResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get link information",
    description="Get information about a short link without counting a click.",
)
async def get_link_info(request: Request, code: str):
    """Get information about a short link."""
    service = request.app.state.service

    link = await service.get_link(code)

    return _link_info(service, link)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get service-wide statistics.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    service = request.app.state.service

    stats = await service.get_statistics()

    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
