"""Redirect routes implementation."""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.get("/{code}", include_in_schema=False)
async def redirect_to_target(request: Request, code: str):
    """Redirect to the target URL, counting a click."""
    service = request.app.state.service
    
    result = await service.resolve(code)
    
    # 302 so browsers keep coming back and every visit is counted
    return RedirectResponse(url=result.target_url, status_code=status.HTTP_302_FOUND)
