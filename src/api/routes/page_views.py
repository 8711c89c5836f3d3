"""
Page-view counter API route.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..schemas.common import ErrorResponse, PageViewResponse
from ..services.page_view_service import CounterApiError, PageViewService
from ..dependencies import get_page_view_service

router = APIRouter()


@router.get("", response_model=PageViewResponse, responses={502: {"model": ErrorResponse}})
async def get_page_views(service: PageViewService = Depends(get_page_view_service)):
    """Increment and return the site's page-view count."""
    try:
        return PageViewResponse(count=service.increment())
    except CounterApiError as e:
        return JSONResponse(status_code=502, content={"error": str(e)})
