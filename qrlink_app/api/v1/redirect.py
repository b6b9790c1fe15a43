from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from qrlink_app.dependencies import get_resolution_service
from qrlink_app.services.resolution_service import ResolutionService, ResolutionStatus

router = APIRouter(tags=["redirect"])


@router.get("/{short_code}")
async def redirect_to_long_url(
    short_code: str,
    service: ResolutionService = Depends(get_resolution_service),
):
    """
    Redirect to the original URL.

    Flow:
    1. Resolve through the cache-aside path
    2. Count the click
    3. Answer 302 to the long URL
    """
    resolution = await service.resolve(short_code)

    if resolution.status is ResolutionStatus.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Short URL not found")
    if resolution.status is ResolutionStatus.GONE:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="Short URL has expired")

    await service.record_hit(short_code)

    return RedirectResponse(url=resolution.long_url, status_code=status.HTTP_302_FOUND)
