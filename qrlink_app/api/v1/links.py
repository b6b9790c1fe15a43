from fastapi import APIRouter, Depends, HTTPException, status

from qrlink_app.dependencies import get_shortening_service, get_resolution_service, get_public_base_url
from qrlink_app.repository.exceptions import RepositoryError
from qrlink_app.schemas.link import (
    ShortenRequest,
    ShortenResponse,
    ResolveResponse,
    HitRequest,
    HitResponse,
)
from qrlink_app.services.exceptions import ValidationError, ConflictError, RetriesExhaustedError
from qrlink_app.services.resolution_service import ResolutionService, ResolutionStatus
from qrlink_app.services.shortening_service import ShorteningService

router = APIRouter(tags=["links"])


@router.post("/shorten", response_model=ShortenResponse, status_code=status.HTTP_201_CREATED)
async def shorten(
    body: ShortenRequest,
    service: ShorteningService = Depends(get_shortening_service),
    base_url: str = Depends(get_public_base_url),
):
    """Create a short link, with a QR image when the QR backend is available"""
    try:
        record = await service.create(
            long_url=body.long_url,
            alias=body.alias,
            expires_at=body.expires_at,
            content_type=body.content_type,
            content_data=body.qr_data,
            customization=body.qr_customization,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConflictError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="alias already in use")
    except RetriesExhaustedError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to generate code",
        )
    except RepositoryError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="could not store short link",
        )
    return ShortenResponse.from_record(record, base_url)


@router.get("/resolve/{code}", response_model=ResolveResponse)
async def resolve(
    code: str,
    service: ResolutionService = Depends(get_resolution_service),
):
    """Resolve a short code to its long URL (404 unknown, 410 expired)"""
    resolution = await service.resolve(code)
    if resolution.status is ResolutionStatus.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Short URL not found")
    if resolution.status is ResolutionStatus.GONE:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="Short URL has expired")
    return ResolveResponse(long_url=resolution.long_url)


@router.post("/analytics/hit", response_model=HitResponse)
async def record_hit(
    body: HitRequest,
    service: ResolutionService = Depends(get_resolution_service),
):
    """Count one click for a code (unknown codes are accepted silently)"""
    if not body.code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="code is required")
    await service.record_hit(body.code)
    return HitResponse(ok=True)
