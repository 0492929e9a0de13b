"""Places API router: stored places, map markers and enrichment."""
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_enrichment_service, require_admin
from app.enrichment.place_enrichment_service import PlaceEnrichmentService
from app.models.db import EnrichmentStatus
from app.models.places import (
    DeleteResponse,
    EnrichmentBatchResponse,
    EnrichmentResult,
    MarkerListResponse,
    MarkerQuery,
    MarkerResponse,
    PlaceListResponse,
    PlaceResponse,
)
from app.services import place_store
from app.services.gemini_client import GeminiNotConfiguredError
from app.services.google_places import GooglePlacesNotConfiguredError
from app.utils.normalizers import place_to_markers

router = APIRouter(prefix="/places", tags=["places"])
logger = logging.getLogger(__name__)


@router.get("", response_model=PlaceListResponse)
async def list_places(
    status_filter: Optional[str] = Query(
        None, alias="status", description="Filter by enrichment status"
    ),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List stored places, newest first."""
    if status_filter and status_filter not in EnrichmentStatus.ALL:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown status '{status_filter}'",
        )

    places, total = await place_store.list_places(db, status=status_filter, limit=limit, offset=offset)
    return PlaceListResponse(
        places=[PlaceResponse.model_validate(place) for place in places],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.delete("", response_model=DeleteResponse, dependencies=[Depends(require_admin)])
async def delete_places(db: AsyncSession = Depends(get_db)):
    """Delete every stored place."""
    count = await place_store.delete_all_places(db)
    logger.info(f"Deleted {count} places")
    return DeleteResponse(count=count)


@router.get("/markers", response_model=MarkerListResponse)
async def get_markers(
    north: Optional[float] = Query(None, ge=-90, le=90, description="Bounding box north latitude"),
    south: Optional[float] = Query(None, ge=-90, le=90, description="Bounding box south latitude"),
    east: Optional[float] = Query(None, ge=-180, le=180, description="Bounding box east longitude"),
    west: Optional[float] = Query(None, ge=-180, le=180, description="Bounding box west longitude"),
    min_scale: Optional[int] = Query(None, ge=1, le=5),
    max_scale: Optional[int] = Query(None, ge=1, le=5),
    keyword: Optional[str] = Query(None, description="Sync keyword the video came from"),
    tag: Optional[str] = Query(None, description="Exact hashtag match"),
    category: Optional[str] = None,
    q: Optional[str] = Query(None, description="Substring of title or place name"),
    limit: int = Query(500, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
):
    """
    Map markers for enriched places.

    The bounding box must be given completely or not at all. Markers are
    ordered by scale, then likes.
    """
    filters = MarkerQuery(
        north=north,
        south=south,
        east=east,
        west=west,
        min_scale=min_scale,
        max_scale=max_scale,
        keyword=keyword,
        tag=tag,
        category=category,
        q=q,
        limit=limit,
    )
    if filters.has_partial_bounds:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Bounding box requires north, south, east and west",
        )
    if filters.has_bounds and filters.south > filters.north:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="south must not be greater than north",
        )
    if min_scale is not None and max_scale is not None and min_scale > max_scale:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="min_scale must not be greater than max_scale",
        )

    places = await place_store.find_markers(db, filters)
    markers = [MarkerResponse(**marker) for marker in place_to_markers(places)]
    return MarkerListResponse(markers=markers, total=len(markers))


@router.post(
    "/enrich",
    response_model=EnrichmentBatchResponse,
    dependencies=[Depends(require_admin)],
)
async def enrich_pending_places(
    limit: Optional[int] = Query(None, ge=1, le=200, description="Max places to process"),
    retry_failed: bool = Query(False, description="Also retry places that failed before"),
    db: AsyncSession = Depends(get_db),
    service: PlaceEnrichmentService = Depends(get_enrichment_service),
):
    """
    Enrich pending places sequentially.

    Each place goes through Gemini extraction and Google lookup, with a
    fixed delay between places to respect rate limits.
    """
    _ensure_configured(service)
    try:
        return await service.enrich_pending(db, limit=limit, retry_failed=retry_failed)
    except (GeminiNotConfiguredError, GooglePlacesNotConfiguredError) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@router.get("/{place_id}", response_model=PlaceResponse)
async def get_place(place_id: int, db: AsyncSession = Depends(get_db)):
    """Retrieve a single stored place."""
    place = await place_store.get_place(db, place_id)
    if not place:
        raise HTTPException(status_code=404, detail="Place not found")
    return PlaceResponse.model_validate(place)


@router.post(
    "/{place_id}/enrich",
    response_model=EnrichmentResult,
    dependencies=[Depends(require_admin)],
)
async def enrich_place(
    place_id: int,
    db: AsyncSession = Depends(get_db),
    service: PlaceEnrichmentService = Depends(get_enrichment_service),
):
    """Enrich (or re-enrich) one place regardless of its current status."""
    _ensure_configured(service)

    place = await place_store.get_place(db, place_id)
    if not place:
        raise HTTPException(status_code=404, detail="Place not found")

    try:
        return await service.enrich_place(db, place)
    except (GeminiNotConfiguredError, GooglePlacesNotConfiguredError) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=502, detail=f"Upstream request failed: {exc}") from exc


def _ensure_configured(service: PlaceEnrichmentService) -> None:
    if not service.is_configured:
        raise HTTPException(
            status_code=503,
            detail="Enrichment requires Gemini and Google Places API keys",
        )
