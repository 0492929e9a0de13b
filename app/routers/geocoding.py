"""
Place Photos Proxy Router
Proxies Google Place Photo calls to hide the API key from the map client
"""
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from app.dependencies import get_google_places_client
from app.services.google_places import GooglePlacesClient

router = APIRouter(prefix="/geocoding", tags=["geocoding"])
logger = logging.getLogger(__name__)


@router.get("/photo-proxy")
async def photo_proxy(
    photo_reference: str = Query(..., description="Google photo reference"),
    maxwidth: int = Query(800, ge=1, le=1600, description="Maximum width in pixels"),
    places: GooglePlacesClient = Depends(get_google_places_client),
):
    """
    Proxy for Google Places Photo API.

    Marker ``photo_url`` values point here.

    Args:
        photo_reference: Photo reference stored on the place
        maxwidth: Maximum width in pixels

    Returns:
        Photo binary data
    """
    if not places.is_configured:
        raise HTTPException(status_code=503, detail="Google Places API not configured")

    try:
        content, content_type = await places.fetch_photo(photo_reference, maxwidth)
    except httpx.HTTPStatusError as e:
        logger.error(f"Google Photo API error: {e}")
        if e.response.status_code in (400, 404):
            raise HTTPException(status_code=404, detail="Photo not found")
        raise HTTPException(status_code=502, detail="Failed to fetch photo")
    except httpx.HTTPError as e:
        logger.error(f"Google Photo API error: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch photo")

    return Response(
        content=content,
        media_type=content_type,
        headers={
            "Cache-Control": "public, max-age=86400",  # Cache for 24 hours
        },
    )
