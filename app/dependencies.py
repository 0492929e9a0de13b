"""Dependencies for FastAPI routes."""
import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config import settings
from app.enrichment.place_enrichment_service import PlaceEnrichmentService, place_enrichment_service
from app.services.gemini_client import GeminiClient, gemini_client
from app.services.google_places import GooglePlacesClient, google_places_client
from app.services.tiktok_client import TiktokClient, tiktok_client

logger = logging.getLogger(__name__)

# HTTP Bearer token security (optional so an unset admin token leaves endpoints open)
security = HTTPBearer(auto_error=False)


def verify_admin_token(token: Optional[str]) -> None:
    """
    Check a bearer token against the configured admin token.

    Raises:
        HTTPException: 401 if a token is configured and the given one differs
    """
    expected = settings.admin_token
    if not expected:
        return

    if not token or not secrets.compare_digest(token, expected):
        logger.warning("Rejected request with missing or invalid admin token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> None:
    """Guard for sync, enrichment and bulk delete endpoints."""
    verify_admin_token(credentials.credentials if credentials else None)


def get_tiktok_client() -> TiktokClient:
    return tiktok_client


def get_gemini_client() -> GeminiClient:
    return gemini_client


def get_google_places_client() -> GooglePlacesClient:
    return google_places_client


def get_enrichment_service() -> PlaceEnrichmentService:
    return place_enrichment_service
