"""Client for Google Places Text Search, Geocoding and Place Photos."""
import logging
from typing import Any, Dict, Optional, Tuple

import httpx
from pydantic import BaseModel

from app.config import settings
from app.services.redis_client import RedisClient, redis_client

logger = logging.getLogger(__name__)

BASE_URL = "https://maps.googleapis.com/maps/api"

# Statuses that mean "the request worked, there is just nothing to return"
_EMPTY_STATUSES = {"ZERO_RESULTS", "NOT_FOUND"}


class GooglePlacesError(Exception):
    """Google answered with an error status (quota, denied, invalid request)."""

    def __init__(self, status: str, message: Optional[str] = None):
        self.status = status
        super().__init__(f"Google API status {status}" + (f": {message}" if message else ""))


class GooglePlacesNotConfiguredError(RuntimeError):
    """Raised when no Google API key is configured."""


class ResolvedLocation(BaseModel):
    """Coordinates (and, for place search hits, a photo) for a text query."""
    latitude: float
    longitude: float
    name: Optional[str] = None
    address: Optional[str] = None
    google_place_id: Optional[str] = None
    photo_reference: Optional[str] = None


class GooglePlacesClient:
    """HTTP client wrapper for the Google Maps web services."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        cache: Optional[RedisClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.google_places_api_key
        self.language = settings.google_places_language
        self.region = settings.google_places_region
        self.timeout = settings.google_places_timeout
        self.cache_ttl = settings.cache_ttl_seconds
        self.cache = cache if cache is not None else redis_client
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _require_key(self) -> str:
        if not self.api_key:
            raise GooglePlacesNotConfiguredError("Google Places API not configured")
        return self.api_key

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "key": self._require_key()}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(f"{BASE_URL}/{path}", params=params)
            response.raise_for_status()
            data = response.json()

        status = data.get("status")
        if status != "OK" and status not in _EMPTY_STATUSES:
            logger.warning(f"Google {path} status: {status}")
            raise GooglePlacesError(status or "UNKNOWN", data.get("error_message"))
        return data

    async def _cached_lookup(self, kind: str, query: str, fetch) -> Optional[ResolvedLocation]:
        cache_key = f"places:{kind}:{self.language}:{query}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            # An empty dict records a previous miss
            return ResolvedLocation(**cached) if cached else None

        location = await fetch(query)
        self.cache.set(cache_key, location.model_dump() if location else {}, self.cache_ttl)
        return location

    async def text_search(self, query: str) -> Optional[ResolvedLocation]:
        """
        Resolve a free-text query to the best matching place.

        Args:
            query: e.g. "尾道 千光寺"

        Returns:
            The first result, or None when Google found nothing
        """
        return await self._cached_lookup("textsearch", query, self._fetch_text_search)

    async def geocode(self, address: str) -> Optional[ResolvedLocation]:
        """Resolve an address or area name to coordinates (no photo)."""
        return await self._cached_lookup("geocode", address, self._fetch_geocode)

    async def _fetch_text_search(self, query: str) -> Optional[ResolvedLocation]:
        data = await self._get_json(
            "place/textsearch/json",
            {"query": query, "language": self.language, "region": self.region},
        )
        results = data.get("results") or []
        if not results:
            return None

        top = results[0]
        location = top.get("geometry", {}).get("location", {})
        photos = top.get("photos") or []
        return ResolvedLocation(
            latitude=location["lat"],
            longitude=location["lng"],
            name=top.get("name"),
            address=top.get("formatted_address"),
            google_place_id=top.get("place_id"),
            photo_reference=photos[0].get("photo_reference") if photos else None,
        )

    async def _fetch_geocode(self, address: str) -> Optional[ResolvedLocation]:
        data = await self._get_json(
            "geocode/json",
            {"address": address, "language": self.language, "region": self.region},
        )
        results = data.get("results") or []
        if not results:
            return None

        top = results[0]
        location = top.get("geometry", {}).get("location", {})
        return ResolvedLocation(
            latitude=location["lat"],
            longitude=location["lng"],
            address=top.get("formatted_address"),
            google_place_id=top.get("place_id"),
        )

    async def fetch_photo(self, photo_reference: str, max_width: int) -> Tuple[bytes, str]:
        """
        Download a place photo.

        Returns:
            Tuple of (image bytes, content type)
        """
        params = {
            "photoreference": photo_reference,
            "maxwidth": max_width,
            "key": self._require_key(),
        }
        async with httpx.AsyncClient(
            timeout=15.0, follow_redirects=True, transport=self._transport
        ) as client:
            response = await client.get(f"{BASE_URL}/place/photo", params=params)
            response.raise_for_status()
            return response.content, response.headers.get("content-type", "image/jpeg")


# Global instance
google_places_client = GooglePlacesClient()
