"""
Enrichment service turning stored videos into geolocated places.

For each place:
- ask Gemini which place the video shows (fenced JSON answer)
- resolve the answer with Google Places Text Search, falling back to
  the Geocoding API
- store coordinates, address and a photo reference
"""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional

import httpx
from google.genai import errors as genai_errors
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.enrichment.extraction import (
    PlaceCandidate,
    PlaceExtractionError,
    build_extraction_prompt,
    parse_place_candidate,
)
from app.models.db import EnrichmentStatus, Place
from app.models.places import EnrichmentBatchResponse, EnrichmentResult
from app.services import place_store
from app.services.gemini_client import GeminiClient, GeminiNotConfiguredError, gemini_client
from app.services.google_places import (
    GooglePlacesClient,
    GooglePlacesError,
    GooglePlacesNotConfiguredError,
    ResolvedLocation,
    google_places_client,
)

logger = logging.getLogger(__name__)


class PlaceEnrichmentService:
    """Service for enriching stored places with model output and geocoding."""

    def __init__(
        self,
        gemini: Optional[GeminiClient] = None,
        places: Optional[GooglePlacesClient] = None,
        delay_seconds: Optional[float] = None,
    ):
        self.gemini = gemini or gemini_client
        self.places = places or google_places_client
        self.delay_seconds = (
            settings.enrichment_delay_seconds if delay_seconds is None else delay_seconds
        )

    @property
    def is_configured(self) -> bool:
        return self.gemini.is_configured and self.places.is_configured

    async def resolve_location(self, candidate: PlaceCandidate) -> Optional[ResolvedLocation]:
        """
        Resolve a candidate to coordinates.

        Text search on "name area" first; then geocode the area, then the name.
        """
        location = await self.places.text_search(candidate.search_query)
        if location:
            return location

        for fallback in (candidate.area, candidate.name):
            if fallback and fallback != candidate.search_query:
                location = await self.places.geocode(fallback)
                if location:
                    return location
        return None

    async def enrich_place(self, db: AsyncSession, place: Place) -> EnrichmentResult:
        """
        Enrich a single place and commit the outcome.

        Extraction and lookup failures are recorded on the row as
        ``failed``; an unresolvable answer is recorded as ``not_found``.
        Configuration errors propagate.
        """
        try:
            response_text = await self.gemini.generate_text(build_extraction_prompt(place))
            candidate = parse_place_candidate(response_text)
        except PlaceExtractionError as exc:
            logger.warning(f"Extraction failed for place {place.id}: {exc}")
            return await self._mark_failed(db, place, f"extraction: {exc}")
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            logger.error(f"Gemini request failed for place {place.id}: {exc}")
            return await self._mark_failed(db, place, f"gemini: {exc}")

        place.place_name = candidate.name
        place.area = candidate.area
        place.category = candidate.category
        if candidate.address:
            place.address = candidate.address

        try:
            location = await self.resolve_location(candidate)
        except (httpx.HTTPError, GooglePlacesError) as exc:
            logger.error(f"Place lookup failed for place {place.id}: {exc}")
            return await self._mark_failed(db, place, f"lookup: {exc}")

        if location is None:
            logger.info(f"No location found for place {place.id} ({candidate.search_query!r})")
            place.enrichment_status = EnrichmentStatus.NOT_FOUND
            place.enrichment_error = None
            place.enriched_at = datetime.utcnow()
            await db.commit()
            return self._result(place)

        place.latitude = location.latitude
        place.longitude = location.longitude
        place.address = location.address or place.address
        place.google_place_id = location.google_place_id
        place.photo_reference = location.photo_reference
        place.enrichment_status = EnrichmentStatus.ENRICHED
        place.enrichment_error = None
        place.enriched_at = datetime.utcnow()
        await db.commit()

        logger.info(
            f"Enriched place {place.id}: {candidate.search_query!r} -> "
            f"({location.latitude}, {location.longitude})"
        )
        return self._result(place)

    async def enrich_pending(
        self,
        db: AsyncSession,
        limit: Optional[int] = None,
        retry_failed: bool = False,
    ) -> EnrichmentBatchResponse:
        """
        Enrich pending places one by one, sleeping between rows.

        An unexpected error on one row is recorded on that row and the loop
        moves on.
        """
        limit = limit or settings.enrichment_batch_limit
        places = await place_store.pending_places(db, limit, retry_failed=retry_failed)
        # Iterate by id: a rollback expires every loaded instance
        place_ids = [place.id for place in places]
        results: List[EnrichmentResult] = []

        for index, place_id in enumerate(place_ids):
            if index and self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)

            place = await db.get(Place, place_id)
            if place is None:
                continue

            try:
                result = await self.enrich_place(db, place)
            except (GeminiNotConfiguredError, GooglePlacesNotConfiguredError):
                raise
            except Exception as exc:
                logger.exception(f"Enrichment crashed for place {place_id}")
                await db.rollback()
                place = await db.get(Place, place_id)
                result = await self._mark_failed(db, place, str(exc))
            results.append(result)

        return EnrichmentBatchResponse(
            processed=len(results),
            enriched=sum(1 for r in results if r.status == EnrichmentStatus.ENRICHED),
            not_found=sum(1 for r in results if r.status == EnrichmentStatus.NOT_FOUND),
            failed=sum(1 for r in results if r.status == EnrichmentStatus.FAILED),
            results=results,
        )

    async def _mark_failed(self, db: AsyncSession, place: Place, error: str) -> EnrichmentResult:
        place.enrichment_status = EnrichmentStatus.FAILED
        place.enrichment_error = error[:1000]
        await db.commit()
        return self._result(place)

    @staticmethod
    def _result(place: Place) -> EnrichmentResult:
        return EnrichmentResult(
            place_id=place.id,
            status=place.enrichment_status,
            place_name=place.place_name,
            latitude=place.latitude,
            longitude=place.longitude,
            error=place.enrichment_error,
        )


# Singleton instance
place_enrichment_service = PlaceEnrichmentService()
