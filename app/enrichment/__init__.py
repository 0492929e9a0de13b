"""
Enrichment Module
=================

Turns stored short-video records into map places.

Current responsibilities:
- Like-count to scale tier bucketing
- Place extraction from Gemini output (fenced JSON block)
- Location resolution through Google Places / Geocoding
"""

from .scale import like_scale
from .extraction import (
    PlaceCandidate,
    PlaceExtractionError,
    build_extraction_prompt,
    extract_json_block,
    parse_place_candidate,
)
from .place_enrichment_service import (
    PlaceEnrichmentService,
    place_enrichment_service,
)

__all__ = [
    "like_scale",
    "PlaceCandidate",
    "PlaceExtractionError",
    "build_extraction_prompt",
    "extract_json_block",
    "parse_place_candidate",
    "PlaceEnrichmentService",
    "place_enrichment_service",
]
