"""Pydantic models for Places."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List

from app.utils.normalizers import parse_tags


class PlaceResponse(BaseModel):
    """Response model for a stored place."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    video_id: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None
    user_name: Optional[str] = None
    likes: int = 0
    views: int = 0
    tags: List[str] = []
    video_created_at: Optional[str] = None
    keyword: Optional[str] = None
    scale: int = 1

    place_name: Optional[str] = None
    area: Optional[str] = None
    address: Optional[str] = None
    category: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    google_place_id: Optional[str] = None
    enrichment_status: str
    enrichment_error: Optional[str] = None
    enriched_at: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _decode_tags(cls, value):
        # Stored as a JSON string in the database
        return parse_tags(value)


class PlaceListResponse(BaseModel):
    """Paginated list of stored places."""
    places: List[PlaceResponse]
    total: int
    limit: Optional[int] = None
    offset: int = 0


class DeleteResponse(BaseModel):
    """Number of deleted rows."""
    count: int


class MarkerQuery(BaseModel):
    """Filters for the map marker query."""
    north: Optional[float] = Field(None, ge=-90, le=90)
    south: Optional[float] = Field(None, ge=-90, le=90)
    east: Optional[float] = Field(None, ge=-180, le=180)
    west: Optional[float] = Field(None, ge=-180, le=180)
    min_scale: Optional[int] = Field(None, ge=1, le=5)
    max_scale: Optional[int] = Field(None, ge=1, le=5)
    keyword: Optional[str] = None
    tag: Optional[str] = None
    category: Optional[str] = None
    q: Optional[str] = None
    limit: int = Field(500, ge=1, le=1000)

    @property
    def has_bounds(self) -> bool:
        return None not in (self.north, self.south, self.east, self.west)

    @property
    def has_partial_bounds(self) -> bool:
        given = [v is not None for v in (self.north, self.south, self.east, self.west)]
        return any(given) and not all(given)


class MarkerResponse(BaseModel):
    """A single map marker."""
    id: int
    name: str
    latitude: float
    longitude: float
    scale: int
    likes: int = 0
    views: int = 0
    category: Optional[str] = None
    area: Optional[str] = None
    address: Optional[str] = None
    video_url: Optional[str] = None
    photo_url: Optional[str] = None


class MarkerListResponse(BaseModel):
    markers: List[MarkerResponse]
    total: int


class EnrichmentResult(BaseModel):
    """Outcome of enriching a single place."""
    place_id: int
    status: str
    place_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    error: Optional[str] = None


class EnrichmentBatchResponse(BaseModel):
    """Outcome of a batch enrichment run."""
    processed: int
    enriched: int
    not_found: int
    failed: int
    results: List[EnrichmentResult]
