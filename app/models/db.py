"""SQLAlchemy ORM models."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from app.database import Base


class EnrichmentStatus:
    """Values stored in Place.enrichment_status."""

    PENDING = "pending"
    ENRICHED = "enriched"
    NOT_FOUND = "not_found"
    FAILED = "failed"

    ALL = (PENDING, ENRICHED, NOT_FOUND, FAILED)


class Place(Base):
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Source video metadata
    video_id = Column(String, nullable=True, unique=True, index=True)
    url = Column(String, nullable=True, index=True)
    title = Column(Text, nullable=True)
    user_name = Column(String, nullable=True)
    likes = Column(Integer, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    tags = Column(Text, nullable=False, default="[]")  # JSON array
    video_created_at = Column(String, nullable=True)
    keyword = Column(String, nullable=True, index=True)
    scale = Column(Integer, nullable=False, default=1, index=True)

    # Enriched place data
    place_name = Column(String, nullable=True)
    area = Column(String, nullable=True)
    address = Column(String, nullable=True)
    category = Column(String, nullable=True, index=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    google_place_id = Column(String, nullable=True)
    photo_reference = Column(Text, nullable=True)
    enrichment_status = Column(String, nullable=False, default=EnrichmentStatus.PENDING, index=True)
    enrichment_error = Column(Text, nullable=True)
    enriched_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Place id={self.id} title={self.title!r} status={self.enrichment_status}>"
