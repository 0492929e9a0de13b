"""Pydantic models for the TikTok scraping API and the sync endpoint."""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional


class TiktokVideo(BaseModel):
    """A video record as returned by the scraping API."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    url: Optional[str] = None
    user_name: Optional[str] = Field(None, alias="userName")
    video_id: Optional[str] = None
    likes: int = 0
    views: int = 0
    tags: List[str] = []
    created_at: Optional[str] = None

    @field_validator("likes", "views", mode="before")
    @classmethod
    def _default_count(cls, value):
        return 0 if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _default_tags(cls, value):
        return [] if value is None else value

    @field_validator("video_id", "created_at", mode="before")
    @classmethod
    def _stringify(cls, value):
        if value is None:
            return None
        # Blank ids count as missing; "" would collide on the unique index
        return str(value).strip() or None


class SyncRequest(BaseModel):
    """Optional keyword override for a sync run."""
    keywords: Optional[List[str]] = Field(None, description="Search keywords; defaults to settings")


class SyncResponse(BaseModel):
    """Summary of a sync run."""
    keywords: List[str]
    fetched: int
    created: int
    updated: int
    failed_keywords: List[str] = []
    videos: List[TiktokVideo] = []
