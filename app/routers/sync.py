"""Sync router - pulls short videos from the scraping API into the places table."""
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_tiktok_client, require_admin
from app.models.tiktok import SyncRequest, SyncResponse
from app.services.tiktok_client import TiktokClient
from app.services.tiktok_sync import sync_tiktok

router = APIRouter(prefix="/sync", tags=["sync"], dependencies=[Depends(require_admin)])


@router.post("/tiktok", response_model=SyncResponse)
async def sync_tiktok_videos(
    payload: Optional[SyncRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    client: TiktokClient = Depends(get_tiktok_client),
):
    """
    Fetch videos for each keyword and store them as pending places.

    Keywords default to the configured list. Keywords whose fetch fails are
    reported in ``failed_keywords`` rather than failing the request.
    """
    keywords = payload.keywords if payload and payload.keywords else None
    return await sync_tiktok(db, keywords=keywords, client=client)
