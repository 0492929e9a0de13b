"""Fetch videos per keyword from the scraping API and store them as places."""
import asyncio
import logging
from typing import List, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.enrichment.scale import like_scale
from app.models.db import EnrichmentStatus, Place
from app.models.tiktok import SyncResponse, TiktokVideo
from app.services import place_store
from app.services.tiktok_client import TiktokAPIError, TiktokClient, tiktok_client
from app.utils.normalizers import encode_tags

logger = logging.getLogger(__name__)


def _place_from_video(video: TiktokVideo, keyword: str) -> Place:
    return Place(
        video_id=video.video_id or None,
        url=video.url,
        title=video.title,
        user_name=video.user_name,
        likes=video.likes,
        views=video.views,
        tags=encode_tags(video.tags),
        video_created_at=video.created_at,
        keyword=keyword,
        scale=like_scale(video.likes),
        enrichment_status=EnrichmentStatus.PENDING,
    )


async def sync_tiktok(
    db: AsyncSession,
    keywords: Optional[List[str]] = None,
    client: Optional[TiktokClient] = None,
    delay_seconds: Optional[float] = None,
) -> SyncResponse:
    """
    Pull videos for each keyword, in order, and store new ones as pending places.

    Videos already stored (matched by video id, else URL) get their counts
    refreshed instead. A keyword whose fetch fails is logged and skipped.
    """
    keywords = keywords or settings.keyword_list
    client = client or tiktok_client
    delay = settings.sync_delay_seconds if delay_seconds is None else delay_seconds

    videos: List[TiktokVideo] = []
    failed_keywords: List[str] = []
    created = 0
    updated = 0

    for index, keyword in enumerate(keywords):
        if index and delay > 0:
            await asyncio.sleep(delay)

        try:
            batch = await client.search_videos(keyword)
        except (httpx.HTTPError, TiktokAPIError) as exc:
            logger.error(f"TikTok fetch failed for keyword {keyword!r}: {exc}")
            failed_keywords.append(keyword)
            continue

        for video in batch:
            existing = await place_store.find_by_source(db, video.video_id, video.url)
            if existing is not None:
                existing.likes = video.likes
                existing.views = video.views
                existing.scale = like_scale(video.likes)
                updated += 1
                continue

            db.add(_place_from_video(video, keyword))
            created += 1

        await db.commit()
        videos.extend(batch)

    logger.info(
        f"TikTok sync finished: keywords={len(keywords)} fetched={len(videos)} "
        f"created={created} updated={updated} failed={failed_keywords}"
    )

    return SyncResponse(
        keywords=keywords,
        fetched=len(videos),
        created=created,
        updated=updated,
        failed_keywords=failed_keywords,
        videos=videos,
    )
