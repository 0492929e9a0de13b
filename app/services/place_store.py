"""Query helpers over the places table."""
import json
from typing import List, Optional, Tuple

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.db import EnrichmentStatus, Place
from app.models.places import MarkerQuery
from app.utils.normalizers import parse_tags


async def list_places(
    db: AsyncSession,
    status: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> Tuple[List[Place], int]:
    """List places newest first, with the total count before pagination."""
    query = select(Place)
    count_query = select(func.count()).select_from(Place)
    if status:
        query = query.where(Place.enrichment_status == status)
        count_query = count_query.where(Place.enrichment_status == status)

    query = query.order_by(Place.created_at.desc(), Place.id.desc()).offset(offset)
    if limit is not None:
        query = query.limit(limit)

    total = (await db.execute(count_query)).scalar_one()
    places = (await db.execute(query)).scalars().all()
    return list(places), total


async def get_place(db: AsyncSession, place_id: int) -> Optional[Place]:
    return await db.get(Place, place_id)


async def find_by_source(
    db: AsyncSession, video_id: Optional[str], url: Optional[str]
) -> Optional[Place]:
    """Find a stored place by its video id, or by URL when the id is missing."""
    if video_id:
        condition = Place.video_id == video_id
    elif url:
        condition = Place.url == url
    else:
        return None
    result = await db.execute(select(Place).where(condition).limit(1))
    return result.scalars().first()


async def delete_all_places(db: AsyncSession) -> int:
    """Delete every place. Returns the number of deleted rows."""
    result = await db.execute(delete(Place))
    await db.commit()
    return result.rowcount or 0


async def pending_places(
    db: AsyncSession, limit: int, retry_failed: bool = False
) -> List[Place]:
    """Places waiting for enrichment, most liked first."""
    statuses = [EnrichmentStatus.PENDING]
    if retry_failed:
        statuses.append(EnrichmentStatus.FAILED)
    result = await db.execute(
        select(Place)
        .where(Place.enrichment_status.in_(statuses))
        .order_by(Place.likes.desc(), Place.id)
        .limit(limit)
    )
    return list(result.scalars().all())


async def find_markers(db: AsyncSession, filters: MarkerQuery) -> List[Place]:
    """
    Enriched places with coordinates matching the marker filters.

    A bounding box whose west edge is east of its east edge is taken to
    cross the antimeridian.
    """
    conditions = [
        Place.enrichment_status == EnrichmentStatus.ENRICHED,
        Place.latitude.is_not(None),
        Place.longitude.is_not(None),
    ]

    if filters.has_bounds:
        conditions.append(Place.latitude.between(filters.south, filters.north))
        if filters.west <= filters.east:
            conditions.append(Place.longitude.between(filters.west, filters.east))
        else:
            conditions.append(or_(Place.longitude >= filters.west, Place.longitude <= filters.east))

    if filters.min_scale is not None:
        conditions.append(Place.scale >= filters.min_scale)
    if filters.max_scale is not None:
        conditions.append(Place.scale <= filters.max_scale)
    if filters.keyword:
        conditions.append(Place.keyword == filters.keyword)
    if filters.category:
        conditions.append(func.lower(Place.category) == filters.category.lower())
    if filters.q:
        conditions.append(or_(
            Place.title.icontains(filters.q, autoescape=True),
            Place.place_name.icontains(filters.q, autoescape=True),
        ))
    if filters.tag:
        # Narrow in SQL, then match the decoded list exactly below
        encoded = json.dumps(filters.tag, ensure_ascii=False)
        conditions.append(Place.tags.contains(encoded, autoescape=True))

    query = select(Place).where(and_(*conditions)).order_by(
        Place.scale.desc(), Place.likes.desc(), Place.id
    )
    if not filters.tag:
        query = query.limit(filters.limit)

    places = list((await db.execute(query)).scalars().all())
    if filters.tag:
        places = [p for p in places if filters.tag in parse_tags(p.tags)][: filters.limit]
    return places
