"""Shared pytest fixtures for the Clipmap backend test suite."""

from __future__ import annotations

import asyncio
import os
from typing import Any, Iterable
from unittest.mock import AsyncMock, MagicMock

# Settings are read at import time; keep tests away from real services.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["CACHE_ENABLED"] = "false"
os.environ["ADMIN_TOKEN"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ["GOOGLE_PLACES_API_KEY"] = ""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.database import init_models
from app.enrichment.scale import like_scale
from app.models.db import EnrichmentStatus, Place
from app.services.google_places import ResolvedLocation
from app.utils.normalizers import encode_tags


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
def engine(tmp_path):
    """A fresh SQLite database file per test with all tables created."""
    # NullPool: no connection outlives the event loop that opened it
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(init_models(eng))
    return eng


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


def make_place(**overrides: Any) -> Place:
    """Build a Place row with sensible defaults."""
    likes = overrides.pop("likes", 1500)
    tags = overrides.pop("tags", ["カフェ", "京都"])
    defaults = {
        "video_id": None,
        "url": None,
        "title": "京都の隠れ家カフェ #カフェ #京都",
        "user_name": "kyoto_cafe",
        "likes": likes,
        "views": likes * 10,
        "tags": encode_tags(tags),
        "keyword": "カフェ",
        "scale": like_scale(likes),
        "enrichment_status": EnrichmentStatus.PENDING,
    }
    defaults.update(overrides)
    return Place(**defaults)


def make_enriched_place(**overrides: Any) -> Place:
    defaults = {
        "place_name": "喫茶ソワレ",
        "area": "京都市下京区",
        "category": "cafe",
        "latitude": 35.0037,
        "longitude": 135.7693,
        "photo_reference": "photo-ref-1",
        "enrichment_status": EnrichmentStatus.ENRICHED,
    }
    defaults.update(overrides)
    return make_place(**defaults)


async def add_places(session: AsyncSession, places: Iterable[Place]) -> list[Place]:
    places = list(places)
    session.add_all(places)
    await session.commit()
    return places


def seed(session_factory, *places: Place) -> list[int]:
    """Insert places from synchronous tests; returns their ids."""

    async def _seed() -> list[int]:
        async with session_factory() as session:
            stored = await add_places(session, places)
            return [p.id for p in stored]

    return asyncio.run(_seed())


# ---------------------------------------------------------------------------
# External service doubles
# ---------------------------------------------------------------------------


GEMINI_ANSWER = """この動画の場所は以下です。
```json
{
  "name": "喫茶ソワレ",
  "area": "京都市下京区",
  "address": "京都府京都市下京区西木屋町通四条上ル真町95",
  "category": "cafe"
}
```
"""


@pytest.fixture
def mock_gemini() -> MagicMock:
    gemini = MagicMock()
    gemini.is_configured = True
    gemini.generate_text = AsyncMock(return_value=GEMINI_ANSWER)
    gemini.chat = AsyncMock(return_value="尾道の千光寺です。")
    return gemini


@pytest.fixture
def resolved_location() -> ResolvedLocation:
    return ResolvedLocation(
        latitude=35.0037,
        longitude=135.7693,
        name="喫茶ソワレ",
        address="日本、〒600-8001 京都府京都市下京区真町95",
        google_place_id="ChIJsoiree",
        photo_reference="photo-ref-1",
    )


@pytest.fixture
def mock_places(resolved_location) -> MagicMock:
    places = MagicMock()
    places.is_configured = True
    places.text_search = AsyncMock(return_value=resolved_location)
    places.geocode = AsyncMock(return_value=None)
    places.fetch_photo = AsyncMock(return_value=(b"\xff\xd8jpeg", "image/jpeg"))
    return places


class DictCache:
    """In-memory stand-in for RedisClient."""

    def __init__(self):
        self.store: dict[str, Any] = {}

    def get(self, key: str):
        return self.store.get(key)

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        self.store[key] = value
        return True


@pytest.fixture
def dict_cache() -> DictCache:
    return DictCache()
