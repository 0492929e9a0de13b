"""Client for the third-party TikTok scraping API."""
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from app.config import settings
from app.models.tiktok import TiktokVideo

logger = logging.getLogger(__name__)


class TiktokAPIError(Exception):
    """The scraping API answered with something other than a video list."""


class TiktokClient:
    """HTTP client wrapper for the scraping API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.tiktok_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.tiktok_timeout
        self._transport = transport

    async def search_videos(self, keyword: str) -> List[TiktokVideo]:
        """
        Search videos for a keyword.

        Args:
            keyword: Search keyword passed as the ``q`` parameter

        Returns:
            Validated video records, in the order the API returned them

        Raises:
            httpx.HTTPError: On transport failures or non-2xx responses
            TiktokAPIError: If the body is not a JSON array of videos
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(
                f"{self.base_url}/get",
                params={"q": keyword},
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            try:
                body = response.json()
            except ValueError as exc:
                raise TiktokAPIError(f"Invalid JSON for keyword {keyword!r}") from exc

        if not isinstance(body, list):
            raise TiktokAPIError(
                f"Expected a list of videos for keyword {keyword!r}, got {type(body).__name__}"
            )

        videos: List[TiktokVideo] = []
        for item in body:
            try:
                videos.append(TiktokVideo.model_validate(item))
            except ValidationError as exc:
                logger.warning(f"Skipping malformed video for keyword {keyword!r}: {exc}")

        logger.info(f"Fetched {len(videos)} videos for keyword {keyword!r}")
        return videos


# Global instance
tiktok_client = TiktokClient()
