"""
Data normalizers to ensure consistent data structure across the application.
These normalizers turn stored place rows into the shapes the map client expects.
"""

import json
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from app.config import settings

PHOTO_PROXY_PATH = "/api/v1/geocoding/photo-proxy"


def parse_tags(raw_tags: Any) -> List[str]:
    """
    Decode tags stored as a JSON string.

    Accepts an already-decoded list, a JSON array string, or None. Anything
    that does not decode to a list yields an empty list.
    """
    if raw_tags is None:
        return []
    if isinstance(raw_tags, list):
        return [str(tag) for tag in raw_tags]
    if isinstance(raw_tags, str):
        try:
            decoded = json.loads(raw_tags)
        except ValueError:
            return []
        if isinstance(decoded, list):
            return [str(tag) for tag in decoded]
    return []


def encode_tags(tags: Optional[List[str]]) -> str:
    """Encode tags for storage, keeping non-ASCII text readable."""
    return json.dumps(list(tags or []), ensure_ascii=False)


def build_photo_url(photo_reference: Optional[str], max_width: Optional[int] = None) -> Optional[str]:
    """Relative URL of the photo proxy for a Google photo reference."""
    if not photo_reference:
        return None
    params = {
        "photo_reference": photo_reference,
        "maxwidth": max_width or settings.photo_max_width,
    }
    return f"{PHOTO_PROXY_PATH}?{urlencode(params)}"


def place_to_marker(place: Any) -> Optional[Dict[str, Any]]:
    """
    Normalize a stored place into a map marker.

    Markers need coordinates; places without them return None.
    The marker name prefers the resolved place name, then the area, then
    the video title.
    """
    if place.latitude is None or place.longitude is None:
        return None

    name = place.place_name or place.area or place.title or "Unknown Place"

    return {
        "id": place.id,
        "name": name,
        "latitude": place.latitude,
        "longitude": place.longitude,
        "scale": place.scale or 1,
        "likes": place.likes or 0,
        "views": place.views or 0,
        "category": place.category,
        "area": place.area,
        "address": place.address,
        "video_url": place.url,
        "photo_url": build_photo_url(place.photo_reference),
    }


def place_to_markers(places: List[Any]) -> List[Dict[str, Any]]:
    """Normalize a list of places, dropping those without coordinates."""
    markers = []
    for place in places:
        marker = place_to_marker(place)
        if marker:
            markers.append(marker)
    return markers
