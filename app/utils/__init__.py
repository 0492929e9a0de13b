"""Utility functions for the backend."""

from app.utils.normalizers import (
    build_photo_url,
    encode_tags,
    parse_tags,
    place_to_marker,
    place_to_markers,
)

__all__ = ["build_photo_url", "encode_tags", "parse_tags", "place_to_marker", "place_to_markers"]
