"""Unit tests for like-count scale bucketing."""

from __future__ import annotations

import pytest

from app.enrichment.scale import MAX_SCALE, MIN_SCALE, like_scale


@pytest.mark.parametrize(
    "likes, expected",
    [
        (0, 1),
        (999, 1),
        (1_000, 2),
        (9_999, 2),
        (10_000, 3),
        (99_999, 3),
        (100_000, 4),
        (261_700, 4),
        (999_999, 4),
        (1_000_000, 5),
        (52_000_000, 5),
    ],
)
def test_tier_boundaries(likes: int, expected: int) -> None:
    assert like_scale(likes) == expected


def test_missing_likes_is_lowest_tier() -> None:
    assert like_scale(None) == MIN_SCALE


def test_negative_likes_is_lowest_tier() -> None:
    assert like_scale(-50) == MIN_SCALE


def test_scale_range() -> None:
    assert (MIN_SCALE, MAX_SCALE) == (1, 5)
