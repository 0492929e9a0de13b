"""Like-count to marker scale bucketing."""
from typing import Optional

# Lower bounds (inclusive) of scale tiers 2..5
SCALE_THRESHOLDS = (1_000, 10_000, 100_000, 1_000_000)

MIN_SCALE = 1
MAX_SCALE = MIN_SCALE + len(SCALE_THRESHOLDS)


def like_scale(likes: Optional[int]) -> int:
    """
    Bucket a like count into an integer scale tier (1-5).

    < 1k -> 1, < 10k -> 2, < 100k -> 3, < 1M -> 4, otherwise 5.
    Missing or negative counts land in the lowest tier.
    """
    count = max(int(likes or 0), 0)
    scale = MIN_SCALE
    for threshold in SCALE_THRESHOLDS:
        if count >= threshold:
            scale += 1
    return scale
