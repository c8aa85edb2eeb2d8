"""Match score utilities: clamping, quality buckets and display percentages.

Scores come from the remote matcher as floats in [0, 1]. They are advisory
display data, so malformed values are clamped or treated as unscored
instead of raising.
"""

import logging
import math
from collections.abc import Sequence
from typing import Any

from src.core.accessors import read_field
from src.core.schemas import UNCLASSIFIED, BucketStyle, Percentage, Threshold

logger = logging.getLogger(__name__)

UNCLASSIFIED_STYLE = BucketStyle(tag=UNCLASSIFIED, label="Low match", color="gray")


def clamp_score(score: Any) -> float | None:
    """Clamp a score into [0, 1]; None, NaN and non-numbers become None."""
    if score is None or isinstance(score, bool):
        return None
    try:
        value = float(score)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric score %r", score)
        return None
    if math.isnan(value):
        logger.debug("Ignoring NaN score")
        return None
    return max(0.0, min(1.0, value))


def score_of(record: Any, field: str = "score") -> float | None:
    """Return the clamped score of a record (model, object or dict)."""
    return clamp_score(read_field(record, field))


def bucket_of(score: float | None, thresholds: Sequence[Threshold]) -> str:
    """Return the tag of the highest threshold the score reaches.

    Thresholds are checked high-to-low, so a score sitting exactly on a
    boundary lands in the higher bucket. Below every threshold (or no
    score) gives UNCLASSIFIED.
    """
    value = clamp_score(score)
    if value is None:
        return UNCLASSIFIED
    for threshold in sorted(thresholds, key=lambda t: t.min_score, reverse=True):
        if value >= threshold.min_score:
            return threshold.tag
    return UNCLASSIFIED


def to_percentage(score: float | None) -> Percentage:
    """Convert a score to a whole percentage, rounding half up.

    An unscored record yields ``Percentage(value=0, known=False)`` so the
    display can say "unknown" instead of "0% match".
    """
    value = clamp_score(score)
    if value is None:
        return Percentage(value=0, known=False)
    return Percentage(value=math.floor(value * 100 + 0.5), known=True)


def style_of(
    score: float | None,
    thresholds: Sequence[Threshold],
    styles: Sequence[BucketStyle],
) -> BucketStyle:
    """Return the display style of the bucket a score falls into."""
    tag = bucket_of(score, thresholds)
    for style in styles:
        if style.tag == tag:
            return style
    return UNCLASSIFIED_STYLE
