"""Aggregate statistics over scored records."""

from collections.abc import Iterable, Sequence
from typing import Any

from src.core.config import DEFAULT_THRESHOLDS
from src.core.schemas import AggregateSummary, Threshold
from src.pipeline.score import bucket_of, score_of


def summarize(
    records: Iterable[Any],
    thresholds: Sequence[Threshold] = DEFAULT_THRESHOLDS,
    *,
    score_field: str = "score",
) -> AggregateSummary:
    """Compute counts, average/max/min and per-bucket counts in one pass.

    Average, max and min cover scored records only and are 0.0 when there
    are none. Unscored records count towards ``total_count`` and
    ``unscored_count`` but not towards any bucket.
    """
    ordered = sorted(thresholds, key=lambda t: t.min_score, reverse=True)
    total = 0
    scored = 0
    score_sum = 0.0
    max_score: float | None = None
    min_score: float | None = None
    bucket_counts: dict[str, int] = {}

    for record in records:
        total += 1
        score = score_of(record, score_field)
        if score is None:
            continue
        scored += 1
        score_sum += score
        max_score = score if max_score is None else max(max_score, score)
        min_score = score if min_score is None else min(min_score, score)
        tag = bucket_of(score, ordered)
        bucket_counts[tag] = bucket_counts.get(tag, 0) + 1

    if max_score is None or min_score is None:
        return AggregateSummary(total_count=total, unscored_count=total)

    return AggregateSummary(
        total_count=total,
        scored_count=scored,
        unscored_count=total - scored,
        average_score=min(max(score_sum / scored, min_score), max_score),
        max_score=max_score,
        min_score=min_score,
        bucket_counts=bucket_counts,
    )


def high_match_count(
    records: Iterable[Any],
    threshold: float = 0.8,
    *,
    score_field: str = "score",
) -> int:
    """Count records scoring at or above ``threshold``."""
    count = 0
    for record in records:
        score = score_of(record, score_field)
        if score is not None and score >= threshold:
            count += 1
    return count


def top_score(records: Iterable[Any], *, score_field: str = "score") -> float:
    """Return the highest score, or 0.0 when nothing is scored."""
    scores = [s for s in (score_of(r, score_field) for r in records) if s is not None]
    return max(scores, default=0.0)
