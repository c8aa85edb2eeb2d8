"""Match report: wires filter chain, ranking and statistics.

Data flow:
  1. Filter chain built from the caller's criteria (plus config score floor)
  2. Stable sort by score, unscored last
  3. Summary over the domain's thresholds
  4. High-match count, top score and summary line for display
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from src.core.config import Settings
from src.core.schemas import AggregateSummary, FilterCriteria
from src.pipeline.matcher import filter_and_sort
from src.pipeline.score import to_percentage
from src.pipeline.stats import high_match_count, summarize, top_score

logger = logging.getLogger(__name__)


class MatchReport:
    """Display-ready result of one filter/rank/summarize run."""

    def __init__(
        self,
        domain: str,
        records: list[Any],
        summary: AggregateSummary,
        high_match_count: int,
        top_score: float,
    ) -> None:
        self.domain = domain
        self.records = records
        self.summary = summary
        self.high_match_count = high_match_count
        self.top_score = top_score

    @property
    def has_results(self) -> bool:
        return bool(self.records)

    @property
    def summary_text(self) -> str:
        """One-line description, e.g. '3 matches (high match: 1, average match: 80%)'."""
        if not self.records:
            return "No matches"
        noun = "match" if self.summary.total_count == 1 else "matches"
        average = to_percentage(self.summary.average_score).value
        return (
            f"{self.summary.total_count} {noun} "
            f"(high match: {self.high_match_count}, average match: {average}%)"
        )


def build_match_report(
    records: Sequence[Any],
    criteria: FilterCriteria | None,
    settings: Settings,
    *,
    domain: str = "job",
    score_field: str = "score",
    now: datetime | None = None,
) -> MatchReport:
    """Filter, rank and summarize records for one matching domain.

    The domain's configured ``min_score`` applies only when the criteria
    do not set their own floor.
    """
    scoring = settings.scoring_for(domain)
    criteria = criteria or FilterCriteria()
    if criteria.min_score is None and scoring.min_score is not None:
        criteria = criteria.model_copy(update={"min_score": scoring.min_score})

    ranked = filter_and_sort(
        records,
        criteria,
        score_field=score_field,
        search_fields=settings.search.fields,
        now=now,
    )
    summary = summarize(ranked, scoring.thresholds, score_field=score_field)
    report = MatchReport(
        domain=domain,
        records=ranked,
        summary=summary,
        high_match_count=high_match_count(
            ranked, scoring.high_match_threshold, score_field=score_field,
        ),
        top_score=top_score(ranked, score_field=score_field),
    )
    logger.info(
        "%s match report: %d of %d records kept, %d high matches",
        domain, len(ranked), len(records), report.high_match_count,
    )
    return report
