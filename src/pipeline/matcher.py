"""Filter chain and score ranking for matched records.

Filter order:
  1. KeywordFilter        : all tokens, substring, hashtag-aware
  2. LocationFilter       : case-insensitive substring
  3. ExperienceLevelFilter: case-insensitive substring
  4. StatusFilter         : exact status tag
  5. ActiveOnlyFilter     : drops postings past their deadline
  6. MinScoreFilter       : optional score floor

Every filter returns a new list; records are never modified.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, time
from typing import Any

from src.core.accessors import read_field, read_text
from src.core.config import DEFAULT_SEARCH_FIELDS
from src.core.schemas import FilterCriteria
from src.pipeline.score import score_of

logger = logging.getLogger(__name__)

# A filter is a callable that takes records and returns a subset.
Filter = Callable[[list[Any]], list[Any]]

DEADLINE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def tokenize_keyword(keyword: str | None) -> list[str]:
    """Split a search query into lower-cased, non-empty tokens."""
    if not keyword:
        return []
    return [token.lower() for token in keyword.split() if token]


def searchable_text(record: Any, fields: Sequence[str]) -> str:
    """Join the record's searchable fields into one lower-cased string."""
    return " ".join(read_text(record, name) for name in fields).lower()


def _token_in(token: str, text: str) -> bool:
    if token in text:
        return True
    # Stored skills may or may not carry the literal '#'
    return token.startswith("#") and token.lstrip("#") in text


def matches(
    record: Any,
    keyword: str | None,
    fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
) -> bool:
    """Return True if every keyword token occurs in the record's text.

    A blank keyword matches everything.
    """
    tokens = tokenize_keyword(keyword)
    if not tokens:
        return True
    text = searchable_text(record, fields)
    return all(_token_in(token, text) for token in tokens)


class KeywordFilter:
    """Keep records containing every token of a free-text query."""

    def __init__(self, keyword: str, fields: Sequence[str] = DEFAULT_SEARCH_FIELDS) -> None:
        self._tokens = tokenize_keyword(keyword)
        self._fields = list(fields)

    def __call__(self, records: list[Any]) -> list[Any]:
        if not self._tokens:
            return list(records)
        result = [r for r in records if self._matches(r)]
        excluded = len(records) - len(result)
        if excluded:
            logger.debug("KeywordFilter: removed %d records", excluded)
        return result

    def _matches(self, record: Any) -> bool:
        text = searchable_text(record, self._fields)
        return all(_token_in(token, text) for token in self._tokens)


class SubstringFilter:
    """Keep records whose field contains a value (case-insensitive)."""

    def __init__(self, field: str, value: str) -> None:
        self._field = field
        self._value = value.strip().lower()

    def __call__(self, records: list[Any]) -> list[Any]:
        if not self._value:
            return list(records)
        result = [r for r in records if self._value in read_text(r, self._field).lower()]
        excluded = len(records) - len(result)
        if excluded:
            logger.debug(
                "%s: removed %d records", type(self).__name__, excluded,
            )
        return result


class LocationFilter(SubstringFilter):
    def __init__(self, location: str) -> None:
        super().__init__("location", location)


class ExperienceLevelFilter(SubstringFilter):
    def __init__(self, experience_level: str) -> None:
        super().__init__("experience_level", experience_level)


class StatusFilter:
    """Keep records whose status equals the selected tag exactly."""

    def __init__(self, status: str, field: str = "status") -> None:
        self._status = status.strip()
        self._field = field

    def __call__(self, records: list[Any]) -> list[Any]:
        if not self._status:
            return list(records)
        result = [r for r in records if read_text(r, self._field) == self._status]
        excluded = len(records) - len(result)
        if excluded:
            logger.debug("StatusFilter: removed %d records", excluded)
        return result


class ActiveOnlyFilter:
    """Remove postings whose deadline has already passed.

    Postings without a deadline are always open. A deadline that cannot be
    parsed is kept rather than hidden.
    """

    def __init__(self, now: datetime | None = None, field: str = "deadline") -> None:
        # Backend deadlines are naive local times
        self._now = _naive_local(now or datetime.now())
        self._field = field

    def __call__(self, records: list[Any]) -> list[Any]:
        result = [r for r in records if self._is_active(r)]
        expired = len(records) - len(result)
        if expired:
            logger.debug("ActiveOnlyFilter: removed %d expired records", expired)
        return result

    def _is_active(self, record: Any) -> bool:
        deadline = parse_deadline(read_field(record, self._field))
        return deadline is None or deadline >= self._now


class MinScoreFilter:
    """Keep records scoring at least ``min_score``; unscored records are dropped."""

    def __init__(self, min_score: float, score_field: str = "score") -> None:
        self._min_score = min_score
        self._score_field = score_field

    def __call__(self, records: list[Any]) -> list[Any]:
        result = []
        for r in records:
            score = score_of(r, self._score_field)
            if score is not None and score >= self._min_score:
                result.append(r)
        excluded = len(records) - len(result)
        if excluded:
            logger.debug("MinScoreFilter: removed %d records below %.2f", excluded, self._min_score)
        return result


def parse_deadline(value: Any) -> datetime | None:
    """Parse a backend deadline; None when absent or malformed.

    Accepts ISO datetimes with a 'T' or space separator, with or without
    seconds, and bare dates. A bare date stays open until the end of that day.
    """
    if isinstance(value, datetime):
        return _naive_local(value)
    if not value:
        return None
    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None
    if parsed is not None:
        if len(text) == len("YYYY-MM-DD"):
            return datetime.combine(parsed.date(), time.max)
        return _naive_local(parsed)
    try:
        return datetime.strptime(text[:19], DEADLINE_FORMAT)
    except ValueError:
        logger.debug("Unparseable deadline %r", text)
        return None


def _naive_local(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def build_filters(
    criteria: FilterCriteria,
    *,
    search_fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
    score_field: str = "score",
    now: datetime | None = None,
) -> list[Filter]:
    """Turn filter criteria into an ordered filter chain."""
    filters: list[Filter] = []
    if criteria.keyword and criteria.keyword.strip():
        filters.append(KeywordFilter(criteria.keyword, search_fields))
    if criteria.location and criteria.location.strip():
        filters.append(LocationFilter(criteria.location))
    if criteria.experience_level and criteria.experience_level.strip():
        filters.append(ExperienceLevelFilter(criteria.experience_level))
    if criteria.status and criteria.status.strip():
        filters.append(StatusFilter(criteria.status))
    if criteria.active_only:
        filters.append(ActiveOnlyFilter(now))
    if criteria.min_score is not None:
        filters.append(MinScoreFilter(criteria.min_score, score_field))
    return filters


def run_filter_chain(records: list[Any], filters: list[Filter]) -> list[Any]:
    """Apply filters in order, returning the surviving records."""
    result = list(records)
    for f in filters:
        result = f(result)
    return result


def sort_by_score(records: Sequence[Any], score_field: str = "score") -> list[Any]:
    """Return records ordered by score, highest first, unscored last.

    ``sorted`` is stable, so equal scores keep their input order.
    """

    def _key(record: Any) -> tuple[int, float]:
        score = score_of(record, score_field)
        if score is None:
            return (1, 0.0)
        return (0, -score)

    return sorted(records, key=_key)


def filter_and_sort(
    records: Sequence[Any],
    criteria: FilterCriteria | None = None,
    *,
    ranked: bool = True,
    score_field: str = "score",
    search_fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
    now: datetime | None = None,
) -> list[Any]:
    """Filter records by the criteria and rank them by score.

    With ``ranked=False`` the surviving records keep their input order,
    for plain searches that carry no score. The input is never modified.
    """
    criteria = criteria or FilterCriteria()
    filters = build_filters(
        criteria, search_fields=search_fields, score_field=score_field, now=now,
    )
    result = run_filter_chain(list(records), filters)
    if ranked:
        result = sort_by_score(result, score_field)
    return result
