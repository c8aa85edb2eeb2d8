"""Counts per category: application statuses, applications per job posting.

Every declared category is present in the result, even at zero, and keys
outside the declared set are counted under OTHER so the counts always add
up to the number of records.
"""

import logging
from collections.abc import Hashable, Iterable, Sequence
from typing import Any

from src.core.accessors import FieldGetter, field_getter
from src.core.config import APPLICATION_STATUSES
from src.core.schemas import ALL, OTHER, StatusCategory

logger = logging.getLogger(__name__)

# Upper bounds (inclusive) of the applicant-count badge tiers
COUNT_LEVELS: list[tuple[int, str]] = [
    (0, "none"),
    (5, "low"),
    (15, "medium"),
]


def tally(
    records: Iterable[Any],
    categories: Iterable[Hashable],
    key: FieldGetter,
) -> dict[Hashable, int]:
    """Count records per category using ``key`` to extract each record's category."""
    counts: dict[Hashable, int] = {category: 0 for category in categories}
    counts[OTHER] = 0
    unknown = 0
    for record in records:
        value = key(record)
        try:
            known = value in counts and value != OTHER
        except TypeError:
            # Unhashable keys, including tuples holding lists
            known = False
        if known:
            counts[value] += 1
        else:
            counts[OTHER] += 1
            unknown += 1
    if unknown:
        logger.debug("tally: %d records outside declared categories", unknown)
    return counts


def ordered_categories(categories: Iterable[StatusCategory]) -> list[StatusCategory]:
    """Return categories in display order (by weight, then declaration)."""
    return sorted(categories, key=lambda c: c.weight)


def status_tally(
    applications: Iterable[Any],
    categories: Sequence[StatusCategory] = APPLICATION_STATUSES,
    field: str = "status",
) -> dict[Hashable, int]:
    """Count applications per status tag for a single job posting."""
    tags = [c.tag for c in ordered_categories(categories)]
    return tally(applications, tags, field_getter(field))


def filter_counts(
    applications: Sequence[Any],
    categories: Sequence[StatusCategory] = APPLICATION_STATUSES,
    field: str = "status",
) -> dict[Hashable, int]:
    """Status counts plus an ALL entry, for the status filter chips.

    Raises:
        ValueError: If a category uses a reserved tag (ALL or OTHER).
    """
    reserved = sorted({ALL, OTHER} & {c.tag for c in categories})
    if reserved:
        msg = f"status tags {reserved} are reserved for tally totals"
        raise ValueError(msg)
    counts: dict[Hashable, int] = {ALL: len(applications)}
    counts.update(status_tally(applications, categories, field))
    return counts


def applications_per_job(
    applications: Iterable[Any],
    job_ids: Iterable[int],
    field: str = "job_posting_id",
) -> dict[Hashable, int]:
    """Count applications for each of a company's job postings."""
    return tally(applications, job_ids, field_getter(field))


def count_level(count: int) -> str:
    """Return the badge tier for an applicant count."""
    for upper, level in COUNT_LEVELS:
        if count <= upper:
            return level
    return "high"
