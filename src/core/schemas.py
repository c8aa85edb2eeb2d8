"""Core data models for match filtering, ranking and statistics.

All records are frozen: filters, sorts and summaries return new objects
and never touch the lists handed in by the API client.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel, to_snake

UNCLASSIFIED = "UNCLASSIFIED"

# Reserved tally keys: total count and keys outside the declared categories
ALL = "ALL"
OTHER = "OTHER"


class ScoredRecord(BaseModel):
    """A record with an id and an optional match score in [0, 1].

    Undeclared fields are kept so callers can search any text field the
    backend sends. Keys may be camelCase (backend JSON) or snake_case;
    undeclared camelCase keys are stored under their snake_case name.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    score: float | None = None

    @model_validator(mode="before")
    @classmethod
    def snake_case_extras(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        declared = set(cls.model_fields)
        declared.update(f.alias for f in cls.model_fields.values() if f.alias)
        return {
            to_snake(k) if isinstance(k, str) and k not in declared else k: v
            for k, v in data.items()
        }


class JobPosting(ScoredRecord):
    """A job posting, optionally carrying the match rate for a resume."""

    title: str = ""
    description: str = ""
    position: str = ""
    required_skills: str = ""
    experience_level: str = ""
    location: str = ""
    salary: str = ""
    deadline: str | None = None
    company_name: str | None = None
    company_email: str | None = None
    created_at: str = ""
    score: float | None = Field(default=None, alias="matchRate")


class JobRecommendation(ScoredRecord):
    """A job recommended for one of the user's resumes."""

    id: int = Field(alias="jobId")
    title: str = ""
    position: str = ""
    company_name: str = ""
    location: str | None = None
    salary: str | None = None
    experience_level: str | None = None
    deadline: str | None = None
    match_reason: str = ""
    score: float | None = Field(default=None, alias="matchScore")


class TalentMatch(ScoredRecord):
    """A candidate resume matched against a company's job posting."""

    id: int = Field(alias="resumeId")
    resume_title: str = ""
    candidate_name: str = ""
    candidate_email: str = ""
    candidate_location: str | None = None
    candidate_age: int | None = None
    resume_updated_at: str = ""
    fitment_level: str = ""
    recommendation_reason: str = ""
    score: float | None = Field(default=None, alias="matchScore")


class ResumeMatch(ScoredRecord):
    title: str = ""
    content: str = ""
    user_name: str = ""
    created_at: str = ""
    updated_at: str = ""
    score: float | None = Field(default=None, alias="matchRate")


class Application(ScoredRecord):
    """An application submitted to a job posting."""

    job_posting_id: int | None = None
    applicant_id: int | None = None
    applicant_name: str = ""
    applicant_email: str = ""
    applied_at: str = ""
    status: str = ""


class FilterCriteria(BaseModel):
    """User-selected filters. Blank fields impose no constraint."""

    model_config = ConfigDict(frozen=True)

    keyword: str | None = None
    location: str | None = None
    experience_level: str | None = None
    status: str | None = None
    active_only: bool = False
    min_score: float | None = Field(default=None, ge=0.0, le=1.0)


class QualityBucket(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    LOW = "LOW"


class Threshold(BaseModel):
    """Scores at or above ``min_score`` fall into ``tag``."""

    model_config = ConfigDict(frozen=True)

    min_score: float = Field(ge=0.0, le=1.0)
    tag: str


class BucketStyle(BaseModel):
    """Display label and colour for a quality bucket."""

    model_config = ConfigDict(frozen=True)

    tag: str
    label: str
    color: str = "gray"


class StatusCategory(BaseModel):
    """A closed-set application status with its label and display weight."""

    model_config = ConfigDict(frozen=True)

    tag: str
    label: str
    weight: int = 0


class Percentage(BaseModel):
    """Display percentage. ``known`` is False for unscored records."""

    model_config = ConfigDict(frozen=True)

    value: int = 0
    known: bool = True


class AggregateSummary(BaseModel):
    """Statistics over a list of scored records.

    ``total_count == sum(bucket_counts.values()) + unscored_count``.
    Average, max and min are 0.0 when no record carries a score.
    """

    model_config = ConfigDict(frozen=True)

    total_count: int = 0
    scored_count: int = 0
    unscored_count: int = 0
    average_score: float = 0.0
    max_score: float = 0.0
    min_score: float = 0.0
    bucket_counts: dict[str, int] = Field(default_factory=dict)
