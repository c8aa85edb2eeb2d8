"""Configuration models and YAML loader for match post-processing."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from src.core.schemas import ALL, OTHER, BucketStyle, QualityBucket, StatusCategory, Threshold

DEFAULT_THRESHOLDS: list[Threshold] = [
    Threshold(min_score=0.9, tag=QualityBucket.EXCELLENT.value),
    Threshold(min_score=0.8, tag=QualityBucket.GOOD.value),
    Threshold(min_score=0.7, tag=QualityBucket.FAIR.value),
    Threshold(min_score=0.6, tag=QualityBucket.LOW.value),
]

JOB_BUCKET_STYLES: list[BucketStyle] = [
    BucketStyle(tag=QualityBucket.EXCELLENT.value, label="Best match", color="red"),
    BucketStyle(tag=QualityBucket.GOOD.value, label="High match", color="green"),
    BucketStyle(tag=QualityBucket.FAIR.value, label="Good match", color="orange"),
    BucketStyle(tag=QualityBucket.LOW.value, label="Basic match", color="blue"),
]

TALENT_BUCKET_STYLES: list[BucketStyle] = [
    BucketStyle(tag=QualityBucket.EXCELLENT.value, label="Perfect fit", color="red"),
    BucketStyle(tag=QualityBucket.GOOD.value, label="Very good fit", color="green"),
    BucketStyle(tag=QualityBucket.FAIR.value, label="Good fit", color="orange"),
    BucketStyle(tag=QualityBucket.LOW.value, label="Potential", color="blue"),
]

APPLICATION_STATUSES: list[StatusCategory] = [
    StatusCategory(tag="PENDING", label="Pending", weight=0),
    StatusCategory(tag="REVIEWED", label="Reviewed", weight=1),
    StatusCategory(tag="ACCEPTED", label="Accepted", weight=2),
    StatusCategory(tag="REJECTED", label="Rejected", weight=3),
]

DEFAULT_SEARCH_FIELDS: list[str] = [
    "title",
    "company_name",
    "position",
    "required_skills",
    "description",
]


class ScoringConfig(BaseModel):
    """Bucket thresholds and display styles for one matching domain."""

    thresholds: list[Threshold] = Field(default_factory=lambda: list(DEFAULT_THRESHOLDS))
    styles: list[BucketStyle] = Field(default_factory=lambda: list(JOB_BUCKET_STYLES))
    high_match_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    min_score: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("thresholds")
    @classmethod
    def thresholds_unique(cls, v: list[Threshold]) -> list[Threshold]:
        if not v:
            msg = "at least one threshold must be configured"
            raise ValueError(msg)
        tags = [t.tag for t in v]
        if len(set(tags)) != len(tags):
            msg = f"threshold tags must be unique, got {tags}"
            raise ValueError(msg)
        # Highest first so bucket lookups resolve boundaries upward
        return sorted(v, key=lambda t: t.min_score, reverse=True)


class SearchConfig(BaseModel):
    """Text fields searched by the keyword filter."""

    fields: list[str] = Field(default_factory=lambda: list(DEFAULT_SEARCH_FIELDS))

    @field_validator("fields")
    @classmethod
    def fields_not_empty(cls, v: list[str]) -> list[str]:
        cleaned = [f.strip() for f in v if f.strip()]
        if not cleaned:
            msg = "at least one search field must be configured"
            raise ValueError(msg)
        return cleaned


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    job_matching: ScoringConfig = Field(default_factory=ScoringConfig)
    talent_matching: ScoringConfig = Field(
        default_factory=lambda: ScoringConfig(styles=list(TALENT_BUCKET_STYLES)),
    )
    search: SearchConfig = Field(default_factory=SearchConfig)
    statuses: list[StatusCategory] = Field(default_factory=lambda: list(APPLICATION_STATUSES))

    @field_validator("statuses")
    @classmethod
    def statuses_unique(cls, v: list[StatusCategory]) -> list[StatusCategory]:
        tags = [s.tag for s in v]
        if len(set(tags)) != len(tags):
            msg = f"status tags must be unique, got {tags}"
            raise ValueError(msg)
        reserved = sorted({ALL, OTHER} & set(tags))
        if reserved:
            msg = f"status tags {reserved} are reserved for tally totals"
            raise ValueError(msg)
        return v

    def scoring_for(self, domain: str) -> ScoringConfig:
        """Return the scoring config for 'job' or 'talent' matching."""
        if domain == "job":
            return self.job_matching
        if domain == "talent":
            return self.talent_matching
        msg = f"Unknown matching domain '{domain}'. Available: job, talent"
        raise ValueError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
