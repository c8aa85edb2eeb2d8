"""Tests for configuration models and YAML loading."""

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from src.core.config import (
    APPLICATION_STATUSES,
    DEFAULT_SEARCH_FIELDS,
    ScoringConfig,
    SearchConfig,
    Settings,
)
from src.core.schemas import StatusCategory, Threshold


class TestScoringConfig:
    def test_defaults(self) -> None:
        s = ScoringConfig()
        assert [t.min_score for t in s.thresholds] == [0.9, 0.8, 0.7, 0.6]
        assert s.high_match_threshold == 0.8
        assert s.min_score is None

    def test_thresholds_sorted_descending(self) -> None:
        s = ScoringConfig(
            thresholds=[
                Threshold(min_score=0.5, tag="OK"),
                Threshold(min_score=0.9, tag="TOP"),
            ],
        )
        assert [t.tag for t in s.thresholds] == ["TOP", "OK"]

    def test_duplicate_tags_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScoringConfig(
                thresholds=[
                    Threshold(min_score=0.5, tag="OK"),
                    Threshold(min_score=0.9, tag="OK"),
                ],
            )

    def test_empty_thresholds_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScoringConfig(thresholds=[])

    def test_threshold_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ScoringConfig(thresholds=[{"min_score": 1.2, "tag": "X"}])

    def test_min_score_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ScoringConfig(min_score=-0.1)


class TestSearchConfig:
    def test_defaults(self) -> None:
        assert SearchConfig().fields == DEFAULT_SEARCH_FIELDS

    def test_fields_stripped(self) -> None:
        assert SearchConfig(fields=[" title ", ""]).fields == ["title"]

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SearchConfig(fields=["  "])


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.statuses == APPLICATION_STATUSES
        assert s.talent_matching.styles[0].label == "Perfect fit"
        assert s.job_matching.styles[0].label == "Best match"

    def test_scoring_for(self) -> None:
        s = Settings()
        assert s.scoring_for("job") is s.job_matching
        assert s.scoring_for("talent") is s.talent_matching

    def test_scoring_for_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown matching domain"):
            Settings().scoring_for("company")

    def test_duplicate_statuses_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(
                statuses=[
                    StatusCategory(tag="PENDING", label="a"),
                    StatusCategory(tag="PENDING", label="b"),
                ],
            )

    @pytest.mark.parametrize("tag", ["ALL", "OTHER"])
    def test_reserved_status_tags_rejected(self, tag: str) -> None:
        with pytest.raises(ValidationError, match="reserved"):
            Settings(statuses=[StatusCategory(tag=tag, label="x")])

    def test_from_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text(dedent("""\
            job_matching:
              min_score: 0.6
              thresholds:
                - {min_score: 0.85, tag: TOP}
                - {min_score: 0.6, tag: OK}
            search:
              fields: [title, required_skills]
            statuses:
              - {tag: OPEN, label: Open, weight: 0}
              - {tag: CLOSED, label: Closed, weight: 1}
        """))
        s = Settings.from_yaml(config)
        assert s.job_matching.min_score == 0.6
        assert [t.tag for t in s.job_matching.thresholds] == ["TOP", "OK"]
        assert s.search.fields == ["title", "required_skills"]
        assert [c.tag for c in s.statuses] == ["OPEN", "CLOSED"]
        assert s.talent_matching.min_score is None

    def test_from_yaml_empty_file(self, tmp_path: Path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text("")
        assert Settings.from_yaml(config) == Settings()

    def test_from_yaml_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "nope.yaml")

    def test_example_config_loads(self) -> None:
        path = Path(__file__).resolve().parents[2] / "config" / "settings.example.yaml"
        s = Settings.from_yaml(path)
        assert s.job_matching.high_match_threshold == 0.8
