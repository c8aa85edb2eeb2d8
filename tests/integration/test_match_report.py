"""Integration test: backend JSON through filter, rank and summary."""

import copy
import logging
from datetime import datetime

import pytest

from src.core.config import ScoringConfig, Settings
from src.core.schemas import Application, FilterCriteria, JobPosting, TalentMatch
from src.pipeline.report import MatchReport, build_match_report
from src.pipeline.tally import OTHER, applications_per_job, status_tally

NOW = datetime(2025, 6, 1, 12, 0, 0)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

POSTINGS_JSON = [
    {
        "id": 101,
        "title": "iOS Developer (3+ years)",
        "description": "MVVM and RxSwift",
        "position": "iOS Developer",
        "requiredSkills": "#Swift #UIKit",
        "experienceLevel": "Experienced 1+ years",
        "location": "Seoul Gangnam",
        "deadline": "2025-07-10T23:59:59",
        "companyName": "TechStartup",
        "matchRate": 0.82,
    },
    {
        "id": 104,
        "title": "Full Stack Developer (Swift + React)",
        "description": "Node.js backend",
        "position": "Full Stack Developer",
        "requiredSkills": "Swift, React",
        "experienceLevel": "Experienced 2+ years",
        "location": "Seoul Mapo",
        "deadline": None,
        "companyName": "StartupKorea",
        "matchRate": 0.95,
    },
    {
        "id": 105,
        "title": "Junior iOS Developer",
        "description": "Bootcamp graduates welcome",
        "position": "Junior iOS Developer",
        "requiredSkills": "Swift",
        "experienceLevel": "Entry level",
        "location": "Seoul Jongno",
        "deadline": "2025-05-05T23:59:59",
        "companyName": "EduTech",
        "matchRate": 0.68,
    },
    {
        "id": 106,
        "title": "Android Developer",
        "requiredSkills": "Kotlin",
        "location": "Busan",
        "companyName": None,
    },
]


@pytest.fixture()
def postings() -> list[JobPosting]:
    return [JobPosting.model_validate(p) for p in POSTINGS_JSON]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestBuildMatchReport:
    def test_no_criteria_ranks_everything(self, postings: list[JobPosting]) -> None:
        report = build_match_report(postings, None, Settings(), now=NOW)
        assert isinstance(report, MatchReport)
        assert [r.id for r in report.records] == [104, 101, 105, 106]
        assert report.summary.total_count == 4
        assert report.summary.unscored_count == 1
        assert report.summary.bucket_counts == {"EXCELLENT": 1, "GOOD": 1, "LOW": 1}
        assert report.high_match_count == 2
        assert report.top_score == 0.95

    def test_hashtag_search_active_only(self, postings: list[JobPosting]) -> None:
        criteria = FilterCriteria(keyword="#swift seoul", active_only=True)
        settings = Settings.model_validate(
            {"search": {"fields": ["title", "required_skills", "location"]}},
        )
        report = build_match_report(postings, criteria, settings, now=NOW)
        assert [r.id for r in report.records] == [104, 101]
        assert report.summary.average_score == pytest.approx(0.885)

    def test_config_min_score_applies(self, postings: list[JobPosting]) -> None:
        settings = Settings(job_matching=ScoringConfig(min_score=0.8))
        report = build_match_report(postings, FilterCriteria(), settings, now=NOW)
        assert [r.id for r in report.records] == [104, 101]

    def test_criteria_min_score_wins(self, postings: list[JobPosting]) -> None:
        settings = Settings(job_matching=ScoringConfig(min_score=0.8))
        report = build_match_report(postings, FilterCriteria(min_score=0.6), settings, now=NOW)
        assert [r.id for r in report.records] == [104, 101, 105]

    def test_summary_text(self, postings: list[JobPosting]) -> None:
        report = build_match_report(postings[:3], None, Settings(), now=NOW)
        assert report.summary_text == "3 matches (high match: 2, average match: 82%)"

    def test_summary_text_empty(self) -> None:
        report = build_match_report([], None, Settings(), now=NOW)
        assert report.has_results is False
        assert report.summary_text == "No matches"

    def test_input_untouched(self, postings: list[JobPosting]) -> None:
        snapshot = copy.deepcopy(postings)
        build_match_report(postings, FilterCriteria(keyword="ios"), Settings(), now=NOW)
        assert postings == snapshot

    def test_raw_dicts_accepted(self) -> None:
        records = [{"id": 1, "score": 0.95}, {"id": 2, "score": None}, {"id": 3, "score": 0.65}]
        report = build_match_report(records, None, Settings(), now=NOW)
        assert [r["id"] for r in report.records] == [1, 3, 2]
        assert report.summary.average_score == pytest.approx(0.8)

    def test_talent_domain(self) -> None:
        talents = [
            TalentMatch.model_validate({"resumeId": 1, "candidateName": "Kim", "matchScore": 0.91}),
            TalentMatch.model_validate({"resumeId": 2, "candidateName": "Park", "matchScore": 0.74}),
        ]
        settings = Settings.model_validate({"search": {"fields": ["candidate_name"]}})
        report = build_match_report(
            talents, FilterCriteria(keyword="kim"), settings, domain="talent",
        )
        assert [t.id for t in report.records] == [1]
        assert report.domain == "talent"

    def test_unknown_domain(self) -> None:
        with pytest.raises(ValueError):
            build_match_report([], None, Settings(), domain="company")

    def test_logs_run(self, postings: list[JobPosting], caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="src.pipeline.report"):
            build_match_report(postings, None, Settings(), now=NOW)
        assert "4 of 4 records kept" in caplog.text


class TestApplicationCounts:
    def test_status_and_per_job_counts(self) -> None:
        apps = [
            Application.model_validate({"id": 1, "jobPostingId": 101, "status": "PENDING"}),
            Application.model_validate({"id": 2, "jobPostingId": 101, "status": "REVIEWED"}),
            Application.model_validate({"id": 3, "jobPostingId": 104, "status": "ACCEPTED"}),
            Application.model_validate({"id": 4, "jobPostingId": 999, "status": "UNKNOWN"}),
        ]
        by_status = status_tally(apps)
        by_job = applications_per_job(apps, [101, 104, 105])
        assert by_status[OTHER] == 1
        assert sum(by_status.values()) == len(apps)
        assert by_job == {101: 2, 104: 1, 105: 0, OTHER: 1}
