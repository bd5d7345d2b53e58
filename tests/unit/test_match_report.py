"""
Unit tests for keyword match scoring.
"""

import pytest

from tailor.contexts.document import normalize
from tailor.contexts.optimizing.match_report import (
    KeywordAnalysis,
    build_match_report,
    detect_role_title,
    grade_from_score,
    match_score,
    normalize_keyword_list,
)


@pytest.mark.unit
class TestScore:
    @pytest.mark.parametrize(
        "score,grade",
        [(98, "A"), (90, "A"), (89, "B+"), (80, "B+"), (79, "B"), (70, "B"),
         (69, "C"), (60, "C"), (59, "D"), (45, "D")],
    )
    def test_grade_thresholds(self, score, grade):
        assert grade_from_score(score) == grade

    def test_score_is_clamped(self):
        assert match_score(["a"] * 10, ["a"]) == 45
        assert match_score(["a", "b"], ["a", "b"]) == 98
        assert match_score(["a", "b", "c", "d"], ["a", "b", "c"]) == 75

    def test_half_rounds_up(self):
        assert match_score(["a"] * 8, ["a"] * 5) == 63  # 62.5

    def test_nothing_required_is_neutral(self):
        assert match_score([], []) == 72
        assert match_score([], ["Python"]) == 72


@pytest.mark.unit
class TestRoleTitle:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Senior Backend Engineer needed to build APIs", "Senior Backend Engineer"),
            ("Product Designer, remote", "Product Designer"),
            ("lead engineer for payments", "lead engineer"),
            ("Join us as a data wrangler", "Target Role"),
            ("", "Target Role"),
        ],
    )
    def test_detect_role_title(self, text, expected):
        assert detect_role_title(text) == expected


@pytest.mark.unit
class TestReport:
    def test_keyword_lists_are_cleaned(self):
        assert normalize_keyword_list([" Python", "Python", "", 3, "Go "]) == ["Python", "3", "Go"]
        assert normalize_keyword_list("Python") == []

    def test_matched_restricted_to_required(self):
        keywords = KeywordAnalysis(
            required=["Python", "Kubernetes", "AWS", "REST"],
            matching=["Python", "REST", "Excel"],
        )
        report = build_match_report(keywords, ["note"], "Senior Backend Engineer role", None)
        assert report.matched == ["Python", "REST"]
        # Missing derived from required when the model listed none
        assert report.missing == ["Kubernetes", "AWS"]
        assert report.match_score == 50
        assert report.grade == "D"
        assert report.role_title == "Senior Backend Engineer"
        assert report.issues == ["note"]
        assert report.summary_after == ""

    def test_model_missing_list_wins(self):
        keywords = KeywordAnalysis(required=["A", "B"], matching=["A"], missing=["C"])
        assert build_match_report(keywords, [], "", None).missing == ["C"]

    def test_summary_after_from_candidate(self):
        candidate = normalize({"summary": "Senior engineer"})
        report = build_match_report(KeywordAnalysis(), [], "", candidate)
        assert report.summary_after == "Senior engineer"
        assert report.match_score == 72
        assert report.to_dict()["atsGrade"] == "B"

    def test_improved_score(self):
        report = build_match_report(KeywordAnalysis(required=["A", "B"], matching=["A"]), [], "", None)
        assert report.match_score == 50
        assert report.improved_score(3) == 56
        assert report.improved_score(100) == 99

        complete = build_match_report(KeywordAnalysis(required=["A"], matching=["A"]), [], "", None)
        assert complete.improved_score(0) == 99
