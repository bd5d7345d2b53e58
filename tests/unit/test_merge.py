"""
Unit tests for the selective merge.
"""

import copy

import pytest

from tailor.contexts.document import normalize
from tailor.contexts.review.change_set import build_change_set
from tailor.contexts.review.merge import apply_changes

ORIGINAL = {
    "basics": {"name": "Jane Doe"},
    "summary": {"id": "summary-1", "text": "Engineer with 5 years"},
    "skills": [
        {"id": "skill-1", "Languages": "Python"},
        {"id": "skill-2", "label": "Tools", "value": "Docker"},
        {"id": "skill-3", "Cloud": "GCP"},
    ],
    "experience": [
        {
            "role": "Engineer",
            "company": "Acme",
            "points": [
                {"id": "exp-1-1", "text": "Built UI components"},
                {"id": "exp-1-2", "text": "Wrote tests"},
                {"id": "exp-1-3", "text": "Reviewed code"},
            ],
        }
    ],
    "projects": [{"name": "Tracker", "points": [{"id": "proj-1-1", "text": "Tracked habits"}]}],
    "education": [{"institution": "State University", "degree": "BS"}],
}

CANDIDATE = {
    "summary": {"id": "summary-1", "text": "Senior engineer with 5 years of experience"},
    "skills": [
        {"id": "skill-1", "Languages": "Python, Go"},
        {"id": "skill-3", "Cloud": "GCP"},
        {"id": "skill-4", "Data": "SQL"},
    ],
    "experience": [
        {
            "role": "Engineer",
            "company": "Acme",
            "points": [
                {"id": "exp-1-1", "text": "Built reusable UI components in React"},
                {"id": "exp-1-2", "text": "Wrote tests"},
                {"id": "exp-1-3", "text": "Reviewed code daily"},
            ],
        }
    ],
    "projects": [{"name": "Tracker", "points": [{"id": "proj-1-1", "text": "Tracked habits in Go"}]}],
}


def _pair():
    return normalize(ORIGINAL), normalize(CANDIDATE)


def _texts(points):
    return [(point.id, point.text) for point in points]


@pytest.mark.unit
class TestSelectivity:
    def test_all_rejected_returns_original(self):
        original, candidate = _pair()
        items = build_change_set(original, candidate)
        decisions = {item.identity_key: False for item in items}
        assert apply_changes(original, candidate, items, decisions) == normalize(ORIGINAL)

    def test_missing_decisions_count_as_rejected(self):
        original, candidate = _pair()
        items = build_change_set(original, candidate)
        assert apply_changes(original, candidate, items, {}) == original

    def test_all_accepted_takes_candidate_values(self):
        original, candidate = _pair()
        items = build_change_set(original, candidate)
        merged = apply_changes(original, candidate, items, {i.identity_key: True for i in items})

        assert merged.summary == candidate.summary
        assert [entry.text for entry in merged.skills] == [
            "Languages: Python, Go",
            "Cloud: GCP",
            "Data: SQL",
        ]
        assert _texts(merged.experience[0].points) == _texts(candidate.experience[0].points)
        assert _texts(merged.projects[0].points) == _texts(candidate.projects[0].points)
        # Never-diffed sections stay as in the original
        assert merged.basics == original.basics
        assert merged.education == original.education

    def test_point_replaced_in_place(self):
        original, candidate = _pair()
        items = build_change_set(original, candidate)
        merged = apply_changes(original, candidate, items, {"exp:0:exp-1-1": True})

        assert _texts(merged.experience[0].points) == [
            ("exp-1-1", "Built reusable UI components in React"),
            ("exp-1-2", "Wrote tests"),
            ("exp-1-3", "Reviewed code"),
        ]
        assert merged.summary == original.summary
        assert merged.skills == original.skills
        assert merged.projects == original.projects

    def test_accepting_dropped_skill_removes_it(self):
        original, candidate = _pair()
        items = build_change_set(original, candidate)
        assert "skill:skill-2" in [item.identity_key for item in items]

        merged = apply_changes(original, candidate, items, {"skill:skill-2": True})
        assert [entry.id for entry in merged.skills] == ["skill-1", "skill-3"]

    def test_accepting_new_skill_appends_it(self):
        original, candidate = _pair()
        items = build_change_set(original, candidate)
        merged = apply_changes(original, candidate, items, {"skill:skill-4": True})
        assert [entry.id for entry in merged.skills] == ["skill-1", "skill-2", "skill-3", "skill-4"]


@pytest.mark.unit
class TestPoints:
    def test_accepting_dropped_point_removes_it(self):
        original = normalize({"projects": [{"name": "Tracker", "points": ["One", "Two"]}]})
        candidate = normalize({"projects": [{"name": "Tracker", "points": ["One"]}]})
        items = build_change_set(original, candidate)
        merged = apply_changes(original, candidate, items, {"proj:0:proj-1-2": True})
        assert _texts(merged.projects[0].points) == [("proj-1-1", "One")]

    def test_new_point_is_appended(self):
        original = normalize({"experience": [{"role": "Engineer", "points": ["One"]}]})
        candidate = normalize({"experience": [{"role": "Engineer", "points": ["One", "Two"]}]})
        items = build_change_set(original, candidate)
        merged = apply_changes(original, candidate, items, {"exp:0:exp-1-2": True})
        assert _texts(merged.experience[0].points) == [("exp-1-1", "One"), ("exp-1-2", "Two")]

    def test_missing_jobs_are_synthesized_from_candidate(self):
        original = normalize({"experience": [{"role": "Engineer", "company": "Acme", "points": ["One"]}]})
        candidate = normalize(
            {
                "experience": [
                    {"role": "Engineer", "company": "Acme", "points": ["One"]},
                    {"role": "Intern", "company": "Globex", "points": ["Two"]},
                    {"role": "Tutor", "company": "School", "startDate": "2015", "points": ["Three", "Four"]},
                ]
            }
        )
        items = build_change_set(original, candidate)
        merged = apply_changes(original, candidate, items, {"exp:2:exp-3-2": True})

        assert len(merged.experience) == 3
        assert merged.experience[1].role == "Intern"
        assert merged.experience[1].points == []
        assert merged.experience[2].role == "Tutor"
        assert merged.experience[2].start_date == "2015"
        assert _texts(merged.experience[2].points) == [("exp-3-2", "Four")]


@pytest.mark.unit
class TestPurity:
    def test_idempotent(self):
        original, candidate = _pair()
        items = build_change_set(original, candidate)
        decisions = {"summary:summary-1": True, "skill:skill-4": True, "exp:0:exp-1-3": True}
        first = apply_changes(original, candidate, items, decisions)
        second = apply_changes(original, candidate, items, decisions)
        assert first == second

    def test_inputs_are_not_mutated(self):
        original, candidate = _pair()
        original_before = copy.deepcopy(original)
        candidate_before = copy.deepcopy(candidate)
        items = build_change_set(original, candidate)
        apply_changes(original, candidate, items, {i.identity_key: True for i in items})
        assert original == original_before
        assert candidate == candidate_before

    def test_result_shares_nothing_with_inputs(self):
        original, candidate = _pair()
        items = build_change_set(original, candidate)
        merged = apply_changes(original, candidate, items, {"proj:0:proj-1-1": True})
        merged.projects[0].points[0].text = "edited"
        merged.experience[0].points.append(merged.experience[0].points[0])
        assert candidate.projects[0].points[0].text == "Tracked habits in Go"
        assert len(original.experience[0].points) == 3

    def test_absent_documents(self):
        original, candidate = _pair()
        assert apply_changes(None, candidate, [], {}) == normalize(None)

        untouched = apply_changes(original, None, build_change_set(original, candidate), {})
        assert untouched == original
        assert untouched is not original

    def test_empty_skills_are_dropped(self):
        original = normalize({"skills": [{"id": "skill-1", "label": "", "value": ""}, {"A": "x"}]})
        merged = apply_changes(original, original, [], {})
        assert [entry.id for entry in merged.skills] == ["skill-2"]
