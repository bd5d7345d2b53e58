"""
Unit tests for ReviewSession decision state and caching.
"""

import pytest

from tailor.contexts.document import normalize
from tailor.contexts.review.session import ReviewSession, hash_decisions

ORIGINAL = {
    "summary": "Engineer with 5 years",
    "skills": [{"Languages": "Python"}],
    "experience": [{"role": "Engineer", "company": "Acme", "points": ["Built UI components"]}],
}
CANDIDATE = {
    "summary": "Senior engineer with 5 years of experience",
    "skills": [{"Languages": "Python, Go"}],
    "experience": [
        {"role": "Engineer", "company": "Acme", "points": ["Built reusable UI components in React"]}
    ],
}


def _session():
    original = normalize(ORIGINAL)
    return ReviewSession(original, normalize(CANDIDATE, fallback=original))


@pytest.mark.unit
class TestDecisions:
    def test_starts_with_everything_rejected(self):
        session = _session()
        assert list(session.decisions) == ["summary:summary-1", "skill:skill-1", "exp:0:exp-1-1"]
        assert not any(session.decisions.values())
        assert session.merged() == session.original

    def test_toggle_and_set(self):
        session = _session()
        assert session.toggle("skill:skill-1") is True
        assert session.toggle("skill:skill-1") is False
        session.set_decision("exp:0:exp-1-1", True)
        assert session.accepted_count == 1
        session.set_all(True)
        assert session.accepted_count == 3

    def test_unknown_key_raises(self):
        session = _session()
        with pytest.raises(KeyError):
            session.toggle("skill:skill-99")
        with pytest.raises(KeyError):
            session.set_decision("nope", True)

    def test_groups(self):
        groups = _session().groups()
        assert list(groups) == ["Summary", "Skills", "Engineer · Acme"]


@pytest.mark.unit
class TestCache:
    def test_merged_is_cached_until_decisions_change(self):
        session = _session()
        first = session.merged()
        assert session.merged() is first

        session.toggle("exp:0:exp-1-1")
        changed = session.merged()
        assert changed is not first
        assert changed.experience[0].points[0].text == "Built reusable UI components in React"

        # Same decisions again hit the earlier entry
        session.toggle("exp:0:exp-1-1")
        assert session.merged() is first

    def test_export_text_follows_decisions(self):
        session = _session()
        before = session.export_text()
        assert session.export_text() is before
        assert "Engineer with 5 years" in before

        session.set_decision("summary:summary-1", True)
        after = session.export_text()
        assert "Senior engineer with 5 years of experience" in after

    def test_replace_candidate_resets_state(self):
        session = _session()
        session.set_all(True)
        stale = session.merged()

        session.replace_candidate(normalize({"summary": "Staff engineer"}, fallback=session.original))
        assert session.candidate_version == 1
        assert not any(session.decisions.values())
        assert "summary:summary-1" in session.decisions
        assert session.merged() is not stale
        assert session.merged() == session.original

    def test_absent_candidate(self):
        session = ReviewSession(normalize(ORIGINAL), None)
        assert session.change_set == []
        assert session.merged() == session.original

    def test_decision_hash_ignores_insertion_order(self):
        assert hash_decisions({"a": True, "b": False}) == hash_decisions({"b": False, "a": True})
        assert hash_decisions({"a": True}) != hash_decisions({"a": False})
