"""
Keyword match report.

Summarizes how well a résumé covers the keywords of a job description, using
the keyword lists the skills step returned: matched/required ratio as a score
clamped to [45, 98], a letter grade, and a role title guessed from the
job description.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from tailor.contexts.document.resume_data_structure import ResumeDocument

MIN_SCORE = 45
MAX_SCORE = 98
# Score shown when the job description yielded no required keywords
NEUTRAL_SCORE = 72
# Ceiling of the score estimate after accepting changes
MAX_IMPROVED_SCORE = 99

DEFAULT_ROLE_TITLE = "Target Role"

ROLE_TITLE_PATTERN = re.compile(
    r"(Senior|Lead|Principal|Staff)?\s*([A-Za-z\s]+?)(Engineer|Developer|Designer|Manager)",
    re.IGNORECASE,
)

GRADE_THRESHOLDS = [(90, "A"), (80, "B+"), (70, "B"), (60, "C")]


def normalize_keyword_list(values: Any) -> List[str]:
    """Stringify, strip and de-duplicate (first occurrence wins); non-lists give []."""
    if not isinstance(values, list):
        return []
    seen = []
    for value in values:
        text = str(value).strip()
        if text and text not in seen:
            seen.append(text)
    return seen


@dataclass
class KeywordAnalysis:
    """Keyword lists reported by the skills step."""

    required: List[str] = field(default_factory=list)
    matching: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "KeywordAnalysis":
        return cls(
            required=normalize_keyword_list(raw.get("Required Keywords")),
            matching=normalize_keyword_list(raw.get("Matching Keywords")),
            missing=normalize_keyword_list(raw.get("Missing Keywords")),
        )

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "Required Keywords": list(self.required),
            "Matching Keywords": list(self.matching),
            "Missing Keywords": list(self.missing),
        }


@dataclass
class MatchReport:
    role_title: str
    required: List[str]
    matched: List[str]
    missing: List[str]
    issues: List[str]
    summary_after: str
    match_score: int
    grade: str

    def improved_score(self, applied_count: int) -> int:
        """
        Rough score estimate after accepting `applied_count` changes.

        Two points per accepted change, two more when nothing was missing,
        capped at 99.
        """
        bonus = applied_count * 2 + (0 if self.missing else 2)
        return min(MAX_IMPROVED_SCORE, self.match_score + bonus)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roleTitle": self.role_title,
            "requiredSkills": self.required,
            "matchedSkills": self.matched,
            "missingSkills": self.missing,
            "issues": self.issues,
            "summaryAfter": self.summary_after,
            "matchScore": self.match_score,
            "atsGrade": self.grade,
        }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def grade_from_score(score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "D"


def detect_role_title(job_description: str) -> str:
    """
    Guess the role title ("Senior Backend Engineer") from a job description.

    Returns:
        First "<seniority?> <words> <Engineer|Developer|Designer|Manager>" match
        with whitespace collapsed, or "Target Role"
    """
    match = ROLE_TITLE_PATTERN.search(job_description or "")
    if not match:
        return DEFAULT_ROLE_TITLE
    seniority, words, noun = match.groups()
    title = f"{seniority + ' ' if seniority else ''}{words.strip()} {noun}"
    return re.sub(r"\s+", " ", title)


def match_score(required: Iterable[str], matched: Iterable[str]) -> int:
    required = list(required)
    if not required:
        return NEUTRAL_SCORE
    raw = _round_half_up(len(list(matched)) / len(required) * 100)
    return max(MIN_SCORE, min(MAX_SCORE, raw))


def build_match_report(
    keywords: KeywordAnalysis,
    notes: List[str],
    job_description: str,
    candidate: Optional[ResumeDocument] = None,
) -> MatchReport:
    """
    Build the match report shown next to the review.

    Matched keywords are restricted to required ones when any are required.
    Missing keywords come from the model when it listed any, otherwise they
    are the required keywords that were not matched.
    """
    required = keywords.required
    matched = [kw for kw in keywords.matching if not required or kw in required]
    missing = keywords.missing or [kw for kw in required if kw not in matched]
    score = match_score(required, matched)

    return MatchReport(
        role_title=detect_role_title(job_description),
        required=list(required),
        matched=matched,
        missing=list(missing),
        issues=list(notes),
        summary_after=candidate.summary.text if candidate is not None else "",
        match_score=score,
        grade=grade_from_score(score),
    )
