"""
Default values for TAILOR résumé structure.

Provides the empty wire-format templates and the deterministic id scheme
used by normalizer.py when an item arrives without a stable id.
"""

from typing import Any, Dict

from tailor.contexts.document.resume_data_structure import BASICS_FIELDS, DEFAULT_SUMMARY_ID

EXPERIENCE_TEMPLATE = {
    "company": "",
    "role": "",
    "location": "",
    "startDate": "",
    "endDate": "",
    "isCurrent": False,
    "points": [],
}

PROJECT_TEMPLATE = {
    "name": "",
    "technologies": "",
    "link": "",
    "points": [],
}

EDUCATION_TEMPLATE = {
    "institution": "",
    "degree": "",
    "field": "",
    "startDate": "",
    "endDate": "",
}

CERTIFICATE_TEMPLATE = {
    "name": "",
    "issuer": "",
    "year": "",
}

# String spellings of isCurrent that mean "still in this role"
CURRENT_MARKERS = {"true", "yes", "y", "1", "present", "current"}


def skill_id(index: int) -> str:
    """Generated id for the skill at 0-based `index` ("skill-1", ...)."""
    return f"skill-{index + 1}"


def experience_point_prefix(job_index: int) -> str:
    return f"exp-{job_index + 1}"


def project_point_prefix(project_index: int) -> str:
    return f"proj-{project_index + 1}"


def point_id(prefix: str, index: int) -> str:
    """Generated id for the point at 0-based `index` under `prefix` ("exp-2-1", ...)."""
    return f"{prefix}-{index + 1}"


def get_empty_resume() -> Dict[str, Any]:
    """
    Get the all-empty wire-format résumé.

    Returns a fresh structure on every call so callers may mutate it.
    """
    return {
        "basics": {key: "" for key in BASICS_FIELDS},
        "summary": {"id": DEFAULT_SUMMARY_ID, "text": ""},
        "skills": [],
        "experience": [],
        "projects": [],
        "education": [],
        "certificates": [],
    }
