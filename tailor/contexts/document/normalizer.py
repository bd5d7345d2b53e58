"""
Résumé Normalization

Turns ANY JSON-shaped value (parser output, optimizer output, hand-written
YAML) into a complete ResumeDocument.

- Input: raw mapping that may be partial, mistyped or carry extra keys
- Output: ResumeDocument with every field present and every stable id assigned
- Operations:
  1. Merge raw over the empty template, then over an optional fallback document
  2. Walk arrays index-aligned with the fallback, backfilling entries and ids
  3. Generate deterministic ids where neither side has one
     (skill-<n>, exp-<job>-<point>, proj-<project>-<point>, summary-1)
  4. Degrade wrong-typed leaves to "" / [] instead of raising

The fallback is how a candidate keeps the original's ids when the optimizer
returns shorter arrays or drops ids: normalize(candidate_raw, fallback=original).
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from tailor.contexts.document.defaults import (
    CERTIFICATE_TEMPLATE,
    CURRENT_MARKERS,
    EDUCATION_TEMPLATE,
    EXPERIENCE_TEMPLATE,
    PROJECT_TEMPLATE,
    experience_point_prefix,
    get_empty_resume,
    point_id,
    project_point_prefix,
    skill_id,
)
from tailor.contexts.document.logger import _log_debug
from tailor.contexts.document.resume_data_structure import (
    BASICS_FIELDS,
    DEFAULT_SUMMARY_ID,
    Basics,
    Certificate,
    DerivedSkill,
    EducationEntry,
    ExplicitSkill,
    Job,
    Point,
    Project,
    ResumeDocument,
    SkillEntry,
    SkillShape,
    Summary,
)

RawDocument = Union[ResumeDocument, Mapping, None]


# ============================================================================
# Leaf coercion
# ============================================================================


def _as_mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _is_missing(value: Any) -> bool:
    """Mirror of "falsy" for JSON leaves; empty mappings and lists still count as present."""
    if isinstance(value, (Mapping, list)):
        return False
    return not value


def _scalar_text(value: Any) -> str:
    """Strings pass through, numbers become their text, everything else is ""."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _clean_id(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _entry_id(entry: Any) -> str:
    return _clean_id(entry.get("id")) if isinstance(entry, Mapping) else ""


def _is_current(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in CURRENT_MARKERS
    if isinstance(value, (int, float)):
        return value == 1
    return False


def _index(items: list, i: int) -> Any:
    return items[i] if i < len(items) else None


def _as_raw(document: RawDocument) -> Mapping:
    if isinstance(document, ResumeDocument):
        return document.to_dict()
    return _as_mapping(document)


# ============================================================================
# Skills
# ============================================================================


def skill_shape_from_raw(entry: Any) -> Optional[SkillShape]:
    """
    Decide which skill shape a raw entry has.

    Explicit when "label" or "value" is a string. Otherwise the first key other
    than "id" (input order) is the label; with several candidate keys the first
    one wins and the rest are ignored. A bare string is a label-only skill.

    Returns:
        The shape, or None when the entry cannot be a skill at all
    """
    if isinstance(entry, str):
        return ExplicitSkill(label=entry.strip())
    if not isinstance(entry, Mapping):
        return None

    label, value = entry.get("label"), entry.get("value")
    if isinstance(label, str) or isinstance(value, str):
        return ExplicitSkill(
            label=label if isinstance(label, str) else "",
            value=value if isinstance(value, str) else "",
        )

    keys = [key for key in entry if key != "id"]
    if not keys:
        return ExplicitSkill()
    key = keys[0]
    raw_value = entry[key]
    return DerivedSkill(key=str(key), value=raw_value if isinstance(raw_value, str) else "")


def normalize_skills(skills: Any, fallback_skills: Any = None) -> List[SkillEntry]:
    """Normalize a skills array index-aligned with an optional fallback array."""
    items = _as_list(skills)
    fallback = _as_list(fallback_skills)
    normalized = []
    for i in range(max(len(items), len(fallback))):
        entry = _index(items, i)
        fallback_entry = _index(fallback, i)
        if _is_missing(entry) and _is_missing(fallback_entry):
            continue

        shape = None if _is_missing(entry) else skill_shape_from_raw(entry)
        if shape is None:
            shape = skill_shape_from_raw(fallback_entry)
        if shape is None:
            continue

        entry_id = _entry_id(entry) or _entry_id(fallback_entry) or skill_id(i)
        normalized.append(SkillEntry(id=entry_id, shape=shape))
    return normalized


# ============================================================================
# Points, jobs and projects
# ============================================================================


def point_text(point: Any) -> str:
    """Text of a raw point: a bare string, or the "text" (else "value") field."""
    if isinstance(point, str):
        return point
    if isinstance(point, Mapping):
        if isinstance(point.get("text"), str):
            return point["text"]
        if isinstance(point.get("value"), str):
            return point["value"]
    return ""


def normalize_points(points: Any, fallback_points: Any, prefix: str) -> List[Point]:
    """
    Normalize a points array index-aligned with an optional fallback array.

    Args:
        points: Raw points (strings or {"id", "text"} mappings)
        fallback_points: Points of the same job/project in the fallback document
        prefix: Id prefix for generated ids ("exp-2", "proj-1")
    """
    items = _as_list(points)
    fallback = _as_list(fallback_points)
    normalized = []
    for i in range(max(len(items), len(fallback))):
        point = _index(items, i)
        fallback_point = _index(fallback, i)
        if _is_missing(point) and _is_missing(fallback_point):
            continue

        pid = _entry_id(point) or _entry_id(fallback_point) or point_id(prefix, i)
        usable = not _is_missing(point) and isinstance(point, (str, Mapping))
        source = point if usable else fallback_point
        normalized.append(Point(id=pid, text=point_text(source)))
    return normalized


def _merged_entries(items: Any, fallback_items: Any, template: Dict[str, Any]):
    """
    Yield (index, merged, raw_entry, fallback_entry) for an index-aligned pair of arrays.

    merged is {**template, **fallback_entry, **raw_entry}; indices where both
    sides are missing are skipped.
    """
    items = _as_list(items)
    fallback = _as_list(fallback_items)
    for i in range(max(len(items), len(fallback))):
        item = _index(items, i)
        fallback_item = _index(fallback, i)
        if _is_missing(item) and _is_missing(fallback_item):
            continue
        item_map = _as_mapping(item)
        fallback_map = _as_mapping(fallback_item)
        yield i, {**template, **fallback_map, **item_map}, item_map, fallback_map


def normalize_experience(experience: Any, fallback_experience: Any = None) -> List[Job]:
    jobs = []
    for i, merged, item, fallback_item in _merged_entries(
        experience, fallback_experience, EXPERIENCE_TEMPLATE
    ):
        jobs.append(
            Job(
                company=_scalar_text(merged["company"]),
                role=_scalar_text(merged["role"]),
                location=_scalar_text(merged["location"]),
                start_date=_scalar_text(merged["startDate"]),
                end_date=_scalar_text(merged["endDate"]),
                is_current=_is_current(merged["isCurrent"]),
                points=normalize_points(
                    item.get("points"), fallback_item.get("points"), experience_point_prefix(i)
                ),
            )
        )
    return jobs


def normalize_projects(projects: Any, fallback_projects: Any = None) -> List[Project]:
    normalized = []
    for i, merged, item, fallback_item in _merged_entries(
        projects, fallback_projects, PROJECT_TEMPLATE
    ):
        normalized.append(
            Project(
                name=_scalar_text(merged["name"]),
                technologies=_scalar_text(merged["technologies"]),
                link=_scalar_text(merged["link"]),
                points=normalize_points(
                    item.get("points"), fallback_item.get("points"), project_point_prefix(i)
                ),
            )
        )
    return normalized


def normalize_education(education: Any, fallback_education: Any = None) -> List[EducationEntry]:
    return [
        EducationEntry(
            institution=_scalar_text(merged["institution"]),
            degree=_scalar_text(merged["degree"]),
            field=_scalar_text(merged["field"]),
            start_date=_scalar_text(merged["startDate"]),
            end_date=_scalar_text(merged["endDate"]),
        )
        for _, merged, _, _ in _merged_entries(education, fallback_education, EDUCATION_TEMPLATE)
    ]


def normalize_certificates(certificates: Any, fallback_certificates: Any = None) -> List[Certificate]:
    return [
        Certificate(
            name=_scalar_text(merged["name"]),
            issuer=_scalar_text(merged["issuer"]),
            year=_scalar_text(merged["year"]),
        )
        for _, merged, _, _ in _merged_entries(
            certificates, fallback_certificates, CERTIFICATE_TEMPLATE
        )
    ]


# ============================================================================
# Basics and summary
# ============================================================================


def normalize_basics(basics: Any, fallback_basics: Any = None) -> Basics:
    merged = {**get_empty_resume()["basics"], **_as_mapping(fallback_basics), **_as_mapping(basics)}
    extras = {
        str(key): _scalar_text(value)
        for key, value in merged.items()
        if key not in BASICS_FIELDS and _scalar_text(value)
    }
    return Basics(**{key: _scalar_text(merged[key]) for key in BASICS_FIELDS}, extras=extras)


def normalize_summary(summary: Any, fallback_summary: Any = None) -> Summary:
    """
    Normalize a summary given as {"id", "text"} or as a bare string.

    The id falls back to the fallback summary's id, then to "summary-1".
    The text is never backfilled.
    """
    fallback_id = _entry_id(fallback_summary) or DEFAULT_SUMMARY_ID
    if isinstance(summary, Mapping):
        text = summary.get("text")
        return Summary(
            id=_entry_id(summary) or fallback_id,
            text=text if isinstance(text, str) else "",
        )
    if isinstance(summary, str):
        return Summary(id=fallback_id, text=summary)
    return Summary(id=fallback_id, text="")


# ============================================================================
# Document
# ============================================================================


def normalize(raw: RawDocument, fallback: RawDocument = None) -> ResumeDocument:
    """
    Coerce an arbitrary value into a fully shaped ResumeDocument.

    Never raises: None, lists, scalars and wrong-typed leaves all degrade to
    empty values.

    Args:
        raw: Raw document (mapping, ResumeDocument, or anything else)
        fallback: Optional document whose ids and entries backfill `raw`
            (typically the original when normalizing a candidate)

    Returns:
        New ResumeDocument (inputs are not modified)

    Example:
        >>> original = normalize(parsed_resume_json)
        >>> candidate = normalize(optimizer_json, fallback=original)
    """
    data = _as_raw(raw)
    base = _as_raw(fallback)

    document = ResumeDocument(
        basics=normalize_basics(data.get("basics"), base.get("basics")),
        summary=normalize_summary(data.get("summary"), base.get("summary")),
        skills=normalize_skills(data.get("skills"), base.get("skills")),
        experience=normalize_experience(data.get("experience"), base.get("experience")),
        projects=normalize_projects(data.get("projects"), base.get("projects")),
        education=normalize_education(data.get("education"), base.get("education")),
        certificates=normalize_certificates(data.get("certificates"), base.get("certificates")),
    )
    _log_debug(
        f"Normalized document: {len(document.skills)} skills, {len(document.experience)} jobs, "
        f"{len(document.projects)} projects (fallback: {'yes' if base else 'no'})"
    )
    return document
