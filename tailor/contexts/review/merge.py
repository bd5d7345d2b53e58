"""
Selective merge.

Builds the final document from the original plus the accepted subset of a
change set. Every accepted item is a whole-field replacement located by
re-resolving its identity (skill id, job/project index plus point id) in the
working copy; nothing is patched from word diffs.

Rejected items leave the original's field untouched, so applying an all-False
decision map returns a document equal to the original, and applying the same
decisions twice gives the same result.
"""

from typing import Dict, List, Optional, Sequence, TypeVar, Union

from tailor.contexts.document.normalizer import normalize
from tailor.contexts.document.resume_data_structure import (
    Job,
    Point,
    Project,
    ResumeDocument,
    Summary,
)
from tailor.contexts.review.change_set import ChangeCategory, ChangeItem
from tailor.contexts.review.logger import _log_debug, log_merge_result

Section = TypeVar("Section", Job, Project)


def _index_of(entries: Sequence, entry_id: str) -> int:
    for index, entry in enumerate(entries):
        if entry.id == entry_id:
            return index
    return -1


def _apply_skill(working: ResumeDocument, candidate: ResumeDocument, entry_id: str) -> None:
    replacement = candidate.find_skill(entry_id)
    existing = _index_of(working.skills, entry_id)
    if replacement is not None and not replacement.is_empty():
        if existing >= 0:
            working.skills[existing] = replacement
        else:
            working.skills.append(replacement)
    elif existing >= 0:
        del working.skills[existing]


def _synthesize(entry: Union[Job, Project]) -> Union[Job, Project]:
    """Copy of a candidate job/project's scalar fields with no points."""
    if isinstance(entry, Job):
        return Job(
            company=entry.company,
            role=entry.role,
            location=entry.location,
            start_date=entry.start_date,
            end_date=entry.end_date,
            is_current=entry.is_current,
        )
    return Project(name=entry.name, technologies=entry.technologies, link=entry.link)


def _apply_point(
    working_sections: List[Section],
    candidate_sections: List[Section],
    index: Optional[int],
    pid: str,
) -> None:
    if index is None or index >= len(candidate_sections):
        _log_debug(f"Point {pid} refers to a missing section; skipped")
        return

    # Jobs/projects only present in the candidate are created on demand
    while len(working_sections) <= index:
        working_sections.append(_synthesize(candidate_sections[len(working_sections)]))

    points = working_sections[index].points
    existing = _index_of(points, pid)
    source = candidate_sections[index].points
    found = _index_of(source, pid)

    if found >= 0:
        replacement = Point(id=pid, text=source[found].text)
        if existing >= 0:
            points[existing] = replacement
        else:
            points.append(replacement)
    elif existing >= 0:
        del points[existing]


def apply_changes(
    original: Optional[ResumeDocument],
    candidate: Optional[ResumeDocument],
    change_set: List[ChangeItem],
    decisions: Dict[str, bool],
) -> ResumeDocument:
    """
    Apply the accepted change items to a copy of the original.

    Args:
        original: Document the user started from (None gives an empty document)
        candidate: Optimizer output the change set was built from
        change_set: Items from build_change_set(original, candidate)
        decisions: identity_key -> accepted; missing keys count as rejected

    Returns:
        New ResumeDocument; neither input is modified

    Example:
        >>> items = build_change_set(original, candidate)
        >>> merged = apply_changes(original, candidate, items, {"exp:0:exp-1-1": True})
    """
    working = original.copy() if original is not None else normalize(None)
    if candidate is None:
        return working

    # Replacement entries are taken from a private copy so the result never
    # shares objects with the caller's candidate
    source = candidate.copy()
    accepted = 0

    for item in change_set:
        if not decisions.get(item.identity_key):
            continue
        accepted += 1

        if item.category == ChangeCategory.SUMMARY:
            working.summary = Summary(id=source.summary.id, text=source.summary.text)
        elif item.category == ChangeCategory.SKILL:
            _apply_skill(working, source, item.item_id)
        elif item.category == ChangeCategory.EXPERIENCE_POINT:
            _apply_point(working.experience, source.experience, item.section_index, item.item_id)
        elif item.category == ChangeCategory.PROJECT_POINT:
            _apply_point(working.projects, source.projects, item.section_index, item.item_id)

    working.skills = [entry for entry in working.skills if not entry.is_empty()]

    log_merge_result(accepted, len(change_set))
    return working
