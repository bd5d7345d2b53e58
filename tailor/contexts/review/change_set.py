"""
Change-set extraction.

Walks an original and a candidate document and lists every atomic,
independently acceptable difference between them. Items are aligned by stable
id, never by position, so a candidate that reorders bullets still pairs each
bullet with its original.

Output order is fixed (summary, skills, experience points, project points) and
within each section follows the original's order, with items that exist only
in the candidate appended in candidate order. Review UIs group by this order.

Identity keys:
    summary:<summaryId>
    skill:<skillId>
    exp:<jobIndex>:<pointId>      (jobIndex is 0-based)
    proj:<projectIndex>:<pointId> (projectIndex is 0-based)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from tailor.contexts.document.defaults import (
    experience_point_prefix,
    point_id,
    project_point_prefix,
    skill_id,
)
from tailor.contexts.document.resume_data_structure import Point, ResumeDocument, SkillEntry
from tailor.contexts.review.logger import log_change_set
from tailor.contexts.review.word_diff import WordDiff, diff_words

T = TypeVar("T")

OTHER_GROUP = "Other"


class ChangeCategory(str, Enum):
    """Section a change item belongs to."""

    SUMMARY = "summary"
    SKILL = "skill"
    EXPERIENCE_POINT = "experiencePoint"
    PROJECT_POINT = "projectPoint"


@dataclass(frozen=True)
class ChangeItem:
    """
    One reviewable difference between original and candidate.

    Attributes:
        identity_key: Key used in the decision map (see module docstring)
        category: Section of the change
        group_label: Display group ("Summary", "Skills", "Engineer · Acme", ...)
        before_text: Original text ("" when the item is new)
        after_text: Candidate text ("" when the item was dropped)
        item_id: Stable id of the summary, skill or point
        section_index: Job/project index for point changes, None otherwise
        title: Short display title (skill label, "Summary")
    """

    identity_key: str
    category: ChangeCategory
    group_label: str
    before_text: str
    after_text: str
    item_id: str
    section_index: Optional[int] = None
    title: str = ""

    def diff(self) -> WordDiff:
        return diff_words(self.before_text, self.after_text)

    def to_dict(self) -> Dict[str, object]:
        return {
            "identityKey": self.identity_key,
            "category": self.category.value,
            "groupLabel": self.group_label,
            "title": self.title,
            "itemId": self.item_id,
            "sectionIndex": self.section_index,
            "before": self.before_text,
            "after": self.after_text,
        }


def summary_key(summary_id: str) -> str:
    return f"summary:{summary_id}"


def skill_key(entry_id: str) -> str:
    return f"skill:{entry_id}"


def experience_key(job_index: int, pid: str) -> str:
    return f"exp:{job_index}:{pid}"


def project_key(project_index: int, pid: str) -> str:
    return f"proj:{project_index}:{pid}"


# ============================================================================
# Identity-keyed alignment
# ============================================================================


def keyed_by_id(
    entries: Sequence[T], id_of: Callable[[T], str], fallback_id: Callable[[int], str]
) -> Dict[str, T]:
    """
    Map entries by stable id, in sequence order.

    Entries without an id get the positional fallback id. A repeated id keeps
    its first position and its last entry.
    """
    mapping: Dict[str, T] = {}
    for index, entry in enumerate(entries):
        mapping[id_of(entry) or fallback_id(index)] = entry
    return mapping


def ordered_union(before: Dict[str, T], after: Dict[str, T]) -> List[str]:
    """Original ids in original order, then candidate-only ids in candidate order."""
    return list(before) + [key for key in after if key not in before]


def _skill_changes(original: ResumeDocument, candidate: ResumeDocument) -> List[ChangeItem]:
    before_map = keyed_by_id(original.skills, lambda entry: entry.id, skill_id)
    after_map = keyed_by_id(candidate.skills, lambda entry: entry.id, skill_id)

    items = []
    for position, entry_id in enumerate(ordered_union(before_map, after_map)):
        before_entry: Optional[SkillEntry] = before_map.get(entry_id)
        after_entry: Optional[SkillEntry] = after_map.get(entry_id)
        before_text = before_entry.text if before_entry else ""
        after_text = after_entry.text if after_entry else ""
        if not before_text and not after_text:
            continue
        if before_text == after_text:
            continue
        title = (
            (after_entry.label if after_entry else "")
            or (before_entry.label if before_entry else "")
            or f"Skill {position + 1}"
        )
        items.append(
            ChangeItem(
                identity_key=skill_key(entry_id),
                category=ChangeCategory.SKILL,
                group_label="Skills",
                before_text=before_text,
                after_text=after_text,
                item_id=entry_id,
                title=title,
            )
        )
    return items


def _point_changes(
    before_points: List[Point],
    after_points: List[Point],
    index: int,
    prefix: str,
    category: ChangeCategory,
    key_fn: Callable[[int, str], str],
    group_label: str,
) -> List[ChangeItem]:
    def fallback_id(position: int) -> str:
        return point_id(prefix, position)

    before_map = keyed_by_id(before_points, lambda point: point.id, fallback_id)
    after_map = keyed_by_id(after_points, lambda point: point.id, fallback_id)

    items = []
    for pid in ordered_union(before_map, after_map):
        before_text = before_map[pid].text if pid in before_map else ""
        after_text = after_map[pid].text if pid in after_map else ""
        if not before_text and not after_text:
            continue
        if before_text == after_text:
            continue
        items.append(
            ChangeItem(
                identity_key=key_fn(index, pid),
                category=category,
                group_label=group_label,
                before_text=before_text,
                after_text=after_text,
                item_id=pid,
                section_index=index,
            )
        )
    return items


def _experience_changes(original: ResumeDocument, candidate: ResumeDocument) -> List[ChangeItem]:
    items = []
    for index in range(max(len(original.experience), len(candidate.experience))):
        before_job = original.experience[index] if index < len(original.experience) else None
        after_job = candidate.experience[index] if index < len(candidate.experience) else None

        role = (after_job.role if after_job else "") or (before_job.role if before_job else "")
        company = (after_job.company if after_job else "") or (
            before_job.company if before_job else ""
        )
        group = " · ".join(part for part in (role, company) if part) or f"Experience {index + 1}"

        items.extend(
            _point_changes(
                before_job.points if before_job else [],
                after_job.points if after_job else [],
                index,
                experience_point_prefix(index),
                ChangeCategory.EXPERIENCE_POINT,
                experience_key,
                group,
            )
        )
    return items


def _project_changes(original: ResumeDocument, candidate: ResumeDocument) -> List[ChangeItem]:
    items = []
    for index in range(max(len(original.projects), len(candidate.projects))):
        before_project = original.projects[index] if index < len(original.projects) else None
        after_project = candidate.projects[index] if index < len(candidate.projects) else None

        group = (
            (after_project.name if after_project else "")
            or (before_project.name if before_project else "")
            or f"Project {index + 1}"
        )

        items.extend(
            _point_changes(
                before_project.points if before_project else [],
                after_project.points if after_project else [],
                index,
                project_point_prefix(index),
                ChangeCategory.PROJECT_POINT,
                project_key,
                group,
            )
        )
    return items


# ============================================================================
# Public API
# ============================================================================


def build_change_set(
    original: Optional[ResumeDocument], candidate: Optional[ResumeDocument]
) -> List[ChangeItem]:
    """
    List the differences between two normalized documents.

    Args:
        original: Document the user started from
        candidate: Optimizer output, normalized against the original

    Returns:
        Ordered change items; empty when either document is missing

    Example:
        >>> items = build_change_set(original, candidate)
        >>> [item.identity_key for item in items]
        ['summary:summary-1', 'skill:skill-2', 'exp:0:exp-1-1']
    """
    if original is None or candidate is None:
        return []

    items: List[ChangeItem] = []

    summary_before = original.summary.text
    summary_after = candidate.summary.text
    if summary_after and summary_after != summary_before:
        summary_id = candidate.summary.id or original.summary.id
        items.append(
            ChangeItem(
                identity_key=summary_key(summary_id),
                category=ChangeCategory.SUMMARY,
                group_label="Summary",
                before_text=summary_before,
                after_text=summary_after,
                item_id=summary_id,
                title="Summary",
            )
        )

    items.extend(_skill_changes(original, candidate))
    items.extend(_experience_changes(original, candidate))
    items.extend(_project_changes(original, candidate))

    log_change_set(items)
    return items


def initial_decisions(items: List[ChangeItem]) -> Dict[str, bool]:
    """Decision map with every change rejected (the review starting point)."""
    return {item.identity_key: False for item in items}


def group_change_items(items: List[ChangeItem]) -> Dict[str, List[ChangeItem]]:
    """Group items by display label, keeping first-seen group order."""
    groups: Dict[str, List[ChangeItem]] = {}
    for item in items:
        groups.setdefault(item.group_label or OTHER_GROUP, []).append(item)
    return groups
