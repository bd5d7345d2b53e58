"""
Resume Document Structure

Defines the canonical structured representation of a résumé for TAILOR.
This structure is the interface between the Document, Review and Optimizing
contexts.

Document owns:
- Coercing raw/partial mappings into ResumeDocument instances (normalizer.py)
- Projecting ResumeDocument instances to text and HTML

Review compares two ResumeDocument instances and builds a third from accepted
edits. Instances are treated as immutable values by every context: operations
that "change" a document return a new one.

Wire format keys are camelCase (startDate, isCurrent, ...), matching the JSON
exchanged with the optimizer.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

BASICS_FIELDS = ["name", "email", "phone", "location", "linkedin", "github", "portfolio"]

# Order of contact parts on the contact line
CONTACT_FIELDS = ["location", "email", "phone", "linkedin", "github", "portfolio"]

DEFAULT_SUMMARY_ID = "summary-1"


# ============================================================================
# Skill entry shapes
# ============================================================================


@dataclass(frozen=True)
class ExplicitSkill:
    """Skill written as {"label": ..., "value": ...}."""

    label: str = ""
    value: str = ""


@dataclass(frozen=True)
class DerivedSkill:
    """
    Skill written as a single arbitrary key, e.g. {"Languages": "Python, Go"}.

    Attributes:
        key: The key as it appeared in the input (used as the label)
        value: Its string value
    """

    key: str
    value: str = ""


SkillShape = Union[ExplicitSkill, DerivedSkill]


def skill_label(shape: SkillShape) -> str:
    """Label of either shape."""
    if isinstance(shape, DerivedSkill):
        return shape.key
    return shape.label


def skill_text(shape: SkillShape) -> str:
    """
    Project a skill shape to its "label: value" text.

    Returns:
        "" when both parts are empty, the bare label when there is no value
    """
    label = skill_label(shape)
    value = shape.value
    if not label and not value:
        return ""
    return f"{label}: {value}" if value else label


@dataclass
class SkillEntry:
    """
    One line of the skills section.

    Attributes:
        id: Stable identifier (e.g. "skill-3")
        shape: ExplicitSkill or DerivedSkill
    """

    id: str
    shape: SkillShape = field(default_factory=ExplicitSkill)

    @property
    def label(self) -> str:
        return skill_label(self.shape)

    @property
    def value(self) -> str:
        return self.shape.value

    @property
    def text(self) -> str:
        return skill_text(self.shape)

    def is_empty(self) -> bool:
        """True when the entry has neither label nor value."""
        return not self.label and not self.value

    def to_dict(self) -> Dict[str, str]:
        if isinstance(self.shape, DerivedSkill):
            return {"id": self.id, self.shape.key: self.shape.value}
        return {"id": self.id, "label": self.shape.label, "value": self.shape.value}


# ============================================================================
# Sections
# ============================================================================


@dataclass
class Basics:
    """Contact block. `extras` keeps additional string fields (e.g. "website")."""

    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""
    extras: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, str]:
        data = {key: getattr(self, key) for key in BASICS_FIELDS}
        data.update(self.extras)
        return data


@dataclass
class Summary:
    id: str = DEFAULT_SUMMARY_ID
    text: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "text": self.text}


@dataclass
class Point:
    """A single bullet point of a job or project."""

    id: str
    text: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "text": self.text}


@dataclass
class Job:
    company: str = ""
    role: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    points: List[Point] = field(default_factory=list)

    def heading_label(self) -> str:
        """"role · company" with empty parts omitted."""
        return " · ".join(part for part in (self.role, self.company) if part)

    def has_content(self) -> bool:
        scalars = [self.role, self.company, self.location, self.start_date, self.end_date]
        return bool("".join(scalars).strip()) or self.is_current or any(p.text for p in self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company": self.company,
            "role": self.role,
            "location": self.location,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "isCurrent": self.is_current,
            "points": [point.to_dict() for point in self.points],
        }


@dataclass
class Project:
    name: str = ""
    technologies: str = ""
    link: str = ""
    points: List[Point] = field(default_factory=list)

    def has_content(self) -> bool:
        scalars = [self.name, self.technologies, self.link]
        return bool("".join(scalars).strip()) or any(p.text for p in self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "technologies": self.technologies,
            "link": self.link,
            "points": [point.to_dict() for point in self.points],
        }


@dataclass
class EducationEntry:
    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "institution": self.institution,
            "degree": self.degree,
            "field": self.field,
            "startDate": self.start_date,
            "endDate": self.end_date,
        }


@dataclass
class Certificate:
    name: str = ""
    issuer: str = ""
    year: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "issuer": self.issuer, "year": self.year}


# ============================================================================
# Document
# ============================================================================


@dataclass
class ResumeDocument:
    """
    Structured representation of a complete résumé.

    Build instances with normalizer.normalize() rather than directly: the
    normalizer guarantees every stable id is present.

    Attributes:
        basics: Contact block (singleton, no identity)
        summary: Summary with a stable id
        skills: Ordered skill entries keyed by id
        experience: Ordered jobs, each with ordered points
        projects: Ordered projects, each with ordered points
        education: Ordered flat records (never diffed)
        certificates: Ordered flat records (never diffed)
    """

    basics: Basics = field(default_factory=Basics)
    summary: Summary = field(default_factory=Summary)
    skills: List[SkillEntry] = field(default_factory=list)
    experience: List[Job] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    education: List[EducationEntry] = field(default_factory=list)
    certificates: List[Certificate] = field(default_factory=list)

    def copy(self) -> "ResumeDocument":
        """Deep, independent copy (no shared lists or entries)."""
        return copy.deepcopy(self)

    def find_skill(self, skill_id: str) -> Optional[SkillEntry]:
        """First skill entry with the given id, or None."""
        for entry in self.skills:
            if entry.id == skill_id:
                return entry
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Wire-format mapping (JSON/YAML ready)."""
        return {
            "basics": self.basics.to_dict(),
            "summary": self.summary.to_dict(),
            "skills": [entry.to_dict() for entry in self.skills],
            "experience": [job.to_dict() for job in self.experience],
            "projects": [project.to_dict() for project in self.projects],
            "education": [entry.to_dict() for entry in self.education],
            "certificates": [entry.to_dict() for entry in self.certificates],
        }
