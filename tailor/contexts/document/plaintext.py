"""
Plaintext projection of a résumé.

Flattens a ResumeDocument into the linear text consumed by preview and export
collaborators. Section order is fixed: name, contact, Summary, Experience,
Projects, Skills. Education and certificates are not part of the text view.
"""

from typing import List

from tailor.contexts.document.resume_data_structure import CONTACT_FIELDS, ResumeDocument

SEPARATOR = " · "
DATE_SEPARATOR = " - "
BULLET = "- "
DEFAULT_NAME = "Candidate"


def join_nonempty(parts: List[str], separator: str = SEPARATOR) -> str:
    return separator.join(part for part in parts if part)


def skills_to_text(document: ResumeDocument) -> str:
    """All non-empty skill entries as "label: value" joined by " · "."""
    return join_nonempty([entry.text for entry in document.skills])


def contact_line(document: ResumeDocument) -> str:
    basics = document.basics
    return join_nonempty([getattr(basics, key) for key in CONTACT_FIELDS])


def date_range(start: str, end: str, is_current: bool) -> str:
    """"start - end", with "Present" standing in for a missing end on a current role."""
    return join_nonempty([start, end or ("Present" if is_current else "")], DATE_SEPARATOR)


def render_resume_text(document: ResumeDocument) -> str:
    """
    Render a document as plain text.

    Args:
        document: Normalized document

    Returns:
        Text with trailing/leading whitespace stripped
    """
    lines = [document.basics.name or DEFAULT_NAME]

    contact = contact_line(document)
    if contact:
        lines.append(contact)

    lines.extend(["", "Summary", document.summary.text])

    lines.extend(["", "Experience"])
    for job in document.experience:
        heading = join_nonempty([job.role, job.company, job.location])
        if heading:
            lines.append(heading)
        dates = date_range(job.start_date, job.end_date, job.is_current)
        if dates:
            lines.append(dates)
        lines.extend(f"{BULLET}{point.text}" for point in job.points if point.text)
        lines.append("")

    lines.append("Projects")
    for project in document.projects:
        heading = join_nonempty([project.name, project.technologies])
        if heading:
            lines.append(heading)
        if project.link:
            lines.append(project.link)
        lines.extend(f"{BULLET}{point.text}" for point in project.points if point.text)
        lines.append("")

    lines.extend(["Skills", skills_to_text(document)])

    return "\n".join(lines).strip()


def preview_lines(text: str, max_lines: int) -> str:
    """First `max_lines` lines of rendered text (for consumers that show a preview)."""
    if max_lines <= 0:
        return ""
    return "\n".join(text.splitlines()[:max_lines])
