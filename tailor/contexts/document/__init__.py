"""
Document Context

Responsibilities:
- Defines the canonical résumé structure (ResumeDocument and its parts)
- Normalizes arbitrary/partial input into that structure, assigning stable ids
- Loads and saves documents as JSON or YAML
- Projects documents to plain text and printable HTML

Owns: Résumé structure representation, id scheme, text/HTML projection
Never: Compares documents or decides which edits apply
"""

from tailor.contexts.document.document_io import load_document, load_document_data, save_document
from tailor.contexts.document.exceptions import DocumentFormatError
from tailor.contexts.document.html_export import HTMLExporter, render_resume_html
from tailor.contexts.document.normalizer import normalize
from tailor.contexts.document.plaintext import preview_lines, render_resume_text
from tailor.contexts.document.resume_data_structure import (
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
    Summary,
)

__all__ = [
    # Normalization and file I/O
    "normalize",
    "load_document",
    "load_document_data",
    "save_document",
    "DocumentFormatError",
    # Projections
    "render_resume_text",
    "preview_lines",
    "render_resume_html",
    "HTMLExporter",
    # Data structure classes
    "ResumeDocument",
    "Basics",
    "Summary",
    "SkillEntry",
    "ExplicitSkill",
    "DerivedSkill",
    "Point",
    "Job",
    "Project",
    "EducationEntry",
    "Certificate",
]
