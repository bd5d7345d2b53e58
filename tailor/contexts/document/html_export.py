"""
HTML export of a résumé.

Renders the printable HTML page handed to the external PDF printer. Content
rules follow the text projection, with two additions: Education and
Certificates sections, and entries with no content at all are skipped.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from tailor.contexts.document.plaintext import (
    DEFAULT_NAME,
    contact_line,
    date_range,
    join_nonempty,
)
from tailor.contexts.document.resume_data_structure import ResumeDocument

load_dotenv()
TEMPLATES_PATH = Path(os.getenv("TAILOR_TEMPLATES_PATH", Path(__file__).parent / "templates"))
RESUME_TEMPLATE = "resume.html.jinja"


class HTMLExporter:
    """
    Loads and caches the résumé HTML template and renders documents with it.

    Autoescaping is always on: every value in a document is user or LLM text.
    """

    def __init__(self, templates_path: Optional[Path] = None):
        self.templates_path = Path(templates_path) if templates_path else TEMPLATES_PATH
        self._cache: Dict[str, Template] = {}
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def get_template(self, name: str = RESUME_TEMPLATE) -> Template:
        if name not in self._cache:
            self._cache[name] = self.env.get_template(name)
        return self._cache[name]

    def render(self, document: ResumeDocument) -> str:
        return self.get_template().render(**build_html_context(document))


def build_html_context(document: ResumeDocument) -> Dict[str, Any]:
    """Flatten a document into the template's view model, dropping empty entries."""
    experience = [
        {
            "heading": job.heading_label(),
            "meta": join_nonempty(
                [job.location, date_range(job.start_date, job.end_date, job.is_current)]
            ),
            "points": [point.text for point in job.points if point.text],
        }
        for job in document.experience
        if job.has_content()
    ]
    projects = [
        {
            "heading": join_nonempty([project.name, project.technologies]),
            "meta": project.link,
            "points": [point.text for point in project.points if point.text],
        }
        for project in document.projects
        if project.has_content()
    ]
    education = [
        {
            "heading": join_nonempty([entry.degree, entry.field]),
            "meta": join_nonempty(
                [entry.institution, date_range(entry.start_date, entry.end_date, False)]
            ),
        }
        for entry in document.education
        if join_nonempty(
            [entry.degree, entry.field, entry.institution, entry.start_date, entry.end_date], ""
        ).strip()
    ]
    certificates = [
        {"heading": join_nonempty([cert.name, cert.issuer]), "meta": cert.year}
        for cert in document.certificates
        if join_nonempty([cert.name, cert.issuer, cert.year], "").strip()
    ]
    return {
        "name": document.basics.name or DEFAULT_NAME,
        "contact": contact_line(document),
        "summary": document.summary.text,
        "experience": experience,
        "projects": projects,
        "skills": [entry.text for entry in document.skills if entry.text],
        "education": education,
        "certificates": certificates,
    }


def render_resume_html(document: ResumeDocument, exporter: Optional[HTMLExporter] = None) -> str:
    """Render `document` with the default (or given) exporter."""
    return (exporter or HTMLExporter()).render(document)
