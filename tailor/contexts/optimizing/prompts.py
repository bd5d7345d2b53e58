"""
Prompt templates for the optimization pipeline.

Four calls, each answering with a single JSON object:
parse (résumé text -> document), skills (keywords + skills section),
points (experience/project bullets + analysis notes), summary.

The structure shown to the model uses the same wire format and id scheme as
the document normalizer, so ids the model copies through survive alignment.
"""

import json
from typing import Any, Dict

# Job descriptions are truncated to this many characters in prompts
MAX_JOB_DESCRIPTION_CHARS = 12000

# =============================================================================
# PARSE
# =============================================================================

PARSE_SYSTEM_PROMPT = """\
You are a résumé parser. Return ONLY a valid JSON object with this structure:

{
  "basics": {"name": "", "email": "", "phone": "", "location": "", "linkedin": "", "github": "", "portfolio": ""},
  "summary": {"id": "summary-1", "text": ""},
  "skills": [{"id": "skill-1", "Languages": "Python, Java"}],
  "experience": [{"company": "", "role": "", "location": "", "startDate": "", "endDate": "", "isCurrent": false,
                  "points": [{"id": "exp-1-1", "text": ""}]}],
  "projects": [{"name": "", "technologies": "", "link": "", "points": [{"id": "proj-1-1", "text": ""}]}],
  "education": [{"institution": "", "degree": "", "field": "", "startDate": "", "endDate": ""}],
  "certificates": [{"name": "", "issuer": "", "year": ""}]
}

Rules:
- Extract only what the résumé contains. Never invent content.
- Copy experience and project bullet points verbatim; do not summarize them.
- Use empty strings or empty arrays for missing data.
- Skill categories follow the résumé; add as many entries as it has.
- Ids are 1-based: skills "skill-<n>", experience points "exp-<job>-<point>",
  project points "proj-<project>-<point>"."""

PARSE_USER_TEMPLATE = """\
Résumé text:
{resume_text}"""

# =============================================================================
# SKILLS
# =============================================================================

SKILLS_SYSTEM_PROMPT = """\
You optimize the skills section of a résumé for a job description.
Return ONLY a valid JSON object:

{
  "Required Keywords": [""],
  "Matching Keywords": [""],
  "Missing Keywords": [""],
  "skills": [{"id": "skill-1", "Languages": "Python, Java"}]
}

Rules:
- Required Keywords come from the job description.
- Matching Keywords are required keywords already present in the résumé JSON;
  Missing Keywords are the ones that are not.
- Add relevant missing tools and technologies to the skills section; keep
  entries unchanged when nothing needs to change.
- Keep every existing skill id. New entries get new unique ids prefixed "skill-".
- Use empty arrays for anything missing."""

SKILLS_USER_TEMPLATE = """\
Résumé JSON:
{resume_json}

Job description:
{job_description}"""

# =============================================================================
# POINTS
# =============================================================================

POINTS_SYSTEM_PROMPT = """\
You rewrite the experience and project bullet points of a résumé for a job
description, using the skills analysis provided. Return ONLY a valid JSON object:

{
  "Analysis": [""],
  "experience": [{"company": "", "role": "", "location": "", "startDate": "", "endDate": "", "isCurrent": false,
                  "points": [{"id": "exp-1-1", "text": ""}]}],
  "projects": [{"name": "", "technologies": "", "link": "", "points": [{"id": "proj-1-1", "text": ""}]}]
}

Rules:
- Analysis holds 3 to 6 short, high-level improvement notes.
- Work relevant keywords and measurable impact into bullets where truthful.
- Keep the same jobs, projects and points in the same order. Rewrite point
  text in place; never add, delete or reorder points.
- Keep every point id exactly as given."""

POINTS_USER_TEMPLATE = """\
Résumé JSON:
{resume_json}

Skills analysis:
{skills_result}

Job description:
{job_description}"""

# =============================================================================
# SUMMARY
# =============================================================================

SUMMARY_SYSTEM_PROMPT = """\
You write the professional summary of a résumé for a target role.
Return ONLY a valid JSON object:

{"summary": {"id": "summary-1", "text": ""}}

Rules:
- Two to four lines naming key skills and impact.
- Keep the summary id from the résumé JSON."""

SUMMARY_USER_TEMPLATE = """\
Résumé JSON:
{resume_json}

Skills analysis:
{skills_result}

Rewritten points:
{points_result}

Job description:
{job_description}"""


def _dump(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False)


def build_parse_prompt(resume_text: str) -> str:
    return PARSE_USER_TEMPLATE.format(resume_text=resume_text)


def build_skills_prompt(resume: Dict[str, Any], job_description: str) -> str:
    return SKILLS_USER_TEMPLATE.format(
        resume_json=_dump(resume),
        job_description=job_description[:MAX_JOB_DESCRIPTION_CHARS],
    )


def build_points_prompt(
    resume: Dict[str, Any], job_description: str, skills_result: Dict[str, Any]
) -> str:
    return POINTS_USER_TEMPLATE.format(
        resume_json=_dump(resume),
        skills_result=_dump(skills_result),
        job_description=job_description[:MAX_JOB_DESCRIPTION_CHARS],
    )


def build_summary_prompt(
    resume: Dict[str, Any],
    job_description: str,
    skills_result: Dict[str, Any],
    points_result: Dict[str, Any],
) -> str:
    return SUMMARY_USER_TEMPLATE.format(
        resume_json=_dump(resume),
        skills_result=_dump(skills_result),
        points_result=_dump(points_result),
        job_description=job_description[:MAX_JOB_DESCRIPTION_CHARS],
    )
