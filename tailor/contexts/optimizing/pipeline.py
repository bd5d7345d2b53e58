"""
Optimization pipeline.

Turns résumé text plus a job description into an original/candidate document
pair ready for review:

1. parse: résumé text -> original document (normalized, ids assigned)
2. skills: keyword lists + rewritten skills section
3. points: analysis notes + rewritten experience/project bullets
4. summary: rewritten summary

The three optimize steps are combined into one "analysis" mapping and
normalized against the original, which keeps the original's ids wherever the
model dropped them and backfills sections the model left empty.

All LLM access goes through an LLMProvider, so tests substitute a fake
provider and no network call is made.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv

from tailor.contexts.document.document_io import save_json_snapshot
from tailor.contexts.document.normalizer import normalize
from tailor.contexts.document.resume_data_structure import ResumeDocument, Summary
from tailor.contexts.optimizing.logger import _log_debug, _log_info, _log_success, log_llm_step
from tailor.contexts.optimizing.match_report import (
    KeywordAnalysis,
    MatchReport,
    build_match_report,
    normalize_keyword_list,
)
from tailor.contexts.optimizing.prompts import (
    PARSE_SYSTEM_PROMPT,
    POINTS_SYSTEM_PROMPT,
    SKILLS_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    build_parse_prompt,
    build_points_prompt,
    build_skills_prompt,
    build_summary_prompt,
)
from tailor.utils.llm import LLMProvider, parse_json_object
from tailor.utils.timestamp import now

load_dotenv()
# Directory for debug snapshots of every LLM step; unset disables snapshots
SNAPSHOT_DIR = os.getenv("TAILOR_SNAPSHOT_DIR")

MIN_JOB_DESCRIPTION_CHARS = 80


@dataclass
class AnalysisResult:
    """Normalized analysis: candidate document plus keyword lists and notes."""

    candidate: ResumeDocument
    keywords: KeywordAnalysis = field(default_factory=KeywordAnalysis)
    notes: List[str] = field(default_factory=list)


@dataclass
class OptimizationResult:
    """
    Everything optimize_resume() produced.

    Attributes:
        candidate: Optimized document, ids aligned with the original
        keywords: Required / matching / missing keyword lists
        analysis_notes: High-level improvement notes from the points step
        raw_steps: Raw JSON returned by each step ("skills", "points", "summary")
        report: Keyword match report for the job description
        snapshot_path: Where the debug snapshot was written, if anywhere
    """

    candidate: ResumeDocument
    keywords: KeywordAnalysis
    analysis_notes: List[str]
    raw_steps: Dict[str, Dict[str, Any]]
    report: MatchReport
    snapshot_path: Optional[Path] = None


def _run_step(provider: LLMProvider, step: str, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
    _log_info(f"Running {step} step with {provider.name}")
    response = provider.generate(system_prompt=system_prompt, user_prompt=user_prompt)
    log_llm_step(step, response)
    return parse_json_object(response.content)


def normalize_analysis(raw: Any, original: ResumeDocument) -> AnalysisResult:
    """
    Normalize a combined analysis mapping against the original document.

    Sections the analysis left empty fall back to the original's, and so
    does a summary without text. Keyword lists and notes are stripped and
    de-duplicated.
    """
    data = raw if isinstance(raw, Mapping) else {}
    candidate = normalize(data, fallback=original)

    if not candidate.summary.text:
        candidate.summary = Summary(id=original.summary.id, text=original.summary.text)
    backfill = original.copy()
    for section in ("skills", "experience", "projects", "education", "certificates"):
        if not getattr(candidate, section):
            setattr(candidate, section, getattr(backfill, section))

    return AnalysisResult(
        candidate=candidate,
        keywords=KeywordAnalysis.from_raw(data),
        notes=normalize_keyword_list(data.get("Analysis")),
    )


def parse_resume_text(resume_text: str, provider: LLMProvider) -> ResumeDocument:
    """
    Parse free résumé text into a normalized original document.

    Raises:
        ValueError: If the text is empty
        LLMResponseError: If the model returns no JSON object
    """
    if not resume_text or not resume_text.strip():
        raise ValueError("Provide résumé text to parse")

    parsed = _run_step(provider, "parse", PARSE_SYSTEM_PROMPT, build_parse_prompt(resume_text.strip()))
    document = normalize(parsed)
    _log_success(
        f"Parsed résumé: {len(document.experience)} jobs, {len(document.projects)} projects, "
        f"{len(document.skills)} skill entries"
    )
    return document


def optimize_resume(
    original: ResumeDocument,
    job_description: str,
    provider: LLMProvider,
    snapshot_dir: Optional[Union[str, Path]] = None,
) -> OptimizationResult:
    """
    Run the skills, points and summary steps for one job description.

    Args:
        original: Normalized original document
        job_description: Target job description (at least 80 characters)
        provider: LLM provider used for every step
        snapshot_dir: Where to dump all intermediate outputs as JSON
            (default: TAILOR_SNAPSHOT_DIR; no snapshot when neither is set)

    Returns:
        OptimizationResult with the candidate aligned to `original`

    Raises:
        ValueError: If the job description is shorter than 80 characters
        LLMResponseError: If any step returns no JSON object
    """
    job_description = (job_description or "").strip()
    if len(job_description) < MIN_JOB_DESCRIPTION_CHARS:
        raise ValueError(
            f"Job description must be at least {MIN_JOB_DESCRIPTION_CHARS} characters "
            f"(got {len(job_description)})"
        )

    resume = original.to_dict()
    skills_result = _run_step(
        provider, "skills", SKILLS_SYSTEM_PROMPT, build_skills_prompt(resume, job_description)
    )
    points_result = _run_step(
        provider,
        "points",
        POINTS_SYSTEM_PROMPT,
        build_points_prompt(resume, job_description, skills_result),
    )
    summary_result = _run_step(
        provider,
        "summary",
        SUMMARY_SYSTEM_PROMPT,
        build_summary_prompt(resume, job_description, skills_result, points_result),
    )

    combined = {
        "Required Keywords": skills_result.get("Required Keywords"),
        "Matching Keywords": skills_result.get("Matching Keywords"),
        "Missing Keywords": skills_result.get("Missing Keywords"),
        "Analysis": points_result.get("Analysis"),
        "summary": summary_result.get("summary"),
        "skills": skills_result.get("skills"),
        "experience": points_result.get("experience"),
        "projects": points_result.get("projects"),
        "education": resume["education"],
        "certificates": resume["certificates"],
    }
    analysis = normalize_analysis(combined, original)
    report = build_match_report(analysis.keywords, analysis.notes, job_description, analysis.candidate)
    raw_steps = {"skills": skills_result, "points": points_result, "summary": summary_result}

    snapshot_path = None
    target_dir = snapshot_dir or SNAPSHOT_DIR
    if target_dir:
        snapshot_path = save_json_snapshot(
            {
                "resume": resume,
                **raw_steps,
                "analysis": {
                    **analysis.keywords.to_dict(),
                    "Analysis": analysis.notes,
                    **analysis.candidate.to_dict(),
                },
            },
            Path(target_dir) / f"llm_result_{now()}.json",
        )
        if snapshot_path:
            _log_debug(f"Snapshot written to {snapshot_path}")

    _log_success(
        f"Optimization complete: score {report.match_score} ({report.grade}), "
        f"{len(report.missing)} missing keyword(s)"
    )
    return OptimizationResult(
        candidate=analysis.candidate,
        keywords=analysis.keywords,
        analysis_notes=analysis.notes,
        raw_steps=raw_steps,
        report=report,
        snapshot_path=snapshot_path,
    )
