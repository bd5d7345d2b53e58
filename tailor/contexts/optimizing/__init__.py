"""
Optimizing Context

Responsibilities:
- Parses free résumé text into a ResumeDocument via an LLM
- Runs the skills, points and summary optimization steps for a job description
- Normalizes the combined analysis against the original document
- Scores keyword coverage (match report)

Owns: Prompts, LLM call sequence, keyword analysis
Never: Decides which suggested edits apply (that is review's job)
"""

from tailor.contexts.optimizing.match_report import (
    KeywordAnalysis,
    MatchReport,
    build_match_report,
    detect_role_title,
    grade_from_score,
)
from tailor.contexts.optimizing.pipeline import (
    AnalysisResult,
    OptimizationResult,
    normalize_analysis,
    optimize_resume,
    parse_resume_text,
)

__all__ = [
    # Pipeline
    "parse_resume_text",
    "optimize_resume",
    "normalize_analysis",
    "OptimizationResult",
    "AnalysisResult",
    # Match report
    "build_match_report",
    "grade_from_score",
    "detect_role_title",
    "MatchReport",
    "KeywordAnalysis",
]
