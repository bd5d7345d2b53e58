"""
TAILOR - structured résumé tailoring with reviewable, selectively merged edits

Takes an original résumé and an LLM-optimized candidate, aligns them by stable
ids, shows word-level diffs for every change and rebuilds a final document from
the edits the user accepts.

Architecture:
- Document Context: Canonical résumé model, normalization and text/HTML projection
- Review Context: Word diff, change-set extraction, selective merge, review sessions
- Optimizing Context: LLM prompts and pipeline producing candidate documents
"""

__version__ = "0.1.0"
