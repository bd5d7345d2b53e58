"""
Review Context

Responsibilities:
- Computes word-level diffs of single text fields for display
- Extracts the ordered set of independently acceptable changes between an
  original and a candidate document
- Merges the accepted subset back onto the original
- Keeps decision state and cached merge results for one review

Owns: Change identity keys, decision maps, merge semantics
Never: Calls LLMs, reads or writes files
"""

from tailor.contexts.review.change_set import (
    ChangeCategory,
    ChangeItem,
    build_change_set,
    group_change_items,
    initial_decisions,
)
from tailor.contexts.review.merge import apply_changes
from tailor.contexts.review.session import ReviewSession
from tailor.contexts.review.word_diff import DiffKind, DiffToken, WordDiff, diff_words

__all__ = [
    # Diff
    "diff_words",
    "WordDiff",
    "DiffToken",
    "DiffKind",
    # Change set
    "build_change_set",
    "initial_decisions",
    "group_change_items",
    "ChangeItem",
    "ChangeCategory",
    # Merge and session
    "apply_changes",
    "ReviewSession",
]
