"""
Review session: decision state and cached review artifacts.

Holds one original/candidate pair, its change set and the user's decision
map. The merged document and its text rendering are recomputed explicitly and
cached by (candidate_version, decisions_hash), so repeated reads between
decision changes return the same objects.

Not thread-safe; one session belongs to one reviewer.
"""

import hashlib
import json
from typing import Dict, List, Optional, Tuple

from tailor.contexts.document.plaintext import render_resume_text
from tailor.contexts.document.resume_data_structure import ResumeDocument
from tailor.contexts.review.change_set import (
    ChangeItem,
    build_change_set,
    group_change_items,
    initial_decisions,
)
from tailor.contexts.review.logger import _log_debug, _log_info
from tailor.contexts.review.merge import apply_changes

CacheKey = Tuple[int, str]


def hash_decisions(decisions: Dict[str, bool]) -> str:
    """Stable digest of a decision map (independent of key insertion order)."""
    payload = json.dumps(decisions, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ReviewSession:
    """
    Interactive review of one candidate against one original.

    Example:
        >>> session = ReviewSession(original, candidate)
        >>> session.toggle("exp:0:exp-1-1")
        >>> print(session.export_text())
    """

    def __init__(self, original: ResumeDocument, candidate: Optional[ResumeDocument]):
        self.original = original
        self.candidate = candidate
        self.candidate_version = 0
        self.change_set: List[ChangeItem] = []
        self.decisions: Dict[str, bool] = {}
        self._merged_cache: Dict[CacheKey, ResumeDocument] = {}
        self._text_cache: Dict[CacheKey, str] = {}
        self._rebuild()

    def _rebuild(self) -> None:
        self.change_set = build_change_set(self.original, self.candidate)
        self.decisions = initial_decisions(self.change_set)
        self._merged_cache.clear()
        self._text_cache.clear()
        _log_debug(
            f"Session at candidate version {self.candidate_version}: "
            f"{len(self.change_set)} change item(s)"
        )

    def _require_key(self, key: str) -> None:
        if key not in self.decisions:
            raise KeyError(f"Unknown change item: {key}")

    @property
    def cache_key(self) -> CacheKey:
        return self.candidate_version, hash_decisions(self.decisions)

    @property
    def accepted_count(self) -> int:
        return sum(1 for accepted in self.decisions.values() if accepted)

    def groups(self) -> Dict[str, List[ChangeItem]]:
        return group_change_items(self.change_set)

    # Decisions

    def toggle(self, key: str) -> bool:
        """Flip one decision and return its new value."""
        self._require_key(key)
        self.decisions[key] = not self.decisions[key]
        return self.decisions[key]

    def set_decision(self, key: str, accepted: bool) -> None:
        self._require_key(key)
        self.decisions[key] = bool(accepted)

    def set_all(self, accepted: bool) -> None:
        for key in self.decisions:
            self.decisions[key] = bool(accepted)

    # Artifacts

    def merged(self) -> ResumeDocument:
        """Merged document for the current decisions (cached)."""
        key = self.cache_key
        if key not in self._merged_cache:
            self._merged_cache[key] = apply_changes(
                self.original, self.candidate, self.change_set, self.decisions
            )
        return self._merged_cache[key]

    def export_text(self) -> str:
        """Plain-text rendering of merged() (cached)."""
        key = self.cache_key
        if key not in self._text_cache:
            self._text_cache[key] = render_resume_text(self.merged())
        return self._text_cache[key]

    def replace_candidate(self, candidate: Optional[ResumeDocument]) -> None:
        """Start over with a new candidate: new change set, all decisions rejected."""
        self.candidate = candidate
        self.candidate_version += 1
        self._rebuild()
        _log_info(f"Candidate replaced (version {self.candidate_version})")
