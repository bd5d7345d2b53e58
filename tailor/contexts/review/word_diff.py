"""
Word-level diff for reviewing a single text field.

Tokens are whitespace-separated words compared by exact, case-sensitive
equality. Alignment is a dynamic-programming longest common subsequence; when
the table gives no preference the backtrack (which walks from the end of
both texts) consumes the before-token as a removal, so ties always resolve
the same way.

The diff is for presentation only. Merging replaces whole fields and never
patches text with these operations.
"""

import html
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from dotenv import load_dotenv

from tailor.contexts.review.logger import _log_warning

load_dotenv()
# Largest LCS table (cells) built before falling back to whole-field replacement
MAX_DIFF_CELLS = int(os.getenv("TAILOR_MAX_DIFF_CELLS", "250000"))

# ANSI color codes
RED = "\033[31m"
GREEN = "\033[32m"
RESET = "\033[0m"


class DiffKind(str, Enum):
    """How a token relates the two texts."""

    EQUAL = "equal"
    REMOVED = "removed"
    ADDED = "added"


# Span classes used by the review UI stylesheet
HTML_CLASSES = {
    DiffKind.EQUAL: "diff-unchanged",
    DiffKind.REMOVED: "diff-removed",
    DiffKind.ADDED: "diff-added",
}


@dataclass(frozen=True)
class DiffToken:
    kind: DiffKind
    value: str


@dataclass
class WordDiff:
    """
    Result of diff_words().

    Attributes:
        operations: Full edit script in order (equal, removed and added tokens)
        truncated: True when the inputs were too large for the LCS table and the
            diff degraded to "remove everything, add everything"
    """

    operations: List[DiffToken] = field(default_factory=list)
    truncated: bool = False

    @property
    def before(self) -> List[DiffToken]:
        """"Before" view: equal and removed tokens."""
        return [op for op in self.operations if op.kind != DiffKind.ADDED]

    @property
    def after(self) -> List[DiffToken]:
        """"After" view: equal and added tokens."""
        return [op for op in self.operations if op.kind != DiffKind.REMOVED]

    @property
    def equal_count(self) -> int:
        return sum(1 for op in self.operations if op.kind == DiffKind.EQUAL)

    def is_unchanged(self) -> bool:
        return all(op.kind == DiffKind.EQUAL for op in self.operations)

    def before_html(self) -> str:
        return _tokens_to_html(self.before)

    def after_html(self) -> str:
        return _tokens_to_html(self.after)

    def before_ansi(self) -> str:
        return _tokens_to_ansi(self.before)

    def after_ansi(self) -> str:
        return _tokens_to_ansi(self.after)


def _tokens_to_html(tokens: List[DiffToken]) -> str:
    return " ".join(
        f'<span class="{HTML_CLASSES[token.kind]}">{html.escape(token.value)}</span>'
        for token in tokens
    )


def _tokens_to_ansi(tokens: List[DiffToken]) -> str:
    parts = []
    for token in tokens:
        if token.kind == DiffKind.REMOVED:
            parts.append(f"{RED}{token.value}{RESET}")
        elif token.kind == DiffKind.ADDED:
            parts.append(f"{GREEN}{token.value}{RESET}")
        else:
            parts.append(token.value)
    return " ".join(parts)


def tokenize(text: str) -> List[str]:
    """Split on runs of whitespace; empty tokens are dropped."""
    return (text or "").split()


def lcs_table(before: List[str], after: List[str]) -> List[List[int]]:
    """
    Build the (m+1) x (n+1) LCS length table.

    table[i][j] is the LCS length of before[:i] and after[:j].
    """
    rows, cols = len(before) + 1, len(after) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(1, rows):
        row, prev = table[i], table[i - 1]
        word = before[i - 1]
        for j in range(1, cols):
            if word == after[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(prev[j], row[j - 1])
    return table


def _backtrack(before: List[str], after: List[str], table: List[List[int]]) -> List[DiffToken]:
    operations = []
    i, j = len(before), len(after)
    while i > 0 and j > 0:
        if before[i - 1] == after[j - 1]:
            operations.append(DiffToken(DiffKind.EQUAL, before[i - 1]))
            i -= 1
            j -= 1
        elif table[i - 1][j] >= table[i][j - 1]:
            # Ties go to the removal
            operations.append(DiffToken(DiffKind.REMOVED, before[i - 1]))
            i -= 1
        else:
            operations.append(DiffToken(DiffKind.ADDED, after[j - 1]))
            j -= 1
    while i > 0:
        operations.append(DiffToken(DiffKind.REMOVED, before[i - 1]))
        i -= 1
    while j > 0:
        operations.append(DiffToken(DiffKind.ADDED, after[j - 1]))
        j -= 1
    operations.reverse()
    return operations


def diff_words(before_text: str, after_text: str) -> WordDiff:
    """
    Diff two texts word by word.

    Args:
        before_text: Original text ("" or whitespace gives no tokens)
        after_text: Candidate text

    Returns:
        WordDiff whose before/after views keep each side's token order

    Example:
        >>> diff = diff_words("Engineer with 5 years", "Senior engineer with 5 years")
        >>> [op.kind.value for op in diff.after]
        ['added', 'added', 'equal', 'equal', 'equal']
    """
    before = tokenize(before_text)
    after = tokenize(after_text)

    if len(before) * len(after) > MAX_DIFF_CELLS:
        _log_warning(
            f"Diff of {len(before)}x{len(after)} tokens exceeds {MAX_DIFF_CELLS} cells; "
            "showing whole-field replacement"
        )
        operations = [DiffToken(DiffKind.REMOVED, word) for word in before]
        operations += [DiffToken(DiffKind.ADDED, word) for word in after]
        return WordDiff(operations=operations, truncated=True)

    return WordDiff(operations=_backtrack(before, after, lcs_table(before, after)))
