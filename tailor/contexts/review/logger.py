"""
Review context logger.

Provides logging interface for the review context with automatic [review] prefix.
All review modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from tailor.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[review]"


def setup_review_logger(log_dir: Path, phase: str = "review") -> Path:
    """
    Setup logger for the review context.

    Args:
        log_dir: Directory for this session
        phase: Phase name for provenance ("changes", "merge", ...)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="review",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


# Wrapper functions with automatic [review] prefix


def _log_info(message: str) -> None:
    """Log info message with [review] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [review] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [review] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level review-specific logging helpers


def log_change_set(items) -> None:
    """Log how many change items each category produced."""
    counts = {}
    for item in items:
        counts[item.category.value] = counts.get(item.category.value, 0) + 1
    summary = ", ".join(f"{category}: {count}" for category, count in counts.items()) or "none"
    _log_debug(f"Change set built with {len(items)} item(s) ({summary})")


def log_merge_result(accepted: int, total: int) -> None:
    """Log how many change items were applied."""
    _log_debug(f"Merged {accepted}/{total} accepted change(s)")
