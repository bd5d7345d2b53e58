"""
Optimizing context logger.

Provides logging interface for the optimizing context with automatic [optimize] prefix.
All optimizing modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from tailor.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[optimize]"


def setup_optimizing_logger(log_dir: Path, provider_name: str = "") -> Path:
    """
    Setup logger for the optimizing context.

    Args:
        log_dir: Directory for this session
        provider_name: LLM provider/model recorded in the provenance header

    Returns:
        Path to log file
    """
    extra = {"Provider": provider_name} if provider_name else None
    return _setup_logger(
        context_name="optimize",
        log_dir=log_dir,
        extra_provenance=extra,
    )


# Wrapper functions with automatic [optimize] prefix


def _log_info(message: str) -> None:
    """Log info message with [optimize] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [optimize] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [optimize] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level optimizing-specific logging helpers


def log_llm_step(step: str, response) -> None:
    """Log token usage of one LLM call."""
    _log_debug(
        f"{step}: {response.model} used {response.input_tokens} input / "
        f"{response.output_tokens} output tokens"
    )
