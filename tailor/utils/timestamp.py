"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """Current local time as a compact, filename-safe stamp (e.g. "20261018_184540")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")
