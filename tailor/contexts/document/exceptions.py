"""Custom exceptions for the document context."""

from pathlib import Path
from typing import Optional


class DocumentFormatError(Exception):
    """
    Exception raised when a résumé file cannot be read as a document.

    Raised only at the file boundary; normalize() itself never raises.

    Attributes:
        message: Error description
        path: File that failed to load
    """

    def __init__(self, message: str, path: Optional[Path] = None):
        self.message = message
        self.path = path
        super().__init__(f"{message} ({path})" if path else message)
