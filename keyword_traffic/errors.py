"""
Exception classes for the keyword traffic analyzer.
"""

from typing import Any, Optional


class KeywordTrafficError(Exception):
    """Base exception for all analyzer errors."""

    def __init__(self, message: str, detail: Optional[Any] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class InputParseError(KeywordTrafficError):
    """Raised when an uploaded keyword file cannot be read at all."""
    pass


class EmptyExportError(KeywordTrafficError):
    """Raised when an export is requested with no projected keywords."""
    pass
