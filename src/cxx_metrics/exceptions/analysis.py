"""Analysis-related exceptions: file access, parsing, naming."""

from pathlib import Path
from typing import Optional, Union

from .base import CxxMetricsError


class AnalysisError(CxxMetricsError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a source file cannot be found or read."""

    def __init__(self, filepath: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when the front end cannot produce a translation unit."""

    def __init__(self, filepath: Union[str, Path], reason: str):
        super().__init__(
            f"Failed to parse translation unit: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class NameResolutionError(AnalysisError):
    """Raised when a function-like entity has no declared name."""

    def __init__(self, kind: str, location: Optional[str] = None):
        details = {"kind": kind}
        if location:
            details["location"] = location

        super().__init__(f"Cannot resolve name of {kind} entity", details=details)
        self.kind = kind
        self.location = location
