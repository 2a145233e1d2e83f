"""Exception hierarchy for cxx-metrics."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    NameResolutionError,
    ParsingError,
)
from .base import CxxMetricsError
from .config import (
    CompilationDatabaseError,
    ConfigurationError,
    InvalidConfigError,
)

__all__ = [
    "CxxMetricsError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "NameResolutionError",
    "ConfigurationError",
    "InvalidConfigError",
    "CompilationDatabaseError",
]
