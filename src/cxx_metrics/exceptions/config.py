"""Configuration exceptions: settings and compilation databases."""

from pathlib import Path
from typing import Any, Union

from .base import CxxMetricsError


class ConfigurationError(CxxMetricsError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class CompilationDatabaseError(ConfigurationError):
    """Raised when a compilation database is missing or malformed."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(
            f"Invalid compilation database: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
