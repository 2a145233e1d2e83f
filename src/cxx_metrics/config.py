"""Configuration loading and management for cxx-metrics.

Configuration sources are merged in priority order:
    1. Defaults (defined in MetricsConfig)
    2. Global config (~/.cxx-metrics.toml)
    3. Project config (./cxx-metrics.toml)
    4. Explicit config file
    5. Environment variables (CXX_METRICS_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(path_filter=r"include/mylib/")
    >>> config.location_filter("src/a.cpp")
    PathRegexFilter('include/mylib/')
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, Union, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .logging_config import LOG_LEVELS
from .traversal import LocationFilter, MainFileFilter, PathRegexFilter

Verbosity = Literal["quiet", "normal", "verbose"]
OutputFormat = Literal["text", "csv", "json", "rich"]

OUTPUT_FORMATS = ("text", "csv", "json", "rich")
VERBOSITY_LEVELS = tuple(LOG_LEVELS)

ENV_PREFIX = "CXX_METRICS_"
CONFIG_FILE_NAME = "cxx-metrics.toml"


@dataclass(frozen=True)
class MetricsConfig:
    """Configuration for a metrics run.

    Attributes:
        Scope:
            path_filter: Regex selecting files to analyze instead of the
                main file only (None = main-file mode)

        Front end:
            extra_flags: Compiler flags appended to every parse
            trailing_flags: Tokens dropped from the end of a compilation
                database command (output file and dependency flags)
            libclang_path: Explicit libclang shared library to load

        Execution:
            workers: Number of files analyzed in parallel
            fail_fast: Abort the run on the first file that fails

        Output:
            output_format: text, csv, json or rich
            verbosity: Logging verbosity level
            log_file: Optional file receiving a copy of the log
    """

    path_filter: Optional[str] = None

    extra_flags: list[str] = field(default_factory=list)
    trailing_flags: int = 4
    libclang_path: Optional[str] = None

    workers: int = 1
    fail_fast: bool = False

    output_format: OutputFormat = "text"
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.path_filter is not None:
            try:
                re.compile(self.path_filter)
            except re.error as e:
                raise InvalidConfigError("path_filter", self.path_filter, str(e))

        if self.trailing_flags < 0:
            raise InvalidConfigError(
                "trailing_flags", self.trailing_flags, "must be non-negative"
            )
        if self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.output_format not in OUTPUT_FORMATS:
            raise InvalidConfigError(
                "output_format",
                self.output_format,
                f"must be one of: {', '.join(OUTPUT_FORMATS)}",
            )
        if self.verbosity not in VERBOSITY_LEVELS:
            raise InvalidConfigError(
                "verbosity",
                self.verbosity,
                f"must be one of: {', '.join(VERBOSITY_LEVELS)}",
            )

    def location_filter(self, main_file: Union[str, os.PathLike]) -> LocationFilter:
        """Build the location filter for one translation unit."""
        if self.path_filter is not None:
            return PathRegexFilter(self.path_filter)
        return MainFileFilter(main_file)


def load_config(config_file: Optional[Path] = None, **overrides) -> MetricsConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). None values
            are ignored so unset CLI options don't mask file settings.

    Returns:
        Validated MetricsConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / f".{CONFIG_FILE_NAME}"
    if global_config.exists():
        merged.update(_load_section(global_config))

    project_config = Path.cwd() / CONFIG_FILE_NAME
    if project_config.exists():
        merged.update(_load_section(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_section(config_file))

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return MetricsConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_section(path: Path) -> dict:
    """Read a TOML file, using its [cxx-metrics] table when present."""
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    section = data.get("cxx-metrics", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid config file '{path}': [cxx-metrics] must be a table")
    return dict(section)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CXX_METRICS_* environment variables.

    Supported environment variables:
        CXX_METRICS_PATH_FILTER: str
        CXX_METRICS_TRAILING_FLAGS: int
        CXX_METRICS_LIBCLANG_PATH: str
        CXX_METRICS_WORKERS: int
        CXX_METRICS_FAIL_FAST: bool (true/false/1/0)
        CXX_METRICS_OUTPUT_FORMAT: text/csv/json/rich
        CXX_METRICS_VERBOSITY: quiet/normal/verbose
        CXX_METRICS_LOG_FILE: str

    Returns:
        Dict of field_name -> parsed_value for any CXX_METRICS_* vars found.
    """
    type_hints = get_type_hints(MetricsConfig)

    result: dict[str, Any] = {}

    for field_name in MetricsConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Args:
        value: Raw string from environment
        type_hint: Type annotation from dataclass

    Returns:
        Parsed value or None if can't parse

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Handle Optional[X] which is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    # List types (extra_flags) are whitespace separated
    if origin is list or type_hint is list:
        return value.split()

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
