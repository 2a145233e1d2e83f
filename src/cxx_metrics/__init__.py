"""
cxx-metrics - per-function size and complexity metrics for C/C++

Walks the libclang syntax tree of each translation unit and reports, for every
function and method definition, its fully qualified name, argument count, line
count and a simplified McCabe score (edges - nodes of the body's control flow).
"""

__version__ = "0.1.0"

from .analysis import FileAnalysis, analyze_compilation_database, analyze_file
from .complexity import ComplexityCount, complexity
from .config import MetricsConfig, load_config
from .naming import ScopeContext, qualified_name
from .traversal import FunctionRecord, MainFileFilter, PathRegexFilter, walk_functions

__all__ = [
    "analyze_file",  # Main entry points
    "analyze_compilation_database",
    "FileAnalysis",
    "FunctionRecord",
    "MetricsConfig",
    "load_config",
    "complexity",  # Core algorithms
    "ComplexityCount",
    "walk_functions",
    "MainFileFilter",
    "PathRegexFilter",
    "qualified_name",
    "ScopeContext",
]
