"""Output formatters for cxx-metrics."""

from .base import BaseFormatter
from .csv_formatter import CsvFormatter
from .json_formatter import JsonFormatter
from .rich_formatter import RichFormatter
from .text_formatter import TextFormatter


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "text", "csv", "json", "rich"

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "text": TextFormatter,
        "csv": CsvFormatter,
        "json": JsonFormatter,
        "rich": RichFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "TextFormatter",
    "CsvFormatter",
    "JsonFormatter",
    "RichFormatter",
    "get_formatter",
]
