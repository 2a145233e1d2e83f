"""Plain text formatter: one tab-separated block per file."""

from typing import Iterable, TextIO

from .base import BaseFormatter
from ..analysis import FileAnalysis

NAME_WIDTH = 80


def format_row(name: str, args, lines, score) -> str:
    return f"{name:{NAME_WIDTH}}\t{args}\t{lines}\t{score}"


HEADER = format_row("name", "args", "lines", "McCabe")


class TextFormatter(BaseFormatter):
    """Print the file path, a header row and one row per function."""

    def render(self, analyses: Iterable[FileAnalysis], stream: TextIO) -> None:
        for analysis in analyses:
            if not analysis.ok:
                continue
            stream.write(f"{analysis.path}\n")
            stream.write(f"{HEADER}\n")
            for r in analysis.records:
                stream.write(format_row(r.qualified_name, r.arg_count, r.line_count, r.score) + "\n")
            stream.flush()
