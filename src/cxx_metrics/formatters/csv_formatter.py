"""CSV formatter for cxx-metrics."""

import csv
from typing import Iterable, TextIO

from .base import RECORD_COLUMNS, BaseFormatter
from ..analysis import FileAnalysis


class CsvFormatter(BaseFormatter):
    """Render records as CSV with a single header row."""

    def render(self, analyses: Iterable[FileAnalysis], stream: TextIO) -> None:
        writer = csv.writer(stream, lineterminator="\n")
        writer.writerow(RECORD_COLUMNS)
        for analysis in analyses:
            for r in analysis.records:
                writer.writerow([
                    r.module, r.file, r.qualified_name,
                    r.arg_count, r.line_count, r.score,
                ])
