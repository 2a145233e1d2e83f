"""JSON formatter for cxx-metrics."""

import json
from dataclasses import asdict
from typing import Iterable, TextIO

from .base import BaseFormatter
from ..analysis import FileAnalysis


class JsonFormatter(BaseFormatter):
    """Render all files, their records and errors as one JSON document."""

    def render(self, analyses: Iterable[FileAnalysis], stream: TextIO) -> None:
        files = [
            {
                "path": a.path,
                "ok": a.ok,
                "error": str(a.error) if a.error is not None else None,
                "diagnostics": a.diagnostics,
                "functions": [asdict(r) for r in a.records],
            }
            for a in analyses
        ]
        json.dump({"files": files}, stream, indent=2)
        stream.write("\n")
