"""Rich terminal formatter: one table per file."""

from typing import Iterable, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .base import BaseFormatter
from ..analysis import FileAnalysis


def _score_style(score: int) -> str:
    if score >= 20:
        return "bold red"
    if score >= 10:
        return "yellow"
    return "green"


class RichFormatter(BaseFormatter):
    """Render a rich table per analyzed file."""

    def render(self, analyses: Iterable[FileAnalysis], stream: TextIO) -> None:
        console = Console(file=stream)
        for analysis in analyses:
            if not analysis.ok:
                continue
            table = Table(title=escape(analysis.path), title_justify="left", show_lines=False)
            table.add_column("Function", style="cyan", overflow="fold")
            table.add_column("Args", justify="right")
            table.add_column("Lines", justify="right")
            table.add_column("McCabe", justify="right")
            for r in analysis.records:
                table.add_row(
                    escape(r.qualified_name),
                    str(r.arg_count),
                    str(r.line_count),
                    f"[{_score_style(r.score)}]{r.score}[/]",
                )
            console.print(table)
