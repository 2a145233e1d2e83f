"""CLI entry point: registers the analysis command."""

import typer

app = typer.Typer(
    name="cxx-metrics",
    help="cxx-metrics - per-function size and McCabe complexity for C/C++",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import commands to register them
from .analyze import main as _main  # noqa: F401, E402
