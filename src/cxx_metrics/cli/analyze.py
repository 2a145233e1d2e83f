"""Main analysis command."""

import sys
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

import click
import typer
from rich.markup import escape

from .. import __version__
from ..analysis import FileAnalysis, iter_analyses, tasks_from_entries, tasks_from_files
from ..compdb import load_compilation_database
from ..config import OUTPUT_FORMATS, load_config
from ..exceptions import ConfigurationError, CxxMetricsError
from ..formatters import get_formatter
from ..logging_config import get_logger, setup_logging
from . import app
from ._common import console, err_console


def _track_failures(
    analyses: Iterable[FileAnalysis], failed: List[FileAnalysis]
) -> Iterator[FileAnalysis]:
    for analysis in analyses:
        if not analysis.ok:
            failed.append(analysis)
        yield analysis


@app.command()
def main(
    files: Optional[List[Path]] = typer.Argument(
        None,
        help="Source files to analyze (parsed with --flag flags only)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    compdb: Optional[Path] = typer.Option(
        None,
        "--compdb",
        "-p",
        help="Compilation database (compile_commands.json) to analyze",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    path_filter: Optional[str] = typer.Option(
        None,
        "--filter",
        "-F",
        help="Regex on file paths; analyze matching files (e.g. headers) instead of the main file only",
    ),
    flags: Optional[List[str]] = typer.Option(
        None,
        "--flag",
        "-X",
        help="Extra compiler flag, repeatable (e.g. -X -std=c++17 -X -Iinclude)",
    ),
    fmt: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: text (default), csv, json, rich",
        click_type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Files analyzed in parallel (default: 1)",
        min=1,
        max=64,
    ),
    fail_fast: Optional[bool] = typer.Option(
        None,
        "--fail-fast/--keep-going",
        help="Abort on the first file that fails to parse",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write log lines to this file",
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Report argument count, line count and McCabe score per function.

    [bold cyan]Examples:[/bold cyan]

      cxx-metrics src/foo.cpp -X -std=c++17

      cxx-metrics --compdb build/compile_commands.json

      cxx-metrics --compdb build/compile_commands.json --filter 'include/mylib/' --format csv
    """
    if version:
        console.print(f"[bold cyan]cxx-metrics[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if verbose and quiet:
        err_console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    if not files and compdb is None:
        err_console.print("[red]Error:[/red] nothing to analyze; pass source files or --compdb")
        raise typer.Exit(2)

    logger = get_logger()

    try:
        settings = load_config(
            config_file=config,
            path_filter=path_filter,
            extra_flags=list(flags) if flags else None,
            output_format=fmt.lower() if fmt else None,
            workers=workers,
            fail_fast=fail_fast,
            verbose=verbose,
            quiet=quiet,
            log_file=str(log_file) if log_file else None,
        )
        try:
            logger = setup_logging(settings.verbosity, settings.log_file)
        except OSError as e:
            raise ConfigurationError(f"Cannot open log file {settings.log_file}: {e}")
        logger.debug("Loaded settings: %s", settings)

        # Database entries first, then loose files
        tasks = []
        if compdb is not None:
            tasks.extend(tasks_from_entries(load_compilation_database(compdb), settings))
        if files:
            tasks.extend(tasks_from_files(files, settings))

        failed: List[FileAnalysis] = []
        formatter = get_formatter(settings.output_format)
        formatter.render(_track_failures(iter_analyses(tasks, settings), failed), sys.stdout)

        for analysis in failed:
            err_console.print(f"[red]Failed:[/red] {escape(analysis.path)}: {escape(str(analysis.error))}")
        if failed:
            raise typer.Exit(1)

    except CxxMetricsError as e:
        logger.debug("%s: %s", e.__class__.__name__, e)
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        err_console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)
