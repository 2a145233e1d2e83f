"""Shared CLI helpers."""

from rich.console import Console

# Records go to stdout; diagnostics to stderr
console = Console()
err_console = Console(stderr=True)
