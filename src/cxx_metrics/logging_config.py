"""
Logging setup for cxx-metrics.

Records are written to stdout by the formatters. Log lines go to stderr
through rich, and optionally to a plain-text log file, so the two streams
never mix.
"""

import logging
import os
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "cxx_metrics"

# Verbosity setting -> level of the cxx_metrics logger
LOG_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    verbosity: str = "normal", log_file: Optional[Union[str, os.PathLike]] = None
) -> logging.Logger:
    """
    Configure the ``cxx_metrics`` logger for one run.

    Handlers installed by an earlier call are replaced, so repeated runs in
    one process never duplicate output.

    Args:
        verbosity: "quiet" (errors only), "normal" (warnings, e.g. front-end
            diagnostics) or "verbose" (per-file and per-function debug lines)
        log_file: Optional file that receives the same lines without markup

    Returns:
        The configured ``cxx_metrics`` logger

    Raises:
        ValueError: If ``verbosity`` is not a known level
    """
    if verbosity not in LOG_LEVELS:
        raise ValueError(
            f"Unknown verbosity {verbosity!r}; expected one of: {', '.join(LOG_LEVELS)}"
        )
    verbose = verbosity == "verbose"

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            markup=False,
            rich_tracebacks=True,
            show_path=verbose,
            log_time_format="[%X]",
        )
    )
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.setLevel(LOG_LEVELS[verbosity])
    # records stay out of the root logger's handlers
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``cxx_metrics`` namespace (the root one for None)."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
