"""Per-file and batch analysis.

Every file produces its own ``FileAnalysis`` outcome. A file that fails to
parse is recorded as failed and the batch moves on, so records already
computed for other files are never lost. ``fail_fast`` restores the
abort-on-first-error behaviour.

Files share no state; with ``workers > 1`` they are analyzed on a thread pool
where every worker thread owns its own front end. Outcomes are always yielded
in input order.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence, Union

from .compdb import CompilationEntry, entry_flags, load_compilation_database
from .config import MetricsConfig
from .exceptions import AnalysisError, CxxMetricsError
from .frontend import ClangFrontend
from .logging_config import get_logger
from .traversal import FunctionRecord, walk_functions

logger = get_logger(__name__)

FrontendFactory = Callable[[Optional[str]], Any]


@dataclass(frozen=True)
class AnalysisTask:
    """A source file and the flags to parse it with."""

    path: str
    flags: tuple[str, ...] = ()


@dataclass
class FileAnalysis:
    """Outcome of analyzing one file.

    ``diagnostics`` holds the front end's error-level messages for a file
    that still parsed; its records may be incomplete.
    """

    path: str
    records: list[FunctionRecord] = field(default_factory=list)
    error: Optional[CxxMetricsError] = None
    diagnostics: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def analyze_unit(unit: Any, config: MetricsConfig) -> list[FunctionRecord]:
    """Collect the records of a parsed unit (anything with ``root`` and ``main_file``)."""
    location_filter = config.location_filter(unit.main_file)
    return list(walk_functions(unit.root, location_filter))


def _analyze(frontend: Any, task: AnalysisTask, config: MetricsConfig) -> FileAnalysis:
    try:
        unit = frontend.parse(task.path, task.flags)
        records = analyze_unit(unit, config)
    except AnalysisError as e:
        if config.fail_fast:
            raise
        logger.error("%s: %s", task.path, e)
        return FileAnalysis(task.path, error=e)

    logger.debug("Analyzed %s: %d functions", task.path, len(records))
    return FileAnalysis(task.path, records, diagnostics=list(unit.diagnostics))


def tasks_from_entries(
    entries: Iterable[CompilationEntry], config: MetricsConfig
) -> list[AnalysisTask]:
    """Turn compilation database entries into analysis tasks.

    Relative include paths in a build command are relative to the entry's
    directory, so the front end is told to work from there.

    Raises:
        CompilationDatabaseError: If an entry's command is malformed
    """
    tasks = []
    for entry in entries:
        flags = entry_flags(entry, config.trailing_flags)
        flags += ["-working-directory", entry.directory]
        flags += config.extra_flags
        tasks.append(AnalysisTask(entry.source_path, tuple(flags)))
    return tasks


def tasks_from_files(
    paths: Iterable[Union[str, os.PathLike]], config: MetricsConfig
) -> list[AnalysisTask]:
    return [AnalysisTask(os.fspath(p), tuple(config.extra_flags)) for p in paths]


def iter_analyses(
    tasks: Sequence[AnalysisTask],
    config: Optional[MetricsConfig] = None,
    frontend_factory: FrontendFactory = ClangFrontend,
) -> Iterator[FileAnalysis]:
    """Analyze tasks, yielding outcomes in input order as they become available.

    Args:
        tasks: Files and flags to analyze
        config: Run configuration (defaults to MetricsConfig())
        frontend_factory: Callable building a front end from a libclang path

    Yields:
        FileAnalysis per task

    Raises:
        AnalysisError: On the first failed file when ``fail_fast`` is set
    """
    config = config or MetricsConfig()

    if config.workers == 1 or config.fail_fast or len(tasks) < 2:
        with frontend_factory(config.libclang_path) as frontend:
            for task in tasks:
                yield _analyze(frontend, task, config)
        return

    local = threading.local()
    opened: list[Any] = []
    opened_lock = threading.Lock()

    def _worker(task: AnalysisTask) -> FileAnalysis:
        frontend = getattr(local, "frontend", None)
        if frontend is None:
            frontend = frontend_factory(config.libclang_path).open()
            local.frontend = frontend
            with opened_lock:
                opened.append(frontend)
        return _analyze(frontend, task, config)

    try:
        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            futures = [executor.submit(_worker, task) for task in tasks]
            for future in futures:
                yield future.result()
    finally:
        for frontend in opened:
            frontend.close()


def analyze_file(
    path: Union[str, os.PathLike],
    flags: Sequence[str] = (),
    config: Optional[MetricsConfig] = None,
    frontend_factory: FrontendFactory = ClangFrontend,
) -> FileAnalysis:
    """Analyze a single source file.

    Example:
        >>> result = analyze_file("src/foo.cpp", ["-std=c++17"])
        >>> [r.qualified_name for r in result.records]
        ['ns::Foo::bar', 'main']
    """
    config = config or MetricsConfig()
    task = AnalysisTask(os.fspath(path), tuple(flags) + tuple(config.extra_flags))
    return next(iter_analyses([task], config, frontend_factory))


def analyze_compilation_database(
    path: Union[str, Path],
    config: Optional[MetricsConfig] = None,
    frontend_factory: FrontendFactory = ClangFrontend,
) -> list[FileAnalysis]:
    """Analyze every entry of a compilation database.

    Raises:
        CompilationDatabaseError: If the database is unreadable or malformed
    """
    config = config or MetricsConfig()
    tasks = tasks_from_entries(load_compilation_database(path), config)
    return list(iter_analyses(tasks, config, frontend_factory))
