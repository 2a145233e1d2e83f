"""libclang front end.

Parses a source file with ``clang.cindex`` and exposes the resulting cursor
tree through the ``Entity`` interface. Cursors are wrapped lazily: only the
parts of the tree the traversal actually visits are ever converted.

Usage:
    with ClangFrontend() as frontend:
        unit = frontend.parse("src/foo.cpp", ["-Iinclude", "-std=c++17"])
        for record in walk_functions(unit.root, MainFileFilter(unit.main_file)):
            ...

Each ``ClangFrontend`` owns one libclang index. Use one frontend per thread.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from clang import cindex

from .entities import SCOPE_KINDS, Entity, EntityKind, SourceSpan
from .exceptions import ConfigurationError, FileAccessError, ParsingError
from .logging_config import get_logger

logger = get_logger(__name__)

_CURSOR_KINDS = {
    cindex.CursorKind.TRANSLATION_UNIT: EntityKind.TRANSLATION_UNIT,
    cindex.CursorKind.COMPOUND_STMT: EntityKind.COMPOUND_STMT,
    cindex.CursorKind.IF_STMT: EntityKind.IF_STMT,
    cindex.CursorKind.WHILE_STMT: EntityKind.WHILE_STMT,
    cindex.CursorKind.DO_STMT: EntityKind.DO_STMT,
    cindex.CursorKind.FOR_STMT: EntityKind.FOR_STMT,
    cindex.CursorKind.SWITCH_STMT: EntityKind.SWITCH_STMT,
    cindex.CursorKind.CASE_STMT: EntityKind.CASE_STMT,
    cindex.CursorKind.DEFAULT_STMT: EntityKind.DEFAULT_STMT,
    cindex.CursorKind.FUNCTION_DECL: EntityKind.FUNCTION_DECL,
    cindex.CursorKind.CXX_METHOD: EntityKind.METHOD,
    cindex.CursorKind.NAMESPACE: EntityKind.NAMESPACE,
    cindex.CursorKind.CLASS_DECL: EntityKind.CLASS_DECL,
    cindex.CursorKind.STRUCT_DECL: EntityKind.STRUCT_DECL,
    cindex.CursorKind.UNION_DECL: EntityKind.UNION_DECL,
    cindex.CursorKind.PARM_DECL: EntityKind.PARAMETER,
}

_library_lock = threading.Lock()


def map_cursor_kind(cursor: cindex.Cursor) -> EntityKind:
    """Translate a cursor kind into an ``EntityKind``."""
    try:
        kind = cursor.kind
    except ValueError:
        # kind id unknown to these bindings
        return EntityKind.OTHER

    mapped = _CURSOR_KINDS.get(kind)
    if mapped is not None:
        return mapped
    if kind.is_statement():
        return EntityKind.STATEMENT
    if kind.is_expression():
        return EntityKind.EXPRESSION
    if kind.is_reference():
        return EntityKind.REFERENCE
    return EntityKind.OTHER


class ClangEntity(Entity):
    """``Entity`` view of a libclang cursor."""

    __slots__ = ("cursor", "_kind", "_children")

    def __init__(self, cursor: cindex.Cursor):
        self.cursor = cursor
        self._kind: Optional[EntityKind] = None
        self._children: Optional[list[ClangEntity]] = None

    @property
    def kind(self) -> EntityKind:
        if self._kind is None:
            self._kind = map_cursor_kind(self.cursor)
        return self._kind

    @property
    def name(self) -> Optional[str]:
        if self.kind in SCOPE_KINDS and self.cursor.is_anonymous():
            return None
        return self.cursor.spelling or None

    @property
    def location(self) -> Optional[SourceSpan]:
        source_file = self.cursor.location.file
        if source_file is None:
            return None
        extent = self.cursor.extent
        return SourceSpan(source_file.name, extent.start.line, extent.end.line)

    @property
    def children(self) -> Sequence[Entity]:
        if self._children is None:
            self._children = [ClangEntity(c) for c in self.cursor.get_children()]
        return self._children

    @property
    def argument_count(self) -> int:
        return sum(1 for _ in self.cursor.get_arguments())

    def referenced(self) -> Optional[Entity]:
        target = self.cursor.referenced
        if target is None:
            return None
        return ClangEntity(target)

    def __repr__(self) -> str:
        return f"ClangEntity({self.kind.value}, {self.cursor.spelling!r})"


@dataclass
class ParsedUnit:
    """A parsed translation unit and the file it was requested for."""

    main_file: str
    translation_unit: cindex.TranslationUnit
    diagnostics: list[str] = field(default_factory=list)

    @property
    def root(self) -> ClangEntity:
        return ClangEntity(self.translation_unit.cursor)


def configure_library(library_file: Optional[str]) -> None:
    """Point the bindings at an explicit libclang before first use."""
    if library_file is None:
        return
    with _library_lock:
        if cindex.Config.loaded:
            logger.debug("libclang already loaded, ignoring %s", library_file)
            return
        cindex.Config.set_library_file(library_file)


class ClangFrontend:
    """Scoped owner of a libclang index."""

    def __init__(self, library_file: Optional[str] = None):
        self.library_file = library_file
        self._index: Optional[cindex.Index] = None

    def open(self) -> ClangFrontend:
        if self._index is not None:
            return self
        configure_library(self.library_file)
        try:
            self._index = cindex.Index.create()
        except cindex.LibclangError as e:
            raise ConfigurationError(f"Cannot load libclang: {e}")
        return self

    def close(self) -> None:
        self._index = None

    def __enter__(self) -> ClangFrontend:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def parse(self, path: Union[str, os.PathLike], flags: Sequence[str] = ()) -> ParsedUnit:
        """Parse one source file.

        Args:
            path: Source file to parse
            flags: Compiler flags (without the compiler and the file itself)

        Returns:
            ParsedUnit for the file

        Raises:
            FileAccessError: If the file does not exist
            ParsingError: If libclang cannot produce a translation unit
        """
        if self._index is None:
            raise RuntimeError("ClangFrontend used outside of its open/close scope")

        path = os.fspath(path)
        if not os.path.isfile(path):
            raise FileAccessError(path, "no such file")

        logger.debug("Parsing %s with %d flags", path, len(flags))
        try:
            tu = self._index.parse(path, args=list(flags))
        except cindex.TranslationUnitLoadError as e:
            raise ParsingError(path, str(e) or "libclang could not load the translation unit")

        diagnostics = []
        for diag in tu.diagnostics:
            if diag.severity >= cindex.Diagnostic.Error:
                message = f"{diag.location.file}:{diag.location.line}: {diag.spelling}"
                diagnostics.append(message)
                logger.warning("%s", message)

        return ParsedUnit(main_file=path, translation_unit=tu, diagnostics=diagnostics)
