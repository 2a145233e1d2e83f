"""Scope-qualified traversal of a translation unit.

Walks the entity tree depth-first in source order, tracking the enclosing
namespace/class/struct/union names, and produces one ``FunctionRecord`` per
function or method definition that passes the location filter.

Only scope-introducing and function-like entities are examined. Everything
else (statements, fields, variables, ...) is skipped without descending, so
functions nested in function bodies are never reported. Function bodies are
handed to the complexity calculator and not walked here.
"""

from __future__ import annotations

import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .complexity import cyclomatic_score
from .entities import CLASS_KINDS, FUNCTION_KINDS, SCOPE_KINDS, Entity, EntityKind
from .logging_config import get_logger
from .naming import ScopeContext, qualified_name

logger = get_logger(__name__)


@dataclass(frozen=True)
class FunctionRecord:
    """Metrics for one function definition."""

    module: str
    file: str
    qualified_name: str
    arg_count: int
    line_count: int
    score: int


def normalize_path(path: Union[str, os.PathLike]) -> str:
    return os.path.normcase(os.path.normpath(os.path.abspath(os.fspath(path))))


class LocationFilter(ABC):
    """Decides whether an entity's location is in scope for analysis."""

    def accepts(self, entity: Entity) -> bool:
        location = entity.location
        if location is None or not location.file:
            return False
        return self.accepts_file(location.file)

    @abstractmethod
    def accepts_file(self, path: str) -> bool:
        """Whether declarations located in ``path`` are analyzed."""


class MainFileFilter(LocationFilter):
    """Accept only entities located in the file that was parsed."""

    def __init__(self, main_file: Union[str, os.PathLike]):
        self.main_file = normalize_path(main_file)

    def accepts_file(self, path: str) -> bool:
        return normalize_path(path) == self.main_file

    def __repr__(self) -> str:
        return f"MainFileFilter({self.main_file!r})"


class PathRegexFilter(LocationFilter):
    """Accept entities whose file path matches a regular expression.

    Used to include header-only code (templates, inline class bodies).
    """

    def __init__(self, pattern: Union[str, re.Pattern]):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def accepts_file(self, path: str) -> bool:
        return self.pattern.search(path) is not None

    def __repr__(self) -> str:
        return f"PathRegexFilter({self.pattern.pattern!r})"


def extract_function(entity: Entity, scope: ScopeContext) -> Optional[FunctionRecord]:
    """Build the record of a function-like entity.

    Returns None for pure declarations (no children) and for definitions
    whose last child is not a block body.
    """
    children = entity.children
    if not children:
        return None

    name = qualified_name(entity, scope)

    body = children[-1]
    if body.kind is not EntityKind.COMPOUND_STMT:
        logger.debug("Skipping %s: body is %s, not a block", name, body.kind.value)
        return None

    location = entity.location
    if location is None:
        return None

    path = os.path.abspath(location.file)
    return FunctionRecord(
        module=os.path.dirname(path),
        file=os.path.basename(path),
        qualified_name=name,
        arg_count=entity.argument_count,
        line_count=location.line_count,
        score=cyclomatic_score(body),
    )


def _walk(
    node: Entity, scope: ScopeContext, location_filter: LocationFilter
) -> Iterator[FunctionRecord]:
    for child in node.children:
        if not location_filter.accepts(child):
            continue

        kind = child.kind
        if kind in SCOPE_KINDS:
            inner = scope.push(child.name, is_class=kind in CLASS_KINDS)
            yield from _walk(child, inner, location_filter)
        elif kind in FUNCTION_KINDS:
            record = extract_function(child, scope)
            if record is not None:
                yield record


def walk_functions(root: Entity, location_filter: LocationFilter) -> Iterator[FunctionRecord]:
    """Yield a record for every in-scope function definition under ``root``.

    Args:
        root: Translation unit entity
        location_filter: Main-file or path-regex filter

    Yields:
        FunctionRecord in lexical declaration order
    """
    yield from _walk(root, ScopeContext(), location_filter)
