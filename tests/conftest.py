"""Shared test fixtures for cxx-metrics.

Entity trees are built in memory with ``EntityTree`` so the core algorithms
can be tested without libclang.
"""

from __future__ import annotations

import logging
from typing import Optional

import pytest

from cxx_metrics.entities import EntityKind, EntityNode, EntityTree, SourceSpan

MAIN_FILE = "/work/project/src/main.cpp"
HEADER_FILE = "/work/project/include/widget.h"


class TreeBuilder:
    """Shorthand constructors for C/C++ shaped entity trees."""

    def __init__(self) -> None:
        self.tree = EntityTree()

    # ── statements ────────────────────────────────────────────

    def stmt(self) -> EntityNode:
        return self.tree.add(EntityKind.STATEMENT)

    def expr(self) -> EntityNode:
        return self.tree.add(EntityKind.EXPRESSION)

    def block(self, *children: EntityNode, role: Optional[str] = None) -> EntityNode:
        return self.tree.add(EntityKind.COMPOUND_STMT, children=children, role=role)

    def if_(self, body: EntityNode, else_body: Optional[EntityNode] = None) -> EntityNode:
        children = [self.expr(), body]
        if else_body is not None:
            children.append(else_body)
        return self.tree.add(EntityKind.IF_STMT, children=children)

    def while_(self, body: EntityNode) -> EntityNode:
        return self.tree.add(EntityKind.WHILE_STMT, children=[self.expr(), body])

    def for_(self, body: EntityNode) -> EntityNode:
        return self.tree.add(
            EntityKind.FOR_STMT, children=[self.stmt(), self.expr(), self.expr(), body]
        )

    def do_(self, body: EntityNode) -> EntityNode:
        return self.tree.add(EntityKind.DO_STMT, children=[body, self.expr()])

    def switch(self, body: EntityNode) -> EntityNode:
        return self.tree.add(EntityKind.SWITCH_STMT, children=[self.expr(), body])

    def case(self, sub: Optional[EntityNode] = None) -> EntityNode:
        return self.tree.add(EntityKind.CASE_STMT, children=[self.expr(), sub or self.stmt()])

    def default(self, sub: Optional[EntityNode] = None) -> EntityNode:
        return self.tree.add(EntityKind.DEFAULT_STMT, children=[sub or self.stmt()])

    # ── declarations ──────────────────────────────────────────

    def ref(self, target: str) -> EntityNode:
        return self.tree.add(EntityKind.REFERENCE, target=target)

    def function(
        self,
        name: Optional[str],
        body: Optional[EntityNode] = None,
        *,
        args: int = 0,
        refs: tuple[EntityNode, ...] = (),
        start: int = 1,
        end: Optional[int] = None,
        file: Optional[str] = MAIN_FILE,
        kind: EntityKind = EntityKind.FUNCTION_DECL,
    ) -> EntityNode:
        children = list(refs)
        children.extend(self.tree.add(EntityKind.PARAMETER) for _ in range(args))
        if body is not None:
            children.append(body)
        location = SourceSpan(file, start, end or start) if file is not None else None
        return self.tree.add(kind, name, location, children, arguments=args)

    def method(self, name: str, body: Optional[EntityNode] = None, **kwargs) -> EntityNode:
        return self.function(name, body, kind=EntityKind.METHOD, **kwargs)

    def scope(
        self,
        kind: EntityKind,
        name: Optional[str],
        *children: EntityNode,
        file: Optional[str] = MAIN_FILE,
        key: Optional[str] = None,
    ) -> EntityNode:
        location = SourceSpan(file, 1, 1) if file is not None else None
        return self.tree.add(kind, name, location, children, key=key)

    def namespace(self, name: Optional[str], *children: EntityNode, **kwargs) -> EntityNode:
        return self.scope(EntityKind.NAMESPACE, name, *children, **kwargs)

    def klass(self, name: Optional[str], *children: EntityNode, **kwargs) -> EntityNode:
        return self.scope(EntityKind.CLASS_DECL, name, *children, **kwargs)

    def unit(self, *children: EntityNode) -> EntityNode:
        return self.tree.add(EntityKind.TRANSLATION_UNIT, MAIN_FILE, None, children)


@pytest.fixture
def builder() -> TreeBuilder:
    """Fresh tree builder."""
    return TreeBuilder()


@pytest.fixture
def restore_logger():
    """The ``cxx_metrics`` logger, with the handlers and level a test installs undone."""
    logger = logging.getLogger("cxx_metrics")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
