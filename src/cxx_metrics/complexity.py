"""Cyclomatic complexity of a function body.

The body's statement tree is folded into an abstract control-flow graph size
(node count, edge count). No graph is materialized.

Counting rules:
    - Every statement of a block is one node reached by one edge.
    - if/while/do/for add one edge for the branch split; switch adds none.
    - An else branch adds one edge.
    - Every case/default label adds one edge.

The score is ``edges - nodes``. The connected-components term of the classical
McCabe formula (``+ 2``) is not added, so straight-line code scores 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .entities import ROLE_BODY, ROLE_ELSE, Entity, EntityKind

LABEL_KINDS = frozenset({EntityKind.CASE_STMT, EntityKind.DEFAULT_STMT})


@dataclass(frozen=True)
class ComplexityCount:
    """Abstract control-flow graph size."""

    nodes: int = 0
    edges: int = 0

    def __add__(self, other: ComplexityCount) -> ComplexityCount:
        return ComplexityCount(self.nodes + other.nodes, self.edges + other.edges)

    @property
    def score(self) -> int:
        return self.edges - self.nodes


def controlled_bodies(stmt: Entity) -> tuple[Entity, Optional[Entity]]:
    """Locate the body (and for ``if`` the optional else-body) of a conditional.

    Children tagged with a structural role win. Untagged children fall back to
    position: an ``if`` with two children is (condition, body), with three it
    is (condition, body, else). Loops and switch use their last child.
    """
    children = list(stmt.children)

    tagged = {child.role: child for child in children if child.role is not None}
    if ROLE_BODY in tagged:
        return tagged[ROLE_BODY], tagged.get(ROLE_ELSE)

    if stmt.kind is EntityKind.IF_STMT:
        if len(children) == 2:
            return children[-1], None
        return children[1], children[2]

    return children[-1], None


def _conditional(stmt: Entity) -> ComplexityCount:
    body, else_body = controlled_bodies(stmt)
    count = complexity(body)

    if else_body is not None:
        branch = complexity(else_body)
        count += ComplexityCount(branch.nodes, branch.edges + 1)

    return count


def complexity(stmt: Entity) -> ComplexityCount:
    """Fold a statement subtree into (nodes, edges)."""
    if stmt.kind is not EntityKind.COMPOUND_STMT:
        if stmt.is_conditional:
            return _conditional(stmt)
        return ComplexityCount(1, 1)

    nodes = 0
    edges = 0
    for child in stmt.children:
        nodes += 1
        edges += 1

        if child.is_conditional:
            if child.kind is not EntityKind.SWITCH_STMT:
                edges += 1
            inner = _conditional(child)
            nodes += inner.nodes
            edges += inner.edges

        # labels inside a switch block are extra dispatch edges
        if child.kind in LABEL_KINDS:
            edges += 1

    return ComplexityCount(nodes, edges)


def cyclomatic_score(body: Entity) -> int:
    """Simplified McCabe score (``edges - nodes``) of a function body."""
    return complexity(body).score
