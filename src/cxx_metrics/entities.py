"""Entity tree model consumed by the traversal engine.

The parsing front end owns the tree; everything in this package only borrows
it. Two implementations exist:

    - ``ClangEntity`` (frontend.py) wraps a libclang cursor lazily.
    - ``EntityNode`` is an immutable in-memory node created through an
      ``EntityTree``. References are stored as keys and resolved through the
      owning tree, so a node never holds a second owning handle on its target.

Usage:
    tree = EntityTree()
    foo = tree.add(EntityKind.CLASS_DECL, name="Foo", key="c:@S@Foo")
    ref = tree.add(EntityKind.REFERENCE, target="c:@S@Foo")
    assert ref.referenced() is foo
"""

from __future__ import annotations

import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Sequence


class EntityKind(Enum):
    """Entity kinds the analysis distinguishes. Everything else maps to a category."""

    TRANSLATION_UNIT = "TranslationUnit"

    # Statements with dedicated handling
    COMPOUND_STMT = "CompoundStmt"
    IF_STMT = "IfStmt"
    WHILE_STMT = "WhileStmt"
    DO_STMT = "DoStmt"
    FOR_STMT = "ForStmt"
    SWITCH_STMT = "SwitchStmt"
    CASE_STMT = "CaseStmt"
    DEFAULT_STMT = "DefaultStmt"

    # Declarations
    FUNCTION_DECL = "FunctionDecl"
    METHOD = "Method"
    NAMESPACE = "Namespace"
    CLASS_DECL = "ClassDecl"
    STRUCT_DECL = "StructDecl"
    UNION_DECL = "UnionDecl"
    PARAMETER = "ParmDecl"

    # Categories
    STATEMENT = "Stmt"
    EXPRESSION = "Expr"
    REFERENCE = "Ref"
    OTHER = "Other"


CONDITIONAL_KINDS = frozenset(
    {
        EntityKind.IF_STMT,
        EntityKind.WHILE_STMT,
        EntityKind.DO_STMT,
        EntityKind.FOR_STMT,
        EntityKind.SWITCH_STMT,
    }
)

STATEMENT_KINDS = CONDITIONAL_KINDS | frozenset(
    {
        EntityKind.COMPOUND_STMT,
        EntityKind.CASE_STMT,
        EntityKind.DEFAULT_STMT,
        EntityKind.STATEMENT,
        EntityKind.EXPRESSION,
    }
)

SCOPE_KINDS = frozenset(
    {
        EntityKind.NAMESPACE,
        EntityKind.CLASS_DECL,
        EntityKind.STRUCT_DECL,
        EntityKind.UNION_DECL,
    }
)

CLASS_KINDS = frozenset(
    {EntityKind.CLASS_DECL, EntityKind.STRUCT_DECL, EntityKind.UNION_DECL}
)

FUNCTION_KINDS = frozenset({EntityKind.FUNCTION_DECL, EntityKind.METHOD})

# Structural slot tags for conditional children
ROLE_BODY = "body"
ROLE_ELSE = "else"


@dataclass(frozen=True)
class SourceSpan:
    """Expansion-resolved source range of an entity."""

    file: str
    start_line: int
    end_line: int

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}"


class Entity(ABC):
    """A node of the syntax tree produced by a parsing front end."""

    @property
    @abstractmethod
    def kind(self) -> EntityKind:
        """Kind of this entity."""

    @property
    @abstractmethod
    def name(self) -> Optional[str]:
        """Declared name, or None for anonymous entities."""

    @property
    @abstractmethod
    def location(self) -> Optional[SourceSpan]:
        """Source span, or None when the front end cannot resolve one."""

    @property
    @abstractmethod
    def children(self) -> Sequence[Entity]:
        """Children in lexical source order."""

    @property
    @abstractmethod
    def argument_count(self) -> int:
        """Number of formal parameters (function-like entities only)."""

    @abstractmethod
    def referenced(self) -> Optional[Entity]:
        """Target of a reference entity, or None."""

    @property
    def role(self) -> Optional[str]:
        """Structural slot inside the parent (``"body"``/``"else"``), if tagged."""
        return None

    @property
    def is_statement(self) -> bool:
        return self.kind in STATEMENT_KINDS

    @property
    def is_reference(self) -> bool:
        return self.kind is EntityKind.REFERENCE

    @property
    def is_conditional(self) -> bool:
        """True for if/while/do/for/switch.

        Only meaningful for statement-like entities; asking anything else is a
        programming error.
        """
        assert self.is_statement, f"{self.kind.value} is not a statement or expression"
        return self.kind in CONDITIONAL_KINDS


@dataclass(frozen=True, eq=False)
class EntityNode(Entity):
    """Immutable in-memory entity. Create through ``EntityTree.add``."""

    node_kind: EntityKind
    node_name: Optional[str] = None
    span: Optional[SourceSpan] = None
    nodes: tuple[EntityNode, ...] = ()
    key: Optional[str] = None
    target: Optional[str] = None
    arguments: int = 0
    slot: Optional[str] = None
    _tree: Any = field(default=None, repr=False)

    @property
    def kind(self) -> EntityKind:
        return self.node_kind

    @property
    def name(self) -> Optional[str]:
        return self.node_name

    @property
    def location(self) -> Optional[SourceSpan]:
        return self.span

    @property
    def children(self) -> Sequence[Entity]:
        return self.nodes

    @property
    def argument_count(self) -> int:
        return self.arguments

    @property
    def role(self) -> Optional[str]:
        return self.slot

    def referenced(self) -> Optional[Entity]:
        if self.target is None or self._tree is None:
            return None
        tree = self._tree()
        if tree is None:
            return None
        return tree.resolve(self.target)


class EntityTree:
    """Owner of a set of ``EntityNode`` objects and their key index."""

    def __init__(self) -> None:
        self._index: dict[str, EntityNode] = {}
        self._self_ref = weakref.ref(self)

    def add(
        self,
        kind: EntityKind,
        name: Optional[str] = None,
        location: Optional[SourceSpan] = None,
        children: Iterable[EntityNode] = (),
        *,
        key: Optional[str] = None,
        target: Optional[str] = None,
        arguments: int = 0,
        role: Optional[str] = None,
    ) -> EntityNode:
        """Create a node owned by this tree.

        Args:
            kind: Entity kind
            name: Declared name (None for anonymous entities)
            location: Source span (None for unresolvable locations)
            children: Child nodes in source order
            key: Identifier other nodes can reference
            target: Key of the entity this node references
            arguments: Formal parameter count
            role: Structural slot tag inside the parent

        Returns:
            The new node

        Raises:
            ValueError: If ``key`` is already registered
        """
        if key is not None and key in self._index:
            raise ValueError(f"Duplicate entity key: {key!r}")

        node = EntityNode(
            node_kind=kind,
            node_name=name,
            span=location,
            nodes=tuple(children),
            key=key,
            target=target,
            arguments=arguments,
            slot=role,
            _tree=self._self_ref,
        )
        if key is not None:
            self._index[key] = node
        return node

    def resolve(self, key: str) -> Optional[EntityNode]:
        """Look up a node by key."""
        return self._index.get(key)

    def __len__(self) -> int:
        return len(self._index)
