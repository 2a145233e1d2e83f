"""Scope context and qualified-name resolution for functions and methods."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .entities import CLASS_KINDS, Entity, EntityKind
from .exceptions import NameResolutionError

SEPARATOR = "::"
ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class ScopeContext:
    """Enclosing namespace/class names, outer to inner.

    Immutable: ``push`` returns a new context and leaves this one untouched,
    so sibling scopes never see each other's names. ``in_class`` is set when
    the innermost scope is a class, struct or union body.
    """

    names: tuple[str, ...] = ()
    in_class: bool = False

    def push(self, name: Optional[str], is_class: bool = False) -> ScopeContext:
        return ScopeContext(self.names + (name or ANONYMOUS,), is_class)

    def qualify(self, name: str) -> str:
        if not self.names:
            return name
        return SEPARATOR.join(self.names + (name,))

    def __len__(self) -> int:
        return len(self.names)

    def __str__(self) -> str:
        return SEPARATOR.join(self.names)


def _reference_targets(method: Entity) -> list[Optional[Entity]]:
    return [child.referenced() for child in method.children if child.is_reference]


def _owner_index(targets: list[Optional[Entity]]) -> Optional[int]:
    owner = None
    for i, target in enumerate(targets):
        if target is not None and target.kind in CLASS_KINDS:
            owner = i
    return owner


def owning_class(method: Entity) -> Optional[str]:
    """Name of the class an out-of-line method definition refers to.

    ``void ns::Foo::bar() {}`` carries one reference child per qualifier
    component (``ns`` then ``Foo``), and a return type such as ``Bar`` in
    ``Bar Foo::make()`` adds a reference before them. The qualifier always
    ends the list, so the last reference whose target is a class, struct or
    union names the owner. Namespace and other targets are skipped.
    """
    targets = _reference_targets(method)
    owner = _owner_index(targets)
    if owner is None:
        return None
    return targets[owner].name


def method_qualifier(method: Entity) -> Optional[str]:
    """Qualifier of an out-of-line method: the owning class plus the
    namespace references written directly before it.

    ``void ns::Foo::bar() {}`` gives ``ns::Foo``; ``Bar Foo::make() {}``
    gives ``Foo``.
    """
    targets = _reference_targets(method)
    owner = _owner_index(targets)
    if owner is None or not targets[owner].name:
        return None

    names = [targets[owner].name]
    for target in reversed(targets[:owner]):
        if target is None or target.kind is not EntityKind.NAMESPACE:
            break
        names.append(target.name or ANONYMOUS)
    return SEPARATOR.join(reversed(names))


def qualified_name(entity: Entity, scope: ScopeContext) -> str:
    """Fully qualified name of a function-like entity.

    Args:
        entity: FunctionDecl or Method entity
        scope: Enclosing scope context at the point of declaration

    Returns:
        Name joined with its scopes by ``::``

    Raises:
        NameResolutionError: If the entity has no declared name
    """
    name = entity.name
    if not name:
        raise NameResolutionError(
            entity.kind.value,
            str(entity.location) if entity.location is not None else None,
        )

    # a method defined in its class body already has the class in scope
    if entity.kind is EntityKind.METHOD and not scope.in_class:
        qualifier = method_qualifier(entity)
        if qualifier:
            name = f"{qualifier}{SEPARATOR}{name}"

    return scope.qualify(name)
