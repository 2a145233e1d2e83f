"""Tests for the in-memory entity tree."""

import gc

import pytest

from cxx_metrics.entities import EntityKind, EntityTree, SourceSpan


class TestSourceSpan:
    def test_line_count(self):
        assert SourceSpan("a.cpp", 3, 7).line_count == 5
        assert SourceSpan("a.cpp", 3, 3).line_count == 1

    def test_str(self):
        assert str(SourceSpan("a.cpp", 12, 20)) == "a.cpp:12"


class TestEntityTree:
    def test_reference_resolves_through_tree(self):
        tree = EntityTree()
        foo = tree.add(EntityKind.CLASS_DECL, "Foo", key="Foo")
        ref = tree.add(EntityKind.REFERENCE, target="Foo")
        assert ref.is_reference
        assert ref.referenced() is foo

    def test_unknown_target(self):
        tree = EntityTree()
        assert tree.add(EntityKind.REFERENCE, target="Nope").referenced() is None

    def test_non_reference_has_no_target(self):
        tree = EntityTree()
        assert tree.add(EntityKind.STATEMENT).referenced() is None

    def test_duplicate_key_rejected(self):
        tree = EntityTree()
        tree.add(EntityKind.CLASS_DECL, "Foo", key="Foo")
        with pytest.raises(ValueError):
            tree.add(EntityKind.STRUCT_DECL, "Foo", key="Foo")

    def test_nodes_do_not_keep_tree_alive(self):
        tree = EntityTree()
        tree.add(EntityKind.CLASS_DECL, "Foo", key="Foo")
        ref = tree.add(EntityKind.REFERENCE, target="Foo")
        del tree
        gc.collect()
        assert ref.referenced() is None

    def test_children_keep_order(self):
        tree = EntityTree()
        a, b, c = (tree.add(EntityKind.STATEMENT) for _ in range(3))
        block = tree.add(EntityKind.COMPOUND_STMT, children=[a, b, c])
        assert list(block.children) == [a, b, c]

    def test_len_counts_keyed_nodes(self):
        tree = EntityTree()
        tree.add(EntityKind.CLASS_DECL, "A", key="A")
        tree.add(EntityKind.STATEMENT)
        assert len(tree) == 1

    def test_nodes_are_immutable(self):
        tree = EntityTree()
        node = tree.add(EntityKind.STATEMENT)
        with pytest.raises(AttributeError):
            node.node_name = "x"

    def test_default_role_is_none(self):
        tree = EntityTree()
        assert tree.add(EntityKind.COMPOUND_STMT).role is None
