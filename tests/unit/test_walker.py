"""Tests for tree traversal and the dictionary overview."""

import types

import pytest

from src.dictionary_exchange.core.walker import build_overview, walk_tree
from src.dictionary_exchange.models.dictionary import DictionaryItem, DictionaryTree
from src.dictionary_exchange.utils.exceptions import CyclicTreeError


class TestWalkTree:
    """Test suite for walk_tree."""

    def test_pre_order_with_sorted_siblings(self, tree):
        """Parents come before children, siblings in key order."""
        visited = [(item.key, depth) for item, depth in walk_tree(tree.roots)]

        assert visited == [
            ("button", 0),
            ("button.cancel", 1),
            ("button.save", 1),
            ("farewell", 0),
            ("greeting", 0),
            ("greeting.casual", 1),
            ("greeting.formal", 1),
        ]

    def test_codepoint_ordering_is_case_sensitive(self):
        """Uppercase letters sort before lowercase (no locale collation)."""
        roots = [DictionaryItem(key="b"), DictionaryItem(key="B"), DictionaryItem(key="a")]

        keys = [item.key for item, _ in walk_tree(roots)]

        assert keys == ["B", "a", "b"]

    def test_descendants_before_next_sibling(self):
        """A whole subtree is emitted before the parent's next sibling."""
        grandchild = DictionaryItem(key="a.x.1")
        child = DictionaryItem(key="a.x", children=[grandchild])
        first = DictionaryItem(key="a", children=[child])
        second = DictionaryItem(key="b")

        visited = [(item.key, depth) for item, depth in walk_tree([second, first])]

        assert visited == [("a", 0), ("a.x", 1), ("a.x.1", 2), ("b", 0)]

    def test_is_lazy_generator(self, tree):
        """The walk is a one-shot generator."""
        walk = walk_tree(tree.roots)

        assert isinstance(walk, types.GeneratorType)
        first_item, depth = next(walk)
        assert first_item.key == "button"
        assert depth == 0

        remaining = list(walk)
        assert len(remaining) == 6
        assert list(walk) == []

    def test_empty_roots(self):
        """Walking no roots yields nothing."""
        assert list(walk_tree([])) == []

    def test_deep_tree_does_not_hit_recursion_limit(self):
        """Depth is handled with an explicit stack, not recursion."""
        depth = 5000
        items = [DictionaryItem(key="node-0")]
        for level in range(1, depth):
            items.append(DictionaryItem(key=f"node-{level}", parent_key=f"node-{level - 1}"))

        deep_tree = DictionaryTree.from_items(items)
        visited = list(walk_tree(deep_tree.roots))

        assert len(visited) == depth
        assert visited[-1][1] == depth - 1

    def test_cycle_is_detected(self):
        """An item reachable from itself raises CyclicTreeError."""
        first = DictionaryItem(key="a")
        second = DictionaryItem(key="b", children=[first])
        first.children.append(second)

        with pytest.raises(CyclicTreeError) as exc:
            list(walk_tree([first]))

        assert exc.value.key == "a"

    def test_does_not_reorder_stored_children(self, tree):
        """Sorting happens during the walk only."""
        greeting = tree.get("greeting")
        before = [child.key for child in greeting.children]

        list(walk_tree(tree.roots))

        assert [child.key for child in greeting.children] == before


class TestBuildOverview:
    """Test suite for the depth-annotated listing."""

    def test_levels_and_order(self, tree, registry):
        overview = build_overview(tree, registry)

        assert [(entry.key, entry.level) for entry in overview] == [
            ("button", 0),
            ("button.cancel", 1),
            ("button.save", 1),
            ("farewell", 0),
            ("greeting", 0),
            ("greeting.casual", 1),
            ("greeting.formal", 1),
        ]

    def test_translations_keyed_by_culture_name(self, tree, registry):
        overview = {entry.key: entry for entry in build_overview(tree, registry)}

        assert overview["greeting"].translations == {"English": "Hello", "French": ""}
        assert overview["farewell"].translations == {"English": "Goodbye", "French": "Au revoir"}
        assert overview["button.cancel"].translations == {}
        assert overview["greeting"].id == 10
