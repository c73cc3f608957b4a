"""Tests for dictionary, registry and change set models."""

import pytest

from src.dictionary_exchange.models.changes import ChangeRecord, ChangeSet
from src.dictionary_exchange.models.dictionary import (
    DictionaryItem,
    DictionaryTree,
    Language,
    LanguageRegistry,
)
from src.dictionary_exchange.utils.exceptions import (
    CyclicTreeError,
    DictionaryExchangeError,
    DuplicateItemKeyError,
    InvalidOptionsError,
)


class TestDictionaryItem:
    """Test DictionaryItem."""

    def test_missing_and_empty_translations_differ(self):
        item = DictionaryItem(key="greeting", translations={1: ""})

        assert item.get_translation(1) == ""
        assert item.get_translation(2) is None

    def test_set_translation(self):
        item = DictionaryItem(key="greeting")

        item.set_translation(1, "Hello")

        assert item.translations == {1: "Hello"}


class TestDictionaryTree:
    """Test DictionaryTree."""

    def test_from_items_links_children(self, tree):
        assert len(tree) == 7
        assert sorted(root.key for root in tree.roots) == ["button", "farewell", "greeting"]
        greeting = tree.get("greeting")
        assert sorted(child.key for child in greeting.children) == [
            "greeting.casual",
            "greeting.formal",
        ]

    def test_lookup_is_exact_and_case_sensitive(self, tree):
        assert tree.get("greeting") is not None
        assert tree.get("Greeting") is None
        assert tree.get("greeting ") is None
        assert "farewell" in tree
        assert "FAREWELL" not in tree

    def test_orphan_parent_key_becomes_root(self):
        items = [DictionaryItem(key="child", parent_key="missing")]

        tree = DictionaryTree.from_items(items)

        assert [root.key for root in tree.roots] == ["child"]

    def test_parent_link_cycle_is_rejected(self):
        items = [
            DictionaryItem(key="root"),
            DictionaryItem(key="a", parent_key="b"),
            DictionaryItem(key="b", parent_key="a"),
        ]

        with pytest.raises(CyclicTreeError) as exc:
            DictionaryTree.from_items(items)

        assert exc.value.key == "a"

    def test_duplicate_keys_are_rejected(self):
        roots = [DictionaryItem(key="dup"), DictionaryItem(key="dup")]

        with pytest.raises(DuplicateItemKeyError, match="Duplicate dictionary item key") as exc:
            DictionaryTree(roots)

        assert exc.value.key == "dup"
        assert isinstance(exc.value, DictionaryExchangeError)

    def test_duplicate_keys_from_flat_items(self):
        items = [DictionaryItem(key="dup", id=1), DictionaryItem(key="dup", id=2)]

        with pytest.raises(DuplicateItemKeyError):
            DictionaryTree.from_items(items)

    def test_empty_tree(self):
        tree = DictionaryTree([])

        assert len(tree) == 0
        assert list(tree.items()) == []


class TestLanguageRegistry:
    """Test LanguageRegistry."""

    def test_lookup_by_culture_name(self, registry):
        assert registry.find_by_culture_name("French").id == 2
        assert registry.find_by_culture_name("french") is None

    def test_resolve_keeps_request_order_and_drops_unknown(self, registry):
        resolved = registry.resolve([3, 99, 1])

        assert [lang.culture_name for lang in resolved] == ["da-DK", "English"]

    def test_resolve_drops_repeated_ids(self, registry):
        resolved = registry.resolve([2, 2, 1])

        assert [lang.id for lang in resolved] == [2, 1]

    def test_iteration_and_length(self):
        registry = LanguageRegistry([Language(id="en", culture_name="en-US")])

        assert len(registry) == 1
        assert [lang.culture_name for lang in registry] == ["en-US"]
        assert registry.get("en").culture_name == "en-US"
        assert registry.get("fr") is None


class TestChangeSet:
    """Test ChangeSet and ChangeRecord."""

    def test_append_preserves_order(self):
        changes = ChangeSet()
        changes.append(ChangeRecord("b", "English", "", "B"))
        changes.append(ChangeRecord("a", "English", "", "A"))
        changes.append(ChangeRecord("b", "French", "", "Bé"))

        assert [record.item_key for record in changes] == ["b", "a", "b"]
        assert changes.item_keys() == ["b", "a"]
        assert len(changes) == 3
        assert changes.has_changes
        assert changes.get_summary() == "3 changes across 2 items"

    def test_empty_change_set(self):
        changes = ChangeSet()

        assert not changes.has_changes
        assert changes.get_summary() == "No changes"
        assert changes.to_list() == []

    def test_api_representation(self):
        record = ChangeRecord("greeting", "French", "", "Bonjour")

        data = record.to_dict()

        assert data == {
            "itemKey": "greeting",
            "cultureName": "French",
            "oldValue": "",
            "newValue": "Bonjour",
        }
        assert ChangeRecord.from_dict(data) == record

    def test_from_list_tolerates_null_old_value(self):
        changes = ChangeSet.from_list(
            [{"itemKey": "k", "cultureName": "English", "oldValue": None, "newValue": "v"}]
        )

        assert changes[0].old_value == ""

    @pytest.mark.parametrize(
        "records",
        [
            [{"itemKey": "k"}],
            [{"itemKey": "k", "cultureName": "English"}],
            ["not a record"],
            [None],
        ],
    )
    def test_from_list_rejects_malformed_records(self, records):
        with pytest.raises(InvalidOptionsError, match=r"expected\[0\]"):
            ChangeSet.from_list(records)
