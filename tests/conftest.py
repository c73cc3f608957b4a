"""Pytest configuration and shared fixtures.

Fixtures are organized by category:
- Language fixtures: languages and registries
- Tree fixtures: dictionary items and trees
- Store fixtures: in-memory and SQLite storage collaborators
"""

from pathlib import Path

import pytest

from src.dictionary_exchange.models.dictionary import (
    DictionaryItem,
    DictionaryTree,
    Language,
    LanguageRegistry,
)
from src.dictionary_exchange.storage.memory import InMemoryLocalizationStore
from src.dictionary_exchange.storage.sqlite import SQLiteLocalizationStore

EN = 1
FR = 2
DA = 3

# =============================================================================
# Language Fixtures
# =============================================================================


@pytest.fixture
def languages() -> list[Language]:
    """English, French and Danish, registered in that order."""
    return [
        Language(id=EN, culture_name="English"),
        Language(id=FR, culture_name="French"),
        Language(id=DA, culture_name="da-DK"),
    ]


@pytest.fixture
def registry(languages: list[Language]) -> LanguageRegistry:
    return LanguageRegistry(languages)


# =============================================================================
# Tree Fixtures
# =============================================================================


def build_items() -> list[DictionaryItem]:
    """
    Flat items for the sample dictionary:

    button
      button.cancel
      button.save        en=Save
    farewell             en=Goodbye, fr=Au revoir
    greeting             en=Hello, fr=""
      greeting.casual
      greeting.formal    en=Good day
    """
    return [
        DictionaryItem(key="greeting", id=10, translations={EN: "Hello", FR: ""}),
        DictionaryItem(
            key="greeting.formal", id=11, parent_key="greeting", translations={EN: "Good day"}
        ),
        DictionaryItem(key="greeting.casual", id=12, parent_key="greeting"),
        DictionaryItem(key="farewell", id=20, translations={EN: "Goodbye", FR: "Au revoir"}),
        DictionaryItem(key="button", id=30),
        DictionaryItem(key="button.save", id=31, parent_key="button", translations={EN: "Save"}),
        DictionaryItem(key="button.cancel", id=32, parent_key="button"),
    ]


@pytest.fixture
def tree() -> DictionaryTree:
    return DictionaryTree.from_items(build_items())


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def memory_store(languages: list[Language]) -> InMemoryLocalizationStore:
    return InMemoryLocalizationStore(languages=languages, items=build_items())


@pytest.fixture
def sqlite_store(tmp_path: Path):
    """SQLite store seeded with the same sample dictionary (ids are generated)."""
    store = SQLiteLocalizationStore(tmp_path / "dictionary.db")
    store.load_fixture(
        {
            "languages": ["English", "French", "da-DK"],
            "items": [
                {
                    "key": "greeting",
                    "translations": {"English": "Hello", "French": ""},
                    "children": [
                        {"key": "greeting.formal", "translations": {"English": "Good day"}},
                        {"key": "greeting.casual"},
                    ],
                },
                {
                    "key": "farewell",
                    "translations": {"English": "Goodbye", "French": "Au revoir"},
                },
                {
                    "key": "button",
                    "children": [
                        {"key": "button.save", "translations": {"English": "Save"}},
                        {"key": "button.cancel"},
                    ],
                },
            ],
        }
    )

    yield store

    store.close()
