"""In-memory storage collaborator."""

import copy
import dataclasses
from collections.abc import Iterable

import structlog

from ..models.dictionary import DictionaryItem, Language

logger = structlog.get_logger(__name__)


class InMemoryLocalizationStore:
    """
    Dictionary storage held in process memory.

    Items are stored flat and handed out as deep copies without children, so
    a preview pass can mutate what it loaded without touching the store.
    """

    def __init__(
        self,
        languages: Iterable[Language] = (),
        items: Iterable[DictionaryItem] = (),
    ) -> None:
        self._languages: list[Language] = list(languages)
        self._items: dict[str, DictionaryItem] = {}
        for item in items:
            self.add_item(item)
        self.save_count = 0

    def add_language(self, language: Language) -> None:
        self._languages.append(language)

    def add_item(self, item: DictionaryItem) -> None:
        """Store an item (children are flattened into the store as well)."""
        pending = [item]
        while pending:
            current = pending.pop()
            pending.extend(current.children)
            stored = dataclasses.replace(
                current, children=[], translations=dict(current.translations)
            )
            self._items[stored.key] = stored

    def get_all_languages(self) -> list[Language]:
        return copy.deepcopy(self._languages)

    def get_items(self) -> list[DictionaryItem]:
        return [copy.deepcopy(item) for item in self._items.values()]

    def get_item(self, key: str) -> DictionaryItem | None:
        item = self._items.get(key)
        return copy.deepcopy(item) if item is not None else None

    def save_items(self, items: list[DictionaryItem]) -> None:
        for item in items:
            stored = self._items.get(item.key)
            if stored is None:
                logger.warning("Saving item unknown to the store", item_key=item.key)
                stored = DictionaryItem(key=item.key, id=item.id, parent_key=item.parent_key)
                self._items[item.key] = stored
            stored.translations = dict(item.translations)
        self.save_count += 1
        logger.debug("Saved items", items=len(items))
