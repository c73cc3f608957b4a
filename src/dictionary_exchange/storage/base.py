"""Interface of the storage collaborator."""

from typing import Protocol, runtime_checkable

from ..models.dictionary import DictionaryItem, Language


@runtime_checkable
class LocalizationStore(Protocol):
    """
    Storage of languages and dictionary items.

    The engine only reads through this interface and saves items it changed.
    Every ``get_items`` call must return fresh objects: an import pass mutates
    the items it receives, and those mutations must not be visible to later
    reads unless ``save_items`` was called.
    """

    def get_all_languages(self) -> list[Language]:
        """Return every known language."""
        ...

    def get_items(self) -> list[DictionaryItem]:
        """Return all dictionary items as a flat list linked through ``parent_key``."""
        ...

    def save_items(self, items: list[DictionaryItem]) -> None:
        """Persist the translations of the given items in one batch."""
        ...
