"""Dictionary item, language and tree models."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from ..utils.exceptions import CyclicTreeError, DuplicateItemKeyError

# Language identifiers are opaque to the engine (integers for the SQLite store)
LanguageId = int | str


@dataclass
class Language:
    """
    A language known to the storage collaborator.

    Attributes:
        id: Opaque language identifier
        culture_name: Unique external name, used as the CSV column header
    """

    id: LanguageId
    culture_name: str


@dataclass
class DictionaryItem:
    """
    A localizable string entry.

    Attributes:
        key: Unique, case-sensitive item key
        id: Opaque storage identifier
        parent_key: Key of the parent item (None for roots)
        children: Child items; storage order carries no meaning
        translations: Translated value per language id. An empty string is a
            present (but empty) translation, distinct from a missing entry.
    """

    key: str
    id: int | str | None = None
    parent_key: str | None = None
    children: list["DictionaryItem"] = field(default_factory=list)
    translations: dict[LanguageId, str] = field(default_factory=dict)

    def get_translation(self, language_id: LanguageId) -> str | None:
        """
        Get the translated value for a language.

        Args:
            language_id: Language identifier

        Returns:
            The value, or None if the item has no translation for the language
        """
        return self.translations.get(language_id)

    def set_translation(self, language_id: LanguageId, value: str) -> None:
        """Add or update the translated value for a language."""
        self.translations[language_id] = value


@dataclass
class DictionaryOverview:
    """One line of the depth-annotated dictionary listing."""

    id: int | str | None
    key: str
    level: int
    translations: dict[str, str] = field(default_factory=dict)


class LanguageRegistry:
    """Read-only lookup of languages by id and by culture name."""

    def __init__(self, languages: Iterable[Language]) -> None:
        self._languages = list(languages)
        self._by_id: dict[LanguageId, Language] = {lang.id: lang for lang in self._languages}
        self._by_culture: dict[str, Language] = {
            lang.culture_name: lang for lang in self._languages
        }

    def __iter__(self) -> Iterator[Language]:
        return iter(self._languages)

    def __len__(self) -> int:
        return len(self._languages)

    def get(self, language_id: LanguageId) -> Language | None:
        return self._by_id.get(language_id)

    def find_by_culture_name(self, culture_name: str) -> Language | None:
        """Exact-match lookup of a language by its culture name."""
        return self._by_culture.get(culture_name)

    def resolve(self, language_ids: Iterable[LanguageId]) -> list[Language]:
        """
        Resolve requested language ids in the caller's order.

        Ids that are unknown to the registry are dropped, as are repeats of an
        id that was already resolved.

        Args:
            language_ids: Requested language ids

        Returns:
            Known languages in request order
        """
        resolved: list[Language] = []
        seen: set[LanguageId] = set()
        for language_id in language_ids:
            language = self._by_id.get(language_id)
            if language is None or language.id in seen:
                continue
            seen.add(language.id)
            resolved.append(language)
        return resolved


class DictionaryTree:
    """
    In-memory view of dictionary items with exact key lookup.

    The tree is built from its root items; every descendant reachable through
    ``children`` is indexed by key.
    """

    def __init__(self, roots: Iterable[DictionaryItem]) -> None:
        """
        Index a tree of dictionary items.

        Args:
            roots: Root-level items with their children attached

        Raises:
            CyclicTreeError: If an item is reachable from itself
            DuplicateItemKeyError: If two distinct items share a key
        """
        self.roots: list[DictionaryItem] = list(roots)
        self._by_key: dict[str, DictionaryItem] = {}

        pending = list(self.roots)
        while pending:
            item = pending.pop()
            existing = self._by_key.get(item.key)
            if existing is item:
                raise CyclicTreeError(item.key)
            if existing is not None:
                raise DuplicateItemKeyError(item.key)
            self._by_key[item.key] = item
            pending.extend(item.children)

    @classmethod
    def from_items(cls, items: Iterable[DictionaryItem]) -> "DictionaryTree":
        """
        Build a tree from a flat list of items linked through ``parent_key``.

        Items whose parent key does not resolve are treated as roots.

        Args:
            items: Flat items as loaded from storage (children empty)

        Returns:
            DictionaryTree

        Raises:
            CyclicTreeError: If parent links form a cycle
        """
        flat = list(items)
        by_key = {item.key: item for item in flat}

        roots: list[DictionaryItem] = []
        for item in flat:
            parent = by_key.get(item.parent_key) if item.parent_key else None
            if parent is None:
                roots.append(item)
            else:
                parent.children.append(item)

        tree = cls(roots)
        if len(tree) < len(by_key):
            # Items that never hang below a root sit on a parent-link cycle
            unreachable = sorted(key for key in by_key if key not in tree)
            raise CyclicTreeError(unreachable[0])
        return tree

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def get(self, key: str) -> DictionaryItem | None:
        """Exact, case-sensitive lookup of an item by key."""
        return self._by_key.get(key)

    def items(self) -> Iterator[DictionaryItem]:
        return iter(self._by_key.values())
