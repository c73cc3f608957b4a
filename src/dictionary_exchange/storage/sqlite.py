"""SQLite storage collaborator for languages and dictionary items.

Database Schema:
---------------
```
languages (
    id            INTEGER PRIMARY KEY,
    culture_name  TEXT NOT NULL UNIQUE    -- e.g. "en-US"
)

dictionary_items (
    id          INTEGER PRIMARY KEY,
    item_key    TEXT NOT NULL UNIQUE,     -- case-sensitive item key
    parent_key  TEXT                      -- item_key of the parent (NULL for roots)
)

dictionary_translations (
    item_id      INTEGER NOT NULL,        -- dictionary_items.id
    language_id  INTEGER NOT NULL,        -- languages.id
    value        TEXT NOT NULL,
    PRIMARY KEY (item_id, language_id)
)
```

Usage:
-----
```python
with SQLiteLocalizationStore("dictionary.db") as store:
    en = store.add_language("en-US")
    store.add_item("greeting", translations={en.id: "Hello"})
    items = store.get_items()
```
"""

import sqlite3
from pathlib import Path
from types import TracebackType
from typing import Any

import structlog

from ..models.dictionary import DictionaryItem, Language, LanguageId

logger = structlog.get_logger(__name__)


class SQLiteLocalizationStore:
    """
    SQLite-backed storage of languages and dictionary items.

    Features:
    - Fresh item objects on every read
    - Batch saves in a single transaction
    - Seeding helpers for languages and items
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn: sqlite3.Connection = self._initialize_db()

    def _initialize_db(self) -> sqlite3.Connection:
        """Initialize database schema."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row

        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS languages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                culture_name TEXT NOT NULL UNIQUE
            );

            CREATE TABLE IF NOT EXISTS dictionary_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                item_key TEXT NOT NULL UNIQUE,
                parent_key TEXT
            );

            CREATE TABLE IF NOT EXISTS dictionary_translations (
                item_id INTEGER NOT NULL REFERENCES dictionary_items(id),
                language_id INTEGER NOT NULL REFERENCES languages(id),
                value TEXT NOT NULL,
                PRIMARY KEY (item_id, language_id)
            );
            """
        )

        conn.commit()
        return conn

    def add_language(self, culture_name: str) -> Language:
        """
        Insert a language.

        Args:
            culture_name: Unique culture name

        Returns:
            The stored language with its generated id
        """
        cursor = self.conn.execute(
            "INSERT INTO languages (culture_name) VALUES (?)", (culture_name,)
        )
        self.conn.commit()
        language_id = cursor.lastrowid
        assert language_id is not None, "INSERT should always set lastrowid"
        return Language(id=language_id, culture_name=culture_name)

    def add_item(
        self,
        key: str,
        parent_key: str | None = None,
        translations: dict[LanguageId, str] | None = None,
    ) -> DictionaryItem:
        """
        Insert a dictionary item with optional translations.

        Args:
            key: Unique item key
            parent_key: Key of the parent item
            translations: Initial values per language id

        Returns:
            The stored item with its generated id
        """
        translations = translations or {}
        with self.conn:
            cursor = self.conn.execute(
                "INSERT INTO dictionary_items (item_key, parent_key) VALUES (?, ?)",
                (key, parent_key),
            )
            item_id = cursor.lastrowid
            self.conn.executemany(
                """
                INSERT INTO dictionary_translations (item_id, language_id, value)
                VALUES (?, ?, ?)
                """,
                [(item_id, language_id, value) for language_id, value in translations.items()],
            )
        return DictionaryItem(
            key=key, id=item_id, parent_key=parent_key, translations=dict(translations)
        )

    def load_fixture(self, data: dict[str, Any]) -> tuple[int, int]:
        """
        Seed languages and nested items from fixture data.

        Fixture format (YAML):
        ```
        languages: [en-US, fr-FR]
        items:
          - key: greeting
            translations: {en-US: Hello, fr-FR: Bonjour}
            children:
              - key: greeting.formal
                translations: {en-US: Good day}
        ```
        Translations are keyed by culture name.

        Args:
            data: Parsed fixture

        Returns:
            (languages added, items added)
        """
        languages = {lang.culture_name: lang for lang in self.get_all_languages()}
        added_languages = 0
        for culture_name in data.get("languages") or []:
            if culture_name not in languages:
                languages[culture_name] = self.add_language(culture_name)
                added_languages += 1

        added_items = 0
        pending: list[tuple[dict[str, Any], str | None]] = [
            (entry, None) for entry in reversed(data.get("items") or [])
        ]
        while pending:
            entry, parent_key = pending.pop()
            translations = {}
            for culture_name, value in (entry.get("translations") or {}).items():
                language = languages.get(culture_name)
                if language is None:
                    raise ValueError(
                        f"Item '{entry['key']}' uses undeclared language '{culture_name}'"
                    )
                translations[language.id] = "" if value is None else str(value)
            self.add_item(str(entry["key"]), parent_key=parent_key, translations=translations)
            added_items += 1
            children = entry.get("children") or []
            pending.extend((child, str(entry["key"])) for child in reversed(children))

        logger.info("Loaded fixture", languages=added_languages, items=added_items)
        return added_languages, added_items

    def get_all_languages(self) -> list[Language]:
        cursor = self.conn.execute("SELECT id, culture_name FROM languages ORDER BY id ASC")
        return [Language(id=row["id"], culture_name=row["culture_name"]) for row in cursor]

    def get_items(self) -> list[DictionaryItem]:
        """
        Load all dictionary items with their translations.

        Returns:
            Flat list of items linked through ``parent_key``
        """
        items: dict[int, DictionaryItem] = {}
        for row in self.conn.execute(
            "SELECT id, item_key, parent_key FROM dictionary_items ORDER BY id ASC"
        ):
            items[row["id"]] = DictionaryItem(
                key=row["item_key"], id=row["id"], parent_key=row["parent_key"]
            )

        for row in self.conn.execute(
            "SELECT item_id, language_id, value FROM dictionary_translations"
        ):
            item = items.get(row["item_id"])
            if item is not None:
                item.translations[row["language_id"]] = row["value"]

        return list(items.values())

    def save_items(self, items: list[DictionaryItem]) -> None:
        """
        Upsert the translations of the given items in one transaction.

        Args:
            items: Items to save (must have been loaded from this store)

        Raises:
            sqlite3.Error: If the transaction fails; it is rolled back
            LookupError: If an item has no stored id
        """
        rows = []
        for item in items:
            if item.id is None:
                raise LookupError(f"Dictionary item '{item.key}' is not stored")
            rows.extend(
                (item.id, language_id, value) for language_id, value in item.translations.items()
            )

        with self.conn:
            self.conn.executemany(
                """
                INSERT INTO dictionary_translations (item_id, language_id, value)
                VALUES (?, ?, ?)
                ON CONFLICT (item_id, language_id) DO UPDATE SET value = excluded.value
                """,
                rows,
            )

        logger.debug("Saved dictionary items", items=len(items), translations=len(rows))

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()

    def __enter__(self) -> "SQLiteLocalizationStore":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit."""
        self.close()
