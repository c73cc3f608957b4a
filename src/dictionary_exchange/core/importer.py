"""CSV importer that turns translation files into change sets.

Overview:
--------
The CsvImporter reads a translation CSV (as produced by CsvExporter or edited
by hand in a spreadsheet) and compares every cell against the current
dictionary tree. Accepted values are written into the in-memory items right
away and recorded as ChangeRecords; they reach storage only when the pass is
confirmed.

CSV Format:
----------
```
,en-US,fr-FR,xx-UNKNOWN,da-DK
greeting,Hello,Bonjour,ignored,Hej
farewell,,Au revoir
```
- Column 0 holds the item key; the header's first cell is unused.
- Header cells are matched exactly against known culture names. Cells that do
  not match still occupy their position, so later columns stay aligned.
- The header is read until the row ends; data rows may be shorter than the
  header and missing cells count as empty.

Leniency Rules:
--------------
- Blank key cell → row skipped (separator line)
- Unknown item key → row skipped, no error
- Unknown culture name in header → column ignored
- Empty/whitespace value → no change for that cell
- Identical value → no change, whatever the override flag

Error Handling:
--------------
- CSVFormatError: bytes cannot be decoded with the chosen encoding, or the CSV
  cannot be tokenized. The whole file is tokenized before any item is
  touched, so a format error never leaves partial mutations behind.
- PersistenceError: the storage collaborator failed to save a confirmed pass.
"""

import csv
import io
from dataclasses import dataclass, field

import structlog

from ..models.changes import ChangeRecord, ChangeSet
from ..models.dictionary import (
    DictionaryItem,
    DictionaryTree,
    Language,
    LanguageId,
    LanguageRegistry,
)
from ..models.options import CsvFormat, ImportOptions
from ..storage.base import LocalizationStore
from ..utils.exceptions import CSVFormatError, PersistenceError
from .resolver import ConflictResolver

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class HeaderColumn:
    """A header position and the language it maps to (None if unknown)."""

    index: int
    language: Language | None


@dataclass
class ImportOutcome:
    """
    Result of one parse pass.

    Attributes:
        changes: Change records in discovery order
        changed_items: Items that received at least one applied change
    """

    changes: ChangeSet = field(default_factory=ChangeSet)
    changed_items: list[DictionaryItem] = field(default_factory=list)


def get_field(row: list[str], index: int) -> str | None:
    """
    Read a cell without failing on short rows.

    Args:
        row: Tokenized CSV row
        index: Column index

    Returns:
        The cell text, or None if the row has no cell at that index
    """
    if 0 <= index < len(row):
        return row[index]
    return None


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class CsvImporter:
    """
    Parse translation CSV bytes into a ChangeSet against a dictionary tree.

    One importer instance serves one request: it mutates the tree it was given,
    so callers load a fresh tree from storage for every pass.
    """

    def __init__(
        self,
        tree: DictionaryTree,
        registry: LanguageRegistry,
        store: LocalizationStore,
    ) -> None:
        """
        Initialize importer.

        Args:
            tree: Current dictionary items (mutated by accepted changes)
            registry: Known languages
            store: Storage collaborator used when a pass is confirmed
        """
        self.tree = tree
        self.registry = registry
        self.store = store

    def read_rows(self, data: bytes, csv_format: CsvFormat) -> list[list[str]]:
        """
        Decode and tokenize CSV bytes.

        Completely blank lines are dropped.

        Args:
            data: Raw file content
            csv_format: Encoding and delimiter

        Returns:
            Tokenized rows

        Raises:
            CSVFormatError: If decoding or tokenizing fails
        """
        codec = csv_format.codec
        if codec == "utf-8":
            # Spreadsheet tools commonly prepend a byte order mark
            codec = "utf-8-sig"

        try:
            text = data.decode(codec)
        except UnicodeDecodeError as e:
            raise CSVFormatError(
                f"File is not valid {csv_format.encoding} text: {e.reason} at byte {e.start}",
                original_error=e,
            ) from e

        reader = csv.reader(io.StringIO(text, newline=""), delimiter=csv_format.delimiter)
        try:
            return [row for row in reader if row]
        except csv.Error as e:
            raise CSVFormatError(
                f"Malformed CSV: {e}", line_number=reader.line_num, original_error=e
            ) from e

    def parse_header(self, header: list[str]) -> list[HeaderColumn]:
        """
        Map header positions to languages.

        Reading starts at index 1 and stops where the row ends. Every present
        cell keeps its position whether or not it names a known language.

        Args:
            header: First row of the file

        Returns:
            Ordered (index, language or None) columns
        """
        columns: list[HeaderColumn] = []
        index = 1
        while True:
            cell = get_field(header, index)
            if cell is None:
                break
            columns.append(HeaderColumn(index, self.registry.find_by_culture_name(cell)))
            index += 1

        unknown = [header[c.index] for c in columns if c.language is None]
        if unknown:
            logger.debug("Ignoring unknown header columns", columns=unknown)
        return columns

    def compute_changes(self, data: bytes, options: ImportOptions) -> ImportOutcome:
        """
        Parse the file and apply accepted values to the in-memory tree.

        Nothing is persisted here; see ``commit``.

        Args:
            data: Raw CSV bytes
            options: Encoding, delimiter and override policy

        Returns:
            ImportOutcome with the change set and the changed items

        Raises:
            CSVFormatError: If the file cannot be decoded or tokenized
        """
        rows = self.read_rows(data, options)
        outcome = ImportOutcome()

        if not rows:
            logger.info("CSV file is empty, nothing to import")
            return outcome

        columns = [c for c in self.parse_header(rows[0]) if c.language is not None]
        resolver = ConflictResolver(override=options.override)

        # First-touch values per (item key, language) for old_value reporting
        original_values: dict[tuple[str, LanguageId], str] = {}
        changed: dict[str, DictionaryItem] = {}
        skipped_keys = 0

        for row_number, row in enumerate(rows[1:], start=2):
            item_key = get_field(row, 0)
            if _is_blank(item_key):
                continue

            item = self.tree.get(item_key)
            if item is None:
                skipped_keys += 1
                logger.debug("Skipping unknown item key", item_key=item_key, row=row_number)
                continue

            for column in columns:
                language = column.language
                new_value = get_field(row, column.index)
                if _is_blank(new_value):
                    continue

                existing = item.get_translation(language.id)
                if not resolver.accepts(existing, new_value):
                    continue

                old_value = original_values.setdefault(
                    (item.key, language.id), existing if existing is not None else ""
                )
                outcome.changes.append(
                    ChangeRecord(
                        item_key=item.key,
                        culture_name=language.culture_name,
                        old_value=old_value,
                        new_value=new_value,
                    )
                )
                item.set_translation(language.id, new_value)
                changed.setdefault(item.key, item)

        outcome.changed_items = list(changed.values())

        logger.info(
            "CSV import parsed",
            rows=len(rows) - 1,
            languages=[c.language.culture_name for c in columns],
            changes=len(outcome.changes),
            changed_items=len(outcome.changed_items),
            unknown_keys=skipped_keys,
            override=options.override,
        )
        return outcome

    def commit(self, items: list[DictionaryItem]) -> None:
        """
        Persist changed items in one batch.

        Args:
            items: Items that received at least one applied change

        Raises:
            PersistenceError: If the storage collaborator fails
        """
        if not items:
            logger.info("No changed items to save")
            return

        try:
            self.store.save_items(items)
        except Exception as e:
            logger.error("Saving imported translations failed", items=len(items), error=str(e))
            raise PersistenceError(
                f"Failed to save {len(items)} dictionary items: {e}", item_count=len(items)
            ) from e

        logger.info("Saved imported translations", items=len(items))

    def import_bytes(self, data: bytes, options: ImportOptions) -> ChangeSet:
        """
        Run a full import pass.

        When ``options.confirmed`` is false the pass is a preview: the change
        set is computed and the in-memory tree updated, but nothing is saved.

        Args:
            data: Raw CSV bytes
            options: Import options

        Returns:
            ChangeSet in discovery order
        """
        outcome = self.compute_changes(data, options)
        if options.confirmed:
            self.commit(outcome.changed_items)
        return outcome.changes
