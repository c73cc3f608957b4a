"""Export module for flattening a dictionary tree into translation CSV."""

import codecs
import csv
import io
from collections.abc import Iterable, Iterator

import structlog

from ..models.dictionary import DictionaryTree, Language, LanguageId, LanguageRegistry
from ..models.options import CsvFormat
from ..utils.exceptions import ExportEncodingError
from .walker import walk_tree

logger = structlog.get_logger(__name__)


class CsvExporter:
    """
    Export dictionary items to CSV with one column per language.

    Layout:
    ```
    ,en-US,fr-FR
    greeting,Hello,Bonjour
    greeting.formal,Good day,
    ```
    The header starts with an empty cell followed by culture names. Each item
    of the tree produces exactly one row, in pre-order with siblings sorted by
    key, so an export always has ``1 + len(tree)`` rows.
    """

    def __init__(self, tree: DictionaryTree, registry: LanguageRegistry) -> None:
        """
        Initialize exporter.

        Args:
            tree: Dictionary items to export
            registry: Languages known at export time
        """
        self.tree = tree
        self.registry = registry

    def resolve_columns(self, language_ids: Iterable[LanguageId]) -> list[Language]:
        """
        Resolve requested language ids into export columns.

        Unknown ids are dropped silently; the caller's order is kept.
        """
        requested = list(language_ids)
        columns = self.registry.resolve(requested)
        if len(columns) != len(requested):
            logger.debug(
                "Dropped unknown language ids from export",
                requested=requested,
                resolved=[lang.id for lang in columns],
            )
        return columns

    def iter_rows(
        self, language_ids: Iterable[LanguageId]
    ) -> Iterator[tuple[str | None, list[str]]]:
        """
        Yield ``(item_key, cells)`` for the header and every item.

        The header row carries None as its item key.
        """
        columns = self.resolve_columns(language_ids)
        yield None, [""] + [lang.culture_name for lang in columns]

        for item, _depth in walk_tree(self.tree.roots):
            cells = [item.key]
            for lang in columns:
                value = item.get_translation(lang.id)
                cells.append(value if value is not None else "")
            yield item.key, cells

    def export(
        self,
        language_ids: Iterable[LanguageId],
        csv_format: CsvFormat | None = None,
    ) -> bytes:
        """
        Serialize the tree to CSV bytes.

        Args:
            language_ids: Requested language ids, in column order
            csv_format: Encoding and delimiter (defaults: ASCII, comma)

        Returns:
            Encoded CSV content

        Raises:
            ExportEncodingError: If a row cannot be represented in the encoding
        """
        csv_format = csv_format or CsvFormat()
        encoder = codecs.getincrementalencoder(csv_format.codec)(errors="strict")

        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=csv_format.delimiter)
        output = io.BytesIO()
        row_count = 0

        for item_key, cells in self.iter_rows(language_ids):
            writer.writerow(cells)
            # Encode row by row so an encoding failure can name the offending item
            try:
                output.write(encoder.encode(buffer.getvalue()))
            except UnicodeEncodeError as e:
                logger.error(
                    "Export encoding failed",
                    encoding=csv_format.codec,
                    item_key=item_key,
                )
                raise ExportEncodingError(csv_format.codec, item_key) from e
            buffer.seek(0)
            buffer.truncate()
            row_count += 1

        output.write(encoder.encode("", final=True))

        logger.info(
            "CSV export completed",
            rows=row_count,
            items=row_count - 1,
            encoding=csv_format.codec,
        )
        return output.getvalue()
