"""Request-level facade for exporting and importing translations.

This module is the seam between a transport (web handler, CLI) and the
exchange engine. Every call reloads languages and items from the storage
collaborator, so no state is shared between requests.
"""

import os
import tempfile
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import structlog

from .config import ExchangeConfig
from .constants import (
    EXPORT_CONTENT_TYPE,
    EXPORT_FILENAME_TEMPLATE,
    FILENAME_HEADER,
    IMPORT_FILE_EXTENSION,
)
from .core.exporter import CsvExporter
from .core.session import ImportSession
from .core.walker import build_overview
from .models.changes import ChangeSet
from .models.dictionary import DictionaryOverview, DictionaryTree, LanguageId, LanguageRegistry
from .models.options import CsvFormat, ImportOptions, parse_options
from .observability.logger import LogContext
from .storage.base import LocalizationStore
from .utils.exceptions import MissingUploadError, UnsupportedFileExtensionError

logger = structlog.get_logger(__name__)


@dataclass
class UploadedFile:
    """A file received with an import request."""

    filename: str
    content: bytes


@dataclass
class ExportResult:
    """
    Export payload ready to be sent as a download.

    Attributes:
        filename: Suggested download name (translations-YYYY-MM-DD.csv)
        content: Encoded CSV bytes
        headers: Response headers (content type, disposition, x-filename)
    """

    filename: str
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)


def export_filename(today: date | None = None) -> str:
    """Build the export file name for a date (today by default)."""
    today = today or date.today()
    return EXPORT_FILENAME_TEMPLATE.format(date=today.strftime("%Y-%m-%d"))


def has_csv_extension(filename: str) -> bool:
    """Check for a .csv extension, case-insensitively."""
    name = filename.strip().strip('"')
    return "." in name and name.rsplit(".", 1)[1].lower() == IMPORT_FILE_EXTENSION


class DictionaryExchangeService:
    """Export and import dictionary translations against a storage collaborator."""

    def __init__(self, store: LocalizationStore, config: ExchangeConfig | None = None) -> None:
        """
        Initialize service.

        Args:
            store: Storage collaborator
            config: Tool configuration (defaults when omitted)
        """
        self.store = store
        self.config = config or ExchangeConfig()

    def _load(self) -> tuple[DictionaryTree, LanguageRegistry]:
        tree = DictionaryTree.from_items(self.store.get_items())
        registry = LanguageRegistry(self.store.get_all_languages())
        return tree, registry

    def _format_defaults(self) -> dict[str, str]:
        return {
            "encoding": self.config.csv.default_encoding,
            "delimiter": self.config.csv.default_delimiter,
        }

    def list_languages(self) -> LanguageRegistry:
        return LanguageRegistry(self.store.get_all_languages())

    def list_items(self) -> list[DictionaryOverview]:
        """Depth-annotated listing of every dictionary item."""
        tree, registry = self._load()
        return build_overview(tree, registry)

    def export_dictionary_items(
        self,
        language_ids: Iterable[LanguageId],
        encoding: str | None = None,
        delimiter: str | None = None,
        today: date | None = None,
    ) -> ExportResult:
        """
        Export all dictionary items for the requested languages.

        Args:
            language_ids: Requested language ids (unknown ids are dropped)
            encoding: Encoding key (configured default when omitted)
            delimiter: Delimiter (configured default when omitted)
            today: Date used in the file name

        Returns:
            ExportResult
        """
        format_data = self._format_defaults()
        if encoding is not None:
            format_data["encoding"] = encoding
        if delimiter is not None:
            format_data["delimiter"] = delimiter
        csv_format = parse_options(CsvFormat, format_data)

        tree, registry = self._load()
        content = CsvExporter(tree, registry).export(language_ids, csv_format)

        filename = export_filename(today)
        headers = {
            "Content-Type": EXPORT_CONTENT_TYPE,
            "Content-Disposition": f'attachment; filename="{filename}"',
            FILENAME_HEADER: filename,
        }
        logger.info("Dictionary items exported", filename=filename, size=len(content))
        return ExportResult(filename=filename, content=content, headers=headers)

    def build_import_options(self, form: Mapping[str, Any]) -> ImportOptions:
        """Validate form fields, filling encoding and delimiter from configuration."""
        data = {**self._format_defaults(), **{k: v for k, v in form.items() if v is not None}}
        return ImportOptions.from_form(data)

    def import_dictionary_items(
        self,
        upload: UploadedFile | None,
        options: ImportOptions | Mapping[str, Any] | None = None,
        expected: ChangeSet | list[dict[str, str]] | None = None,
    ) -> list[dict[str, str]]:
        """
        Preview or confirm an uploaded translation file.

        The upload is staged to a temporary file that is removed on every
        exit path.

        Args:
            upload: The uploaded file
            options: ImportOptions or raw form fields
            expected: Previewed changes to verify when confirming

        Returns:
            The change set as a list of camelCase records

        Raises:
            MissingUploadError: If no file was provided
            UnsupportedFileExtensionError: If the file is not a .csv file
        """
        if upload is None:
            raise MissingUploadError()
        if not has_csv_extension(upload.filename):
            raise UnsupportedFileExtensionError(upload.filename)

        if not isinstance(options, ImportOptions):
            options = self.build_import_options(options or {})
        if isinstance(expected, list):
            expected = ChangeSet.from_list(expected)

        import_id = uuid.uuid4().hex[:12]
        with LogContext(import_id=import_id):
            logger.info(
                "Import request received",
                filename=upload.filename,
                size=len(upload.content),
                confirmed=options.confirmed,
                override=options.override,
            )

            staged_path = self._stage_upload(upload)
            try:
                data = staged_path.read_bytes()
                changes = ImportSession(self.store).run(data, options, expected=expected)
            finally:
                staged_path.unlink(missing_ok=True)
                logger.debug("Removed staged upload", path=str(staged_path))

        return changes.to_list()

    def _stage_upload(self, upload: UploadedFile) -> Path:
        """Write the upload to a temporary file in the configured directory."""
        directory = self.config.uploads.directory
        if directory is not None:
            directory.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            suffix=f".{IMPORT_FILE_EXTENSION}",
            prefix="dictionary-import-",
            dir=str(directory) if directory is not None else None,
        )
        staged_path = Path(temp_path)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(upload.content)
        except BaseException:
            staged_path.unlink(missing_ok=True)
            raise
        return staged_path
