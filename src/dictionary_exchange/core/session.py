"""Two-phase preview/confirm workflow for translation imports."""

import structlog

from ..models.changes import ChangeSet
from ..models.dictionary import DictionaryTree, LanguageRegistry
from ..models.options import ImportOptions
from ..storage.base import LocalizationStore
from ..utils.exceptions import StalePreviewError
from .importer import CsvImporter

logger = structlog.get_logger(__name__)


class ImportSession:
    """
    Preview and confirm translation imports against a storage collaborator.

    The session keeps no state between calls. Both ``preview`` and ``confirm``
    load the current dictionary from storage and parse the submitted bytes from
    scratch, so the caller must resubmit the same file and options to confirm.

    Stale previews:
        ``confirm`` accepts the change set returned by ``preview`` as
        ``expected``. When given, the freshly computed change set must match it
        record for record (old values included); otherwise StalePreviewError
        is raised and nothing is saved.
    """

    def __init__(self, store: LocalizationStore) -> None:
        self.store = store

    def _load_importer(self) -> CsvImporter:
        tree = DictionaryTree.from_items(self.store.get_items())
        registry = LanguageRegistry(self.store.get_all_languages())
        return CsvImporter(tree, registry, self.store)

    def preview(self, data: bytes, options: ImportOptions) -> ChangeSet:
        """
        Compute the changes an import would make, without saving.

        Args:
            data: Raw CSV bytes
            options: Import options (``confirmed`` is ignored)

        Returns:
            ChangeSet
        """
        importer = self._load_importer()
        changes = importer.compute_changes(data, options).changes
        logger.info("Import preview computed", changes=len(changes))
        return changes

    def confirm(
        self,
        data: bytes,
        options: ImportOptions,
        expected: ChangeSet | None = None,
    ) -> ChangeSet:
        """
        Re-run the import and persist the changed items.

        Args:
            data: Raw CSV bytes (the same bytes that were previewed)
            options: Import options (``confirmed`` is ignored)
            expected: Change set returned by the preview, if available

        Returns:
            ChangeSet that was applied

        Raises:
            StalePreviewError: If ``expected`` no longer matches
            PersistenceError: If saving fails
        """
        importer = self._load_importer()
        outcome = importer.compute_changes(data, options)

        if expected is not None and list(expected) != list(outcome.changes):
            logger.warning(
                "Import preview is stale",
                expected=len(expected),
                actual=len(outcome.changes),
            )
            raise StalePreviewError(len(expected), len(outcome.changes))

        importer.commit(outcome.changed_items)
        logger.info("Import confirmed", changes=len(outcome.changes))
        return outcome.changes

    def run(
        self,
        data: bytes,
        options: ImportOptions,
        expected: ChangeSet | None = None,
    ) -> ChangeSet:
        """Preview or confirm depending on ``options.confirmed``."""
        if options.confirmed:
            return self.confirm(data, options, expected=expected)
        return self.preview(data, options)
