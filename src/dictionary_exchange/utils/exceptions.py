"""Custom exceptions for the dictionary exchange engine.

Exception Hierarchy:
-------------------
DictionaryExchangeError (base)
├── ImportRequestError              # Rejected before any tree mutation
│   ├── MissingUploadError          # No file in the import request
│   ├── UnsupportedFileExtensionError  # File name does not end in .csv
│   ├── CSVFormatError              # Undecodable bytes or malformed CSV
│   └── InvalidOptionsError         # Import/export options failed validation
├── ExportEncodingError             # Value not representable in export encoding
├── CyclicTreeError                 # Item reached twice while walking the tree
├── DuplicateItemKeyError           # Two distinct items share a key
├── StalePreviewError               # Confirm pass differs from the previewed changes
└── PersistenceError                # Storage save failed during confirm

Usage Guidelines:
----------------
1. Lookup misses are NOT errors. Unknown item keys, unknown language columns
   and identical values are skipped silently by the importer.

2. ImportRequestError subclasses are raised before any in-memory item is
   touched, so callers can report them as bad requests.

3. PersistenceError always chains the storage exception (``raise ... from e``).
   In-memory mutations of the current pass have already happened when it is
   raised; the tree is reloaded per request so nothing leaks across requests.
"""


class DictionaryExchangeError(Exception):
    """Base exception for all dictionary exchange errors."""

    pass


class ImportRequestError(DictionaryExchangeError):
    """Raised when an import request is rejected before parsing rows."""

    pass


class MissingUploadError(ImportRequestError):
    """Raised when an import request carries no file."""

    def __init__(self, message: str = "No file was provided") -> None:
        super().__init__(message)


class UnsupportedFileExtensionError(ImportRequestError):
    """Raised when the uploaded file is not a .csv file."""

    def __init__(self, filename: str) -> None:
        """
        Initialize UnsupportedFileExtensionError.

        Args:
            filename: Name of the rejected upload.
        """
        super().__init__(f"Unsupported file extension: {filename}")
        self.filename = filename


class CSVFormatError(ImportRequestError):
    """Raised when CSV bytes cannot be decoded or tokenized."""

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """
        Initialize CSVFormatError.

        Args:
            message: Error message.
            line_number: Optional line number where the error occurred.
            original_error: Optional original exception.
        """
        super().__init__(message)
        self.line_number = line_number
        self.original_error = original_error

    def __str__(self) -> str:
        if self.line_number:
            return f"Line {self.line_number}: {self.args[0]}"
        return str(self.args[0]) if self.args else "CSV format error"


class InvalidOptionsError(ImportRequestError):
    """Raised when import or export options fail validation."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class ExportEncodingError(DictionaryExchangeError):
    """Raised when an exported value cannot be encoded with the chosen encoding."""

    def __init__(self, encoding: str, item_key: str | None = None) -> None:
        """
        Initialize ExportEncodingError.

        Args:
            encoding: Python codec name used for the export.
            item_key: Key of the first item whose row could not be encoded.
        """
        where = f" (item '{item_key}')" if item_key else ""
        super().__init__(f"Export contains characters not representable in {encoding}{where}")
        self.encoding = encoding
        self.item_key = item_key


class CyclicTreeError(DictionaryExchangeError):
    """Raised when a dictionary item is reached twice during a tree walk."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Dictionary tree contains a cycle at item '{key}'")
        self.key = key


class DuplicateItemKeyError(DictionaryExchangeError):
    """Raised when two distinct dictionary items share the same key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Duplicate dictionary item key: {key}")
        self.key = key


class StalePreviewError(DictionaryExchangeError):
    """
    Raised when a confirm pass would apply different changes than were previewed.

    This happens when the stored dictionary changed between the preview and the
    confirm request (e.g. another editor saved the same item). Nothing is
    persisted when this is raised.
    """

    def __init__(self, expected_count: int, actual_count: int) -> None:
        """
        Initialize StalePreviewError.

        Args:
            expected_count: Number of changes in the previewed change set.
            actual_count: Number of changes computed by the confirm pass.
        """
        super().__init__(
            "Dictionary changed since preview "
            f"({expected_count} changes previewed, {actual_count} computed now); "
            "preview the file again before confirming"
        )
        self.expected_count = expected_count
        self.actual_count = actual_count


class PersistenceError(DictionaryExchangeError):
    """Raised when the storage collaborator fails to save changed items."""

    def __init__(self, message: str, item_count: int = 0) -> None:
        super().__init__(message)
        self.item_count = item_count
