"""Utility functions and exceptions."""

from .exceptions import (
    CSVFormatError,
    CyclicTreeError,
    DictionaryExchangeError,
    DuplicateItemKeyError,
    ExportEncodingError,
    ImportRequestError,
    InvalidOptionsError,
    MissingUploadError,
    PersistenceError,
    StalePreviewError,
    UnsupportedFileExtensionError,
)

__all__ = [
    "DictionaryExchangeError",
    "ImportRequestError",
    "MissingUploadError",
    "UnsupportedFileExtensionError",
    "CSVFormatError",
    "InvalidOptionsError",
    "ExportEncodingError",
    "CyclicTreeError",
    "DuplicateItemKeyError",
    "StalePreviewError",
    "PersistenceError",
]
