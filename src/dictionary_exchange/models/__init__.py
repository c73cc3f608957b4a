"""Data models for dictionary items, change sets and options."""

from .changes import ChangeRecord, ChangeSet
from .dictionary import (
    DictionaryItem,
    DictionaryOverview,
    DictionaryTree,
    Language,
    LanguageId,
    LanguageRegistry,
)
from .options import CsvFormat, ImportOptions, parse_options

__all__ = [
    "ChangeRecord",
    "ChangeSet",
    "CsvFormat",
    "DictionaryItem",
    "DictionaryOverview",
    "DictionaryTree",
    "ImportOptions",
    "Language",
    "LanguageId",
    "LanguageRegistry",
    "parse_options",
]
