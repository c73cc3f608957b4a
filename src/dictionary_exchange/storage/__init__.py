"""Storage collaborators for languages and dictionary items."""

from .base import LocalizationStore
from .memory import InMemoryLocalizationStore
from .sqlite import SQLiteLocalizationStore

__all__ = ["LocalizationStore", "InMemoryLocalizationStore", "SQLiteLocalizationStore"]
