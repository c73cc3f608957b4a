"""Core components of the dictionary exchange engine.

This package contains the tree walker, the CSV exporter and importer, the
conflict resolver and the preview/confirm import session.
"""

from .exporter import CsvExporter
from .importer import CsvImporter, HeaderColumn, ImportOutcome, get_field
from .resolver import ConflictResolver, should_accept
from .session import ImportSession
from .walker import build_overview, walk_tree

__all__ = [
    "ConflictResolver",
    "CsvExporter",
    "CsvImporter",
    "HeaderColumn",
    "ImportOutcome",
    "ImportSession",
    "build_overview",
    "get_field",
    "should_accept",
    "walk_tree",
]
