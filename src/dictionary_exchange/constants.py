"""Named constants for the CSV exchange format."""

# -----------------------------------------------------------------------------
# Delimiters
# -----------------------------------------------------------------------------

# Single-character field delimiters accepted for import and export
SUPPORTED_DELIMITERS: frozenset[str] = frozenset({",", ";", "\t", "|", "^", "~"})

# Spelled-out aliases accepted from forms and the command line
DELIMITER_ALIASES: dict[str, str] = {
    "tab": "\t",
    "\\t": "\t",
    "comma": ",",
    "semicolon": ";",
    "pipe": "|",
    "caret": "^",
    "tilde": "~",
}

DEFAULT_DELIMITER: str = ","


# -----------------------------------------------------------------------------
# Encodings
# -----------------------------------------------------------------------------

# Maps encoding keys (lower-cased) to Python codec names.
# "ansi" and "unicode" are the keys older clients send for ASCII and UTF-16.
ENCODING_MAP: dict[str, str] = {
    "ascii": "ascii",
    "ansi": "ascii",
    "utf-8": "utf-8",
    "utf8": "utf-8",
    "utf-16": "utf-16",
    "unicode": "utf-16",
    "utf-32": "utf-32",
    "windows-1252": "cp1252",
    "cp1252": "cp1252",
    "iso-8859-1": "latin-1",
    "latin-1": "latin-1",
}

DEFAULT_ENCODING: str = "ascii"


# -----------------------------------------------------------------------------
# Export delivery
# -----------------------------------------------------------------------------

EXPORT_FILENAME_TEMPLATE: str = "translations-{date}.csv"
EXPORT_CONTENT_TYPE: str = "application/octet-stream"

# Custom header for clients that cannot parse Content-Disposition
FILENAME_HEADER: str = "x-filename"

# Only files with this extension are accepted for import (case-insensitive)
IMPORT_FILE_EXTENSION: str = "csv"
