"""Import and export option models with Pydantic v2 validation."""

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..constants import (
    DEFAULT_DELIMITER,
    DEFAULT_ENCODING,
    DELIMITER_ALIASES,
    ENCODING_MAP,
    SUPPORTED_DELIMITERS,
)
from ..utils.exceptions import InvalidOptionsError

logger = structlog.get_logger(__name__)


def normalize_encoding(v: Any) -> str:
    """
    Normalize an encoding key to a supported, lower-cased key.

    Unknown keys fall back to ASCII, the default clients have always received.

    Args:
        v: Encoding key as sent by the client (e.g. "UTF-8", "ANSI", "Unicode")

    Returns:
        str: A key of ENCODING_MAP
    """
    if v is None:
        return DEFAULT_ENCODING
    key = str(v).strip().lower()
    if not key:
        return DEFAULT_ENCODING
    if key not in ENCODING_MAP:
        logger.warning("Unknown encoding, falling back to ASCII", encoding=v)
        return DEFAULT_ENCODING
    return key


def normalize_delimiter(v: Any) -> str:
    """
    Normalize a delimiter option to a single supported character.

    - "tab", "\\t" → "\t"
    - "comma", "semicolon", ... → the character
    - empty/None → ","

    Args:
        v: Delimiter option

    Returns:
        str: One of SUPPORTED_DELIMITERS

    Raises:
        ValueError: If the delimiter is not supported
    """
    if v is None or v == "":
        return DEFAULT_DELIMITER
    value = str(v)
    if value in SUPPORTED_DELIMITERS:
        return value
    alias = DELIMITER_ALIASES.get(value.strip().lower())
    if alias is None:
        raise ValueError(
            f"Unsupported delimiter {value!r}; expected one of , ; tab | ^ ~"
        )
    return alias


class CsvFormat(BaseModel):
    """Character encoding and field delimiter of a CSV file."""

    model_config = ConfigDict(frozen=True)

    encoding: str = DEFAULT_ENCODING
    delimiter: str = DEFAULT_DELIMITER

    @field_validator("encoding", mode="before")
    @classmethod
    def _normalize_encoding(cls, v: Any) -> str:
        return normalize_encoding(v)

    @field_validator("delimiter", mode="before")
    @classmethod
    def _normalize_delimiter(cls, v: Any) -> str:
        return normalize_delimiter(v)

    @property
    def codec(self) -> str:
        """Python codec name for the encoding key."""
        return ENCODING_MAP[self.encoding]


class ImportOptions(CsvFormat):
    """
    Options of an import request.

    Boolean flags accept form-style values ("1", "0", "true", "false").
    """

    override: bool = False
    confirmed: bool = False

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ImportOptions":
        """
        Build options from request form fields, ignoring unknown fields.

        Args:
            form: Form fields (override, encoding, delimiter, confirmed)

        Returns:
            ImportOptions

        Raises:
            InvalidOptionsError: If a field fails validation
        """
        fields = {
            name: form[name]
            for name in ("override", "encoding", "delimiter", "confirmed")
            if form.get(name) is not None
        }
        return parse_options(cls, fields)


def parse_options(model: type[CsvFormat], data: Mapping[str, Any]) -> Any:
    """
    Validate option data, converting Pydantic errors into InvalidOptionsError.

    Args:
        model: CsvFormat or ImportOptions
        data: Raw option values

    Returns:
        Validated model instance
    """
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise InvalidOptionsError(f"{field}: {first_error['msg']}", original_error=e) from e
