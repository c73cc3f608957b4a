"""Configuration management for the dictionary exchange tool."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import DEFAULT_DELIMITER, DEFAULT_ENCODING


@dataclass
class CsvConfig:
    """Default CSV format for imports and exports."""

    default_encoding: str = DEFAULT_ENCODING
    default_delimiter: str = DEFAULT_DELIMITER


@dataclass
class StorageConfig:
    """Location of the SQLite dictionary store."""

    database: Path = Path("dictionary.db")


@dataclass
class UploadConfig:
    """Staging of uploaded import files."""

    directory: Path | None = None  # System temp directory when unset


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"
    file: Path | None = None


@dataclass
class ExchangeConfig:
    """
    Complete configuration for the dictionary exchange tool.

    This combines all configuration sections.
    """

    csv: CsvConfig = field(default_factory=CsvConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    uploads: UploadConfig = field(default_factory=UploadConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Path) -> "ExchangeConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file

        Returns:
            ExchangeConfig instance
        """
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid configuration file structure in {config_path}: "
                f"expected dictionary, got {type(data).__name__}"
            )

        csv_config = CsvConfig(**(data.get("csv") or {}))

        storage_data = dict(data.get("storage") or {})
        if storage_data.get("database"):
            storage_data["database"] = Path(storage_data["database"])
        storage = StorageConfig(**storage_data)

        upload_data = dict(data.get("uploads") or {})
        if upload_data.get("directory"):
            upload_data["directory"] = Path(upload_data["directory"])
        uploads = UploadConfig(**upload_data)

        logging_data = dict(data.get("logging") or {})
        # Convert file path string to Path if present
        if logging_data.get("file"):
            logging_data["file"] = Path(logging_data["file"])
        logging = LoggingConfig(**logging_data)

        return cls(csv=csv_config, storage=storage, uploads=uploads, logging=logging)

    def to_file(self, config_path: Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            config_path: Path to save config file
        """
        data = {
            "csv": self.csv.__dict__,
            "storage": {"database": str(self.storage.database)},
            "uploads": {
                "directory": str(self.uploads.directory) if self.uploads.directory else None
            },
            "logging": {
                k: str(v) if isinstance(v, Path) else v
                for k, v in self.logging.__dict__.items()
                if v is not None
            },
        }

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_env(cls) -> "ExchangeConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            DICTIONARY_DB: SQLite database path (default: dictionary.db)
            DICTIONARY_UPLOAD_DIR: Staging directory for uploads
            DICTIONARY_CSV_ENCODING: Default CSV encoding (default: ascii)
            DICTIONARY_CSV_DELIMITER: Default CSV delimiter (default: ,)
            LOG_LEVEL: Logging level (default: INFO)
            LOG_FORMAT: "json" or "console" (default: console)

        Returns:
            ExchangeConfig instance
        """
        upload_dir = os.environ.get("DICTIONARY_UPLOAD_DIR")

        return cls(
            csv=CsvConfig(
                default_encoding=os.environ.get("DICTIONARY_CSV_ENCODING", DEFAULT_ENCODING),
                default_delimiter=os.environ.get("DICTIONARY_CSV_DELIMITER", DEFAULT_DELIMITER),
            ),
            storage=StorageConfig(database=Path(os.environ.get("DICTIONARY_DB", "dictionary.db"))),
            uploads=UploadConfig(directory=Path(upload_dir) if upload_dir else None),
            logging=LoggingConfig(
                level=os.environ.get("LOG_LEVEL", "INFO"),
                format=os.environ.get("LOG_FORMAT", "console"),
            ),
        )


def load_config(config_file: Path | None = None) -> ExchangeConfig:
    """
    Load configuration from file or environment variables.

    Args:
        config_file: Optional path to YAML config file

    Returns:
        ExchangeConfig instance

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        return ExchangeConfig.from_file(config_file)
    return ExchangeConfig.from_env()
