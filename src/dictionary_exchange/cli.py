"""Command-line interface for the dictionary exchange tool."""

from pathlib import Path

import structlog
import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import ExchangeConfig, load_config
from .models.changes import ChangeSet
from .observability import configure_logging
from .service import DictionaryExchangeService, UploadedFile
from .storage.sqlite import SQLiteLocalizationStore
from .utils.exceptions import DictionaryExchangeError

app = typer.Typer(
    name="dictionary-exchange",
    help="Export and import dictionary translations as CSV",
    add_completion=False,
)

console = Console()
logger = structlog.get_logger(__name__)

DB_OPTION = typer.Option(None, "--db", help="SQLite dictionary database (overrides config)")
CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Configuration file")
LOG_LEVEL_OPTION = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR")
JSON_LOGS_OPTION = typer.Option(False, "--json-logs", help="Emit logs as JSON")


def _load(
    config_file: Path | None,
    db: Path | None,
    log_level: str | None,
    json_logs: bool,
) -> ExchangeConfig:
    """Load configuration, apply command-line overrides and configure logging."""
    try:
        config = load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]ERROR:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    if db is not None:
        config.storage.database = db
    if log_level:
        config.logging.level = log_level

    configure_logging(
        level=config.logging.level,
        json_logs=json_logs or config.logging.format == "json",
        log_file=config.logging.file,
    )
    return config


def _render_changes(changes: ChangeSet, title: str) -> None:
    table = Table(title=title)
    table.add_column("Item Key", style="cyan")
    table.add_column("Culture", style="magenta")
    table.add_column("Old Value", style="red")
    table.add_column("New Value", style="green")

    for record in changes:
        table.add_row(record.item_key, record.culture_name, record.old_value, record.new_value)

    console.print(table)


@app.command("init-db")
def init_db(
    fixture: Path = typer.Argument(..., help="YAML fixture with languages and items", exists=True),
    db: Path | None = DB_OPTION,
    config_file: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
) -> None:
    """
    Seed a dictionary database from a YAML fixture.

    Examples:
        dictionary-exchange init-db fixture.yaml --db dictionary.db
    """
    config = _load(config_file, db, log_level, False)

    try:
        with open(fixture) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Fixture {fixture} must be a mapping")

        with SQLiteLocalizationStore(config.storage.database) as store:
            languages, items = store.load_fixture(data)
    except (yaml.YAMLError, ValueError, KeyError) as e:
        console.print(f"\n[red]ERROR: Loading fixture failed:[/red] {e}")
        raise typer.Exit(code=1) from e

    console.print(
        f"[green]Loaded {languages} languages and {items} items into "
        f"{config.storage.database}[/green]"
    )


@app.command()
def languages(
    db: Path | None = DB_OPTION,
    config_file: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
) -> None:
    """List known languages and their ids."""
    config = _load(config_file, db, log_level, False)

    with SQLiteLocalizationStore(config.storage.database) as store:
        registry = DictionaryExchangeService(store, config).list_languages()

    table = Table(title="Languages")
    table.add_column("Id", justify="right", style="cyan")
    table.add_column("Culture Name", style="green")
    for language in registry:
        table.add_row(str(language.id), language.culture_name)

    console.print(table)


@app.command("list")
def list_items(
    db: Path | None = DB_OPTION,
    config_file: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
) -> None:
    """Show all dictionary items as an indented tree with their translations."""
    config = _load(config_file, db, log_level, False)

    try:
        with SQLiteLocalizationStore(config.storage.database) as store:
            service = DictionaryExchangeService(store, config)
            culture_names = [lang.culture_name for lang in service.list_languages()]
            overview = service.list_items()
    except DictionaryExchangeError as e:
        console.print(f"\n[red]ERROR:[/red] {e}")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Dictionary ({len(overview)} items)")
    table.add_column("Key", style="cyan")
    for culture_name in culture_names:
        table.add_column(culture_name)

    for entry in overview:
        table.add_row(
            "  " * entry.level + entry.key,
            *(entry.translations.get(name, "") for name in culture_names),
        )

    console.print(table)


@app.command()
def export(
    language_ids: list[int] = typer.Option(
        [], "--language-id", "-l", help="Language id to export (repeatable, keeps order)"
    ),
    all_languages: bool = typer.Option(False, "--all", help="Export every known language"),
    output_file: Path | None = typer.Option(
        None, "--output", "-o", help="Output file (default: translations-<date>.csv)"
    ),
    encoding: str | None = typer.Option(None, "--encoding", help="Output encoding"),
    delimiter: str | None = typer.Option(None, "--delimiter", help="Field delimiter (or 'tab')"),
    db: Path | None = DB_OPTION,
    config_file: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
) -> None:
    """
    Export dictionary translations to CSV.

    Examples:
        dictionary-exchange export --all
        dictionary-exchange export -l 1 -l 3 -o translations.csv --encoding utf-8
    """
    config = _load(config_file, db, log_level, json_logs)

    if not language_ids and not all_languages:
        console.print("[bold red]ERROR:[/bold red] Select languages with --language-id or --all")
        raise typer.Exit(code=1)

    try:
        with SQLiteLocalizationStore(config.storage.database) as store:
            service = DictionaryExchangeService(store, config)
            if all_languages:
                language_ids = [lang.id for lang in service.list_languages()]
            result = service.export_dictionary_items(
                language_ids, encoding=encoding, delimiter=delimiter
            )
    except DictionaryExchangeError as e:
        console.print(f"\n[red]ERROR: Export failed:[/red] {e}")
        raise typer.Exit(code=1) from e

    target = output_file or Path(result.filename)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(result.content)

    console.print(f"[green]Exported translations to {target}[/green] ({len(result.content)} bytes)")


@app.command("import")
def import_translations(
    csv_file: Path = typer.Argument(..., help="Translation CSV file", exists=True),
    override: bool = typer.Option(
        False, "--override", help="Replace existing non-empty translations"
    ),
    encoding: str | None = typer.Option(None, "--encoding", help="File encoding"),
    delimiter: str | None = typer.Option(None, "--delimiter", help="Field delimiter (or 'tab')"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Confirm without prompting"),
    db: Path | None = DB_OPTION,
    config_file: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
) -> None:
    """
    Preview a translation CSV and save the changes after confirmation.

    The file is parsed twice: once to preview the changes, and again to apply
    them. The second pass is rejected if the dictionary changed in between.

    Examples:
        dictionary-exchange import translations-2024-05-01.csv
        dictionary-exchange import edited.csv --override --encoding utf-8 --yes
    """
    config = _load(config_file, db, log_level, json_logs)

    upload = UploadedFile(filename=csv_file.name, content=csv_file.read_bytes())
    form = {"override": override, "encoding": encoding, "delimiter": delimiter}

    console.print(
        Panel.fit(
            f"[bold blue]Import Translations[/bold blue]\n\n"
            f"CSV File: {csv_file}\n"
            f"Database: {config.storage.database}\n"
            f"Override: [yellow]{'Enabled' if override else 'Disabled'}[/yellow]",
            border_style="blue",
        )
    )

    try:
        with SQLiteLocalizationStore(config.storage.database) as store:
            service = DictionaryExchangeService(store, config)

            preview = ChangeSet.from_list(service.import_dictionary_items(upload, form))
            if not preview.has_changes:
                console.print("[green]No changes: the dictionary already matches the file.[/green]")
                return

            _render_changes(preview, title=f"Proposed changes ({preview.get_summary()})")

            if not yes and not typer.confirm(f"Apply {len(preview)} changes?"):
                console.print("[yellow]Aborted. Nothing was saved.[/yellow]")
                raise typer.Exit()

            applied = service.import_dictionary_items(
                upload, {**form, "confirmed": True}, expected=preview
            )
    except DictionaryExchangeError as e:
        logger.error("Import failed", csv_file=str(csv_file), error=str(e))
        console.print(f"\n[red]ERROR: Import failed:[/red] {e}")
        raise typer.Exit(code=1) from e

    console.print(f"[green]Saved {len(applied)} changes.[/green]")


def main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "main"]
