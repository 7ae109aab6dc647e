"""Backup commands for repertoire.

Provides CLI commands to export the whole library to a JSON file and to
merge such a file back in.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from repertoire.commands.common import CONFIG_OPTION_HELP, console, get_db_client, load_config
from repertoire.services.backup import BackupCodec, BackupFormatError

app = typer.Typer(help="Backup operations")


@app.command("export")
def export_backup(
    path: Optional[Path] = typer.Argument(
        None,
        help="Output file or directory (defaults to the configured backup directory)",
    ),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Export songs, setlists, practice log and memos to a JSON file."""
    config = load_config(config_path)

    if not config.db_path.exists():
        console.print(f"[red]Database not found at {config.db_path}[/red]")
        raise typer.Exit(1)

    target = path or config.backup_dir
    if path is None:
        target.mkdir(parents=True, exist_ok=True)

    try:
        with get_db_client(config) as client:
            written = BackupCodec(client).export_to_file(target)
    except Exception as e:
        console.print(f"[red]Export failed: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Backup saved to {written}[/green]")


@app.command("import")
def import_backup(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Backup file to import"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Merge a backup file into the library.

    Items with IDs already in the library are overwritten; new items are
    added. The import is all-or-nothing.
    """
    config = load_config(config_path)

    if not yes:
        typer.confirm(
            "This will merge imported data into your current library. "
            "Existing items with same IDs will be updated. Continue?",
            abort=True,
        )

    try:
        with get_db_client(config) as client:
            result = BackupCodec(client).import_from_file(path)
    except BackupFormatError as e:
        console.print(f"[red]Invalid file: {e}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Import failed, no changes were made: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Imported")
    table.add_column("Entity", style="cyan")
    table.add_column("Rows", justify="right", style="green")
    for key, count in result.counts.items():
        table.add_row(key, str(count))

    console.print(table)
    console.print("[green]Library imported successfully![/green]")
