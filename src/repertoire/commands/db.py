"""Database commands for repertoire.

Provides CLI commands for database initialization and status checking.
"""

from pathlib import Path

import typer
from rich.table import Table

from repertoire.commands.common import CONFIG_OPTION_HELP, configure_logging, console, get_db_client, load_config
from repertoire.config import RepertoireConfig, get_config_path
from repertoire.db.client import RepertoireClient

app = typer.Typer(help="Database operations")


@app.command("init")
def init_db(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Force re-initialization (destructive)",
    ),
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help=CONFIG_OPTION_HELP,
    ),
) -> None:
    """Initialize the local database.

    Creates the database file and the schema. Running it against an
    existing database is refused unless --force is given, which deletes
    all data.
    """
    try:
        config = RepertoireConfig.load(config_path) if config_path else RepertoireConfig.load()
    except FileNotFoundError:
        config = RepertoireConfig()
        config.save(config_path)
        console.print(f"[yellow]Created default config at {config_path or get_config_path()}[/yellow]")

    configure_logging(config)

    db_path = config.db_path

    if db_path.exists() and not force:
        console.print(f"[yellow]Database already exists at {db_path}[/yellow]")
        console.print("Use --force to re-initialize (this will delete all data)")
        raise typer.Exit(1)

    if force and db_path.exists():
        console.print(f"[red]Resetting database at {db_path}...[/red]")
        with RepertoireClient(db_path) as client:
            client.initialize_schema()
            client.reset_database()
        console.print("[green]Database reset and re-initialized successfully![/green]")
    else:
        console.print(f"Creating database at {db_path}...")
        with get_db_client(config):
            pass
        console.print("[green]Database initialized successfully![/green]")

    show_status(config_path)


@app.command("status")
def show_status(
    config_path: Path = typer.Option(
        None,
        "--config",
        "-c",
        help=CONFIG_OPTION_HELP,
    ),
) -> None:
    """Show database status and statistics.

    Displays the database path, file size, row counts per table,
    schema version and integrity check results.
    """
    config = load_config(config_path)
    db_path = config.db_path
    exists = db_path.exists()

    info_table = Table(title="Database Information")
    info_table.add_column("Property", style="cyan")
    info_table.add_column("Value", style="green")

    info_table.add_row("Database Path", str(db_path))
    info_table.add_row("Exists", "Yes" if exists else "No")

    if exists:
        size = db_path.stat().st_size
        info_table.add_row("File Size", f"{size:,} bytes ({size / 1024 / 1024:.2f} MB)")

    console.print(info_table)

    if not exists:
        console.print("\n[yellow]Database does not exist. Run 'repertoire db init' to create it.[/yellow]")
        return

    try:
        with get_db_client(config) as client:
            stats = client.get_stats()
    except Exception as e:
        console.print(f"\n[red]Error reading database: {e}[/red]")
        raise typer.Exit(1)

    stats_table = Table(title="Database Statistics")
    stats_table.add_column("Metric", style="cyan")
    stats_table.add_column("Value", style="green")

    for table_name, count in stats.table_counts.items():
        stats_table.add_row(table_name.replace("_", " ").title(), f"{count:,}")
    stats_table.add_row("Schema Version", str(stats.schema_version))
    stats_table.add_row("Integrity Check", "[green]OK[/green]" if stats.integrity_ok else "[red]FAILED[/red]")
    stats_table.add_row(
        "Foreign Keys",
        "[green]Enabled[/green]" if stats.foreign_keys_enabled else "[red]Disabled[/red]",
    )

    console.print()
    console.print(stats_table)
