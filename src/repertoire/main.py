"""Main entry point for the repertoire CLI.

Provides a Typer-based CLI for tracking a personal music repertoire:
songs, setlists, practice time, statistics and backups.
"""

from pathlib import Path

import typer
from rich.panel import Panel
from rich.table import Table

from repertoire import __version__
from repertoire.commands import backup as backup_commands
from repertoire.commands import db as db_commands
from repertoire.commands import practice as practice_commands
from repertoire.commands import setlists as setlist_commands
from repertoire.commands import songs as song_commands
from repertoire.commands.common import CONFIG_OPTION_HELP, configure_logging, console, format_minutes, open_client
from repertoire.config import ensure_config_exists, get_config_path
from repertoire.services.stats import StatsService
from repertoire.services.suggestion import SuggestionPicker

app = typer.Typer(
    name="repertoire",
    help="Track the songs you are learning",
    rich_markup_mode="rich",
)

app.add_typer(db_commands.app, name="db", help="Database operations")
app.add_typer(song_commands.app, name="song", help="Song library operations")
app.add_typer(setlist_commands.app, name="setlist", help="Setlist operations")
app.add_typer(practice_commands.app, name="practice", help="Practice log operations")
app.add_typer(practice_commands.memo_app, name="memo", help="Audio memo operations")
app.add_typer(backup_commands.app, name="backup", help="Backup operations")

CHART_WIDTH = 30


def version_callback(value: bool) -> None:
    """Callback for --version flag."""
    if value:
        console.print(f"repertoire version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """repertoire: track the songs you are learning.

    ## Commands

    * [bold cyan]db[/bold cyan] - Database operations (init, status)
    * [bold cyan]song[/bold cyan] - Library operations (add, list, show, progress, ...)
    * [bold cyan]setlist[/bold cyan] - Setlist operations (create, add, show, ...)
    * [bold cyan]practice[/bold cyan] / [bold cyan]memo[/bold cyan] - Practice log and audio memos
    * [bold cyan]stats[/bold cyan] / [bold cyan]suggest[/bold cyan] - Weekly chart, streak and what to practice
    * [bold cyan]backup[/bold cyan] - Export and import

    ## Getting Started

    1. Initialize the database:
       [dim]$ repertoire db init[/dim]

    2. Add a song:
       [dim]$ repertoire song add 1440833098 "Blackbird" "The Beatles"[/dim]
    """


@app.command()
def stats(
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Show practice minutes for the last seven days and the current streak."""
    with open_client(config_path) as client:
        practice_stats = StatsService(client).get_practice_stats()

    max_value = max([bucket.value for bucket in practice_stats.last_seven_days] + [10])

    table = Table(title="Last 7 Days")
    table.add_column("Day", style="cyan")
    table.add_column("Minutes", justify="right", style="green")
    table.add_column("")

    for bucket in practice_stats.last_seven_days:
        bar = "█" * round(bucket.value / max_value * CHART_WIDTH)
        table.add_row(bucket.label, f"{bucket.value:.1f}", f"[green]{bar}[/green]")

    console.print(table)

    streak = practice_stats.current_streak
    console.print(Panel.fit(
        f"[cyan]Current Streak:[/cyan] {streak} day{'s' if streak != 1 else ''}\n"
        f"[cyan]Total Practice:[/cyan] {format_minutes(practice_stats.total_minutes)}",
        title="Practice",
        border_style="green",
    ))


@app.command()
def suggest(
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Suggest a song to practice next."""
    with open_client(config_path) as client:
        song = SuggestionPicker(client).get_suggestion()

    if song is None:
        console.print("[yellow]Your library is empty. Add a song first.[/yellow]")
        return

    console.print(Panel.fit(
        f"[cyan]{song.title}[/cyan] by {song.artist}\n"
        f"{song.status.label}, {song.progress}%",
        title="Practice Suggestion",
        border_style="green",
    ))
    console.print(f"[dim]Song ID: {song.id}[/dim]")


@app.command()
def config(
    action: str = typer.Argument(
        ...,
        help="Action to perform (show, set, path)",
    ),
    key: str = typer.Argument(
        None,
        help="Configuration key (for set action)",
    ),
    value: str = typer.Argument(
        None,
        help="Configuration value (for set action)",
    ),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Manage configuration.

    Show, set, or display the path to the configuration file.

    Examples:
        repertoire config show
        repertoire config set setlists.allow_duplicates true
        repertoire config path
    """
    if action == "show":
        cfg = ensure_config_exists(config_path)
        configure_logging(cfg)

        console.print(Panel.fit(
            f"[cyan]Database Path:[/cyan] {cfg.db_path}\n"
            f"[cyan]Log Directory:[/cyan] {cfg.log_dir}\n"
            f"[cyan]Backup Directory:[/cyan] {cfg.backup_dir}\n"
            f"[cyan]Duplicate Setlist Songs:[/cyan] {'allowed' if cfg.allow_duplicate_setlist_items else 'not allowed'}",
            title="Configuration",
            border_style="green",
        ))

    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage: repertoire config set <key> <value>[/red]")
            raise typer.Exit(1)

        try:
            cfg = ensure_config_exists(config_path)
            configure_logging(cfg)
            cfg.set(key, value)
            cfg.save(config_path)
            console.print(f"[green]Set {key} = {value}[/green]")
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

    elif action == "path":
        console.print(config_path or get_config_path())

    else:
        console.print(f"[red]Unknown action: {action}[/red]")
        console.print("Valid actions: show, set, path")
        raise typer.Exit(1)


def cli_entry() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli_entry()
