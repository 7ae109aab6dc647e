"""Setlist commands for repertoire.

Provides CLI commands for creating setlists and managing their songs.
"""

from datetime import datetime
from pathlib import Path

import typer
from rich.table import Table

from repertoire.commands.common import CONFIG_OPTION_HELP, console, open_client

app = typer.Typer(help="Setlist operations")


@app.command("create")
def create_setlist(
    name: str = typer.Argument(..., help="Setlist name"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Create a new, empty setlist."""
    with open_client(config_path) as client:
        try:
            setlist = client.create_setlist(name)
        except Exception as e:
            console.print(f"[red]Failed to create setlist: {e}[/red]")
            raise typer.Exit(1)

    console.print(f"[green]Created setlist \"{setlist.name}\"[/green] [dim]({setlist.id})[/dim]")


@app.command("list")
def list_setlists(
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """List setlists, newest first."""
    with open_client(config_path) as client:
        setlists = client.list_setlists()
        counts = {s.id: len(client.get_setlist_items(s.id)) for s in setlists}

    if not setlists:
        console.print("[yellow]No setlists yet.[/yellow]")
        return

    table = Table(title=f"Setlists ({len(setlists)} total)")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Songs", justify="right")
    table.add_column("Created", style="green")

    for setlist in setlists:
        table.add_row(
            setlist.id,
            setlist.name,
            str(counts[setlist.id]),
            f"{datetime.fromtimestamp(setlist.created_at / 1000):%Y-%m-%d}",
        )

    console.print(table)


@app.command("show")
def show_setlist(
    setlist_id: str = typer.Argument(..., help="Setlist ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Show the songs of a setlist in order."""
    with open_client(config_path) as client:
        setlist = client.get_setlist(setlist_id)
        if setlist is None:
            console.print(f"[red]Setlist not found: {setlist_id}[/red]")
            raise typer.Exit(1)
        songs = client.get_setlist_songs(setlist_id)

    if not songs:
        console.print(f"[yellow]Setlist \"{setlist.name}\" is empty.[/yellow]")
        return

    table = Table(title=f"{setlist.name} ({len(songs)} songs)")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Artist", style="green")
    table.add_column("Progress", justify="right")

    for position, song in enumerate(songs, 1):
        table.add_row(str(position), song.title, song.artist, f"{song.progress}%")

    console.print(table)


@app.command("add")
def add_to_setlist(
    setlist_id: str = typer.Argument(..., help="Setlist ID"),
    song_id: str = typer.Argument(..., help="Song ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Append a song to a setlist."""
    with open_client(config_path) as client:
        if client.get_setlist(setlist_id) is None:
            console.print(f"[red]Setlist not found: {setlist_id}[/red]")
            raise typer.Exit(1)
        if client.get_song(song_id) is None:
            console.print(f"[red]Song not found: {song_id}[/red]")
            raise typer.Exit(1)

        try:
            item = client.add_song_to_setlist(setlist_id, song_id)
            position = len(client.get_setlist_items(setlist_id))
        except Exception as e:
            console.print(f"[red]Failed to add song to setlist: {e}[/red]")
            raise typer.Exit(1)

    if item is None:
        console.print("[yellow]Song is already in this setlist.[/yellow]")
    else:
        console.print(f"[green]Added song at position {position}[/green]")


@app.command("remove")
def remove_from_setlist(
    setlist_id: str = typer.Argument(..., help="Setlist ID"),
    song_id: str = typer.Argument(..., help="Song ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Remove a song from a setlist."""
    with open_client(config_path) as client:
        try:
            removed = client.remove_song_from_setlist(setlist_id, song_id)
        except Exception as e:
            console.print(f"[red]Failed to remove song from setlist: {e}[/red]")
            raise typer.Exit(1)

    if removed:
        console.print("[green]Removed song from setlist[/green]")
    else:
        console.print("[yellow]Song was not in this setlist.[/yellow]")


@app.command("delete")
def delete_setlist(
    setlist_id: str = typer.Argument(..., help="Setlist ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Delete a setlist. The songs stay in the library."""
    with open_client(config_path) as client:
        try:
            deleted = client.delete_setlist(setlist_id)
        except Exception as e:
            console.print(f"[red]Failed to delete setlist: {e}[/red]")
            raise typer.Exit(1)

    if deleted:
        console.print(f"[green]Deleted setlist {setlist_id}[/green]")
    else:
        console.print(f"[yellow]No setlist with ID {setlist_id}[/yellow]")
