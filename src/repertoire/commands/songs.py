"""Song commands for repertoire.

Provides CLI commands for adding songs to the library, listing and
viewing them, and updating progress, instrument and notes.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from repertoire.commands.common import CONFIG_OPTION_HELP, console, format_minutes, open_client
from repertoire.db.models import Instrument, Song, SongStatus

app = typer.Typer(help="Song library operations")

STATUS_STYLES = {
    SongStatus.WANT_TO_LEARN: "yellow",
    SongStatus.LEARNING: "cyan",
    SongStatus.LEARNED: "green",
}

# Library tabs: "learning" covers everything not yet learned
STATUS_FILTERS = {
    "learning": [SongStatus.WANT_TO_LEARN, SongStatus.LEARNING],
    "learned": [SongStatus.LEARNED],
    "want": [SongStatus.WANT_TO_LEARN],
    "in-progress": [SongStatus.LEARNING],
}


def _parse_instrument(name: str) -> Instrument:
    for instrument in Instrument:
        if instrument.value.lower() == name.lower():
            return instrument
    valid = ", ".join(i.value for i in Instrument)
    console.print(f"[red]Unknown instrument '{name}'. Valid instruments: {valid}[/red]")
    raise typer.Exit(1)


def _status_text(status: SongStatus) -> str:
    return f"[{STATUS_STYLES[status]}]{status.label}[/{STATUS_STYLES[status]}]"


@app.command("add")
def add_song(
    song_id: str = typer.Argument(..., help="Song ID (e.g. catalog track ID)"),
    title: str = typer.Argument(..., help="Song title"),
    artist: str = typer.Argument(..., help="Artist name"),
    album_art: str = typer.Option("", "--art", "-a", help="Album artwork URL"),
    learned: bool = typer.Option(False, "--learned", help="Add as already learned"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Add a song to the library.

    Songs start on the Want to Learn list unless --learned is given.
    """
    status = SongStatus.LEARNED if learned else SongStatus.WANT_TO_LEARN
    song = Song(
        id=song_id,
        title=title,
        artist=artist,
        album_art=album_art,
        status=status,
        progress=100 if learned else 0,
    )

    with open_client(config_path) as client:
        try:
            added = client.add_song(song)
        except Exception as e:
            console.print(f"[red]Failed to add song: {e}[/red]")
            raise typer.Exit(1)

    if added:
        console.print(f"[green]Added \"{title}\" to {status.label} list![/green]")
    else:
        console.print(f"[yellow]\"{title}\" is already in your library.[/yellow]")


@app.command("list")
def list_songs(
    status: Optional[str] = typer.Option(
        None,
        "--status",
        "-s",
        help="Filter by status (learning|learned|want|in-progress)",
    ),
    instrument: Optional[list[str]] = typer.Option(
        None,
        "--instrument",
        "-i",
        help="Filter by instrument (repeatable)",
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table|ids)",
    ),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """List songs in the library, newest first."""
    statuses = None
    if status:
        if status not in STATUS_FILTERS:
            console.print(f"[red]Unknown status filter '{status}'. Valid: {', '.join(STATUS_FILTERS)}[/red]")
            raise typer.Exit(1)
        statuses = STATUS_FILTERS[status]

    instruments = [_parse_instrument(name) for name in instrument] if instrument else None

    with open_client(config_path) as client:
        songs = client.list_songs(status=statuses, instrument=instruments)

    if not songs:
        console.print("[yellow]No songs found matching the criteria.[/yellow]")
        return

    if format == "ids":
        for song in songs:
            console.print(song.id)
        return

    table = Table(title=f"Songs ({len(songs)} total)")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="cyan")
    table.add_column("Artist", style="green")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    table.add_column("Instrument", style="magenta")

    for song in songs:
        table.add_row(
            song.id,
            song.title,
            song.artist,
            _status_text(song.status),
            f"{song.progress}%",
            song.instrument.value if song.instrument else "-",
        )

    console.print(table)


@app.command("show")
def show_song(
    song_id: str = typer.Argument(..., help="Song ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Show a song with its practice history and memos."""
    with open_client(config_path) as client:
        song = client.get_song(song_id)
        if song is None:
            console.print(f"[red]Song not found: {song_id}[/red]")
            raise typer.Exit(1)
        sessions = client.get_song_practice_sessions(song_id)
        memos = client.get_audio_memos(song_id)

    total_minutes = sum(s.duration_seconds for s in sessions) / 60
    console.print(Panel.fit(
        f"[cyan]Artist:[/cyan] {song.artist}\n"
        f"[cyan]Status:[/cyan] {_status_text(song.status)}\n"
        f"[cyan]Progress:[/cyan] {song.progress}%\n"
        f"[cyan]Instrument:[/cyan] {song.instrument.value if song.instrument else '[dim]not set[/dim]'}\n"
        f"[cyan]Added:[/cyan] {song.added_datetime:%Y-%m-%d}\n"
        f"[cyan]Practiced:[/cyan] {len(sessions)} sessions, {format_minutes(total_minutes)}\n"
        f"[cyan]Memos:[/cyan] {len(memos)}\n"
        f"[cyan]Notes:[/cyan] {song.notes or '[dim]none[/dim]'}",
        title=song.title,
        border_style="green",
    ))


@app.command("progress")
def set_progress(
    song_id: str = typer.Argument(..., help="Song ID"),
    value: int = typer.Argument(..., min=0, max=100, help="Progress percentage (0-100)"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Update a song's learning progress.

    Reaching 100% marks the song learned; moving a learned song below 100%
    puts it back to learning.
    """
    with open_client(config_path) as client:
        try:
            song = client.set_progress(song_id, value)
        except Exception as e:
            console.print(f"[red]Failed to update progress: {e}[/red]")
            raise typer.Exit(1)

    if song is None:
        console.print(f"[red]Song not found: {song_id}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]{song.title}: {song.progress}% ({song.status.label})[/green]")
    if song.status == SongStatus.LEARNED:
        console.print("Great job! Song learned.")


@app.command("instrument")
def set_instrument(
    song_id: str = typer.Argument(..., help="Song ID"),
    name: str = typer.Argument(..., help="Instrument (Acoustic|Electric|Bass|Classical|Piano)"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Set the instrument a song is practiced on."""
    instrument = _parse_instrument(name)

    with open_client(config_path) as client:
        if client.get_song(song_id) is None:
            console.print(f"[red]Song not found: {song_id}[/red]")
            raise typer.Exit(1)
        try:
            client.update_instrument(song_id, instrument)
        except Exception as e:
            console.print(f"[red]Failed to update instrument: {e}[/red]")
            raise typer.Exit(1)

    console.print(f"[green]Instrument set to {instrument.value}[/green]")


@app.command("notes")
def set_notes(
    song_id: str = typer.Argument(..., help="Song ID"),
    text: str = typer.Argument(..., help="Notes text (empty string clears)"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Replace a song's notes."""
    with open_client(config_path) as client:
        if client.get_song(song_id) is None:
            console.print(f"[red]Song not found: {song_id}[/red]")
            raise typer.Exit(1)
        try:
            client.update_notes(song_id, text or None)
        except Exception as e:
            console.print(f"[red]Failed to update notes: {e}[/red]")
            raise typer.Exit(1)

    console.print("[green]Notes saved[/green]")


@app.command("delete")
def delete_song(
    song_id: str = typer.Argument(..., help="Song ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Delete a song with its setlist entries, practice log and memos."""
    with open_client(config_path) as client:
        try:
            deleted = client.delete_song(song_id)
        except Exception as e:
            console.print(f"[red]Failed to delete song: {e}[/red]")
            raise typer.Exit(1)

    if deleted:
        console.print(f"[green]Deleted song {song_id}[/green]")
    else:
        console.print(f"[yellow]No song with ID {song_id}[/yellow]")
