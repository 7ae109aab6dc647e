"""Practice and memo commands for repertoire.

Provides CLI commands for logging practice time and managing the audio
memos recorded for a song.
"""

from pathlib import Path

import typer
from rich.table import Table

from repertoire.commands.common import CONFIG_OPTION_HELP, console, open_client

app = typer.Typer(help="Practice log operations")
memo_app = typer.Typer(help="Audio memo operations")


@app.command("log")
def log_practice(
    song_id: str = typer.Argument(..., help="Song ID"),
    seconds: int = typer.Argument(..., min=1, help="Practice duration in seconds"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Log a finished practice session for a song."""
    with open_client(config_path) as client:
        if client.get_song(song_id) is None:
            console.print(f"[red]Song not found: {song_id}[/red]")
            raise typer.Exit(1)
        try:
            session = client.log_practice_session(song_id, seconds)
        except Exception as e:
            console.print(f"[red]Failed to log practice: {e}[/red]")
            raise typer.Exit(1)

    console.print(f"[green]Logged {session.formatted_duration} of practice[/green]")


@app.command("history")
def practice_history(
    song_id: str = typer.Argument(..., help="Song ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Show a song's practice sessions, newest first."""
    with open_client(config_path) as client:
        sessions = client.get_song_practice_sessions(song_id)

    if not sessions:
        console.print("[yellow]No practice logged for this song.[/yellow]")
        return

    table = Table(title=f"Practice History ({len(sessions)} sessions)")
    table.add_column("Date", style="cyan")
    table.add_column("Duration", justify="right", style="green")

    for session in sessions:
        table.add_row(f"{session.ended_at:%Y-%m-%d %H:%M}", session.formatted_duration)

    console.print(table)


@memo_app.command("add")
def add_memo(
    song_id: str = typer.Argument(..., help="Song ID"),
    uri: str = typer.Argument(..., help="Location of the recorded audio file"),
    duration: int = typer.Argument(..., min=0, help="Recording length in seconds"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Attach a recorded audio memo to a song."""
    with open_client(config_path) as client:
        if client.get_song(song_id) is None:
            console.print(f"[red]Song not found: {song_id}[/red]")
            raise typer.Exit(1)
        try:
            memo = client.add_audio_memo(song_id, uri, duration)
        except Exception as e:
            console.print(f"[red]Failed to add memo: {e}[/red]")
            raise typer.Exit(1)

    console.print(f"[green]Added memo[/green] [dim]({memo.id})[/dim]")


@memo_app.command("list")
def list_memos(
    song_id: str = typer.Argument(..., help="Song ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """List a song's audio memos, newest first."""
    with open_client(config_path) as client:
        memos = client.get_audio_memos(song_id)

    if not memos:
        console.print("[yellow]No memos for this song.[/yellow]")
        return

    table = Table(title=f"Audio Memos ({len(memos)})")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Recorded", style="cyan")
    table.add_column("Length", justify="right")
    table.add_column("URI", style="green")

    for memo in memos:
        table.add_row(memo.id, memo.created_at, f"{memo.duration // 60}:{memo.duration % 60:02d}", memo.uri)

    console.print(table)


@memo_app.command("delete")
def delete_memo(
    memo_id: str = typer.Argument(..., help="Memo ID"),
    config_path: Path = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Delete an audio memo. The audio file itself is left in place."""
    with open_client(config_path) as client:
        try:
            deleted = client.delete_audio_memo(memo_id)
        except Exception as e:
            console.print(f"[red]Failed to delete memo: {e}[/red]")
            raise typer.Exit(1)

    if deleted:
        console.print(f"[green]Deleted memo {memo_id}[/green]")
    else:
        console.print(f"[yellow]No memo with ID {memo_id}[/yellow]")
