"""Helpers shared by the repertoire CLI commands."""

from pathlib import Path
from typing import Optional

import tomllib
import typer
from rich.console import Console

from repertoire.config import RepertoireConfig
from repertoire.db.client import RepertoireClient
from repertoire.logging_config import setup_logging

console = Console()

CONFIG_OPTION_HELP = "Path to config file"


def load_config(config_path: Optional[Path]) -> RepertoireConfig:
    """Load config or exit with an error message.

    Args:
        config_path: Explicit config path, or None for the default location

    Returns:
        Loaded configuration
    """
    try:
        config = RepertoireConfig.load(config_path) if config_path else RepertoireConfig.load()
    except FileNotFoundError:
        console.print("[red]Config file not found. Run 'repertoire db init' first.[/red]")
        raise typer.Exit(1)
    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)

    configure_logging(config)
    return config


def configure_logging(config: RepertoireConfig) -> None:
    """Start the session log in the configured log directory."""
    setup_logging(config.log_dir)


def get_db_client(config: RepertoireConfig) -> RepertoireClient:
    """Get an initialized database client from config.

    Args:
        config: Repertoire configuration

    Returns:
        RepertoireClient with the schema brought up to date
    """
    client = RepertoireClient(
        config.db_path,
        allow_duplicate_setlist_items=config.allow_duplicate_setlist_items,
    )
    client.initialize_schema()
    return client


def open_client(config_path: Optional[Path]) -> RepertoireClient:
    """Load config and open the database, exiting if it does not exist yet."""
    config = load_config(config_path)

    if not config.db_path.exists():
        console.print(f"[red]Database not found at {config.db_path}[/red]")
        console.print("Run 'repertoire db init' to create the database.")
        raise typer.Exit(1)

    return get_db_client(config)


def format_minutes(minutes: float) -> str:
    """Format minutes as e.g. "1h 05m" or "12.5 min"."""
    if minutes >= 60:
        hours = int(minutes // 60)
        return f"{hours}h {int(minutes % 60):02d}m"
    return f"{minutes:.1f} min"
