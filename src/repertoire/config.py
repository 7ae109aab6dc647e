"""Configuration management for repertoire.

Handles loading, saving, and validating TOML configuration stored in:
- macOS: ~/.config/repertoire/config.toml
- Linux: ~/.config/repertoire/config.toml (XDG_CONFIG_HOME)
- Windows: %APPDATA%\\repertoire\\config.toml
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomllib
import tomli_w


@dataclass
class RepertoireConfig:
    """Configuration for the repertoire CLI.

    Attributes:
        db_path: Local SQLite database path
        log_dir: Directory for session log files
        backup_dir: Default directory for exported backups
        allow_duplicate_setlist_items: Whether a song may appear in a setlist more than once
    """

    # Local Database
    db_path: Path = field(default_factory=lambda: get_default_db_path())

    # Logging
    log_dir: Path = field(default_factory=lambda: get_config_dir() / "logs")

    # Backups
    backup_dir: Path = field(default_factory=lambda: Path.home() / "Repertoire" / "backups")

    # Setlists
    allow_duplicate_setlist_items: bool = False

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "RepertoireConfig":
        """Load configuration from TOML file.

        Args:
            path: Path to config file (defaults to standard location)

        Returns:
            RepertoireConfig instance with loaded values

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        if path is None:
            path = get_config_path()

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "rb") as f:
            data = tomllib.load(f)

        config = cls()

        if "database" in data:
            db_path = data["database"].get("path")
            if db_path:
                config.db_path = Path(db_path)

        if "logging" in data:
            log_dir = data["logging"].get("dir")
            if log_dir:
                config.log_dir = Path(log_dir)

        if "backup" in data:
            backup_dir = data["backup"].get("dir")
            if backup_dir:
                config.backup_dir = Path(backup_dir)

        if "setlists" in data:
            config.allow_duplicate_setlist_items = bool(
                data["setlists"].get("allow_duplicates", config.allow_duplicate_setlist_items)
            )

        # Environment takes precedence over the file
        env_db_path = os.environ.get("REPERTOIRE_DB_PATH")
        if env_db_path:
            config.db_path = Path(env_db_path)

        return config

    def save(self, path: Optional[Path] = None) -> None:
        """Save configuration to TOML file.

        Args:
            path: Path to save config (defaults to standard location)
        """
        if path is None:
            path = get_config_path()

        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "database": {"path": str(self.db_path)},
            "logging": {"dir": str(self.log_dir)},
            "backup": {"dir": str(self.backup_dir)},
            "setlists": {"allow_duplicates": self.allow_duplicate_setlist_items},
        }

        with open(path, "wb") as f:
            tomli_w.dump(data, f)

    def get(self, key: str, default: Optional[str] = None) -> Any:
        """Get a configuration value by key.

        Accepts either an attribute name (``db_path``) or its TOML
        section key (``database.path``).

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        attr = CONFIG_KEYS.get(key, key)
        if not hasattr(self, attr):
            return default

        value = getattr(self, attr)
        if isinstance(value, Path):
            return str(value)
        return value

    def set(self, key: str, value: str) -> None:
        """Set a configuration value by key.

        Args:
            key: Configuration key (attribute name or TOML section key)
            value: Configuration value

        Raises:
            ValueError: If the key is unknown
        """
        attr = CONFIG_KEYS.get(key, key)
        if attr not in CONFIG_KEYS.values():
            raise ValueError(f"Invalid config key: {key}")

        # Try to preserve type
        current = getattr(self, attr)
        if isinstance(current, bool):
            new_value: Any = value.lower() in ("true", "1", "yes")
        elif isinstance(current, int):
            new_value = int(value)
        elif isinstance(current, Path):
            new_value = Path(value)
        else:
            new_value = value

        setattr(self, attr, new_value)


# TOML section keys mapped to attribute names
CONFIG_KEYS = {
    "database.path": "db_path",
    "logging.dir": "log_dir",
    "backup.dir": "backup_dir",
    "setlists.allow_duplicates": "allow_duplicate_setlist_items",
}


def get_config_dir() -> Path:
    """Get the platform-specific config directory.

    Returns:
        Path to the config directory for repertoire.
    """
    if sys.platform == "darwin" or sys.platform == "linux":
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / "repertoire"
        return Path.home() / ".config" / "repertoire"
    elif sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "repertoire"
        return Path.home() / "AppData" / "Roaming" / "repertoire"
    else:
        return Path.home() / ".config" / "repertoire"


def get_config_path() -> Path:
    """Get the path to the config.toml file."""
    return get_config_dir() / "config.toml"


def get_default_db_path() -> Path:
    """Get the default database path."""
    return get_config_dir() / "db" / "repertoire.db"


def ensure_config_exists(path: Optional[Path] = None) -> RepertoireConfig:
    """Ensure config file exists, creating default if needed.

    Args:
        path: Path to config file (defaults to standard location)

    Returns:
        RepertoireConfig instance
    """
    config_path = path or get_config_path()

    if config_path.exists():
        try:
            return RepertoireConfig.load(config_path)
        except (tomllib.TOMLDecodeError, ValueError):
            # Corrupted config is replaced with defaults
            pass

    config = RepertoireConfig()
    config.save(config_path)
    return config
