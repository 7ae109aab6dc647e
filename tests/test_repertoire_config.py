"""Tests for configuration loading and saving."""

from pathlib import Path

import pytest

from repertoire.config import (
    RepertoireConfig,
    ensure_config_exists,
    get_config_dir,
    get_config_path,
    get_default_db_path,
)


class TestRepertoireConfig:
    """Tests for RepertoireConfig."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        config = RepertoireConfig()

        assert config.db_path == get_default_db_path()
        assert config.allow_duplicate_setlist_items is False

    def test_load_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RepertoireConfig.load(tmp_path / "missing.toml")

    def test_save_and_load_round_trip(self, tmp_path):
        config = RepertoireConfig(
            db_path=tmp_path / "lib.db",
            log_dir=tmp_path / "logs",
            backup_dir=tmp_path / "backups",
            allow_duplicate_setlist_items=True,
        )
        path = tmp_path / "nested" / "config.toml"

        config.save(path)
        loaded = RepertoireConfig.load(path)

        assert loaded == config

    def test_partial_file_keeps_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        path = tmp_path / "config.toml"
        path.write_text('[setlists]\nallow_duplicates = true\n')

        config = RepertoireConfig.load(path)

        assert config.allow_duplicate_setlist_items is True
        assert config.db_path == get_default_db_path()

    def test_env_overrides_db_path(self, config_file, tmp_path, monkeypatch):
        monkeypatch.setenv("REPERTOIRE_DB_PATH", str(tmp_path / "env.db"))

        config = RepertoireConfig.load(config_file)

        assert config.db_path == tmp_path / "env.db"

    def test_get_by_attribute_and_section_key(self, config_file, tmp_path):
        config = RepertoireConfig.load(config_file)

        assert config.get("db_path") == str(tmp_path / "repertoire.db")
        assert config.get("database.path") == str(tmp_path / "repertoire.db")
        assert config.get("nope", "fallback") == "fallback"

    @pytest.mark.parametrize("raw, expected", [("true", True), ("yes", True), ("false", False), ("0", False)])
    def test_set_bool(self, raw, expected):
        config = RepertoireConfig()

        config.set("setlists.allow_duplicates", raw)

        assert config.allow_duplicate_setlist_items is expected

    def test_set_path(self):
        config = RepertoireConfig()

        config.set("backup.dir", "/tmp/backups")

        assert config.backup_dir == Path("/tmp/backups")

    def test_set_unknown_key(self):
        with pytest.raises(ValueError, match="Invalid config key"):
            RepertoireConfig().set("colour", "blue")


class TestConfigPaths:
    """Tests for platform paths and ensure_config_exists."""

    def test_xdg_config_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_config_dir() == tmp_path / "repertoire"
        assert get_config_path() == tmp_path / "repertoire" / "config.toml"

    def test_ensure_creates_default(self, tmp_path):
        path = tmp_path / "config.toml"

        config = ensure_config_exists(path)

        assert path.exists()
        assert RepertoireConfig.load(path) == config

    def test_ensure_replaces_corrupt_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[database\npath = ")

        ensure_config_exists(path)

        assert RepertoireConfig.load(path).allow_duplicate_setlist_items is False

    def test_ensure_loads_existing(self, config_file, tmp_path):
        config = ensure_config_exists(config_file)

        assert config.db_path == tmp_path / "repertoire.db"
