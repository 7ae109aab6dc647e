"""Tests for backup commands."""

import json

import pytest
from typer.testing import CliRunner

from repertoire.commands.backup import app
from repertoire.db.client import RepertoireClient
from repertoire.services.backup import DEFAULT_BACKUP_FILENAME

runner = CliRunner()


@pytest.fixture
def db_path(initialized_config, tmp_path, make_song):
    path = tmp_path / "repertoire.db"
    with RepertoireClient(path) as client:
        client.initialize_schema()
        client.add_song(make_song("1001"))
    return path


class TestExportCommand:
    """Tests for backup export."""

    def test_defaults_to_backup_dir(self, initialized_config, db_path, tmp_path):
        result = runner.invoke(app, ["export", "--config", str(initialized_config)])

        assert result.exit_code == 0
        written = tmp_path / "backups" / DEFAULT_BACKUP_FILENAME
        assert json.loads(written.read_text())["songs"][0]["id"] == "1001"

    def test_explicit_path(self, initialized_config, db_path, tmp_path):
        target = tmp_path / "mine.json"

        result = runner.invoke(app, ["export", str(target), "--config", str(initialized_config)])

        assert result.exit_code == 0
        assert target.exists()

    def test_requires_database(self, config_file):
        result = runner.invoke(app, ["export", "--config", str(config_file)])

        assert result.exit_code == 1


class TestImportCommand:
    """Tests for backup import."""

    def test_imports_with_yes(self, initialized_config, db_path, tmp_path):
        backup = tmp_path / "in.json"
        backup.write_text(json.dumps({"version": 1, "songs": [{"id": "2002", "title": "Yesterday", "artist": "The Beatles"}]}))

        result = runner.invoke(app, ["import", str(backup), "--yes", "--config", str(initialized_config)])

        assert result.exit_code == 0
        assert "Library imported successfully!" in result.stdout
        with RepertoireClient(db_path) as client:
            client.initialize_schema()
            assert client.get_song("2002").title == "Yesterday"

    def test_declined_confirmation_aborts(self, initialized_config, db_path, tmp_path):
        backup = tmp_path / "in.json"
        backup.write_text(json.dumps({"version": 1, "songs": [{"id": "2002", "title": "Y", "artist": "A"}]}))

        result = runner.invoke(app, ["import", str(backup), "--config", str(initialized_config)], input="n\n")

        assert result.exit_code == 1
        with RepertoireClient(db_path) as client:
            client.initialize_schema()
            assert client.get_song("2002") is None

    def test_invalid_file(self, initialized_config, db_path, tmp_path):
        backup = tmp_path / "in.json"
        backup.write_text(json.dumps({"songs": []}))

        result = runner.invoke(app, ["import", str(backup), "--yes", "--config", str(initialized_config)])

        assert result.exit_code == 1
        assert "Invalid file" in result.stdout
