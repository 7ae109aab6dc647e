"""Tests for song commands."""

import pytest
from typer.testing import CliRunner

from repertoire.commands.songs import app
from repertoire.db.client import RepertoireClient
from repertoire.db.models import Instrument, SongStatus

runner = CliRunner()


@pytest.fixture
def db_path(initialized_config, tmp_path):
    return tmp_path / "repertoire.db"


def invoke(config, *args):
    return runner.invoke(app, [*args, "--config", str(config)])


def read_song(db_path, song_id):
    with RepertoireClient(db_path) as client:
        client.initialize_schema()
        return client.get_song(song_id)


class TestAddCommand:
    """Tests for song add."""

    def test_adds_to_want_to_learn(self, initialized_config, db_path):
        result = invoke(initialized_config, "add", "1001", "Blackbird", "The Beatles")

        assert result.exit_code == 0
        assert "Added \"Blackbird\" to Want to Learn list!" in result.stdout
        song = read_song(db_path, "1001")
        assert song.status == SongStatus.WANT_TO_LEARN
        assert song.progress == 0

    def test_adds_as_learned(self, initialized_config, db_path):
        result = invoke(initialized_config, "add", "1001", "Blackbird", "The Beatles", "--learned")

        assert result.exit_code == 0
        song = read_song(db_path, "1001")
        assert song.status == SongStatus.LEARNED
        assert song.progress == 100

    def test_duplicate_reported(self, initialized_config):
        invoke(initialized_config, "add", "1001", "Blackbird", "The Beatles")

        result = invoke(initialized_config, "add", "1001", "Other", "Someone")

        assert result.exit_code == 0
        assert "already in your library" in result.stdout

    def test_requires_database(self, config_file):
        result = invoke(config_file, "add", "1001", "Blackbird", "The Beatles")

        assert result.exit_code == 1
        assert "Database not found" in result.stdout


class TestListCommand:
    """Tests for song list."""

    @pytest.fixture(autouse=True)
    def songs(self, initialized_config):
        invoke(initialized_config, "add", "1", "Blackbird", "The Beatles")
        invoke(initialized_config, "add", "2", "Wonderwall", "Oasis", "--learned")
        invoke(initialized_config, "instrument", "2", "electric")

    def test_lists_all(self, initialized_config):
        result = invoke(initialized_config, "list")

        assert result.exit_code == 0
        assert "Blackbird" in result.stdout
        assert "Wonderwall" in result.stdout

    def test_filters_by_status(self, initialized_config):
        result = invoke(initialized_config, "list", "--status", "learned", "--format", "ids")

        assert result.exit_code == 0
        assert result.stdout.split() == ["2"]

    def test_filters_by_instrument(self, initialized_config):
        result = invoke(initialized_config, "list", "--instrument", "Electric", "--format", "ids")

        assert result.stdout.split() == ["2"]

    def test_unknown_status(self, initialized_config):
        result = invoke(initialized_config, "list", "--status", "mastered")

        assert result.exit_code == 1
        assert "Unknown status filter" in result.stdout

    def test_unknown_instrument(self, initialized_config):
        result = invoke(initialized_config, "list", "--instrument", "kazoo")

        assert result.exit_code == 1
        assert "Unknown instrument" in result.stdout


class TestUpdateCommands:
    """Tests for progress, instrument, notes, show and delete."""

    @pytest.fixture(autouse=True)
    def song(self, initialized_config):
        invoke(initialized_config, "add", "1001", "Blackbird", "The Beatles")

    def test_progress_moves_to_learning(self, initialized_config, db_path):
        result = invoke(initialized_config, "progress", "1001", "40")

        assert result.exit_code == 0
        song = read_song(db_path, "1001")
        assert song.progress == 40
        assert song.status == SongStatus.LEARNING

    def test_progress_full_marks_learned(self, initialized_config, db_path):
        result = invoke(initialized_config, "progress", "1001", "100")

        assert "Great job! Song learned." in result.stdout
        assert read_song(db_path, "1001").status == SongStatus.LEARNED

    def test_progress_out_of_range_rejected(self, initialized_config, db_path):
        result = invoke(initialized_config, "progress", "1001", "101")

        assert result.exit_code != 0
        assert read_song(db_path, "1001").progress == 0

    def test_progress_unknown_song(self, initialized_config):
        result = invoke(initialized_config, "progress", "nope", "10")

        assert result.exit_code == 1
        assert "Song not found" in result.stdout

    def test_instrument(self, initialized_config, db_path):
        result = invoke(initialized_config, "instrument", "1001", "piano")

        assert result.exit_code == 0
        assert read_song(db_path, "1001").instrument == Instrument.PIANO

    def test_notes_set_and_cleared(self, initialized_config, db_path):
        invoke(initialized_config, "notes", "1001", "Capo 2")
        assert read_song(db_path, "1001").notes == "Capo 2"

        invoke(initialized_config, "notes", "1001", "")
        assert read_song(db_path, "1001").notes is None

    def test_show(self, initialized_config):
        invoke(initialized_config, "notes", "1001", "Capo 2")

        result = invoke(initialized_config, "show", "1001")

        assert result.exit_code == 0
        assert "The Beatles" in result.stdout
        assert "Capo 2" in result.stdout

    def test_delete(self, initialized_config, db_path):
        result = invoke(initialized_config, "delete", "1001")

        assert result.exit_code == 0
        assert read_song(db_path, "1001") is None

    def test_delete_missing(self, initialized_config):
        result = invoke(initialized_config, "delete", "nope")

        assert result.exit_code == 0
        assert "No song with ID nope" in result.stdout
