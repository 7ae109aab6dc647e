"""Tests for setlist commands."""

import pytest
from typer.testing import CliRunner

from repertoire.commands.setlists import app
from repertoire.db.client import RepertoireClient

runner = CliRunner()


def invoke(config, *args):
    return runner.invoke(app, [*args, "--config", str(config)])


@pytest.fixture
def library(initialized_config, tmp_path, make_song):
    """Library with three songs and one empty setlist; returns the setlist ID."""
    with RepertoireClient(tmp_path / "repertoire.db") as client:
        client.initialize_schema()
        client.add_song(make_song("1", title="Blackbird"))
        client.add_song(make_song("2", title="Yesterday"))
        client.add_song(make_song("3", title="Let It Be"))
        return client.create_setlist("Open Mic").id


def setlist_song_ids(tmp_path, setlist_id):
    with RepertoireClient(tmp_path / "repertoire.db") as client:
        client.initialize_schema()
        return [s.id for s in client.get_setlist_songs(setlist_id)]


class TestSetlistCommands:
    """Tests for creating and editing setlists."""

    def test_create(self, initialized_config):
        result = invoke(initialized_config, "create", "Sunday Jam")

        assert result.exit_code == 0
        assert "Created setlist \"Sunday Jam\"" in result.stdout

    def test_list(self, initialized_config, library):
        result = invoke(initialized_config, "list")

        assert result.exit_code == 0
        assert "Open Mic" in result.stdout

    def test_add_appends_in_order(self, initialized_config, library, tmp_path):
        for song_id, position in (("2", 1), ("1", 2)):
            result = invoke(initialized_config, "add", library, song_id)
            assert f"Added song at position {position}" in result.stdout

        assert setlist_song_ids(tmp_path, library) == ["2", "1"]

    def test_add_reports_position_after_removals(self, initialized_config, library, tmp_path):
        for song_id in ("1", "2", "3"):
            invoke(initialized_config, "add", library, song_id)
        invoke(initialized_config, "remove", library, "1")
        invoke(initialized_config, "remove", library, "2")
        invoke(initialized_config, "remove", library, "3")

        result = invoke(initialized_config, "add", library, "2")

        assert "Added song at position 1" in result.stdout
        assert setlist_song_ids(tmp_path, library) == ["2"]

    def test_add_duplicate(self, initialized_config, library):
        invoke(initialized_config, "add", library, "1")

        result = invoke(initialized_config, "add", library, "1")

        assert result.exit_code == 0
        assert "already in this setlist" in result.stdout

    def test_add_unknown_song(self, initialized_config, library):
        result = invoke(initialized_config, "add", library, "nope")

        assert result.exit_code == 1
        assert "Song not found" in result.stdout

    def test_add_unknown_setlist(self, initialized_config, library):
        result = invoke(initialized_config, "add", "missing", "1")

        assert result.exit_code == 1
        assert "Setlist not found" in result.stdout

    def test_show(self, initialized_config, library):
        invoke(initialized_config, "add", library, "3")

        result = invoke(initialized_config, "show", library)

        assert result.exit_code == 0
        assert "Let It Be" in result.stdout

    def test_show_empty(self, initialized_config, library):
        result = invoke(initialized_config, "show", library)

        assert "is empty" in result.stdout

    def test_remove(self, initialized_config, library, tmp_path):
        invoke(initialized_config, "add", library, "1")
        invoke(initialized_config, "add", library, "2")

        result = invoke(initialized_config, "remove", library, "1")

        assert "Removed song from setlist" in result.stdout
        assert setlist_song_ids(tmp_path, library) == ["2"]

    def test_delete_keeps_songs(self, initialized_config, library, tmp_path):
        invoke(initialized_config, "add", library, "1")

        result = invoke(initialized_config, "delete", library)

        assert result.exit_code == 0
        with RepertoireClient(tmp_path / "repertoire.db") as client:
            client.initialize_schema()
            assert client.get_setlist(library) is None
            assert client.get_song("1") is not None
