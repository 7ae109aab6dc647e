"""Tests for practice log and audio memo commands."""

import pytest
from typer.testing import CliRunner

from repertoire.commands.practice import app, memo_app
from repertoire.db.client import RepertoireClient

runner = CliRunner()


@pytest.fixture
def db_path(initialized_config, tmp_path, make_song):
    path = tmp_path / "repertoire.db"
    with RepertoireClient(path) as client:
        client.initialize_schema()
        client.add_song(make_song("1001"))
    return path


class TestPracticeCommands:
    """Tests for practice log and history."""

    def test_log(self, initialized_config, db_path):
        result = runner.invoke(app, ["log", "1001", "125", "--config", str(initialized_config)])

        assert result.exit_code == 0
        assert "Logged" in result.stdout
        with RepertoireClient(db_path) as client:
            client.initialize_schema()
            sessions = client.get_song_practice_sessions("1001")
        assert [s.duration_seconds for s in sessions] == [125]

    def test_log_rejects_zero(self, initialized_config, db_path):
        result = runner.invoke(app, ["log", "1001", "0", "--config", str(initialized_config)])

        assert result.exit_code != 0

    def test_log_unknown_song(self, initialized_config, db_path):
        result = runner.invoke(app, ["log", "nope", "60", "--config", str(initialized_config)])

        assert result.exit_code == 1
        assert "Song not found" in result.stdout

    def test_history(self, initialized_config, db_path):
        runner.invoke(app, ["log", "1001", "60", "--config", str(initialized_config)])

        result = runner.invoke(app, ["history", "1001", "--config", str(initialized_config)])

        assert result.exit_code == 0
        assert "Practice History (1 sessions)" in result.stdout

    def test_history_empty(self, initialized_config, db_path):
        result = runner.invoke(app, ["history", "1001", "--config", str(initialized_config)])

        assert "No practice logged" in result.stdout


class TestMemoCommands:
    """Tests for memo add, list and delete."""

    def test_add_and_list(self, initialized_config, db_path):
        result = runner.invoke(memo_app, ["add", "1001", "file:///intro.m4a", "42", "--config", str(initialized_config)])
        assert result.exit_code == 0

        result = runner.invoke(memo_app, ["list", "1001", "--config", str(initialized_config)])

        assert "Audio Memos (1)" in result.stdout
        assert "0:42" in result.stdout

    def test_delete(self, initialized_config, db_path):
        with RepertoireClient(db_path) as client:
            client.initialize_schema()
            memo = client.add_audio_memo("1001", "file:///a.m4a", 5)

        result = runner.invoke(memo_app, ["delete", memo.id, "--config", str(initialized_config)])

        assert result.exit_code == 0
        with RepertoireClient(db_path) as client:
            client.initialize_schema()
            assert client.get_audio_memos("1001") == []

    def test_add_unknown_song(self, initialized_config, db_path):
        result = runner.invoke(memo_app, ["add", "nope", "file:///a.m4a", "5", "--config", str(initialized_config)])

        assert result.exit_code == 1
