"""Shared fixtures for repertoire tests."""

from datetime import datetime, time, timedelta

import pytest

from repertoire.db.client import RepertoireClient
from repertoire.db.models import Song, SongStatus


@pytest.fixture
def tmp_db_path(tmp_path):
    """Temporary SQLite database path."""
    return tmp_path / "test.db"


@pytest.fixture
def client(tmp_db_path):
    """RepertoireClient with initialized schema."""
    db = RepertoireClient(tmp_db_path)
    db.initialize_schema()
    yield db
    db.close()


@pytest.fixture
def make_song():
    """Factory for Song instances with sensible defaults."""

    def _make_song(song_id="1001", title="Blackbird", artist="The Beatles", **kwargs):
        kwargs.setdefault("album_art", "https://example.com/art/600x600.jpg")
        kwargs.setdefault("status", SongStatus.WANT_TO_LEARN)
        kwargs.setdefault("progress", 0)
        return Song(id=song_id, title=title, artist=artist, **kwargs)

    return _make_song


@pytest.fixture
def sample_song(client, make_song):
    """A song already added to the library."""
    song = make_song()
    client.add_song(song)
    return song


@pytest.fixture
def at_noon():
    """Epoch milliseconds at local noon, ``days_ago`` days before a given day."""

    def _at_noon(day, days_ago=0):
        moment = datetime.combine(day - timedelta(days=days_ago), time(12, 0))
        return int(moment.timestamp() * 1000)

    return _at_noon


@pytest.fixture
def config_file(tmp_path):
    """Config file pointing at a temporary database."""
    db_path = tmp_path / "repertoire.db"
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f'[database]\npath = "{db_path}"\n\n'
        f'[logging]\ndir = "{tmp_path / "logs"}"\n\n'
        f'[backup]\ndir = "{tmp_path / "backups"}"\n'
    )
    return config_path


@pytest.fixture
def initialized_config(config_file, tmp_path):
    """Config file whose database has been created."""
    db = RepertoireClient(tmp_path / "repertoire.db")
    db.initialize_schema()
    db.close()
    return config_file
