"""Tests for the suggestion picker.

Tests that the status tiers are tried in order.
"""

import random

import pytest

from repertoire.db.models import SongStatus
from repertoire.services.suggestion import SuggestionPicker


@pytest.fixture
def picker(client):
    return SuggestionPicker(client, rng=random.Random(1234))


class TestSuggestionPicker:
    """Tests for get_suggestion tiering."""

    def test_empty_library_returns_none(self, picker):
        assert picker.get_suggestion() is None

    def test_learning_songs_win(self, client, make_song, picker):
        """Verify only Learning songs are suggested while any exist."""
        client.add_song(make_song("l1", status=SongStatus.LEARNING, progress=30))
        client.add_song(make_song("l2", status=SongStatus.LEARNING, progress=60))
        client.add_song(make_song("w1", status=SongStatus.WANT_TO_LEARN))
        client.add_song(make_song("d1", status=SongStatus.LEARNED, progress=100))

        suggestions = {picker.get_suggestion().id for _ in range(50)}

        assert suggestions <= {"l1", "l2"}

    def test_want_to_learn_when_nothing_in_progress(self, client, make_song, picker):
        client.add_song(make_song("w1", status=SongStatus.WANT_TO_LEARN))
        client.add_song(make_song("d1", status=SongStatus.LEARNED, progress=100))

        suggestions = {picker.get_suggestion().id for _ in range(20)}

        assert suggestions == {"w1"}

    def test_falls_back_to_any_song(self, client, make_song, picker):
        client.add_song(make_song("d1", status=SongStatus.LEARNED, progress=100))

        assert picker.get_suggestion().id == "d1"

    def test_selection_is_uniform_over_tier(self, client, make_song, picker):
        """Verify every song in the winning tier can be picked."""
        for song_id in ("l1", "l2", "l3"):
            client.add_song(make_song(song_id, status=SongStatus.LEARNING, progress=10))

        suggestions = {picker.get_suggestion().id for _ in range(200)}

        assert suggestions == {"l1", "l2", "l3"}

    def test_default_rng(self, client, sample_song):
        assert SuggestionPicker(client).get_suggestion().id == sample_song.id
