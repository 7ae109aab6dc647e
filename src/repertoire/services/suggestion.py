"""Song suggestions for repertoire.

Picks one song to practice next: a random song being learned, else a
random song on the want-to-learn list, else any song at all.
"""

import logging
import random
from typing import Optional

from repertoire.db.client import RepertoireClient
from repertoire.db.models import Song, SongStatus

logger = logging.getLogger(__name__)

# Tiers tried in order; the first non-empty one wins
SUGGESTION_TIERS = (SongStatus.LEARNING, SongStatus.WANT_TO_LEARN)


class SuggestionPicker:
    """Selects a song to surface to the user.

    Selection is memoryless: nothing is excluded or weighted by past
    suggestions, recency or progress.
    """

    def __init__(self, client: RepertoireClient, rng: Optional[random.Random] = None):
        """Initialize the picker.

        Args:
            client: Repertoire database client
            rng: Random source for the status tiers (defaults to a fresh Random)
        """
        self.client = client
        self.rng = rng or random.Random()

    def get_suggestion(self) -> Optional[Song]:
        """Get a suggested song, or None if the library is empty."""
        for status in SUGGESTION_TIERS:
            candidates = self.client.get_songs_by_status(status)
            if candidates:
                song = self.rng.choice(candidates)
                logger.debug(f"Suggesting {song.id} from {len(candidates)} {status.value} songs")
                return song

        return self.client.get_random_song()
