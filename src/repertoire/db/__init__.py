"""Database layer for repertoire.

Provides the SQLite client, models, and schema definitions.
"""

from repertoire.db.client import RepertoireClient
from repertoire.db.models import (
    AudioMemo,
    Instrument,
    PracticeSession,
    Setlist,
    SetlistItem,
    Song,
    SongStatus,
)

__all__ = [
    "AudioMemo",
    "Instrument",
    "PracticeSession",
    "RepertoireClient",
    "Setlist",
    "SetlistItem",
    "Song",
    "SongStatus",
]
