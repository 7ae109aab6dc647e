"""Data models for repertoire database entities.

Provides dataclasses for Song, Setlist, SetlistItem, PracticeSession and
AudioMemo with conversion to/from database rows, plus the status
transition rule applied when a song's progress changes.
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def generate_id(prefix: str) -> str:
    """Generate a unique ID with an entity prefix (e.g. "setlist_3f2a...")."""
    return f"{prefix}_{uuid.uuid4().hex}"


class SongStatus(str, Enum):
    """Learning stage of a song."""

    WANT_TO_LEARN = "WANT_TO_LEARN"
    LEARNING = "LEARNING"
    LEARNED = "LEARNED"

    @property
    def label(self) -> str:
        return {
            SongStatus.WANT_TO_LEARN: "Want to Learn",
            SongStatus.LEARNING: "Learning",
            SongStatus.LEARNED: "Learned",
        }[self]


class Instrument(str, Enum):
    """Instrument a song is practiced on."""

    ACOUSTIC = "Acoustic"
    ELECTRIC = "Electric"
    BASS = "Bass"
    CLASSICAL = "Classical"
    PIANO = "Piano"


def next_status(current: SongStatus, progress: int) -> SongStatus:
    """Compute the status implied by a progress change.

    Reaching 100 always means Learned. Dropping below 100 from Learned
    moves back to Learning, and any progress above 0 on a WantToLearn
    song starts Learning. Otherwise the status is kept.

    Args:
        current: Status before the change
        progress: New progress value (0-100)

    Returns:
        Status to store alongside the new progress
    """
    if progress == 100:
        return SongStatus.LEARNED
    if current == SongStatus.LEARNED:
        return SongStatus.LEARNING
    if progress > 0 and current == SongStatus.WANT_TO_LEARN:
        return SongStatus.LEARNING
    return current


@dataclass
class Song:
    """A song in the user's repertoire.

    Attributes:
        id: Stable song ID (usually the catalog track ID)
        title: Song title
        artist: Artist name
        album_art: Album artwork URL
        status: Learning status
        progress: Learning progress, 0-100
        notes: Free-form user notes
        instrument: Instrument the song is practiced on
        added_at: Epoch milliseconds when added to the library
    """

    id: str
    title: str
    artist: str
    album_art: str = ""
    status: SongStatus = SongStatus.WANT_TO_LEARN
    progress: int = 0
    notes: Optional[str] = None
    instrument: Optional[Instrument] = None
    added_at: int = field(default_factory=now_ms)

    def __post_init__(self) -> None:
        if not 0 <= self.progress <= 100:
            raise ValueError(f"Progress must be between 0 and 100, got {self.progress}")
        self.status = SongStatus(self.status)
        if self.instrument is not None:
            self.instrument = Instrument(self.instrument)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Song":
        """Create a Song from a database row.

        Args:
            row: sqlite3.Row (or mapping) keyed by column name

        Returns:
            Song instance
        """
        return cls(
            id=row["id"],
            title=row["title"],
            artist=row["artist"],
            album_art=row["albumArt"],
            status=SongStatus(row["status"]),
            progress=row["progress"],
            notes=row["notes"],
            instrument=Instrument(row["instrument"]) if row["instrument"] else None,
            added_at=row["addedAt"],
        )

    @classmethod
    def from_catalog_result(cls, record: Mapping[str, Any], status: SongStatus = SongStatus.WANT_TO_LEARN) -> "Song":
        """Create a Song from a catalog search result.

        Args:
            record: Search record with trackId, trackName, artistName, artworkUrl100
            status: Initial status; Learned songs start at 100% progress

        Returns:
            Song instance
        """
        status = SongStatus(status)
        return cls(
            id=str(record["trackId"]),
            title=record["trackName"],
            artist=record["artistName"],
            album_art=(record.get("artworkUrl100") or "").replace("100x100", "600x600"),
            status=status,
            progress=100 if status == SongStatus.LEARNED else 0,
        )

    def to_record(self) -> dict[str, Any]:
        """Convert to a dictionary keyed by column name."""
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "albumArt": self.album_art,
            "status": self.status.value,
            "progress": self.progress,
            "notes": self.notes,
            "instrument": self.instrument.value if self.instrument else None,
            "addedAt": self.added_at,
        }

    @property
    def added_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.added_at / 1000)


@dataclass
class Setlist:
    """User-named ordered list of songs.

    Attributes:
        id: Unique setlist ID
        name: Display name
        created_at: Epoch milliseconds when created
    """

    id: str
    name: str
    created_at: int = field(default_factory=now_ms)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Setlist":
        return cls(id=row["id"], name=row["name"], created_at=row["createdAt"])

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "createdAt": self.created_at}


@dataclass
class SetlistItem:
    """Membership of a song in a setlist.

    Attributes:
        id: Unique item ID
        setlist_id: Reference to setlists.id
        song_id: Reference to songs.id
        order: Append position at insertion time (0-indexed)
    """

    id: str
    setlist_id: str
    song_id: str
    order: int

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SetlistItem":
        return cls(
            id=row["id"],
            setlist_id=row["setlistId"],
            song_id=row["songId"],
            order=row["songOrder"],
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "setlistId": self.setlist_id,
            "songId": self.song_id,
            "songOrder": self.order,
        }


@dataclass
class PracticeSession:
    """A logged block of practice time for a song.

    Attributes:
        id: Unique session ID
        song_id: Reference to songs.id
        duration_seconds: Practice length in seconds
        date: Epoch milliseconds when the session ended
    """

    id: str
    song_id: str
    duration_seconds: int
    date: int

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PracticeSession":
        return cls(
            id=row["id"],
            song_id=row["songId"],
            duration_seconds=row["durationSeconds"],
            date=row["date"],
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "songId": self.song_id,
            "durationSeconds": self.duration_seconds,
            "date": self.date,
        }

    @property
    def ended_at(self) -> datetime:
        """Session end as a local datetime."""
        return datetime.fromtimestamp(self.date / 1000)

    @property
    def formatted_duration(self) -> str:
        """Get duration formatted as M:SS."""
        minutes = self.duration_seconds // 60
        seconds = self.duration_seconds % 60
        return f"{minutes}:{seconds:02d}"


@dataclass
class AudioMemo:
    """Reference to an audio note recorded for a song.

    Attributes:
        id: Unique memo ID
        song_id: Reference to songs.id
        uri: Location of the recorded audio file
        created_at: ISO timestamp when recorded
        duration: Length in seconds
    """

    id: str
    song_id: str
    uri: str
    created_at: str
    duration: int

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AudioMemo":
        return cls(
            id=row["id"],
            song_id=row["songId"],
            uri=row["uri"],
            created_at=row["createdAt"],
            duration=row["duration"],
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "songId": self.song_id,
            "uri": self.uri,
            "createdAt": self.created_at,
            "duration": self.duration,
        }


@dataclass
class DatabaseStats:
    """Database statistics shown by ``db status``.

    Attributes:
        table_counts: Row count per table
        schema_version: Stored schema version
        integrity_ok: Whether PRAGMA integrity_check passed
        foreign_keys_enabled: Whether foreign key enforcement is on
    """

    table_counts: dict[str, int] = field(default_factory=dict)
    schema_version: int = 0
    integrity_ok: bool = True
    foreign_keys_enabled: bool = True
