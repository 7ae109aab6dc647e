"""Database client for repertoire.

Provides the SQLite store handle, versioned schema initialization, and
CRUD operations for songs, setlists, setlist items, practice sessions
and audio memos.

Failure model: write operations log and re-raise sqlite3 errors; read
operations log and fall back to an empty result so callers always have
something to render. Until ``initialize_schema()`` has run, every
operation is a logged no-op returning its neutral value.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator, Iterable, Optional, Union

from repertoire.db.models import (
    AudioMemo,
    DatabaseStats,
    Instrument,
    PracticeSession,
    Setlist,
    SetlistItem,
    Song,
    SongStatus,
    generate_id,
    next_status,
    now_ms,
)
from repertoire.db.schema import (
    ALL_TABLES,
    FOREIGN_KEYS_QUERY,
    INTEGRITY_CHECK_QUERY,
    SCHEMA_VERSION,
    SETLIST_SONGS_QUERY,
    TABLE_COLUMNS,
    V1_STATEMENTS,
    V2_COLUMNS,
)

logger = logging.getLogger(__name__)


class RepertoireClient:
    """Client for the local repertoire database.

    The client owns a single lazily-opened SQLite connection and is meant
    to be constructed once and passed to the services that need it.

    Attributes:
        db_path: Path to the SQLite database file
        allow_duplicate_setlist_items: Whether a song may be added to the same setlist twice
        connection: Active database connection
    """

    def __init__(self, db_path: Union[Path, str], allow_duplicate_setlist_items: bool = False):
        """Initialize the client.

        Args:
            db_path: Path to the SQLite database file
            allow_duplicate_setlist_items: Allow repeated (setlist, song) memberships
        """
        self.db_path = Path(db_path)
        self.allow_duplicate_setlist_items = allow_duplicate_setlist_items
        self._connection: Optional[sqlite3.Connection] = None
        self._initialized = False

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection.

        Returns:
            Active SQLite connection
        """
        if self._connection is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self._connection = sqlite3.connect(self.db_path)
            self._connection.row_factory = sqlite3.Row

            # Cascading deletes depend on this
            self._connection.execute("PRAGMA foreign_keys = ON")

        return self._connection

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
        self._initialized = False

    def __enter__(self) -> "RepertoireClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager for database transactions.

        Commits on success; rolls back and re-raises on any error.

        Yields:
            SQLite connection with active transaction
        """
        conn = self.connection
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    # Schema management

    def get_schema_version(self) -> int:
        """Get the schema version stored in the database file."""
        return self.connection.execute("PRAGMA user_version").fetchone()[0]

    def initialize_schema(self) -> None:
        """Create or migrate the schema to SCHEMA_VERSION.

        Safe to call on every start: a database already at the current
        version is left untouched, an older one only gets the missing
        steps applied.
        """
        conn = self.connection
        conn.execute("PRAGMA journal_mode=WAL")

        existing_version = self.get_schema_version()
        if existing_version < SCHEMA_VERSION:
            logger.info(f"Migrating database {self.db_path} from version {existing_version} to {SCHEMA_VERSION}")

            with self.transaction() as conn:
                # sqlite3 leaves DDL in autocommit unless a transaction is opened explicitly
                conn.execute("BEGIN")

                if existing_version < 1:
                    for statement in V1_STATEMENTS:
                        conn.execute(statement)

                if existing_version < 2:
                    for table, column, column_type in V2_COLUMNS:
                        self._add_column_if_missing(conn, table, column, column_type)

                conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")

        self._initialized = True

    @staticmethod
    def _add_column_if_missing(conn: sqlite3.Connection, table: str, column: str, column_type: str) -> None:
        # Stores written before versioning was introduced may already have the column
        existing = {row["name"] for row in conn.execute(f"PRAGMA table_info({table})")}
        if column not in existing:
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")
            logger.info(f"Added column {table}.{column}")

    def reset_database(self) -> None:
        """Drop all tables and re-create the schema."""
        with self.transaction() as conn:
            for table in reversed(ALL_TABLES):
                conn.execute(f"DROP TABLE IF EXISTS {table}")
            conn.execute("PRAGMA user_version = 0")

        logger.warning(f"Database {self.db_path} reset")
        self.initialize_schema()

    def get_stats(self) -> DatabaseStats:
        """Get row counts and health checks for the database."""
        conn = self.connection
        stats = DatabaseStats(schema_version=self.get_schema_version())

        for table in ALL_TABLES:
            try:
                stats.table_counts[table] = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
            except sqlite3.OperationalError:
                stats.table_counts[table] = 0

        stats.integrity_ok = conn.execute(INTEGRITY_CHECK_QUERY).fetchone()[0] == "ok"
        stats.foreign_keys_enabled = conn.execute(FOREIGN_KEYS_QUERY).fetchone()[0] == 1

        return stats

    # Internal helpers

    def _store_available(self, operation: str) -> bool:
        if not self._initialized:
            logger.warning(f"Database not initialized, skipping {operation}")
            return False
        return True

    def _fetch_all(self, operation: str, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
        if not self._store_available(operation):
            return []
        try:
            return self.connection.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error:
            logger.exception(f"Error during {operation}")
            return []

    def _fetch_one(self, operation: str, sql: str, params: Iterable[Any] = ()) -> Optional[sqlite3.Row]:
        if not self._store_available(operation):
            return None
        try:
            return self.connection.execute(sql, tuple(params)).fetchone()
        except sqlite3.Error:
            logger.exception(f"Error during {operation}")
            return None

    def _execute_write(self, operation: str, sql: str, params: Iterable[Any] = ()) -> int:
        """Run a single write statement in its own transaction.

        Returns:
            Number of affected rows

        Raises:
            sqlite3.Error: Logged and re-raised
        """
        try:
            with self.transaction() as conn:
                cursor = conn.execute(sql, tuple(params))
                return cursor.rowcount
        except sqlite3.Error:
            logger.exception(f"Error during {operation}")
            raise

    @staticmethod
    def upsert_sql(table: str) -> str:
        """Build an insert-or-overwrite statement for a table.

        Overwriting a row updates it in place; its child rows are kept.
        """
        columns = TABLE_COLUMNS[table]
        placeholders = ", ".join("?" for _ in columns)
        assignments = ", ".join(f"{col} = excluded.{col}" for col in columns if col != "id")
        return (
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders}) "
            f"ON CONFLICT(id) DO UPDATE SET {assignments}"
        )

    # Song operations

    def add_song(self, song: Song) -> bool:
        """Add a song to the library.

        Args:
            song: Song to insert

        Returns:
            True if added, False if a song with the same ID already exists
        """
        if not self._store_available("add_song"):
            return False

        try:
            with self.transaction() as conn:
                existing = conn.execute("SELECT 1 FROM songs WHERE id = ?", (song.id,)).fetchone()
                if existing:
                    logger.info(f"Song {song.id} already in library")
                    return False

                record = song.to_record()
                columns = TABLE_COLUMNS["songs"]
                conn.execute(
                    f"INSERT INTO songs ({', '.join(columns)}) VALUES ({', '.join('?' for _ in columns)})",
                    [record[col] for col in columns],
                )
        except sqlite3.Error:
            logger.exception(f"Error adding song {song.id}")
            raise

        logger.info(f"Added song {song.id} ({song.title} - {song.artist})")
        return True

    def get_song(self, song_id: str) -> Optional[Song]:
        """Get a song by ID.

        Returns:
            Song or None if not found
        """
        row = self._fetch_one("get_song", "SELECT * FROM songs WHERE id = ?", (song_id,))
        return Song.from_row(row) if row else None

    def list_songs(
        self,
        status: Union[SongStatus, Iterable[SongStatus], None] = None,
        instrument: Union[Instrument, Iterable[Instrument], None] = None,
    ) -> list[Song]:
        """List songs in the library, newest first.

        Args:
            status: Only songs with this status (or any of these statuses)
            instrument: Only songs set to this instrument (or any of these)

        Returns:
            List of songs
        """
        query = "SELECT * FROM songs"
        conditions = []
        params: list = []

        for column, value, enum_cls in (("status", status, SongStatus), ("instrument", instrument, Instrument)):
            if value is None:
                continue
            values = [value] if isinstance(value, (str, enum_cls)) else list(value)
            if not values:
                continue
            conditions.append(f"{column} IN ({', '.join('?' for _ in values)})")
            params.extend(enum_cls(v).value for v in values)

        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY addedAt DESC"

        return [Song.from_row(row) for row in self._fetch_all("list_songs", query, params)]

    def get_songs_by_status(self, status: SongStatus) -> list[Song]:
        return self.list_songs(status=status)

    def get_random_song(self) -> Optional[Song]:
        """Pick one song uniformly at random, or None for an empty library."""
        row = self._fetch_one("get_random_song", "SELECT * FROM songs ORDER BY RANDOM() LIMIT 1")
        return Song.from_row(row) if row else None

    def update_progress(self, song_id: str, progress: int, status: SongStatus) -> None:
        """Overwrite a song's progress and status.

        The caller decides the status; see ``set_progress`` for the version
        that applies the status transition rule.

        Args:
            song_id: The song ID
            progress: New progress (0-100)
            status: New status
        """
        if not 0 <= progress <= 100:
            raise ValueError(f"Progress must be between 0 and 100, got {progress}")
        if not self._store_available("update_progress"):
            return

        status = SongStatus(status)
        self._execute_write(
            "update_progress",
            "UPDATE songs SET progress = ?, status = ? WHERE id = ?",
            (progress, status.value, song_id),
        )
        logger.info(f"Updated song {song_id}: progress={progress}, status={status.value}")

    def set_progress(self, song_id: str, progress: int) -> Optional[Song]:
        """Update a song's progress, deriving the new status.

        Args:
            song_id: The song ID
            progress: New progress (0-100)

        Returns:
            The updated Song, or None if not found
        """
        song = self.get_song(song_id)
        if song is None:
            return None

        status = next_status(song.status, progress)
        self.update_progress(song_id, progress, status)

        song.progress = progress
        song.status = status
        return song

    def update_instrument(self, song_id: str, instrument: Optional[Instrument]) -> None:
        """Set (or clear) the instrument a song is practiced on."""
        if not self._store_available("update_instrument"):
            return

        value = Instrument(instrument).value if instrument else None
        self._execute_write(
            "update_instrument",
            "UPDATE songs SET instrument = ? WHERE id = ?",
            (value, song_id),
        )
        logger.info(f"Updated song {song_id}: instrument={value}")

    def update_notes(self, song_id: str, notes: Optional[str]) -> None:
        """Replace a song's notes."""
        if not self._store_available("update_notes"):
            return

        self._execute_write("update_notes", "UPDATE songs SET notes = ? WHERE id = ?", (notes, song_id))
        logger.info(f"Updated song {song_id}: notes={(notes or '')[:20]}...")

    def delete_song(self, song_id: str) -> bool:
        """Delete a song along with its memberships, sessions and memos.

        Returns:
            True if deleted, False if not found
        """
        if not self._store_available("delete_song"):
            return False

        deleted = self._execute_write("delete_song", "DELETE FROM songs WHERE id = ?", (song_id,)) > 0
        logger.info(f"Deleted song {song_id}")
        return deleted

    # Setlist operations

    def create_setlist(self, name: str) -> Optional[Setlist]:
        """Create a new, empty setlist.

        Args:
            name: Display name

        Returns:
            Created Setlist, or None if the store is unavailable
        """
        if not self._store_available("create_setlist"):
            return None

        setlist = Setlist(id=generate_id("setlist"), name=name)
        self._execute_write(
            "create_setlist",
            "INSERT INTO setlists (id, name, createdAt) VALUES (?, ?, ?)",
            (setlist.id, setlist.name, setlist.created_at),
        )
        logger.info(f"Created setlist {setlist.id}: {name}")
        return setlist

    def get_setlist(self, setlist_id: str) -> Optional[Setlist]:
        row = self._fetch_one("get_setlist", "SELECT * FROM setlists WHERE id = ?", (setlist_id,))
        return Setlist.from_row(row) if row else None

    def list_setlists(self) -> list[Setlist]:
        """List all setlists, newest first."""
        rows = self._fetch_all("list_setlists", "SELECT * FROM setlists ORDER BY createdAt DESC, rowid DESC")
        return [Setlist.from_row(row) for row in rows]

    def delete_setlist(self, setlist_id: str) -> bool:
        """Delete a setlist and all its items.

        Returns:
            True if deleted, False if not found
        """
        if not self._store_available("delete_setlist"):
            return False

        deleted = self._execute_write("delete_setlist", "DELETE FROM setlists WHERE id = ?", (setlist_id,)) > 0
        logger.info(f"Deleted setlist {setlist_id}")
        return deleted

    def add_song_to_setlist(self, setlist_id: str, song_id: str) -> Optional[SetlistItem]:
        """Append a song to a setlist.

        The item's order is one past the highest order in the setlist, which
        equals the item count until songs are removed.

        Args:
            setlist_id: The setlist ID
            song_id: The song ID

        Returns:
            Created SetlistItem, or None if the song is already in the
            setlist and duplicates are not allowed
        """
        if not self._store_available("add_song_to_setlist"):
            return None

        try:
            with self.transaction() as conn:
                if not self.allow_duplicate_setlist_items:
                    existing = conn.execute(
                        "SELECT 1 FROM setlist_items WHERE setlistId = ? AND songId = ?",
                        (setlist_id, song_id),
                    ).fetchone()
                    if existing:
                        logger.info(f"Song {song_id} already in setlist {setlist_id}")
                        return None

                # Above every position in use, even after removals
                order = conn.execute(
                    "SELECT COALESCE(MAX(songOrder), -1) + 1 FROM setlist_items WHERE setlistId = ?",
                    (setlist_id,),
                ).fetchone()[0]

                item = SetlistItem(id=generate_id("item"), setlist_id=setlist_id, song_id=song_id, order=order)
                conn.execute(
                    "INSERT INTO setlist_items (id, setlistId, songId, songOrder) VALUES (?, ?, ?, ?)",
                    (item.id, item.setlist_id, item.song_id, item.order),
                )
        except sqlite3.Error:
            logger.exception(f"Error adding song {song_id} to setlist {setlist_id}")
            raise

        logger.info(f"Added song {song_id} to setlist {setlist_id} at position {order}")
        return item

    def get_setlist_songs(self, setlist_id: str) -> list[Song]:
        """Get the songs of a setlist in the order they were added."""
        rows = self._fetch_all("get_setlist_songs", SETLIST_SONGS_QUERY, (setlist_id,))
        return [Song.from_row(row) for row in rows]

    def get_setlist_items(self, setlist_id: str) -> list[SetlistItem]:
        rows = self._fetch_all(
            "get_setlist_items",
            "SELECT * FROM setlist_items WHERE setlistId = ? ORDER BY songOrder ASC, rowid ASC",
            (setlist_id,),
        )
        return [SetlistItem.from_row(row) for row in rows]

    def remove_song_from_setlist(self, setlist_id: str, song_id: str) -> int:
        """Remove every membership of a song in a setlist.

        Remaining items keep their stored order.

        Returns:
            Number of items removed
        """
        if not self._store_available("remove_song_from_setlist"):
            return 0

        removed = self._execute_write(
            "remove_song_from_setlist",
            "DELETE FROM setlist_items WHERE setlistId = ? AND songId = ?",
            (setlist_id, song_id),
        )
        logger.info(f"Removed song {song_id} from setlist {setlist_id}")
        return removed

    # Practice session operations

    def log_practice_session(
        self,
        song_id: str,
        duration_seconds: int,
        date: Optional[int] = None,
    ) -> Optional[PracticeSession]:
        """Record a finished practice session.

        Args:
            song_id: The song practiced
            duration_seconds: Session length, must be positive
            date: Session end as epoch milliseconds (defaults to now)

        Returns:
            Created PracticeSession, or None if the store is unavailable

        Raises:
            ValueError: If duration_seconds is not a positive integer
        """
        if isinstance(duration_seconds, bool) or not isinstance(duration_seconds, int) or duration_seconds <= 0:
            raise ValueError(f"Practice duration must be a positive number of seconds, got {duration_seconds!r}")
        if not self._store_available("log_practice_session"):
            return None

        session = PracticeSession(
            id=generate_id("session"),
            song_id=song_id,
            duration_seconds=duration_seconds,
            date=date if date is not None else now_ms(),
        )
        self._execute_write(
            "log_practice_session",
            "INSERT INTO practice_sessions (id, songId, durationSeconds, date) VALUES (?, ?, ?, ?)",
            (session.id, session.song_id, session.duration_seconds, session.date),
        )
        logger.info(f"Logged practice: {duration_seconds}s for song {song_id}")
        return session

    def get_song_practice_sessions(self, song_id: str) -> list[PracticeSession]:
        """Get a song's practice sessions, newest first."""
        rows = self._fetch_all(
            "get_song_practice_sessions",
            "SELECT * FROM practice_sessions WHERE songId = ? ORDER BY date DESC",
            (song_id,),
        )
        return [PracticeSession.from_row(row) for row in rows]

    def get_practice_sessions_since(self, since_ms: int) -> list[PracticeSession]:
        """Get all sessions ending at or after a timestamp, oldest first."""
        rows = self._fetch_all(
            "get_practice_sessions_since",
            "SELECT * FROM practice_sessions WHERE date >= ? ORDER BY date ASC",
            (since_ms,),
        )
        return [PracticeSession.from_row(row) for row in rows]

    def get_practice_dates(self) -> list[int]:
        """Get the distinct session timestamps, newest first."""
        rows = self._fetch_all(
            "get_practice_dates",
            "SELECT DISTINCT date FROM practice_sessions ORDER BY date DESC",
        )
        return [row["date"] for row in rows]

    def get_total_practice_seconds(self) -> int:
        row = self._fetch_one(
            "get_total_practice_seconds",
            "SELECT COALESCE(SUM(durationSeconds), 0) AS total FROM practice_sessions",
        )
        return row["total"] if row else 0

    # Audio memo operations

    def add_audio_memo(self, song_id: str, uri: str, duration: int) -> Optional[AudioMemo]:
        """Attach a recorded audio memo to a song.

        Args:
            song_id: The song ID
            uri: Location of the recorded audio file
            duration: Length in seconds

        Returns:
            Created AudioMemo, or None if the store is unavailable
        """
        if not self._store_available("add_audio_memo"):
            return None

        memo = AudioMemo(
            id=generate_id("memo"),
            song_id=song_id,
            uri=uri,
            created_at=datetime.now(timezone.utc).isoformat(),
            duration=duration,
        )
        self._execute_write(
            "add_audio_memo",
            "INSERT INTO audio_memos (id, songId, uri, createdAt, duration) VALUES (?, ?, ?, ?, ?)",
            (memo.id, memo.song_id, memo.uri, memo.created_at, memo.duration),
        )
        logger.info(f"Added audio memo for song {song_id}")
        return memo

    def get_audio_memos(self, song_id: str) -> list[AudioMemo]:
        """Get a song's audio memos, newest first."""
        rows = self._fetch_all(
            "get_audio_memos",
            "SELECT * FROM audio_memos WHERE songId = ? ORDER BY createdAt DESC",
            (song_id,),
        )
        return [AudioMemo.from_row(row) for row in rows]

    def delete_audio_memo(self, memo_id: str) -> bool:
        if not self._store_available("delete_audio_memo"):
            return False

        deleted = self._execute_write("delete_audio_memo", "DELETE FROM audio_memos WHERE id = ?", (memo_id,)) > 0
        logger.info(f"Deleted audio memo {memo_id}")
        return deleted

    # Raw table access

    def fetch_table_rows(self, table: str) -> list[dict[str, Any]]:
        """Get every row of a table as column-keyed dictionaries.

        Unlike the other reads, errors propagate: a backup must not be
        written from a partial read.

        Raises:
            ValueError: If the table is unknown
            sqlite3.Error: If the read fails
        """
        if table not in TABLE_COLUMNS:
            raise ValueError(f"Unknown table: {table}")
        if not self._store_available(f"fetch_table_rows({table})"):
            return []

        columns = TABLE_COLUMNS[table]
        try:
            rows = self.connection.execute(f"SELECT {', '.join(columns)} FROM {table} ORDER BY rowid").fetchall()
        except sqlite3.Error:
            logger.exception(f"Error reading table {table}")
            raise
        return [dict(row) for row in rows]
