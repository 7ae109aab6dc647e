"""SQL schema definitions for the repertoire database.

Defines the tables for songs, setlists, setlist membership, practice
sessions and audio memos, plus the versioned migration steps applied by
the client. Column names match the backup document keys.
"""

# Stored in PRAGMA user_version; bumped with each migration step
SCHEMA_VERSION = 2

# SQL to create the songs table (the repertoire)
CREATE_SONGS_TABLE = """
CREATE TABLE IF NOT EXISTS songs (
    id TEXT PRIMARY KEY NOT NULL,
    title TEXT NOT NULL,
    artist TEXT NOT NULL,
    albumArt TEXT NOT NULL,
    status TEXT NOT NULL,
    progress INTEGER NOT NULL,
    addedAt INTEGER NOT NULL
);
"""

# SQL to create the setlists table (user-named ordered lists)
CREATE_SETLISTS_TABLE = """
CREATE TABLE IF NOT EXISTS setlists (
    id TEXT PRIMARY KEY NOT NULL,
    name TEXT NOT NULL,
    createdAt INTEGER NOT NULL
);
"""

# SQL to create the setlist_items table (songs in a setlist)
CREATE_SETLIST_ITEMS_TABLE = """
CREATE TABLE IF NOT EXISTS setlist_items (
    id TEXT PRIMARY KEY NOT NULL,
    setlistId TEXT NOT NULL,
    songId TEXT NOT NULL,
    songOrder INTEGER NOT NULL,
    FOREIGN KEY(setlistId) REFERENCES setlists(id) ON DELETE CASCADE,
    FOREIGN KEY(songId) REFERENCES songs(id) ON DELETE CASCADE
);
"""

# SQL to create the practice_sessions table
CREATE_PRACTICE_SESSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS practice_sessions (
    id TEXT PRIMARY KEY NOT NULL,
    songId TEXT NOT NULL,
    durationSeconds INTEGER NOT NULL,
    date INTEGER NOT NULL,
    FOREIGN KEY(songId) REFERENCES songs(id) ON DELETE CASCADE
);
"""

# SQL to create the audio_memos table (references to recorded files)
CREATE_AUDIO_MEMOS_TABLE = """
CREATE TABLE IF NOT EXISTS audio_memos (
    id TEXT PRIMARY KEY NOT NULL,
    songId TEXT NOT NULL,
    uri TEXT NOT NULL,
    createdAt TEXT NOT NULL,
    duration INTEGER NOT NULL,
    FOREIGN KEY(songId) REFERENCES songs(id) ON DELETE CASCADE
);
"""

# Indexes for efficient lookups
CREATE_INDEXES = [
    """
    CREATE INDEX IF NOT EXISTS idx_songs_status
    ON songs(status);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_setlist_items_setlist
    ON setlist_items(setlistId, songOrder);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_setlist_items_song
    ON setlist_items(songId);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_practice_sessions_song
    ON practice_sessions(songId);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_practice_sessions_date
    ON practice_sessions(date);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_audio_memos_song
    ON audio_memos(songId);
    """,
]

# Version 1: base tables
V1_STATEMENTS = [
    CREATE_SONGS_TABLE,
    CREATE_SETLISTS_TABLE,
    CREATE_SETLIST_ITEMS_TABLE,
    CREATE_PRACTICE_SESSIONS_TABLE,
    CREATE_AUDIO_MEMOS_TABLE,
    *CREATE_INDEXES,
]

# Version 2: optional song columns, as (table, column, type)
V2_COLUMNS = [
    ("songs", "notes", "TEXT"),
    ("songs", "instrument", "TEXT"),
]

# Tables in dependency order (parents first)
ALL_TABLES = [
    "songs",
    "setlists",
    "setlist_items",
    "practice_sessions",
    "audio_memos",
]

# Column order used for backups and upserts
TABLE_COLUMNS = {
    "songs": ["id", "title", "artist", "albumArt", "status", "progress", "notes", "instrument", "addedAt"],
    "setlists": ["id", "name", "createdAt"],
    "setlist_items": ["id", "setlistId", "songId", "songOrder"],
    "practice_sessions": ["id", "songId", "durationSeconds", "date"],
    "audio_memos": ["id", "songId", "uri", "createdAt", "duration"],
}

# SQL to get songs of a setlist in membership order
SETLIST_SONGS_QUERY = """
SELECT s.*
FROM songs s
JOIN setlist_items si ON s.id = si.songId
WHERE si.setlistId = ?
ORDER BY si.songOrder ASC, si.rowid ASC;
"""

INTEGRITY_CHECK_QUERY = "PRAGMA integrity_check;"

FOREIGN_KEYS_QUERY = "PRAGMA foreign_keys;"
