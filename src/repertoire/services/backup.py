"""Backup export and import for repertoire.

Serializes every table to a versioned JSON document and merges such a
document back in by ID: rows with a matching ID are overwritten, new IDs
are inserted. An import is applied in a single transaction, so a failure
part-way leaves the database untouched.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

from repertoire.db.client import RepertoireClient
from repertoire.db.models import Instrument, SongStatus, now_ms
from repertoire.db.schema import TABLE_COLUMNS

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1
DEFAULT_BACKUP_FILENAME = "repertoire_backup.json"

# Document key -> table, parents before children
SNAPSHOT_TABLES = [
    ("songs", "songs"),
    ("setlists", "setlists"),
    ("setlistItems", "setlist_items"),
    ("practiceSessions", "practice_sessions"),
    ("audioMemos", "audio_memos"),
]

# Values used when an imported song omits a field
SONG_DEFAULTS = {
    "albumArt": "",
    "status": SongStatus.WANT_TO_LEARN.value,
    "progress": 0,
    "notes": None,
    "instrument": None,
}


class BackupFormatError(ValueError):
    """Backup document is missing required fields or is not valid JSON."""


@dataclass
class ImportResult:
    """Outcome of a backup import.

    Attributes:
        counts: Rows merged per document key
    """

    counts: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class BackupCodec:
    """Exports and imports the full repertoire database."""

    def __init__(self, client: RepertoireClient):
        self.client = client

    def export_snapshot(self) -> dict[str, Any]:
        """Build a backup document with the full contents of every table."""
        document: dict[str, Any] = {
            "version": BACKUP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        for key, table in SNAPSHOT_TABLES:
            document[key] = self.client.fetch_table_rows(table)

        logger.info(
            "Exported snapshot: "
            + ", ".join(f"{len(document[key])} {key}" for key, _ in SNAPSHOT_TABLES)
        )
        return document

    def export_to_file(self, path: Union[Path, str]) -> Path:
        """Write a backup document to a JSON file.

        Args:
            path: Target file, or a directory to write the default file name into

        Returns:
            Path of the written file
        """
        path = Path(path)
        if path.is_dir():
            path = path / DEFAULT_BACKUP_FILENAME

        path.parent.mkdir(parents=True, exist_ok=True)
        document = self.export_snapshot()
        path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")

        logger.info(f"Backup written to {path}")
        return path

    @staticmethod
    def validate(document: Any) -> None:
        """Check a document looks like a repertoire backup.

        Raises:
            BackupFormatError: If version or songs is missing
        """
        if not isinstance(document, dict):
            raise BackupFormatError("Backup must be a JSON object")
        if not document.get("version") or "songs" not in document:
            raise BackupFormatError("This does not look like a repertoire backup file")
        for key, _ in SNAPSHOT_TABLES:
            value = document.get(key)
            if value is not None and not isinstance(value, list):
                raise BackupFormatError(f"Backup field '{key}' must be a list")

    def import_snapshot(self, document: dict[str, Any]) -> ImportResult:
        """Merge a backup document into the database.

        Args:
            document: Parsed backup document

        Returns:
            ImportResult with per-entity counts

        Raises:
            BackupFormatError: If the document is invalid (nothing is written)
            sqlite3.Error: If writing fails (the whole import is rolled back)
        """
        self.validate(document)
        result = ImportResult()

        if not self.client.is_initialized:
            logger.warning("Database not initialized, skipping import")
            return result

        try:
            with self.client.transaction() as conn:
                for key, table in SNAPSHOT_TABLES:
                    sql = self.client.upsert_sql(table)
                    records = document.get(key) or []
                    for record in records:
                        conn.execute(sql, self._record_values(table, record))
                    result.counts[key] = len(records)
        except BackupFormatError:
            logger.error("Import aborted: malformed record")
            raise
        except Exception:
            logger.exception("Import failed, rolled back")
            raise

        logger.info(f"Imported {result.total} rows: {result.counts}")
        return result

    def import_from_file(self, path: Union[Path, str]) -> ImportResult:
        """Read a backup file and merge it into the database.

        Raises:
            BackupFormatError: If the file is not valid JSON or not a backup
        """
        path = Path(path)
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise BackupFormatError(f"Backup file is not valid JSON: {e}") from e

        return self.import_snapshot(document)

    @staticmethod
    def _record_values(table: str, record: Any) -> list[Any]:
        """Order a record's values by the table's columns."""
        if not isinstance(record, dict):
            raise BackupFormatError(f"Invalid {table} record: {record!r}")

        record = dict(record)
        if table == "songs":
            for column, default in SONG_DEFAULTS.items():
                record.setdefault(column, default)
            record.setdefault("addedAt", now_ms())
        elif table == "setlist_items" and "songOrder" not in record and "order" in record:
            record["songOrder"] = record["order"]

        missing = [column for column in TABLE_COLUMNS[table] if column not in record]
        if missing:
            raise BackupFormatError(f"Invalid {table} record {record.get('id')!r}: missing {', '.join(missing)}")

        if table == "songs":
            BackupCodec._check_song_values(record)

        return [record[column] for column in TABLE_COLUMNS[table]]

    @staticmethod
    def _check_song_values(record: dict) -> None:
        song_id = record["id"]
        if record["status"] not in {status.value for status in SongStatus}:
            raise BackupFormatError(f"Invalid song {song_id!r}: unknown status {record['status']!r}")

        progress = record["progress"]
        if isinstance(progress, bool) or not isinstance(progress, int) or not 0 <= progress <= 100:
            raise BackupFormatError(f"Invalid song {song_id!r}: progress must be an integer from 0 to 100, got {progress!r}")

        instrument = record["instrument"]
        if instrument and instrument not in {i.value for i in Instrument}:
            raise BackupFormatError(f"Invalid song {song_id!r}: unknown instrument {instrument!r}")
