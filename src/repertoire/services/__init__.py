"""Services for repertoire.

Derived views over the database: practice statistics, song suggestions
and backups.
"""

from repertoire.services.backup import BackupCodec, BackupFormatError
from repertoire.services.stats import PracticeStats, StatsService
from repertoire.services.suggestion import SuggestionPicker

__all__ = ["BackupCodec", "BackupFormatError", "PracticeStats", "StatsService", "SuggestionPicker"]
