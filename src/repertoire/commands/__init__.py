"""CLI command groups for repertoire."""
