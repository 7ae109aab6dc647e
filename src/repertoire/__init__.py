"""Repertoire - a personal music practice tracker.

This package provides tools for:
- Keeping a library of songs with learning status and progress
- Organizing songs into setlists
- Logging practice time and audio memos
- Practice statistics, song suggestions and backups
"""

__version__ = "0.1.0"
