"""
Data models for the link store.

Entries live in memory and are persisted to the link data file;
there is no database.
"""

from .entry import Entry, EntryMetadata

__all__ = ["Entry", "EntryMetadata"]
