"""Adapters - I/O implementations of ports."""

from .file_journal import FileJournalSource, JournalReadError

__all__ = [
    "FileJournalSource",
    "JournalReadError",
]
