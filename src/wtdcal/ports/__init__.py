"""Ports - interfaces/protocols for external dependencies."""

from .journal_source import JournalSource

__all__ = [
    "JournalSource",
]
