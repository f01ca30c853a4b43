"""Journal source interface."""

from typing import Protocol


class JournalSource(Protocol):
    """Interface for reading the weekly journal text."""

    def read(self) -> str:
        """Read the full journal text. Raises JournalReadError on failure."""
        ...
