"""File-based journal source adapter."""

import logging
import sys
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)

STDIN_PATH = "-"


class JournalReadError(Exception):
    """Raised when the journal can't be read."""

    pass


class FileJournalSource:
    """
    File-based journal source.

    Implements JournalSource protocol. A path of '-' reads standard input.
    """

    def __init__(self, path: Path | str, stdin: TextIO | None = None):
        self.path = path if path == STDIN_PATH else Path(path).expanduser()
        self.stdin = stdin

    @property
    def is_stdin(self) -> bool:
        return self.path == STDIN_PATH

    def read(self) -> str:
        """Read the full journal text as UTF-8."""
        if self.is_stdin:
            logger.debug("Reading journal from stdin")
            try:
                if self.stdin is not None:
                    return self.stdin.read()
                return sys.stdin.buffer.read().decode("utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise JournalReadError(f"Couldn't read stdin: {e}") from e

        logger.debug(f"Reading journal from {self.path}")
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise JournalReadError(f"Journal not found: {self.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise JournalReadError(f"Couldn't read {self.path}: {e}") from e
