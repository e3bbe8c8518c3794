"""Exceptions raised by the memory store."""

from __future__ import annotations

from pathlib import Path


class MemoryStoreError(Exception):
    """Base class for errors the presentation layer reports to the user."""


class InvalidDateError(MemoryStoreError, ValueError):
    """Raised when a date expression matches none of the accepted forms."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid date: {value}")
        self.value = value


class BackupError(MemoryStoreError):
    """Raised when the compressor fails to produce a backup archive."""


class ArchiveError(MemoryStoreError):
    """Raised when archived files could not all be removed after the export was written."""

    def __init__(self, reason: str, archive_path: Path, removed: list[str]) -> None:
        super().__init__(
            f"Archive written to {archive_path} but cleanup failed after removing "
            f"{len(removed)} file(s): {reason}"
        )
        self.archive_path = archive_path
        self.removed = removed
