"""MemoryStore -- unified facade for memory operations."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from pathlib import Path

from loguru import logger

from agent_memory.config.schema import MemorySettings
from agent_memory.memory.analytics import MemoryAnalytics
from agent_memory.memory.backup import Compressor, TarCommandCompressor, get_compressor
from agent_memory.memory.dates import date_string, normalize_date, time_string
from agent_memory.memory.entry import MemoryEntry, format_entry
from agent_memory.memory.errors import BackupError, InvalidDateError
from agent_memory.memory.export import ExportDocument, MemoryExporter
from agent_memory.memory.models import (
    AddResult,
    ArchiveResult,
    BackupResult,
    DayFile,
    DaySummary,
    ExportWritten,
    InitResult,
    MemoryStats,
    SearchHit,
    TagCount,
)
from agent_memory.memory.query import MemoryQuery
from agent_memory.memory.repository import MemoryRepository
from agent_memory.memory.tags import extract_tags
from agent_memory.utils.helpers import format_bytes

Clock = Callable[[], datetime]


def wall_clock() -> datetime:
    """Current local time."""
    return datetime.now()


class MemoryStore:
    """
    Unified facade over a directory of daily memory files.

    Every operation makes sure the store root exists, then delegates to the
    repository, query, analytics and export components. "Now" comes from the
    injected clock so relative dates and streaks can be pinned in tests.
    """

    def __init__(
        self,
        memory_dir: Path,
        clock: Clock | None = None,
        compressor: Compressor | None = None,
    ) -> None:
        self.memory_dir = memory_dir
        self._clock = clock or wall_clock
        self._compressor = compressor or TarCommandCompressor()
        self._repo = MemoryRepository(memory_dir)
        self._query = MemoryQuery(self._repo)
        self._analytics = MemoryAnalytics(self._repo)
        self._exporter = MemoryExporter(self._repo)

    @classmethod
    def from_settings(cls, settings: MemorySettings, clock: Clock | None = None) -> MemoryStore:
        """
        Factory method to create a MemoryStore from settings.

        Args:
            settings: Loaded settings; provides the root and the compressor.
            clock: Optional time source, defaults to the local wall clock.

        Returns:
            Configured MemoryStore instance.
        """
        store = cls(
            settings.memory_path,
            clock=clock,
            compressor=get_compressor(settings.compressor),
        )
        logger.debug(f"MemoryStore created at {settings.memory_path}")
        return store

    # --- Dates ---

    def now(self) -> datetime:
        return self._clock()

    def today_date(self) -> str:
        return date_string(self.now())

    def normalize_date(self, value: object) -> str | None:
        """Resolve a date expression against the store's clock; None if unrecognized."""
        return normalize_date(value, self.now())

    def _require_date(self, value: object) -> str:
        date = self.normalize_date(value)
        if date is None:
            raise InvalidDateError(value)
        return date

    def _resolve_bound(self, value: object) -> str | None:
        if value is None or value == "":
            return None
        return self._require_date(value)

    # --- Core operations ---

    def init(self) -> InitResult:
        """Create the store root and today's file."""
        created = self._repo.ensure_dir()
        today_file = self._repo.ensure_file(self.today_date())
        return InitResult(created=created, memory_dir=self.memory_dir, today_file=today_file)

    def today(self) -> DayFile:
        """Return today's file, creating it from the template if needed."""
        self._repo.ensure_dir()
        date = self.today_date()
        path = self._repo.ensure_file(date)
        return DayFile(date=date, path=path, exists=True, content=self._repo.read(date))

    def add(self, text: str, timestamp: str | None = None) -> AddResult:
        """
        Append a timestamped entry to today's file.

        Args:
            text: Entry text; hashtags in it become the entry's tags.
            timestamp: ``HH:MM`` override, defaults to the current time.
        """
        now = self.now()
        return self._append_entry(date_string(now), text, timestamp or time_string(now))

    def show(self, date: object) -> DayFile:
        """
        Return the file for a date expression.

        A missing file is reported with ``exists=False``, not raised.

        Raises:
            InvalidDateError: If the expression is not recognized.
        """
        resolved = self._require_date(date)
        self._repo.ensure_dir()
        path = self._repo.path_for(resolved)
        if not path.exists():
            return DayFile(date=resolved, path=path, exists=False)
        return DayFile(date=resolved, path=path, exists=True, content=self._repo.read(resolved))

    def append(self, date: object, text: str) -> AddResult:
        """
        Append a timestamped entry to the file of any date.

        Raises:
            InvalidDateError: If the expression is not recognized.
        """
        resolved = self._require_date(date)
        return self._append_entry(resolved, text, time_string(self.now()))

    def _append_entry(self, date: str, text: str, timestamp: str) -> AddResult:
        self._repo.ensure_dir()
        entry = format_entry(timestamp, text)
        path = self._repo.append(date, entry)
        return AddResult(
            date=date,
            path=path,
            entry=entry.strip(),
            timestamp=timestamp,
            tags=extract_tags(text),
        )

    # --- Queries ---

    def search(
        self,
        query: str | None = None,
        tags: str | Iterable[str] | None = None,
        start: object = None,
        end: object = None,
        limit: int | None = None,
    ) -> list[SearchHit]:
        """
        Search every non-blank line of the in-range files, newest first.

        Raises:
            InvalidDateError: If ``start`` or ``end`` is given but not recognized.
        """
        self._repo.ensure_dir()
        return self._query.search(
            query=query,
            tags=tags,
            start=self._resolve_bound(start),
            end=self._resolve_bound(end),
            limit=limit,
        )

    def recent(self, count: int = 10) -> list[MemoryEntry]:
        """The ``count`` newest entries, each annotated with its date."""
        self._repo.ensure_dir()
        return self._query.recent(count)

    def tags(self) -> list[TagCount]:
        self._repo.ensure_dir()
        return self._query.tags()

    def summary(self, days: int = 7) -> list[DaySummary]:
        self._repo.ensure_dir()
        return self._query.summary(days)

    def list_files(
        self,
        start: object = None,
        end: object = None,
        limit: int | None = None,
    ) -> list[str]:
        self._repo.ensure_dir()
        return self._query.list_files(
            start=self._resolve_bound(start),
            end=self._resolve_bound(end),
            limit=limit,
        )

    def stats(self) -> MemoryStats:
        self._repo.ensure_dir()
        return self._analytics.stats(self.today_date())

    # --- Export, backup, archive ---

    def export(
        self,
        start: object = None,
        end: object = None,
        full: bool = False,
        output: Path | None = None,
    ) -> ExportDocument | ExportWritten:
        """
        Export the in-range files, oldest first.

        Args:
            start: Inclusive lower bound (date expression).
            end: Inclusive upper bound (date expression).
            full: Include each file's raw content.
            output: Write the JSON document here instead of returning it.

        Returns:
            The document, or a summary of what was written when ``output`` is set.
        """
        self._repo.ensure_dir()
        dates = self._repo.select(self._resolve_bound(start), self._resolve_bound(end))
        document = self._exporter.build(dates, exported_at=self._timestamp(), full=full)
        if output is None:
            return document
        return self._exporter.write(document, output)

    def backup(self, output: Path | None = None) -> BackupResult:
        """
        Compress the whole store directory.

        Raises:
            BackupError: If the compressor fails; no partial archive is kept.
        """
        self._repo.ensure_dir()
        stamp = self.now().strftime("%Y-%m-%dT%H-%M-%S")
        dest = (output or Path(f"memory-backup-{stamp}.tar.gz")).resolve()
        try:
            size = self._compressor.compress(self.memory_dir.resolve(), dest)
        except Exception as e:
            dest.unlink(missing_ok=True)
            raise BackupError(f"Backup failed: {e}") from e
        logger.debug(f"MemoryStore: backup written to {dest} ({size} bytes)")
        return BackupResult(path=dest, size=size, size_human=format_bytes(size))

    def archive(self, older_than: int = 90, output: Path | None = None) -> ArchiveResult:
        """
        Export files older than ``older_than`` days to JSON, then delete them.

        Raises:
            ArchiveError: If some files could not be removed after the export was written.
        """
        self._repo.ensure_dir()
        try:
            cutoff = date_string(self.now() - timedelta(days=older_than))
        except OverflowError:
            # Nothing on disk can be older than year 1.
            cutoff = date_string(datetime.min)
        target = output or Path(f"memory-archive-before-{cutoff}.json")
        return self._exporter.archive(cutoff, target, exported_at=self._timestamp())

    def _timestamp(self) -> str:
        return self.now().astimezone().isoformat()
