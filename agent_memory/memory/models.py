"""Result records returned by MemoryStore operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class TagCount:
    """A tag and the number of texts it was found in."""

    tag: str
    count: int


@dataclass
class InitResult:
    """Outcome of initializing the store."""

    created: bool
    memory_dir: Path
    today_file: Path


@dataclass
class DayFile:
    """One daily file as returned by ``today`` and ``show``."""

    date: str
    path: Path
    exists: bool
    content: str | None = None


@dataclass
class AddResult:
    """An entry appended to a daily file."""

    date: str
    path: Path
    entry: str
    timestamp: str
    tags: list[str] = field(default_factory=list)


@dataclass
class SearchHit:
    """A matching line from a search."""

    file: str
    date: str
    line: int
    text: str
    tags: list[str] = field(default_factory=list)


@dataclass
class DaySummary:
    """Per-file counts used by ``summary`` and ``stats``."""

    date: str
    entries: int
    words: int
    sections: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass
class DateRange:
    start: str
    end: str


@dataclass
class MemoryStats:
    """Aggregate statistics over every file in the store."""

    total_files: int = 0
    total_entries: int = 0
    total_words: int = 0
    date_range: DateRange | None = None
    average_entries_per_day: float = 0
    average_words_per_entry: int = 0
    most_active_day: DaySummary | None = None
    streak_current: int = 0
    streak_longest: int = 0
    tags: list[TagCount] = field(default_factory=list)


@dataclass
class ExportWritten:
    """An export serialized to disk."""

    path: Path
    size: int
    files: int


@dataclass
class BackupResult:
    path: Path
    size: int
    size_human: str


@dataclass
class ArchiveResult:
    """Outcome of archiving old files; ``archived`` is 0 when nothing qualified."""

    archived: int
    cutoff_date: str
    path: Path | None = None
    files: list[str] = field(default_factory=list)
