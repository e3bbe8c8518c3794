"""Search, recency and tag queries over the daily files."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from agent_memory.memory.entry import MemoryEntry, parse_entries
from agent_memory.memory.models import DaySummary, SearchHit, TagCount
from agent_memory.memory.repository import MemoryRepository
from agent_memory.memory.tags import count_tags, extract_tags, normalize_tag


def count_words(content: str) -> int:
    return len(content.split())


def summarize_day(date: str, content: str) -> DaySummary:
    """Entry, word, section and tag counts for one daily file."""
    lines = content.split("\n")
    return DaySummary(
        date=date,
        entries=len(parse_entries(content)),
        words=count_words(content),
        sections=[line[3:] for line in lines if line.startswith("## ")],
        tags=extract_tags(content),
    )


class MemoryQuery:
    """
    Read-only queries over a MemoryRepository.

    Date bounds passed here are already canonical; resolving user expressions
    is the caller's job.
    """

    def __init__(self, repository: MemoryRepository) -> None:
        self._repo = repository

    def search(
        self,
        query: str | None = None,
        tags: str | Iterable[str] | None = None,
        start: str | None = None,
        end: str | None = None,
        limit: int | None = None,
    ) -> list[SearchHit]:
        """
        Find matching lines, newest file first.

        Every non-blank line is a candidate, not only entry lines. A line
        matches when it contains the query (case-insensitive) and, if tags are
        given, carries at least one of them.

        Args:
            query: Substring to look for; None matches every line.
            tags: One tag or several; case and a leading ``#`` are ignored.
            start: Inclusive lower date bound.
            end: Inclusive upper date bound.
            limit: Maximum number of hits; None or 0 means no limit.

        Returns:
            Hits in file order within each file.
        """
        if isinstance(tags, str):
            tags = [tags]
        wanted = {normalize_tag(t) for t in tags or []}
        query_lower = query.lower() if query else None

        results: list[SearchHit] = []
        for date in self._repo.select(start, end, descending=True):
            content = self._repo.read(date)
            for idx, line in enumerate(content.split("\n")):
                if not line.strip():
                    continue
                if query_lower and query_lower not in line.lower():
                    continue
                line_tags = extract_tags(line)
                if wanted and not wanted.intersection(line_tags):
                    continue
                results.append(
                    SearchHit(
                        file=self._repo.file_name(date),
                        date=date,
                        line=idx + 1,
                        text=line.strip(),
                        tags=line_tags,
                    )
                )
            # Checked per file, so the last file may overshoot before truncation.
            if limit and len(results) >= limit:
                break

        logger.debug(f"MemoryQuery: search found {len(results)} hit(s)")
        return results[:limit] if limit else results

    def recent(self, count: int = 10) -> list[MemoryEntry]:
        """The ``count`` newest entries across files, newest first."""
        results: list[MemoryEntry] = []
        for date in self._repo.list_dates(descending=True):
            if len(results) >= count:
                break
            entries = parse_entries(self._repo.read(date), date=date)
            for entry in reversed(entries):
                if len(results) >= count:
                    break
                results.append(entry)
        return results

    def tags(self) -> list[TagCount]:
        """Tag counts over every daily file, one count per file a tag appears in."""
        return count_tags(self._repo.read(date) for date in self._repo.list_dates())

    def summary(self, days: int = 7) -> list[DaySummary]:
        """Per-file summaries of the ``days`` newest files."""
        dates = self._repo.list_dates(descending=True)[:days]
        return [summarize_day(date, self._repo.read(date)) for date in dates]

    def list_files(
        self,
        start: str | None = None,
        end: str | None = None,
        limit: int | None = None,
    ) -> list[str]:
        """File names within the range, newest first."""
        dates = self._repo.select(start, end, descending=True)
        if limit:
            dates = dates[:limit]
        return [self._repo.file_name(date) for date in dates]
