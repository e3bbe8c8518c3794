"""Statistics and writing streaks over the daily files."""

from __future__ import annotations

import math
from datetime import date, timedelta

from loguru import logger

from agent_memory.memory.dates import date_string, days_between
from agent_memory.memory.models import DateRange, DaySummary, MemoryStats
from agent_memory.memory.query import summarize_day
from agent_memory.memory.repository import MemoryRepository
from agent_memory.memory.tags import count_tags

TOP_TAGS = 10


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def calculate_streaks(dates: list[str], today: str) -> tuple[int, int]:
    """
    Compute the current and longest runs of consecutive days.

    The current streak only counts when the newest date is today or
    yesterday; it then extends back until the first gap. The longest streak is
    the longest run of one-day steps anywhere in the history.

    Args:
        dates: Canonical dates, newest first.
        today: Canonical date of the reference day.

    Returns:
        ``(current, longest)``.
    """
    if not dates:
        return 0, 0

    yesterday = date_string(date.fromisoformat(today) - timedelta(days=1))

    current = 0
    if dates[0] in (today, yesterday):
        current = 1
        for newer, older in zip(dates, dates[1:]):
            if days_between(newer, older) != 1:
                break
            current += 1

    longest = 0
    run = 1
    for newer, older in zip(dates, dates[1:]):
        if days_between(newer, older) == 1:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    longest = max(longest, run)

    return current, longest


class MemoryAnalytics:
    """Aggregate statistics over every file of a MemoryRepository."""

    def __init__(self, repository: MemoryRepository) -> None:
        self._repo = repository

    def stats(self, today: str) -> MemoryStats:
        """
        Collect totals, averages, the most active day, top tags and streaks.

        An empty store yields a zeroed MemoryStats rather than an error.
        """
        dates = self._repo.list_dates()
        if not dates:
            return MemoryStats()

        contents = [self._repo.read(date) for date in dates]
        days: list[DaySummary] = [
            summarize_day(date, content) for date, content in zip(dates, contents)
        ]

        total_entries = sum(day.entries for day in days)
        total_words = sum(day.words for day in days)

        most_active = days[0]
        for day in days[1:]:
            if day.entries > most_active.entries:
                most_active = day

        current, longest = calculate_streaks(list(reversed(dates)), today)
        logger.debug(f"MemoryAnalytics: {len(dates)} file(s), {total_entries} entries")

        return MemoryStats(
            total_files=len(dates),
            total_entries=total_entries,
            total_words=total_words,
            date_range=DateRange(start=dates[0], end=dates[-1]),
            average_entries_per_day=_round_half_up(total_entries / len(dates), 1),
            average_words_per_entry=(
                int(_round_half_up(total_words / total_entries)) if total_entries else 0
            ),
            most_active_day=DaySummary(
                date=most_active.date,
                entries=most_active.entries,
                words=most_active.words,
            ),
            streak_current=current,
            streak_longest=longest,
            tags=count_tags(contents, limit=TOP_TAGS),
        )
