"""Tests for statistics and streak computation."""

from pathlib import Path

import pytest

from agent_memory.memory.analytics import MemoryAnalytics, calculate_streaks
from agent_memory.memory.entry import format_entry
from agent_memory.memory.repository import MemoryRepository

TODAY = "2026-02-10"


def test_streaks_consecutive_from_today():
    assert calculate_streaks(["2026-02-10", "2026-02-09", "2026-02-08"], TODAY) == (3, 3)


def test_streaks_gap_after_today():
    assert calculate_streaks(["2026-02-10", "2026-02-08"], TODAY) == (1, 1)


def test_streaks_current_starts_yesterday():
    assert calculate_streaks(["2026-02-09", "2026-02-08"], TODAY) == (2, 2)


def test_streaks_stale_history_has_no_current():
    dates = ["2026-02-05", "2026-02-04", "2026-02-03", "2026-02-02"]
    assert calculate_streaks(dates, TODAY) == (0, 4)


def test_streaks_longest_run_in_the_past():
    dates = ["2026-02-10", "2026-02-09", "2026-01-20", "2026-01-19", "2026-01-18", "2026-01-17"]
    assert calculate_streaks(dates, TODAY) == (2, 4)


def test_streaks_across_month_boundary():
    dates = ["2026-03-01", "2026-02-28", "2026-02-27"]
    assert calculate_streaks(dates, "2026-03-01") == (3, 3)


def test_streaks_single_and_empty():
    assert calculate_streaks(["2026-02-10"], TODAY) == (1, 1)
    assert calculate_streaks(["2025-01-01"], TODAY) == (0, 1)
    assert calculate_streaks([], TODAY) == (0, 0)


def test_streaks_treat_impossible_dates_as_gaps():
    assert calculate_streaks(["2026-02-10", "2026-02-09", "2026-02-00"], TODAY) == (2, 2)


@pytest.fixture
def repo(tmp_path: Path) -> MemoryRepository:
    repo = MemoryRepository(tmp_path / "memory")
    repo.ensure_dir()
    return repo


def _write_day(repo: MemoryRepository, date: str, *texts: str) -> None:
    repo.ensure_file(date)
    for i, text in enumerate(texts):
        repo.append(date, format_entry(f"{9 + i:02d}:00", text))


def test_stats_empty_store(repo):
    stats = MemoryAnalytics(repo).stats(TODAY)
    assert stats.total_files == 0
    assert stats.total_entries == 0
    assert stats.total_words == 0
    assert stats.date_range is None
    assert stats.average_entries_per_day == 0
    assert stats.average_words_per_entry == 0
    assert stats.most_active_day is None
    assert stats.streak_current == 0
    assert stats.streak_longest == 0
    assert stats.tags == []


def test_stats_aggregates(repo):
    _write_day(repo, "2026-02-08", "one #a", "two #b")
    _write_day(repo, "2026-02-09", "three #a")
    _write_day(repo, "2026-02-10", "four #a #c", "five", "six #c")

    stats = MemoryAnalytics(repo).stats(TODAY)

    assert stats.total_files == 3
    assert stats.total_entries == 6
    assert stats.date_range.start == "2026-02-08"
    assert stats.date_range.end == "2026-02-10"
    assert stats.average_entries_per_day == 2.0
    assert stats.most_active_day.date == "2026-02-10"
    assert stats.most_active_day.entries == 3
    assert stats.streak_current == 3
    assert stats.streak_longest == 3
    assert [(t.tag, t.count) for t in stats.tags] == [("a", 3), ("b", 1), ("c", 1)]

    words = sum(len(repo.read(d).split()) for d in repo.list_dates())
    assert stats.total_words == words
    assert words == 48
    assert stats.average_words_per_entry == 8


def test_stats_most_active_first_wins_ties(repo):
    _write_day(repo, "2026-02-01", "a", "b")
    _write_day(repo, "2026-02-05", "c", "d")

    stats = MemoryAnalytics(repo).stats(TODAY)
    assert stats.most_active_day.date == "2026-02-01"
    assert stats.streak_current == 0
    assert stats.streak_longest == 1


def test_stats_average_rounds_half_up(repo):
    _write_day(repo, "2026-02-07", "a")
    _write_day(repo, "2026-02-08", "a", "b")
    _write_day(repo, "2026-02-09", "a", "b")
    _write_day(repo, "2026-02-10", "a", "b")

    # 7 entries over 4 files = 1.75 -> 1.8
    assert MemoryAnalytics(repo).stats(TODAY).average_entries_per_day == 1.8


def test_stats_files_without_entries(repo):
    repo.ensure_file("2026-02-10")
    stats = MemoryAnalytics(repo).stats(TODAY)
    assert stats.total_files == 1
    assert stats.total_entries == 0
    assert stats.average_entries_per_day == 0
    assert stats.average_words_per_entry == 0
    assert stats.streak_current == 1
