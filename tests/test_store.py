"""Tests for the MemoryStore facade."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest
from freezegun import freeze_time

from agent_memory.config.schema import MemorySettings
from agent_memory.memory.backup import TarfileCompressor
from agent_memory.memory.errors import InvalidDateError
from agent_memory.memory.export import ExportDocument
from agent_memory.memory.models import ExportWritten
from agent_memory.memory.store import MemoryStore
from agent_memory.memory.tags import extract_tags

NOW = datetime(2026, 2, 10, 14, 30)


class FakeClock:
    """Settable time source."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def store(tmp_path: Path, clock: FakeClock) -> MemoryStore:
    return MemoryStore(tmp_path / "memory", clock=clock)


def _days_ago(days: int) -> str:
    return (NOW - timedelta(days=days)).strftime("%Y-%m-%d")


def test_init_creates_directory_and_today(store):
    result = store.init()
    assert result.created is True
    assert result.memory_dir.is_dir()
    assert result.today_file == store.memory_dir / "2026-02-10.md"
    assert result.today_file.exists()

    assert store.init().created is False


def test_today_returns_template(store):
    result = store.today()
    assert result.date == "2026-02-10"
    assert result.exists is True
    assert "# 2026-02-10" in result.content
    assert "## Timeline" in result.content
    assert "## Notes" in result.content


def test_add_appends_timestamped_entry(store):
    result = store.add("Test entry #test #feature")

    assert result.date == "2026-02-10"
    assert result.timestamp == "14:30"
    assert result.entry == "- **14:30** — Test entry #test #feature"
    assert result.tags == ["test", "feature"]
    assert result.entry in store.today().content


def test_add_with_explicit_timestamp(store):
    result = store.add("Morning #routine", timestamp="07:15")
    assert result.entry == "- **07:15** — Morning #routine"


def test_add_then_recent_round_trips_tags(store):
    text = "Mixed #Case and #case with #other-tag"
    store.add(text)

    entry = store.recent(1)[0]
    assert entry.text == text
    assert entry.tags == extract_tags(text)
    assert entry.date == "2026-02-10"


def test_show_existing_and_missing(store):
    store.add("something")

    shown = store.show("today")
    assert shown.exists is True
    assert "something" in shown.content

    missing = store.show("yesterday")
    assert missing.date == "2026-02-09"
    assert missing.exists is False
    assert missing.content is None
    assert missing.path == store.memory_dir / "2026-02-09.md"


@pytest.mark.parametrize("value", ["not-a-date", None, ""])
def test_show_invalid_date(store, value):
    with pytest.raises(InvalidDateError):
        store.show(value)


def test_append_to_past_date(store):
    result = store.append("-3", "Late note #retro")

    assert result.date == "2026-02-07"
    assert result.timestamp == "14:30"
    content = store.show("2026-02-07").content
    assert content.startswith("# 2026-02-07\n\n## Timeline\n\n## Notes\n\n")
    assert "- **14:30** — Late note #retro" in content


def test_append_invalid_date_writes_nothing(store):
    with pytest.raises(InvalidDateError) as exc_info:
        store.append("someday", "text")
    assert exc_info.value.value == "someday"
    assert store.list_files() == []


def test_search_resolves_date_expressions(store, clock):
    store.append("-2", "two days ago #work")
    store.append("yesterday", "yesterday #work")
    store.add("today #work")

    hits = store.search(tags="work", start="-1", end="today")
    assert [h.date for h in hits] == ["2026-02-10", "2026-02-09"]


def test_search_date_range_bounds_results(store):
    for days in range(5):
        store.append(f"-{days}", f"entry {days} #log")

    hits = store.search("entry", start=_days_ago(3), end=_days_ago(1))
    assert {h.date for h in hits} == {_days_ago(1), _days_ago(2), _days_ago(3)}


def test_search_invalid_bound(store):
    with pytest.raises(InvalidDateError):
        store.search("x", start="whenever")


def test_tags_summary_list(store):
    store.append("-1", "a #alpha")
    store.add("b #alpha #beta")

    assert [(t.tag, t.count) for t in store.tags()] == [("alpha", 2), ("beta", 1)]
    assert [d.date for d in store.summary(1)] == ["2026-02-10"]
    assert store.list_files(start="today") == ["2026-02-10.md"]


def test_stats_streak_uses_clock(store, clock):
    for days in range(3):
        store.append(f"-{days}", "daily")

    stats = store.stats()
    assert stats.streak_current == 3
    assert stats.streak_longest == 3

    clock.now = NOW + timedelta(days=5)
    stats = store.stats()
    assert stats.streak_current == 0
    assert stats.streak_longest == 3


def test_stats_empty_store(store):
    stats = store.stats()
    assert stats.total_files == 0
    assert stats.date_range is None
    assert store.memory_dir.is_dir()


def test_export_today_only(store):
    store.append("-1", "old")
    store.add("new #today")

    document = store.export(start="today", end="today")
    assert isinstance(document, ExportDocument)
    assert [m.date for m in document.memories] == ["2026-02-10"]
    assert document.memory_dir == str(store.memory_dir)


def test_export_to_file(store, tmp_path: Path):
    store.add("hello")
    output = tmp_path / "export.json"

    result = store.export(output=output, full=True)
    assert isinstance(result, ExportWritten)
    assert result.files == 1
    assert result.size == output.stat().st_size
    assert '"raw"' in output.read_text(encoding="utf-8")


def test_archive_threshold(store, tmp_path: Path):
    store.append("-100", "ancient #old")
    store.append("-10", "recent #new")
    output = tmp_path / "archive.json"

    result = store.archive(90, output)

    assert result.archived == 1
    assert result.cutoff_date == _days_ago(90)
    assert store.list_files() == [f"{_days_ago(10)}.md"]
    assert output.exists()


def test_archive_noop(store, tmp_path: Path):
    store.append("-10", "recent")
    result = store.archive(90, tmp_path / "archive.json")

    assert result.archived == 0
    assert result.path is None
    assert len(store.list_files()) == 1


def test_archive_default_name(store, tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    store.append("-100", "ancient")

    result = store.archive()
    assert result.path == (tmp_path / f"memory-archive-before-{_days_ago(90)}.json").resolve()


def test_from_settings(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("MEMORY_DIR", raising=False)
    settings = MemorySettings(memory_dir=tmp_path / "mem", compressor="tarfile")

    store = MemoryStore.from_settings(settings, clock=lambda: NOW)
    assert store.memory_dir == tmp_path / "mem"
    assert isinstance(store._compressor, TarfileCompressor)
    assert store.today_date() == "2026-02-10"


def test_default_clock_is_wall_clock(tmp_path: Path):
    store = MemoryStore(tmp_path / "memory")
    with freeze_time("2030-06-15 08:00:00"):
        assert store.today_date() == "2030-06-15"
        assert store.add("frozen").timestamp == "08:00"


def test_show_out_of_range_offset_is_invalid(store):
    with pytest.raises(InvalidDateError):
        store.show("-1000000")


def test_archive_huge_threshold_keeps_everything(store, tmp_path: Path):
    store.append("-100", "ancient")

    result = store.archive(10**12, tmp_path / "archive.json")
    assert result.archived == 0
    assert result.cutoff_date == "0001-01-01"
    assert len(store.list_files()) == 1
