"""MemoryEntry data model and the daily-file entry line format."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from agent_memory.memory.tags import extract_tags

ENTRY_RE = re.compile(r"^- \*\*(\d{2}:\d{2})\*\* — ([^\r\n]+)$", re.ASCII)


@dataclass
class MemoryEntry:
    """
    A single timestamped line of a daily memory file.

    Attributes:
        time: Local wall-clock time the entry was written, ``HH:MM``.
        text: The entry body.
        tags: Tags derived from ``text``; never stored on disk.
        date: Canonical date of the file the entry came from, when known.
    """

    time: str
    text: str
    tags: list[str] = field(default_factory=list)
    date: str | None = None

    @classmethod
    def from_text(cls, time: str, text: str, date: str | None = None) -> MemoryEntry:
        """Build an entry, deriving its tags from the text."""
        return cls(time=time, text=text, tags=extract_tags(text), date=date)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        data: dict[str, Any] = {"time": self.time, "text": self.text, "tags": self.tags}
        if self.date is not None:
            data = {"date": self.date, **data}
        return data


def format_entry(time: str, text: str) -> str:
    """Render the block appended to a daily file for one entry."""
    return f"\n- **{time}** — {text}\n"


def parse_entries(content: str, date: str | None = None) -> list[MemoryEntry]:
    """
    Parse the entry lines of a daily file.

    Lines that are not exactly ``- **HH:MM** — <text>`` are skipped.

    Args:
        content: Raw file content.
        date: Optional file date attached to every entry.

    Returns:
        Entries in file order.
    """
    entries: list[MemoryEntry] = []
    for line in content.split("\n"):
        match = ENTRY_RE.match(line)
        if match:
            entries.append(MemoryEntry.from_text(match.group(1), match.group(2), date=date))
    return entries
