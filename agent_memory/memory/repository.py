"""Directory of daily markdown files backing the memory store."""

from __future__ import annotations

import re
from pathlib import Path

from loguru import logger

from agent_memory.memory.dates import is_date_in_range

MEMORY_FILE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})\.md$", re.ASCII)


def file_template(date: str) -> str:
    """Content of a newly created daily file."""
    return f"# {date}\n\n## Timeline\n\n## Notes\n\n"


class MemoryRepository:
    """
    Reads and writes the ``<YYYY-MM-DD>.md`` files in the store root.

    Other files in the directory are ignored. The repository does no parsing;
    it only knows file names, dates and raw content.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def ensure_dir(self) -> bool:
        """Create the store root if needed; return True if it was created."""
        if self.root.exists():
            return False
        self.root.mkdir(parents=True, exist_ok=True)
        logger.debug(f"MemoryRepository: created {self.root}")
        return True

    @staticmethod
    def file_name(date: str) -> str:
        return f"{date}.md"

    def path_for(self, date: str) -> Path:
        return self.root / self.file_name(date)

    def list_dates(self, descending: bool = False) -> list[str]:
        """Dates of all daily files, sorted."""
        dates = []
        for path in self.root.iterdir():
            match = MEMORY_FILE_RE.fullmatch(path.name)
            if match and path.is_file():
                dates.append(match.group(1))
        return sorted(dates, reverse=descending)

    def select(
        self,
        start: str | None = None,
        end: str | None = None,
        descending: bool = False,
    ) -> list[str]:
        """Dates of daily files within the inclusive range; missing bounds are open."""
        dates = self.list_dates(descending=descending)
        if start or end:
            dates = [d for d in dates if is_date_in_range(d, start, end)]
        return dates

    def exists(self, date: str) -> bool:
        return self.path_for(date).exists()

    def read(self, date: str) -> str:
        return self.path_for(date).read_text(encoding="utf-8")

    def ensure_file(self, date: str) -> Path:
        """Create the daily file from the template if it does not exist yet."""
        path = self.path_for(date)
        if not path.exists():
            path.write_text(file_template(date), encoding="utf-8")
            logger.debug(f"MemoryRepository: created {path.name}")
        return path

    def append(self, date: str, text: str) -> Path:
        path = self.ensure_file(date)
        with open(path, "a", encoding="utf-8") as f:
            f.write(text)
        logger.debug(f"MemoryRepository: appended {len(text)} chars to {path.name}")
        return path

    def delete(self, date: str) -> None:
        path = self.path_for(date)
        path.unlink()
        logger.debug(f"MemoryRepository: deleted {path.name}")
