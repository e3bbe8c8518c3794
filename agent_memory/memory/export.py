"""Export of daily files to JSON and archival of old files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, model_serializer

from agent_memory.memory.entry import parse_entries
from agent_memory.memory.errors import ArchiveError
from agent_memory.memory.models import ArchiveResult, ExportWritten
from agent_memory.memory.repository import MemoryRepository
from agent_memory.memory.tags import extract_tags

# --- Export document ---


class ExportEntry(BaseModel):
    time: str
    text: str
    tags: list[str] = Field(default_factory=list)


class ExportRecord(BaseModel):
    """One daily file; ``raw`` is only present in full exports."""

    date: str
    file: str
    entries: list[ExportEntry] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    raw: Optional[str] = None

    @model_serializer(mode="wrap")
    def _omit_missing_raw(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if self.raw is None:
            data.pop("raw", None)
        return data


class ExportRange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: str = Field(alias="from")
    end: str = Field(alias="to")


class ExportDocument(BaseModel):
    """Portable JSON snapshot of a slice of the store."""

    model_config = ConfigDict(populate_by_name=True)

    exported_at: str = Field(alias="exportedAt")
    memory_dir: str = Field(alias="memoryDir")
    date_range: Optional[ExportRange] = Field(default=None, alias="dateRange")
    total_files: int = Field(default=0, alias="totalFiles")
    memories: list[ExportRecord] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(indent=2, by_alias=True)


# --- Engine ---


class MemoryExporter:
    """Builds export documents from a MemoryRepository and archives old files."""

    def __init__(self, repository: MemoryRepository) -> None:
        self._repo = repository

    def build(self, dates: list[str], exported_at: str, full: bool = False) -> ExportDocument:
        """
        Assemble an export document for the given dates.

        Args:
            dates: Canonical dates of the files to include, ascending.
            exported_at: ISO timestamp recorded in the document.
            full: Include each file's raw content.
        """
        memories: list[ExportRecord] = []
        for date in dates:
            content = self._repo.read(date)
            memories.append(
                ExportRecord(
                    date=date,
                    file=self._repo.file_name(date),
                    entries=[
                        ExportEntry(time=e.time, text=e.text, tags=e.tags)
                        for e in parse_entries(content)
                    ],
                    tags=extract_tags(content),
                    raw=content if full else None,
                )
            )

        return ExportDocument(
            exported_at=exported_at,
            memory_dir=str(self._repo.root),
            date_range=ExportRange(start=dates[0], end=dates[-1]) if dates else None,
            total_files=len(dates),
            memories=memories,
        )

    @staticmethod
    def write(document: ExportDocument, output: Path) -> ExportWritten:
        """Serialize a document to ``output`` and report the bytes written."""
        payload = document.to_json().encode("utf-8")
        output.write_bytes(payload)
        logger.debug(f"MemoryExporter: wrote {len(payload)} bytes to {output}")
        return ExportWritten(path=output, size=len(payload), files=document.total_files)

    def archive(
        self,
        cutoff: str,
        output: Path,
        exported_at: str,
    ) -> ArchiveResult:
        """
        Move every file dated before ``cutoff`` into a full JSON export.

        The export is written first; files are only deleted once the write has
        succeeded. Deletions are not rolled back if one of them fails.

        Args:
            cutoff: Canonical date; files strictly older are archived.
            output: Where to write the archive.
            exported_at: ISO timestamp recorded in the archive.

        Returns:
            The archive outcome; ``archived`` is 0 and nothing is written when no
            file is old enough.

        Raises:
            ArchiveError: If a file could not be removed after the export was written.
        """
        dates = [d for d in self._repo.list_dates() if d < cutoff]
        if not dates:
            return ArchiveResult(archived=0, cutoff_date=cutoff)

        document = self.build(dates, exported_at=exported_at, full=True)
        self.write(document, output)

        removed: list[str] = []
        for date in dates:
            try:
                self._repo.delete(date)
            except OSError as e:
                raise ArchiveError(str(e), output.resolve(), removed) from e
            removed.append(self._repo.file_name(date))

        logger.debug(f"MemoryExporter: archived {len(removed)} file(s) before {cutoff}")
        return ArchiveResult(
            archived=len(removed),
            cutoff_date=cutoff,
            path=output.resolve(),
            files=removed,
        )
