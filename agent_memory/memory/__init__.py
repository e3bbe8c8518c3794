"""Daily-file memory store: dates, tags, entries, queries, analytics and export."""

from agent_memory.memory.entry import MemoryEntry
from agent_memory.memory.errors import ArchiveError, BackupError, InvalidDateError, MemoryStoreError
from agent_memory.memory.store import MemoryStore

__all__ = [
    "MemoryEntry",
    "MemoryStore",
    "MemoryStoreError",
    "InvalidDateError",
    "BackupError",
    "ArchiveError",
]
