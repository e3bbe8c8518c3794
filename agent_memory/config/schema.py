"""Configuration schema using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MEMORY_DIR = Path.home() / ".openclaw" / "workspace" / "memory"


class MemorySettings(BaseSettings):
    """
    Root configuration for agent-memory-tools.

    The store root comes from ``MEMORY_DIR``; every other field uses the
    ``AGENT_MEMORY_`` prefix (e.g. ``AGENT_MEMORY_LOG_LEVEL``).
    """

    model_config = SettingsConfigDict(
        env_prefix="AGENT_MEMORY_",
        extra="ignore",
    )

    memory_dir: Path = Field(
        default=DEFAULT_MEMORY_DIR,
        validation_alias=AliasChoices("memory_dir", "MEMORY_DIR"),
    )
    log_level: str = "WARNING"
    archive_older_than: int = Field(default=90, ge=0, description="Default archive threshold in days")
    recent_count: int = Field(default=10, ge=1)
    summary_days: int = Field(default=7, ge=1)
    compressor: Literal["tar", "tarfile"] = "tar"

    @property
    def memory_path(self) -> Path:
        """Get expanded store root."""
        return Path(self.memory_dir).expanduser()
