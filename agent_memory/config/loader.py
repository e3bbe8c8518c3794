"""Read and write the agent-memory JSON config file."""

import json
from pathlib import Path

from loguru import logger

from agent_memory.config.schema import MemorySettings

DEFAULT_CONFIG_DIR = Path.home() / ".agent-memory"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"


def load_config(config_path: Path | None = None) -> MemorySettings:
    """
    Build settings for the memory store.

    Keys present in the JSON file win over ``MEMORY_DIR`` and the
    ``AGENT_MEMORY_*`` variables, which in turn win over built-in defaults.
    An unreadable or invalid file is reported and ignored.

    Args:
        config_path: JSON file to read; ``~/.agent-memory/config.json`` if omitted.
    """
    path = config_path or DEFAULT_CONFIG_FILE
    if not path.exists():
        return MemorySettings()

    try:
        settings = MemorySettings(**json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Ignoring memory config {path}: {e}")
        return MemorySettings()

    logger.debug(f"Memory settings read from {path}")
    return settings


def save_default_config(config_path: Path | None = None) -> Path:
    """Write the built-in defaults as JSON, creating parent directories; returns the path."""
    path = config_path or DEFAULT_CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)

    defaults = MemorySettings().model_dump(mode="json")
    path.write_text(json.dumps(defaults, indent=2, ensure_ascii=False), encoding="utf-8")

    logger.info(f"Wrote default memory config to {path}")
    return path
