"""Configuration module."""

from agent_memory.config.schema import MemorySettings
from agent_memory.config.loader import load_config, save_default_config

__all__ = ["MemorySettings", "load_config", "save_default_config"]
