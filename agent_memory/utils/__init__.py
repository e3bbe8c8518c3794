"""Utility functions module."""

from agent_memory.utils.helpers import format_bytes

__all__ = ["format_bytes"]
