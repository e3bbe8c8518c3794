"""agent-memory-tools: daily markdown memory files for people and agents."""

__version__ = "0.2.0"
