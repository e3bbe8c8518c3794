"""Hashtag extraction and counting."""

from __future__ import annotations

import re
from collections.abc import Iterable

from agent_memory.memory.models import TagCount

TAG_RE = re.compile(r"#([a-zA-Z][a-zA-Z0-9_-]*)")


def extract_tags(text: str) -> list[str]:
    """
    Extract hashtags from text.

    Args:
        text: Any text, a single line or a whole file.

    Returns:
        Unique lowercase tags without the ``#``, in order of first occurrence.
    """
    tags: list[str] = []
    for match in TAG_RE.finditer(text):
        tag = match.group(1).lower()
        if tag not in tags:
            tags.append(tag)
    return tags


def normalize_tag(tag: str) -> str:
    """Lowercase a tag filter value and drop a leading ``#``."""
    tag = tag.strip().lower()
    return tag[1:] if tag.startswith("#") else tag


def count_tags(texts: Iterable[str], limit: int | None = None) -> list[TagCount]:
    """
    Count tag occurrences, one extraction per text.

    Results are sorted by count, descending; ties keep first-appearance order.
    """
    counts: dict[str, int] = {}
    for text in texts:
        for tag in extract_tags(text):
            counts[tag] = counts.get(tag, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [TagCount(tag=tag, count=count) for tag, count in ranked]
