"""Date expressions accepted by the memory store and canonical date helpers."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

CANONICAL_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
_DAYS_AGO_RE = re.compile(r"^-(\d+)$", re.ASCII)
_PARTIAL_RE = re.compile(r"^(\d{1,2})(?:-(\d{1,2}))?$", re.ASCII)


def date_string(moment: datetime | date) -> str:
    """Format a local datetime or date as ``YYYY-MM-DD``, zero-padding years below 1000."""
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def time_string(moment: datetime) -> str:
    """Format the local wall-clock time as ``HH:MM``."""
    return moment.strftime("%H:%M")


def normalize_date(value: object, now: datetime) -> str | None:
    """
    Resolve a human date expression to a canonical date string.

    Accepted forms, in priority order: ``today``, ``yesterday``, ``-N`` (N days
    ago), ``D`` or ``M-D`` (current year, and current month when only the day is
    given) and ``YYYY-MM-DD``.

    Args:
        value: The expression. ``None`` is passed through.
        now: The reference moment for relative expressions.

    Returns:
        The canonical date, or ``None`` if the expression is not recognized.
    """
    if value is None:
        return None
    text = str(value)

    if text == "today":
        return date_string(now)

    if text == "yesterday":
        return date_string(now - timedelta(days=1))

    match = _DAYS_AGO_RE.fullmatch(text)
    if match:
        try:
            return date_string(now - timedelta(days=int(match.group(1))))
        except (OverflowError, ValueError):
            # Offsets past year 1 are not a date.
            return None

    match = _PARTIAL_RE.fullmatch(text)
    if match:
        first, second = match.groups()
        if second is not None:
            month, day = first, second
        else:
            month, day = str(now.month), first
        return f"{now.year:04d}-{month.zfill(2)}-{day.zfill(2)}"

    if CANONICAL_DATE_RE.fullmatch(text):
        return text

    return None


def is_date_in_range(value: str | None, start: str | None = None, end: str | None = None) -> bool:
    """Check a canonical date against optional inclusive bounds."""
    if not value:
        return False
    if start and value < start:
        return False
    if end and value > end:
        return False
    return True


def parse_canonical(value: str) -> date | None:
    """Parse a canonical date string, or return None if it is not a real calendar day."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def days_between(later: str, earlier: str) -> int | None:
    """Whole calendar days from ``earlier`` to ``later``, or None if either is not a real date."""
    later_day = parse_canonical(later)
    earlier_day = parse_canonical(earlier)
    if later_day is None or earlier_day is None:
        return None
    return (later_day - earlier_day).days
