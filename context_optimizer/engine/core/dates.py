"""Stale date detection.

Scans a document line by line for date references and reports the ones that
are old enough to suggest the surrounding content is outdated:
- Full dates ("January 15, 2025", "Jan 15 2025")
- ISO dates ("2025-01-15")
- US numeric dates ("01/15/2025", "01-15-2025")
- Bare years from the last few years ("in 2023"), unless they look like part
  of a version string
"""

import logging
import re
from collections.abc import Iterator
from datetime import datetime

from ...models import StaleDate

logger = logging.getLogger(__name__)

# Dates older than this many days are reported as stale
STALE_AFTER_DAYS = 30

# Bare years this many years back (and no further) are reported
OLD_YEAR_SPAN = 4

# Characters of context kept on each side of a match
CONTEXT_CHARS = 30

MONTHS: dict[str, int] = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}  # fmt: skip

FULL_DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    # "January 15, 2025" or "January 15 2025"
    re.compile(
        r"\b(January|February|March|April|May|June|July|August|September|October|November|December)"
        r"\s+(\d{1,2}),?\s+(\d{4})\b",
        re.IGNORECASE,
    ),
    # "Jan 15, 2025"
    re.compile(
        r"\b(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+(\d{1,2}),?\s+(\d{4})\b",
        re.IGNORECASE,
    ),
    # "2025-01-15"
    re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b"),
    # "01/15/2025" or "01-15-2025"
    re.compile(r"\b(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})\b"),
)

YEAR_PATTERN = re.compile(r"\b(\d{4})\b")

# Text near a bare year that marks it as a version number rather than a date
VERSION_MARKERS = ("v", ".", "version")


def _parse_match(match: re.Match[str]) -> datetime | None:
    """Turn a full-date match into a datetime, or None for impossible dates."""
    first, second, third = match.group(1), match.group(2), match.group(3)
    try:
        if len(first) == 4 and first.isdigit():
            return datetime(int(first), int(second), int(third))
        month = MONTHS.get(first.lower())
        if month is not None:
            return datetime(int(third), month, int(second))
        return datetime(int(third), int(first), int(second))
    except ValueError:
        return None


def _iter_full_dates(line: str) -> Iterator[tuple[re.Match[str], datetime]]:
    for pattern in FULL_DATE_PATTERNS:
        for match in pattern.finditer(line):
            parsed = _parse_match(match)
            if parsed is not None:
                yield match, parsed


def _snippet(line: str, start: int, end: int) -> str:
    context = line[max(0, start) : min(len(line), end)].strip()
    return f"...{context}..." if len(context) < len(line) else context


def extract_dates(text: str) -> list[tuple[str, datetime]]:
    """Find every parseable full date in a text.

    Args:
        text: Text to scan (may span multiple lines)

    Returns:
        (date_string, parsed_date) pairs in line order
    """
    found: list[tuple[str, datetime]] = []
    for line in text.split("\n"):
        for match, parsed in _iter_full_dates(line):
            found.append((match.group(0), parsed))
    return found


def _normalize_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now()
    if now.tzinfo is not None:
        return now.replace(tzinfo=None)
    return now


def detect_stale_dates(content: str, now: datetime | None = None) -> list[StaleDate]:
    """Detect outdated date references in content.

    Args:
        content: Document text
        now: Reference time (defaults to the current local time)

    Returns:
        Stale dates, deduplicated by (line number, date string)
    """
    if not content:
        return []

    now = _normalize_now(now)
    oldest_year = now.year - OLD_YEAR_SPAN
    stale_dates: list[StaleDate] = []

    for line_number, line in enumerate(content.split("\n"), start=1):
        for match, parsed in _iter_full_dates(line):
            days_old = (now - parsed).days
            if days_old <= STALE_AFTER_DAYS:
                continue
            stale_dates.append(
                StaleDate(
                    date_string=match.group(0),
                    line_number=line_number,
                    context=_snippet(
                        line, match.start() - CONTEXT_CHARS, match.end() + CONTEXT_CHARS
                    ),
                    days_old=days_old,
                )
            )

        for match in YEAR_PATTERN.finditer(line):
            year = int(match.group(1))
            if not oldest_year <= year < now.year:
                continue
            window = line[max(0, match.start() - 5) : match.start() + 10]
            if any(marker in window for marker in VERSION_MARKERS):
                continue
            stale_dates.append(
                StaleDate(
                    date_string=match.group(1),
                    line_number=line_number,
                    context=_snippet(line, match.start() - CONTEXT_CHARS, match.start() + 10),
                    days_old=(now - datetime(year, 12, 31)).days,
                )
            )

    seen: set[tuple[int, str]] = set()
    unique: list[StaleDate] = []
    for stale in stale_dates:
        key = (stale.line_number, stale.date_string)
        if key in seen:
            continue
        seen.add(key)
        unique.append(stale)

    logger.debug(f"Detected {len(unique)} stale date references")
    return unique
