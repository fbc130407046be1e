"""CLAUDE.md section parser and document analysis.

This module splits a markdown document into header-delimited sections and
combines the section list, token estimate and stale date scan into an
AnalysisResult.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from ...models import AnalysisResult, ParsedSection, SectionStats
from .dates import detect_stale_dates
from .tokens import count_tokens, round_half_up

logger = logging.getLogger(__name__)

HEADER_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")


@dataclass
class _OpenSection:
    """A section whose end line is not known yet."""

    name: str
    level: int
    start_line: int
    body: list[str] = field(default_factory=list)

    def close(self, end_line: int) -> ParsedSection:
        content = "\n".join(self.body).strip()
        return ParsedSection(
            name=self.name,
            level=self.level,
            start_line=self.start_line,
            end_line=end_line,
            line_count=end_line - self.start_line + 1,
            content=content,
            estimated_tokens=count_tokens(content),
        )


def parse_sections(content: str) -> list[ParsedSection]:
    """Parse markdown content into header-delimited sections.

    Each header (# through ######) opens a section that runs until the line
    before the next header, or to the end of the document. Text before the
    first header belongs to no section.

    Args:
        content: Raw markdown content

    Returns:
        Sections in document order
    """
    if not content or not content.strip():
        return []

    lines = content.split("\n")
    sections: list[ParsedSection] = []
    current: _OpenSection | None = None

    for line_number, line in enumerate(lines, start=1):
        match = HEADER_PATTERN.match(line)
        if match:
            if current is not None:
                sections.append(current.close(line_number - 1))
            current = _OpenSection(
                name=match.group(2).strip(),
                level=len(match.group(1)),
                start_line=line_number,
            )
        elif current is not None:
            current.body.append(line)

    if current is not None:
        sections.append(current.close(len(lines)))

    return sections


def analyze_content(
    content: str,
    file_path: str = "CLAUDE.md",
    now: datetime | None = None,
) -> AnalysisResult:
    """Analyze CLAUDE.md content without touching the filesystem.

    Never raises: header-less or empty input yields zero sections while line
    and token totals still cover the whole document.

    Args:
        content: Raw markdown content
        file_path: Logical path, used for reporting only
        now: Reference time for stale date detection

    Returns:
        Complete analysis result
    """
    sections = parse_sections(content)
    stale_dates = detect_stale_dates(content, now=now)
    total_lines = len(content.split("\n"))

    logger.debug(
        f"Analyzed {file_path}: {total_lines} lines, {len(sections)} sections, "
        f"{len(stale_dates)} stale dates"
    )

    return AnalysisResult(
        file_path=file_path,
        total_lines=total_lines,
        total_tokens=count_tokens(content),
        sections=sections,
        stale_dates=stale_dates,
        raw_content=content,
        analyzed_at=now or datetime.now(UTC),
    )


def analyze_file(file_path: str | Path, now: datetime | None = None) -> AnalysisResult:
    """Read and analyze a CLAUDE.md file.

    Args:
        file_path: Path to the file
        now: Reference time for stale date detection

    Returns:
        Complete analysis result

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    content = path.read_text(encoding="utf-8")
    return analyze_content(content, file_path=str(path), now=now)


def find_section(sections: list[ParsedSection], name: str) -> ParsedSection | None:
    """Find the first section whose name contains ``name`` (case-insensitive)."""
    lower_name = name.lower()
    return next((s for s in sections if lower_name in s.name.lower()), None)


def get_sections_by_level(sections: list[ParsedSection], level: int) -> list[ParsedSection]:
    return [s for s in sections if s.level == level]


def get_section_stats(sections: list[ParsedSection]) -> SectionStats:
    """Calculate section size statistics."""
    if not sections:
        return SectionStats()

    total_lines = sum(s.line_count for s in sections)
    total_tokens = sum(s.estimated_tokens for s in sections)
    by_size = sorted(sections, key=lambda s: s.line_count, reverse=True)

    return SectionStats(
        total_sections=len(sections),
        total_lines=total_lines,
        total_tokens=total_tokens,
        avg_lines_per_section=round_half_up(total_lines / len(sections)),
        avg_tokens_per_section=round_half_up(total_tokens / len(sections)),
        largest_section=by_size[0],
        smallest_section=by_size[-1],
    )
