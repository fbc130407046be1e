"""Archive payload generation.

Archiving moves a section's full content into a separate markdown file and
leaves a short reference in CLAUDE.md. This module builds the archive file
body, its deterministic path, and the references pointing at it. Nothing here
writes to disk: callers persist ArchiveContent.path / ArchiveContent.content.
"""

import logging
import posixpath
import re
from datetime import UTC, datetime

from ..models import (
    ArchiveContent,
    ArchiveDirectoryInfo,
    ArchiveMetadata,
    ArchiveReference,
    ArchiveStats,
    ClassifiedSection,
    ParsedSection,
    SectionType,
)
from .core import extract_dates, round_half_up

logger = logging.getLogger(__name__)

ARCHIVE_DIR = posixpath.join(".claude", "archives")
FILENAME_PATTERN = "CLAUDE-{section-name}-{YYYY-MM}.md"
MAX_SLUG_LENGTH = 50

_SLUG_SEPARATOR = re.compile(r"[^a-z0-9]+")
_CHECKED_BOX = re.compile(r"^[-*]\s+\[x\]", re.IGNORECASE)
_HEADER_PREFIX = re.compile(r"^#+\s*")

ARCHIVE_REFERENCE_PATTERNS = (
    re.compile(r"\[`([^`]*\.claude/archives/[^`]+)`\]"),
    re.compile(r"`(\.claude/archives/[^`]+)`"),
    re.compile(r"See\s+`([^`]+archives[^`]+)`", re.IGNORECASE),
)


def _unwrap(section: ParsedSection | ClassifiedSection) -> ParsedSection:
    return section.section if isinstance(section, ClassifiedSection) else section


def slugify_section_name(name: str) -> str:
    """Lowercase a section name and collapse everything else to single dashes."""
    slug = _SLUG_SEPARATOR.sub("-", name.lower())
    slug = slug.removeprefix("-").removesuffix("-")
    return slug[:MAX_SLUG_LENGTH]


def get_archive_path(
    project_path: str,
    section_name: str,
    date: datetime | None = None,
) -> str:
    """Build the archive file path for a section.

    Args:
        project_path: Project root ("" or "." for a project-relative path)
        section_name: Section header text
        date: Archive date, determines the YYYY-MM suffix (defaults to now)

    Returns:
        ``<project>/.claude/archives/CLAUDE-<slug>-<YYYY-MM>.md`` with posix
        separators
    """
    date = date or datetime.now(UTC)
    filename = f"CLAUDE-{slugify_section_name(section_name)}-{date.year}-{date.month:02d}.md"
    root = (project_path or ".").replace("\\", "/")
    return posixpath.normpath(posixpath.join(root, ARCHIVE_DIR, filename))


def _is_highlight(line: str) -> bool:
    return (
        line.startswith("##")
        or line.startswith("- **")
        or line.startswith("* **")
        or _CHECKED_BOX.match(line) is not None
        or "Complete" in line
        or "Implement" in line
    )


def generate_summary(
    section: ParsedSection | ClassifiedSection,
    max_lines: int = 10,
    include_bullets: bool = True,
    include_date_range: bool = True,
    prefix: str = "",
) -> str:
    """Summarize a section for its archive file.

    Short sections (at most ``max_lines`` non-blank lines) are returned as-is.
    Longer ones are reduced to highlight bullets, the range of dates they
    mention, and their original size.

    Args:
        section: Section to summarize
        max_lines: Maximum lines in the summary
        include_bullets: Include highlighted lines
        include_date_range: Include the earliest and latest dates mentioned
        prefix: Text placed before the summary

    Returns:
        Markdown summary
    """
    parsed = _unwrap(section)
    lines = [line for line in parsed.content.split("\n") if line.strip()]

    if len(lines) <= max_lines:
        return prefix + parsed.content

    summary: list[str] = []
    if prefix:
        summary.extend([prefix, ""])

    if include_bullets:
        highlights: list[str] = []
        for line in lines:
            if not _is_highlight(line):
                continue
            bullet = _HEADER_PREFIX.sub("", line).strip()
            if bullet not in highlights:
                highlights.append(bullet)

        if highlights:
            summary.append("**Key items:**")
            for bullet in highlights[: max(0, max_lines - 3)]:
                summary.append(bullet if bullet.startswith(("-", "*")) else f"- {bullet}")

    if include_date_range:
        dates = extract_dates(parsed.content)
        if dates:
            earliest = min(dates, key=lambda d: d[1])
            latest = max(dates, key=lambda d: d[1])
            if earliest[1] != latest[1]:
                summary.extend(["", f"*Date range: {earliest[0]} to {latest[0]}*"])
            else:
                summary.extend(["", f"*Date: {earliest[0]}*"])

    summary.extend(["", f"*Original: {parsed.line_count} lines, ~{parsed.estimated_tokens} tokens*"])
    return "\n".join(summary)


def create_archive(
    section: ParsedSection | ClassifiedSection,
    project_path: str,
    reason: str = "Optimization",
    archived_at: datetime | None = None,
    source_file: str = "CLAUDE.md",
) -> ArchiveContent:
    """Build the archive file for one section.

    Args:
        section: Section to archive
        project_path: Project root the archive path is built under
        reason: Why the section was archived
        archived_at: Archive timestamp (defaults to now)
        source_file: Document the section came from

    Returns:
        Archive path, file body and metadata
    """
    parsed = _unwrap(section)
    section_type = section.type if isinstance(section, ClassifiedSection) else SectionType.UNKNOWN
    archived_at = archived_at or datetime.now(UTC)

    summary = generate_summary(section, max_lines=15)
    content = "\n".join(
        [
            f"# Archive: {parsed.name}",
            "",
            "---",
            "",
            "## Metadata",
            "",
            "| Field | Value |",
            "|-------|-------|",
            f"| Source | {source_file} |",
            f"| Section | {parsed.name} |",
            f"| Type | {section_type.value} |",
            f"| Archived | {archived_at.isoformat()} |",
            f"| Original Lines | {parsed.line_count} |",
            f"| Original Tokens | ~{parsed.estimated_tokens} |",
            f"| Reason | {reason} |",
            "",
            "---",
            "",
            "## Summary",
            "",
            summary,
            "",
            "---",
            "",
            "## Original Content",
            "",
            parsed.content,
            "",
        ]
    )

    path = get_archive_path(project_path, parsed.name, archived_at)
    logger.debug(f"Created archive for section {parsed.name!r} at {path}")

    return ArchiveContent(
        path=path,
        content=content,
        metadata=ArchiveMetadata(
            section_name=parsed.name,
            source_file=source_file,
            archived_at=archived_at,
            original_lines=parsed.line_count,
            original_tokens=parsed.estimated_tokens,
            reason=reason,
            summary=summary,
        ),
    )


def create_archives(
    sections: list[ParsedSection | ClassifiedSection],
    project_path: str,
    reason: str = "Bulk optimization",
    archived_at: datetime | None = None,
) -> list[ArchiveContent]:
    archived_at = archived_at or datetime.now(UTC)
    return [create_archive(s, project_path, reason, archived_at=archived_at) for s in sections]


def format_archive_reference(archive_path: str, line_count: int, summary: str | None = None) -> str:
    """Build the blockquote that points at an archive from CLAUDE.md.

    Absolute paths are shortened to start at ``.claude/archives``.
    """
    marker = archive_path.find(ARCHIVE_DIR)
    relative_path = archive_path[marker:] if marker >= 0 else archive_path

    lines = [
        "> **Archived Content**",
        ">",
        f"> {line_count} lines moved to [`{relative_path}`]({relative_path})",
    ]
    if summary:
        lines.extend([">", f"> {summary}"])
    return "\n".join(lines)


def find_archive_references(content: str) -> list[ArchiveReference]:
    """Find archive pointers in a document.

    Returns:
        One reference per (line, archive path), in document order
    """
    references: list[ArchiveReference] = []
    seen: set[tuple[int, str]] = set()

    for line_number, line in enumerate(content.split("\n"), start=1):
        for pattern in ARCHIVE_REFERENCE_PATTERNS:
            for match in pattern.finditer(line):
                key = (line_number, match.group(1))
                if key in seen:
                    continue
                seen.add(key)
                references.append(
                    ArchiveReference(
                        archive_path=match.group(1),
                        line_number=line_number,
                        context=line.strip(),
                    )
                )

    return references


def get_archive_directory_info(project_path: str) -> ArchiveDirectoryInfo:
    return ArchiveDirectoryInfo(
        archive_dir=posixpath.normpath(posixpath.join(project_path or ".", ARCHIVE_DIR)),
        pattern=FILENAME_PATTERN,
        description="Archives are organized by section name and month",
    )


def calculate_archive_stats(archives: list[ArchiveContent]) -> ArchiveStats:
    """Aggregate archive sizes and reasons."""
    by_reason: dict[str, int] = {}
    total_lines = 0
    total_tokens = 0

    for archive in archives:
        total_lines += archive.metadata.original_lines
        total_tokens += archive.metadata.original_tokens
        by_reason[archive.metadata.reason] = by_reason.get(archive.metadata.reason, 0) + 1

    return ArchiveStats(
        total_archives=len(archives),
        total_lines=total_lines,
        total_tokens=total_tokens,
        avg_lines_per_archive=round_half_up(total_lines / len(archives)) if archives else 0,
        by_reason=by_reason,
    )


def generate_restore_instructions(archive: ArchiveContent) -> str:
    """Human-readable steps for putting an archived section back."""
    metadata = archive.metadata
    return "\n".join(
        [
            "# Restore Instructions",
            "",
            f"To restore this archived content to {metadata.source_file}:",
            "",
            f"1. Open `{metadata.source_file}`",
            f'2. Find the archive reference for "{metadata.section_name}"',
            '3. Replace the reference with the content from "Original Content" section below',
            "4. Optionally delete this archive file",
            "",
            f"**Original section header:** `## {metadata.section_name}`",
            "",
            f"**Archived on:** {metadata.archived_at.isoformat()}",
            "",
        ]
    )
