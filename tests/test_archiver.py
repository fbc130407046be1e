"""Tests for archive payloads and references"""

from datetime import datetime

from context_optimizer.engine.archiver import (
    calculate_archive_stats,
    create_archive,
    create_archives,
    find_archive_references,
    format_archive_reference,
    generate_restore_instructions,
    generate_summary,
    get_archive_directory_info,
    get_archive_path,
    slugify_section_name,
)
from context_optimizer.engine.optimizer import archive_reference
from context_optimizer.models import SectionType


class TestArchivePaths:
    """Tests for deterministic archive paths."""

    def test_slugify(self):
        assert slugify_section_name("Completed Work (2024)!") == "completed-work-2024"
        assert slugify_section_name("  --Notes--  ") == "notes"
        assert len(slugify_section_name("word " * 40)) == 50

    def test_project_relative_path(self, now):
        assert (
            get_archive_path("", "Completed Work", now)
            == ".claude/archives/CLAUDE-completed-work-2025-06.md"
        )
        assert get_archive_path(".", "Completed Work", now) == get_archive_path(
            "", "Completed Work", now
        )

    def test_absolute_and_windows_roots(self, now):
        assert (
            get_archive_path("/work/app/", "Notes", now)
            == "/work/app/.claude/archives/CLAUDE-notes-2025-06.md"
        )
        assert (
            get_archive_path("C:\\work\\app", "Notes", now)
            == "C:/work/app/.claude/archives/CLAUDE-notes-2025-06.md"
        )

    def test_directory_info(self):
        info = get_archive_directory_info("")
        assert info.archive_dir == ".claude/archives"
        assert info.pattern == "CLAUDE-{section-name}-{YYYY-MM}.md"


class TestGenerateSummary:
    """Tests for archive summaries."""

    def test_short_sections_are_kept_verbatim(self, make_section):
        section = make_section("Notes", content="- one\n- two")
        assert generate_summary(section) == "- one\n- two"

    def test_long_sections_are_summarized(self, make_section):
        content = "\n".join(
            f"- **Feature {i}** shipped March {i}, 2024" for i in range(1, 21)
        )
        section = make_section("History", line_count=21, content=content)

        lines = generate_summary(section, max_lines=10).split("\n")

        assert lines[0] == "**Key items:**"
        assert lines[1:8] == [f"- **Feature {i}** shipped March {i}, 2024" for i in range(1, 8)]
        assert "*Date range: March 1, 2024 to March 20, 2024*" in lines
        assert lines[-1] == f"*Original: 21 lines, ~{section.estimated_tokens} tokens*"

    def test_prefix_and_disabled_parts(self, make_section):
        content = "\n".join(f"plain line {i} on March {i}, 2024" for i in range(1, 21))
        section = make_section("History", line_count=21, content=content)

        summary = generate_summary(
            section, max_lines=5, include_bullets=False, include_date_range=False, prefix="Old"
        )

        original = f"*Original: 21 lines, ~{section.estimated_tokens} tokens*"
        assert summary.split("\n") == ["Old", "", "", original]


class TestCreateArchive:
    """Tests for archive file generation."""

    def test_round_trip_of_metadata(self, make_classified, now):
        section = make_classified("Completed Work", SectionType.COMPLETED_WORK, line_count=40)

        archive = create_archive(section, "/work/app", reason="Too long", archived_at=now)

        assert archive.path == "/work/app/.claude/archives/CLAUDE-completed-work-2025-06.md"
        assert archive.metadata.section_name == "Completed Work"
        assert archive.metadata.archived_at == now
        assert archive.metadata.original_lines == 40
        assert "| Archived | 2025-06-15T00:00:00 |" in archive.content
        assert "| Type | completed_work |" in archive.content
        assert "| Reason | Too long |" in archive.content
        assert archive.content.endswith(f"## Original Content\n\n{section.section.content}\n")

    def test_parsed_sections_have_unknown_type(self, make_section, now):
        archive = create_archive(make_section("Misc"), "", archived_at=now)
        assert "| Type | unknown |" in archive.content
        assert archive.metadata.source_file == "CLAUDE.md"

    def test_bulk_archives_share_timestamp(self, make_section, now):
        archives = create_archives(
            [make_section("A"), make_section("B", start_line=20)], "", archived_at=now
        )
        assert [a.metadata.archived_at for a in archives] == [now, now]
        assert {a.metadata.reason for a in archives} == {"Bulk optimization"}

    def test_restore_instructions(self, make_section, now):
        archive = create_archive(make_section("Old Notes"), "", archived_at=now)
        instructions = generate_restore_instructions(archive)

        assert "`## Old Notes`" in instructions
        assert now.isoformat() in instructions


class TestArchiveReferences:
    """Tests for archive pointers inside CLAUDE.md."""

    def test_format_reference_shortens_absolute_paths(self):
        reference = format_archive_reference(
            "/work/app/.claude/archives/CLAUDE-x-2025-06.md", 40, "Old release notes"
        )
        lines = reference.split("\n")

        assert lines[0] == "> **Archived Content**"
        assert lines[2] == (
            "> 40 lines moved to [`.claude/archives/CLAUDE-x-2025-06.md`]"
            "(.claude/archives/CLAUDE-x-2025-06.md)"
        )
        assert lines[-1] == "> Old release notes"

    def test_find_references_once_per_line(self):
        content = "\n".join(
            [
                "## History",
                "",
                archive_reference(".claude/archives/CLAUDE-history-2025-06.md", 60),
                format_archive_reference(".claude/archives/CLAUDE-notes-2025-06.md", 10),
            ]
        )

        references = find_archive_references(content)

        assert [(r.line_number, r.archive_path) for r in references] == [
            (3, ".claude/archives/CLAUDE-history-2025-06.md"),
            (6, ".claude/archives/CLAUDE-notes-2025-06.md"),
        ]

    def test_stats(self, make_section, now):
        archives = [
            create_archive(make_section("A", line_count=10), "", reason="r1", archived_at=now),
            create_archive(make_section("B", line_count=30), "", reason="r1", archived_at=now),
            create_archive(make_section("C", line_count=20), "", reason="r2", archived_at=now),
        ]
        stats = calculate_archive_stats(archives)

        assert stats.total_archives == 3
        assert stats.total_lines == 60
        assert stats.avg_lines_per_archive == 20
        assert stats.by_reason == {"r1": 2, "r2": 1}

    def test_stats_empty(self):
        assert calculate_archive_stats([]).total_archives == 0


def test_archive_timestamp_sets_month():
    assert get_archive_path("", "X", datetime(2024, 1, 31)).endswith("CLAUDE-x-2024-01.md")
