"""Tests for end-to-end analysis and optimization"""

import pytest

from context_optimizer import (
    analyze_context,
    analyze_context_file,
    calculate_context_optimization_score,
    get_quick_stats,
    get_recommendations,
    needs_optimization,
    optimize,
)
from context_optimizer.engine import merge_issues
from context_optimizer.engine.archiver import find_archive_references
from context_optimizer.engine.pipeline import calculate_optimization_score
from context_optimizer.models import (
    ActionType,
    DetectedIssue,
    IssueSeverity,
    IssueType,
    LineRange,
    SectionType,
    Strategy,
)

CLEAN_DOC = "# Project Overview\nA tiny library.\n## Conventions\nAlways type-hint public functions."


def _issue(start, issue_type, savings):
    return DetectedIssue(
        type=issue_type,
        severity=IssueSeverity.LOW,
        section_name="S",
        section_type=SectionType.UNKNOWN,
        description=f"{issue_type} {savings}",
        suggested_action="a",
        estimated_savings=savings,
        confidence=0.5,
        line_range=LineRange(start=start, end=start + 5),
    )


class TestMergeIssues:
    """Tests for combining detector and rule issues."""

    def test_keeps_larger_savings_per_section_and_type(self):
        merged = merge_issues(
            [_issue(1, IssueType.OVERSIZED_SECTION, 100)],
            [
                _issue(1, IssueType.OVERSIZED_SECTION, 300),
                _issue(1, IssueType.STALE_DATES, 10),
                _issue(20, IssueType.OVERSIZED_SECTION, 50),
            ],
        )

        assert [(i.line_range.start, i.type, i.estimated_savings) for i in merged] == [
            (1, IssueType.OVERSIZED_SECTION, 300),
            (20, IssueType.OVERSIZED_SECTION, 50),
            (1, IssueType.STALE_DATES, 10),
        ]

    @pytest.mark.parametrize(
        "tokens,savings,expected",
        [(1000, 250, (75, 25)), (0, 10, (100, 0)), (100, 150, (0, 150))],
    )
    def test_optimization_score(self, tokens, savings, expected):
        assert calculate_optimization_score(tokens, savings) == expected


class TestAnalyzeContext:
    """Tests for analyze_context."""

    def test_empty_document(self, now):
        context = analyze_context("", now=now)

        assert context.classified == []
        assert context.issues == []
        assert context.optimization_score == 100
        assert context.recommended_strategy == Strategy.CONSERVATIVE

    def test_history_document(self, history_doc, now):
        context = analyze_context(history_doc, now=now)

        assert context.summary.sections_count == 2
        assert context.summary.issues_count == len(context.issues)
        assert context.summary.estimated_savings == sum(
            i.estimated_savings for i in context.issues
        )
        assert 0 <= context.optimization_score < 100
        types = {i.type for i in context.issues}
        assert {IssueType.COMPLETED_WORK_VERBOSE, IssueType.STALE_DATES} <= types
        # One issue per (section, type) after merging both sources
        keys = [(i.line_range.start, i.type) for i in context.issues]
        assert len(keys) == len(set(keys))

    def test_two_full_dates_count_their_years_too(self, now):
        content = (
            "## Release Log\n"
            "- Shipped search on March 3, 2023 for users\n"
            "- Shipped export on April 9, 2023 for users\n"
        )
        context = analyze_context(content, now=now, rules=None)

        assert [d.date_string for d in context.analysis.stale_dates] == [
            "March 3, 2023",
            "2023",
            "April 9, 2023",
            "2023",
        ]
        stale = [i for i in context.issues if i.type == IssueType.STALE_DATES]
        assert len(stale) == 1
        assert stale[0].details["stale_date_count"] == 4

    def test_issue_sources_can_be_disabled(self, history_doc, now):
        rules_only = analyze_context(history_doc, now=now, use_detector=False)
        detector_only = analyze_context(history_doc, now=now, rules=None)

        assert {i.details.get("rule_id") for i in rules_only.issues} >= {
            "archive-completed-work"
        }
        assert all("rule_id" not in i.details for i in detector_only.issues)

    def test_analyze_file(self, tmp_path, history_doc, now):
        path = tmp_path / "CLAUDE.md"
        path.write_text(history_doc, encoding="utf-8")

        from_file = analyze_context_file(path, now=now)
        from_text = analyze_context(history_doc, file_path=str(path), now=now)

        assert from_file.issues == from_text.issues
        with pytest.raises(FileNotFoundError):
            analyze_context_file(tmp_path / "missing.md")

    def test_serializes_to_json(self, history_doc, now):
        data = analyze_context(history_doc, now=now).model_dump(mode="json")
        assert data["classified"][1]["type"] == "completed_work"
        assert data["analysis"]["sections"][1]["start_line"] == 3


class TestOptimize:
    """Tests for plan + apply + archive in one call."""

    def test_archives_match_in_document_references(self, history_doc, now):
        context = analyze_context(history_doc, now=now)
        output = optimize(context, Strategy.MODERATE, project_path="/work/app", now=now)

        assert output.result.success
        assert len(output.archives) == 1
        archive = output.archives[0]
        assert archive.path == "/work/app/.claude/archives/CLAUDE-completed-work-2025-06.md"
        assert archive.metadata.archived_at == output.plan.generated_at == now
        assert archive.metadata.source_file == "CLAUDE.md"

        references = find_archive_references(output.result.new_content)
        assert [r.archive_path for r in references] == [
            ".claude/archives/CLAUDE-completed-work-2025-06.md"
        ]
        assert archive.path.endswith(references[0].archive_path)
        # Archive keeps every line the document dropped
        for line in history_doc.split("\n")[3:]:
            assert line in archive.content

    def test_uses_recommended_strategy_by_default(self, history_doc, now):
        context = analyze_context(history_doc, now=now)
        output = optimize(context, now=now)
        assert output.plan.strategy == context.recommended_strategy

    def test_non_archive_actions_produce_no_archives(self, examples_doc, now):
        context = analyze_context(examples_doc, now=now)
        output = optimize(context, Strategy.AGGRESSIVE, now=now)

        assert [a.type for a in output.result.applied_actions] == [ActionType.CONDENSE]
        assert output.archives == []


class TestQuickHelpers:
    """Tests for the one-call helpers."""

    def test_clean_document(self):
        assert calculate_context_optimization_score(CLEAN_DOC) == 100
        assert not needs_optimization(CLEAN_DOC)
        assert get_recommendations(CLEAN_DOC) == [
            "Content is well optimized. No issues detected."
        ]

    def test_blank_document_scores_100(self):
        assert calculate_context_optimization_score("   ") == 100

    def test_quick_stats(self):
        stats = get_quick_stats(CLEAN_DOC)
        assert stats.lines == 4
        assert stats.sections == 2
        assert stats.score == 100

    def test_bloated_document_needs_optimization(self):
        bloated = "# Notes\n" + "\n".join(f"- note {i}: " + "x" * 200 for i in range(150))
        assert needs_optimization(bloated)
        assert get_recommendations(bloated)[0].startswith("[HIGH]")
