"""Tests for applying optimization plans"""

import pytest

from context_optimizer.engine import analyze_context
from context_optimizer.engine.core import parse_sections
from context_optimizer.engine.optimizer import apply_plan, generate_plan, splice_lines
from context_optimizer.models import (
    ActionType,
    LineRange,
    OptimizationAction,
    OptimizationPlan,
    Strategy,
)


def _document(total_lines=30):
    lines = [f"line {n}" for n in range(1, total_lines + 1)]
    lines[4] = "## Alpha"
    lines[19] = "## Beta"
    return "\n".join(lines)


def _archive(name, start, end, lines_saved=None):
    return OptimizationAction(
        type=ActionType.ARCHIVE,
        section_name=name,
        line_range=LineRange(start=start, end=end),
        archive_path=f".claude/archives/CLAUDE-{name.lower()}-2025-06.md",
        lines_saved=(end - start + 1) - 4 if lines_saved is None else lines_saved,
    )


def _plan(now, *actions):
    return OptimizationPlan(strategy=Strategy.CUSTOM, actions=list(actions), generated_at=now)


class TestSpliceLines:
    """Tests for the immutable splice step."""

    def test_replaces_inclusive_range(self):
        lines = ("a", "b", "c", "d")
        assert splice_lines(lines, 2, 3, ["x"]) == ("a", "x", "d")
        assert lines == ("a", "b", "c", "d")

    def test_empty_replacement_removes(self):
        assert splice_lines(("a", "b", "c"), 1, 2, []) == ("c",)


class TestApplyPlan:
    """Tests for apply_plan."""

    def test_applies_bottom_up(self, now):
        first = _archive("Alpha", 5, 10)
        second = _archive("Beta", 20, 25)

        result = apply_plan(_plan(now, first, second), _document())

        assert result.success
        assert [a.line_range.start for a in result.applied_actions] == [20, 5]
        assert result.summary.new_lines == 30 - first.lines_saved - second.lines_saved

        new_lines = result.new_content.split("\n")
        assert new_lines[4] == "## Alpha"
        assert new_lines[6].startswith("> **Archived:** See `.claude/archives/CLAUDE-alpha")
        # Beta moved up by Alpha's savings
        assert new_lines[19 - first.lines_saved] == "## Beta"
        assert new_lines[-1] == "line 30"

    def test_overlapping_action_fails(self, now):
        result = apply_plan(
            _plan(now, _archive("Alpha", 5, 10), _archive("Inner", 8, 12)), _document()
        )

        assert not result.success
        assert [a.section_name for a in result.applied_actions] == ["Inner"]
        assert "overlaps" in result.failed_actions[0].error

    def test_out_of_range_action_fails(self, now):
        result = apply_plan(_plan(now, _archive("Tail", 25, 40)), _document())

        assert not result.success
        assert result.failed_actions[0].error.startswith("Invalid line range: 25-40")
        assert result.new_content == _document()

    def test_move_requires_manual_intervention(self, now):
        move = OptimizationAction(
            type=ActionType.MOVE, section_name="Alpha", line_range=LineRange(start=5, end=10)
        )
        result = apply_plan(_plan(now, move, _archive("Beta", 20, 25)), _document())

        assert not result.success
        assert result.failed_actions[0].error == "Move actions require manual intervention"
        assert len(result.applied_actions) == 1

    def test_archive_without_path_fails(self, now):
        action = _archive("Alpha", 5, 10).model_copy(update={"archive_path": None})
        result = apply_plan(_plan(now, action), _document())
        assert result.failed_actions[0].error == "Archive action has no archive path"

    def test_remove_and_dedupe(self, now):
        remove = OptimizationAction(
            type=ActionType.REMOVE, section_name="Alpha", line_range=LineRange(start=5, end=10)
        )
        dedupe = OptimizationAction(
            type=ActionType.DEDUPE,
            section_name="Beta",
            line_range=LineRange(start=20, end=25),
            reference_file="README.md",
        )
        result = apply_plan(_plan(now, remove, dedupe), _document())

        assert "## Alpha" not in result.new_content
        assert "> See `README.md` for beta information." in result.new_content
        assert result.summary.lines_saved == 6 + 2

    def test_empty_plan_is_identity(self, now):
        result = apply_plan(_plan(now), _document())
        assert result.new_content == _document()
        assert result.summary.lines_saved == 0
        assert result.summary.reduction_percent == 0

    @pytest.mark.parametrize("strategy", [Strategy.MODERATE, Strategy.AGGRESSIVE])
    def test_plan_savings_match_applied_lines(self, history_doc, examples_doc, now, strategy):
        content = history_doc + "\n" + examples_doc
        context = analyze_context(content, now=now)
        plan = generate_plan(
            context.analysis, context.classified, context.issues, strategy, now=now
        )

        result = apply_plan(plan, content)

        assert result.success
        assert plan.actions
        assert result.summary.lines_saved == sum(a.lines_saved for a in plan.actions)
        assert result.summary.new_lines == plan.summary.projected_lines

        # Edited sections keep their headers and the result parses cleanly
        names = [s.name for s in parse_sections(result.new_content)]
        assert {a.section_name for a in plan.actions} <= set(names)
        assert names[:2] == ["Project Overview", "Completed Work"]
