"""Optimization plan application.

Actions are applied from the bottom of the document up, each one producing a
new immutable tuple of lines. Because every splice happens below all ranges
still waiting to be applied, their line numbers stay valid throughout.
"""

import logging

from ...models import (
    FailedAction,
    OptimizationAction,
    OptimizationPlan,
    OptimizationResult,
    ResultSummary,
)
from ..core import count_tokens, round_half_up
from .edits import build_replacement

logger = logging.getLogger(__name__)


def splice_lines(
    lines: tuple[str, ...], start: int, end: int, replacement: list[str]
) -> tuple[str, ...]:
    """Replace the inclusive, 1-indexed range [start, end] with new lines."""
    return lines[: start - 1] + tuple(replacement) + lines[end:]


def _check_range(action: OptimizationAction, total_lines: int, applied_floor: int) -> str | None:
    start, end = action.line_range.start, action.line_range.end
    if start < 1 or end > total_lines or start > end:
        return f"Invalid line range: {start}-{end} (file has {total_lines} lines)"
    if end >= applied_floor:
        return f"Line range {start}-{end} overlaps an already applied action"
    return None


def apply_plan(plan: OptimizationPlan, content: str) -> OptimizationResult:
    """Apply a plan's actions to a document.

    Failed actions are recorded rather than raised; actions that succeeded
    stay applied.

    Args:
        plan: Plan generated for this content
        content: Document the plan was generated from

    Returns:
        New content, applied and failed actions, and before/after measurements
    """
    original_lines = tuple(content.split("\n"))
    lines = original_lines
    applied: list[OptimizationAction] = []
    failed: list[FailedAction] = []

    # Lowest start line applied so far; everything from here down is rewritten
    applied_floor = len(original_lines) + 1

    for action in sorted(plan.actions, key=lambda a: a.line_range.start, reverse=True):
        error = _check_range(action, len(original_lines), applied_floor)
        if error is None:
            start, end = action.line_range.start, action.line_range.end
            try:
                replacement = build_replacement(
                    action,
                    header_line=lines[start - 1],
                    body="\n".join(lines[start:end]).strip(),
                    line_count=end - start + 1,
                )
            except ValueError as e:
                error = str(e)
            else:
                lines = splice_lines(lines, start, end, replacement)
                applied_floor = start
                applied.append(action)
                continue

        logger.warning(f"Could not apply {action.type.value} to {action.section_name!r}: {error}")
        failed.append(FailedAction(action=action, error=error))

    new_content = "\n".join(lines)
    original_tokens = count_tokens(content)
    new_tokens = count_tokens(new_content)
    tokens_saved = original_tokens - new_tokens

    logger.info(
        f"Applied {len(applied)} of {len(plan.actions)} actions "
        f"({len(original_lines)} -> {len(lines)} lines)"
    )

    return OptimizationResult(
        success=not failed,
        new_content=new_content,
        applied_actions=applied,
        failed_actions=failed,
        summary=ResultSummary(
            original_lines=len(original_lines),
            new_lines=len(lines),
            original_tokens=original_tokens,
            new_tokens=new_tokens,
            lines_saved=len(original_lines) - len(lines),
            tokens_saved=tokens_saved,
            reduction_percent=(
                round_half_up(tokens_saved / original_tokens * 100) if original_tokens else 0
            ),
        ),
    )
