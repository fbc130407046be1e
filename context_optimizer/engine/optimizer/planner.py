"""Optimization plan generation.

Turns detected issues and classified sections into a prioritized,
strategy-scoped list of section edits.
"""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from ...models import (
    SEVERITY_ORDER,
    ActionType,
    Actionability,
    AnalysisResult,
    ClassifiedSection,
    CustomStrategyConfig,
    DetectedIssue,
    IssueSeverity,
    IssueType,
    LineRange,
    OptimizationAction,
    OptimizationPlan,
    PlanPreview,
    PlanPreviewItem,
    PlanSummary,
    Strategy,
)
from ..archiver import get_archive_path
from ..core import count_tokens, round_half_up
from .edits import (
    DEFAULT_CONDENSE_LINES,
    DEFAULT_REFERENCE_FILE,
    EXAMPLES_CONDENSE_LINES,
    build_replacement,
    truncate_content,
)
from .strategy import StrategyConfig, resolve_strategy_config

logger = logging.getLogger(__name__)

ARCHIVE_ISSUE_TYPES = frozenset(
    {
        IssueType.OVERSIZED_SECTION,
        IssueType.COMPLETED_WORK_VERBOSE,
        IssueType.LOW_ACTIONABILITY,
    }
)

SEVERITY_PRIORITY: dict[IssueSeverity, int] = {
    IssueSeverity.HIGH: 1,
    IssueSeverity.MEDIUM: 2,
    IssueSeverity.LOW: 3,
}


def _build_action(
    classified: ClassifiedSection,
    action_type: ActionType,
    reason: str,
    priority: int,
    issue: DetectedIssue | None = None,
    **params: Any,
) -> OptimizationAction:
    """Create an action whose savings match what applying it will remove."""
    section = classified.section
    action = OptimizationAction(
        type=action_type,
        section_name=section.name,
        reason=reason,
        line_range=LineRange(start=section.start_line, end=section.end_line),
        issue_type=issue.type if issue else None,
        priority=priority,
        **params,
    )

    replacement = build_replacement(
        action, section.header_line, section.content, section.line_count
    )
    replaced_body = "\n".join(replacement[2:-1])

    if issue is not None:
        tokens_saved = issue.estimated_savings
    else:
        tokens_saved = max(0, section.estimated_tokens - count_tokens(replaced_body))

    return action.model_copy(
        update={
            "before": truncate_content(section.content),
            "after": truncate_content(replaced_body),
            "lines_saved": section.line_count - len(replacement),
            "tokens_saved": tokens_saved,
        }
    )


def _action_from_issue(
    classified: ClassifiedSection, issue: DetectedIssue, generated_at: datetime
) -> OptimizationAction | None:
    name = classified.section.name

    if issue.type in ARCHIVE_ISSUE_TYPES:
        return _build_action(
            classified,
            ActionType.ARCHIVE,
            issue.description,
            SEVERITY_PRIORITY[issue.severity],
            issue,
            archive_path=get_archive_path("", name, generated_at),
        )

    if issue.type == IssueType.DUPLICATE_CONTENT:
        return _build_action(
            classified,
            ActionType.DEDUPE,
            issue.description,
            2,
            issue,
            reference_file=issue.details.get("reference_file") or DEFAULT_REFERENCE_FILE,
        )

    if issue.type == IssueType.EXCESSIVE_EXAMPLES:
        return _build_action(
            classified,
            ActionType.CONDENSE,
            issue.description,
            3,
            issue,
            keep_lines=issue.details.get("keep_lines") or EXAMPLES_CONDENSE_LINES,
        )

    return None


def _action_from_thresholds(
    classified: ClassifiedSection, config: StrategyConfig, generated_at: datetime
) -> OptimizationAction | None:
    section = classified.section

    if (
        section.line_count >= config.archive_threshold
        and classified.actionability == Actionability.LOW
    ):
        return _build_action(
            classified,
            ActionType.ARCHIVE,
            f"Section has {section.line_count} lines with low actionability",
            2,
            archive_path=get_archive_path("", section.name, generated_at),
        )

    if section.line_count >= config.condense_threshold:
        return _build_action(
            classified,
            ActionType.CONDENSE,
            f"Section has {section.line_count} lines, condensing to summary",
            3,
            keep_lines=DEFAULT_CONDENSE_LINES,
        )

    return None


def _rank_issues(issues: list[DetectedIssue]) -> list[DetectedIssue]:
    return sorted(issues, key=lambda i: (SEVERITY_ORDER[i.severity], -i.estimated_savings))


def generate_plan(
    analysis: AnalysisResult,
    classified: list[ClassifiedSection],
    issues: list[DetectedIssue],
    strategy: Strategy,
    custom_config: CustomStrategyConfig | Mapping[str, Any] | None = None,
    now: datetime | None = None,
) -> OptimizationPlan:
    """Generate an optimization plan for a document.

    Sections of a preserved type are left alone. Otherwise the section's
    strongest in-scope issue that maps to an edit becomes its action; stale
    date issues become warnings. Sections without issues may still be
    archived or condensed when they exceed the strategy's size thresholds.
    Each section gets at most one action.

    Args:
        analysis: Document analysis
        classified: Classified sections of the same document
        issues: Detected issues (detector, rules, or both)
        strategy: Strategy to plan with
        custom_config: Overrides for the custom strategy
        now: Plan timestamp; also sets the archive month in archive paths

    Returns:
        Plan with actions sorted by priority and capped at max_actions
    """
    config = resolve_strategy_config(strategy, custom_config)
    generated_at = now or datetime.now(UTC)

    relevant = [
        i
        for i in issues
        if not config.include_issue_types or i.type in config.include_issue_types
    ]

    actions: list[OptimizationAction] = []
    warnings: list[str] = []
    preserved: list[str] = []

    for c in classified:
        section = c.section
        if c.type in config.preserve_types:
            preserved.append(section.name)
            continue

        section_issues = [i for i in relevant if i.line_range.start == section.start_line]

        if not section_issues:
            action = _action_from_thresholds(c, config, generated_at)
            if action is not None and action.lines_saved > 0:
                actions.append(action)
            else:
                preserved.append(section.name)
            continue

        chosen: OptimizationAction | None = None
        for issue in _rank_issues(section_issues):
            if issue.type == IssueType.STALE_DATES:
                warning = f'Section "{section.name}" has stale date references - review recommended'
                if warning not in warnings:
                    warnings.append(warning)
                continue
            if chosen is not None:
                continue
            action = _action_from_issue(c, issue, generated_at)
            if action is not None and action.lines_saved > 0:
                chosen = action

        if chosen is not None:
            actions.append(chosen)

    # Stable sort keeps document order within a priority
    actions = sorted(actions, key=lambda a: a.priority)[: config.max_actions]

    lines_saved = sum(a.lines_saved for a in actions)
    tokens_saved = sum(a.tokens_saved for a in actions)
    reduction = (
        round_half_up(tokens_saved / analysis.total_tokens * 100) if analysis.total_tokens else 0
    )

    logger.info(
        f"Generated {strategy.value} plan: {len(actions)} actions, "
        f"{lines_saved} lines / ~{tokens_saved} tokens saved"
    )

    return OptimizationPlan(
        strategy=strategy,
        actions=actions,
        summary=PlanSummary(
            current_lines=analysis.total_lines,
            projected_lines=max(0, analysis.total_lines - lines_saved),
            current_tokens=analysis.total_tokens,
            projected_tokens=max(0, analysis.total_tokens - tokens_saved),
            reduction_percent=reduction,
            actions_count=len(actions),
        ),
        generated_at=generated_at,
        preserved_sections=preserved,
        warnings=warnings,
    )


def preview_plan(plan: OptimizationPlan) -> PlanPreview:
    """Describe a plan for display before it is applied."""
    saved = plan.summary.current_tokens - plan.summary.projected_tokens
    return PlanPreview(
        actions=[
            PlanPreviewItem(
                type=a.type,
                section=a.section_name,
                reason=a.reason,
                savings=f"{a.lines_saved} lines / ~{a.tokens_saved} tokens",
            )
            for a in plan.actions
        ],
        summary=(
            f"{len(plan.actions)} actions | {plan.summary.reduction_percent}% reduction | "
            f"{saved} tokens saved"
        ),
    )
