"""Optimization strategies.

A strategy bundles the thresholds and scope the planner works with. The
presets range from conservative (touch only large historical sections) to
aggressive (keep only essential context).
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from ...models import (
    AnalysisResult,
    CustomStrategyConfig,
    DetectedIssue,
    IssueSeverity,
    IssueType,
    SectionType,
    Strategy,
)


@dataclass(frozen=True)
class StrategyConfig:
    """Planner settings for one strategy."""

    archive_threshold: int  # Min lines to archive a section without issues
    condense_threshold: int  # Min lines to condense a section without issues
    include_issue_types: tuple[IssueType, ...]  # Empty = all issue types
    preserve_types: tuple[SectionType, ...]  # Section types never touched
    max_actions: int


STRATEGY_CONFIG: dict[Strategy, StrategyConfig] = {
    Strategy.CONSERVATIVE: StrategyConfig(
        archive_threshold=200,
        condense_threshold=300,
        include_issue_types=(IssueType.OVERSIZED_SECTION, IssueType.COMPLETED_WORK_VERBOSE),
        preserve_types=(
            SectionType.PROJECT_OVERVIEW,
            SectionType.CURRENT_PHASE,
            SectionType.TECHNOLOGY_STACK,
            SectionType.COMMANDS,
            SectionType.CONVENTIONS,
            SectionType.DATA_MODEL,
        ),
        max_actions=3,
    ),
    Strategy.MODERATE: StrategyConfig(
        archive_threshold=100,
        condense_threshold=150,
        include_issue_types=(
            IssueType.OVERSIZED_SECTION,
            IssueType.COMPLETED_WORK_VERBOSE,
            IssueType.STALE_DATES,
            IssueType.DUPLICATE_CONTENT,
        ),
        preserve_types=(
            SectionType.PROJECT_OVERVIEW,
            SectionType.CURRENT_PHASE,
            SectionType.TECHNOLOGY_STACK,
            SectionType.CONVENTIONS,
        ),
        max_actions=10,
    ),
    Strategy.AGGRESSIVE: StrategyConfig(
        archive_threshold=50,
        condense_threshold=75,
        include_issue_types=(
            IssueType.OVERSIZED_SECTION,
            IssueType.COMPLETED_WORK_VERBOSE,
            IssueType.STALE_DATES,
            IssueType.DUPLICATE_CONTENT,
            IssueType.LOW_ACTIONABILITY,
            IssueType.EXCESSIVE_EXAMPLES,
        ),
        preserve_types=(SectionType.PROJECT_OVERVIEW, SectionType.CURRENT_PHASE),
        max_actions=50,
    ),
    Strategy.CUSTOM: StrategyConfig(
        archive_threshold=100,
        condense_threshold=150,
        include_issue_types=(),
        preserve_types=(),
        max_actions=100,
    ),
}

STRATEGY_DESCRIPTIONS: dict[Strategy, str] = {
    Strategy.CONSERVATIVE: "Archive only large historical sections. Preserves most content.",
    Strategy.MODERATE: (
        "Archive historical content, condense verbose sections, dedupe with README."
    ),
    Strategy.AGGRESSIVE: "Minimize to essential context only. Maximum token savings.",
    Strategy.CUSTOM: "Apply custom rules and thresholds.",
}


def resolve_strategy_config(
    strategy: Strategy,
    custom_config: CustomStrategyConfig | Mapping[str, Any] | None = None,
) -> StrategyConfig:
    """Return the config for a strategy.

    Overrides only apply to the custom strategy, where they are laid over the
    custom preset field by field.
    """
    config = STRATEGY_CONFIG[strategy]
    if strategy != Strategy.CUSTOM or custom_config is None:
        return config

    if isinstance(custom_config, CustomStrategyConfig):
        overrides = custom_config.model_dump(exclude_none=True)
    else:
        overrides = {k: v for k, v in custom_config.items() if v is not None}

    for key in ("include_issue_types", "preserve_types"):
        if key in overrides:
            overrides[key] = tuple(overrides[key])

    return replace(config, **overrides)


def get_strategy_description(strategy: Strategy) -> str:
    return STRATEGY_DESCRIPTIONS[strategy]


def get_recommended_strategy(analysis: AnalysisResult, issues: list[DetectedIssue]) -> Strategy:
    """Suggest a strategy from document size and issue severity.

    Args:
        analysis: Document analysis
        issues: Detected issues

    Returns:
        aggressive, moderate or conservative (never custom)
    """
    total_tokens = analysis.total_tokens
    high_severity = sum(1 for i in issues if i.severity == IssueSeverity.HIGH)
    total_savings = sum(i.estimated_savings for i in issues)
    savings_percent = total_savings / total_tokens * 100 if total_tokens > 0 else 0.0

    if total_tokens > 20000 or high_severity >= 3 or savings_percent > 50:
        return Strategy.AGGRESSIVE
    if total_tokens > 10000 or high_severity >= 1 or savings_percent > 30:
        return Strategy.MODERATE
    return Strategy.CONSERVATIVE
