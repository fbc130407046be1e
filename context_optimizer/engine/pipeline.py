"""End-to-end context optimization.

This module chains the engine stages for callers that want one call:
- analyze_context: parse, classify, detect and score a document
- optimize: plan, apply and archive in one step
- Quick helpers for dashboards and checks
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path, PurePath
from typing import Any

from ..models import (
    ActionType,
    AnalysisResult,
    ArchiveContent,
    ContextAnalysis,
    ContextSummary,
    CustomStrategyConfig,
    DetectedIssue,
    IssueSeverity,
    OptimizationOutput,
    OptimizationRule,
    QuickStats,
    Strategy,
)
from .archiver import create_archive
from .core import analyze_content, analyze_file, count_tokens, round_half_up
from .detector import detect_issues, get_total_estimated_savings, sort_issues
from .optimizer import apply_plan, generate_plan, get_recommended_strategy
from .rules import DEFAULT_RULES, PatternCache, apply_rules
from .scoring import classify_sections

logger = logging.getLogger(__name__)

DEFAULT_SCORE_THRESHOLD = 70


def merge_issues(*sources: Iterable[DetectedIssue]) -> list[DetectedIssue]:
    """Combine issue lists, keeping one issue per (section, issue type).

    When two sources report the same issue for a section, the one with the
    larger estimated savings wins.

    Returns:
        Merged issues sorted by severity then savings
    """
    merged: dict[tuple[int, str], DetectedIssue] = {}
    for source in sources:
        for issue in source:
            key = (issue.line_range.start, issue.type)
            current = merged.get(key)
            if current is None or issue.estimated_savings > current.estimated_savings:
                merged[key] = issue
    return sort_issues(list(merged.values()))


def calculate_optimization_score(total_tokens: int, estimated_savings: int) -> tuple[int, int]:
    """Return (score, savings_percent). 100 means nothing left to save."""
    savings_percent = round_half_up(estimated_savings / total_tokens * 100) if total_tokens else 0
    return max(0, 100 - savings_percent), savings_percent


def _build_context_analysis(
    analysis: AnalysisResult,
    rules: Iterable[OptimizationRule] | None,
    use_detector: bool,
    cache: PatternCache | None,
) -> ContextAnalysis:
    classified = classify_sections(analysis.sections, analysis.stale_dates)

    heuristic_issues = detect_issues(classified, analysis.stale_dates) if use_detector else []
    rule_issues = apply_rules(classified, rules, cache) if rules is not None else []
    issues = merge_issues(heuristic_issues, rule_issues)

    estimated_savings = get_total_estimated_savings(issues)
    score, savings_percent = calculate_optimization_score(analysis.total_tokens, estimated_savings)

    logger.info(
        f"Analyzed {analysis.file_path}: {len(classified)} sections, {len(issues)} issues, "
        f"score {score}"
    )

    return ContextAnalysis(
        analysis=analysis,
        classified=classified,
        issues=issues,
        recommended_strategy=get_recommended_strategy(analysis, issues),
        optimization_score=score,
        summary=ContextSummary(
            total_lines=analysis.total_lines,
            total_tokens=analysis.total_tokens,
            sections_count=len(classified),
            issues_count=len(issues),
            estimated_savings=estimated_savings,
            savings_percent=savings_percent,
        ),
    )


def analyze_context(
    content: str,
    file_path: str = "CLAUDE.md",
    rules: Iterable[OptimizationRule] | None = DEFAULT_RULES,
    now: datetime | None = None,
    use_detector: bool = True,
    cache: PatternCache | None = None,
) -> ContextAnalysis:
    """Analyze a CLAUDE.md document end to end.

    The detector and the rule engine are independent issue sources. Pass
    ``rules=None`` to skip the rule engine or ``use_detector=False`` to skip
    the detector; when both run their issues are merged.

    Args:
        content: Document text
        file_path: Logical path of the document
        rules: Rules for the rule engine
        now: Reference time for stale date detection
        use_detector: Run the threshold heuristics
        cache: Compiled pattern cache for rule evaluation

    Returns:
        Analysis, classification, issues, score and recommended strategy
    """
    analysis = analyze_content(content, file_path=file_path, now=now)
    return _build_context_analysis(analysis, rules, use_detector, cache)


def analyze_context_file(
    file_path: str | Path,
    rules: Iterable[OptimizationRule] | None = DEFAULT_RULES,
    now: datetime | None = None,
    use_detector: bool = True,
    cache: PatternCache | None = None,
) -> ContextAnalysis:
    """Same as analyze_context, reading the document from disk.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    analysis = analyze_file(file_path, now=now)
    return _build_context_analysis(analysis, rules, use_detector, cache)


def optimize(
    context_analysis: ContextAnalysis,
    strategy: Strategy | None = None,
    project_path: str = ".",
    now: datetime | None = None,
    custom_config: CustomStrategyConfig | Mapping[str, Any] | None = None,
) -> OptimizationOutput:
    """Plan and apply an optimization, and build the archive files it needs.

    Args:
        context_analysis: Result of analyze_context
        strategy: Strategy to use (the recommended one when omitted)
        project_path: Project root for archive paths
        now: Plan timestamp; also the archive timestamp
        custom_config: Overrides for the custom strategy

    Returns:
        The plan, the applied result, and one archive per applied archive action
    """
    selected = strategy or context_analysis.recommended_strategy
    plan = generate_plan(
        context_analysis.analysis,
        context_analysis.classified,
        context_analysis.issues,
        selected,
        custom_config=custom_config,
        now=now,
    )
    result = apply_plan(plan, context_analysis.analysis.raw_content)

    by_start = {c.section.start_line: c for c in context_analysis.classified}
    source_file = PurePath(context_analysis.analysis.file_path).name or "CLAUDE.md"
    archives: list[ArchiveContent] = []

    for action in result.applied_actions:
        if action.type != ActionType.ARCHIVE:
            continue
        section = by_start.get(action.line_range.start)
        if section is None:
            continue
        archives.append(
            create_archive(
                section,
                project_path,
                reason=action.reason,
                archived_at=plan.generated_at,
                source_file=source_file,
            )
        )

    return OptimizationOutput(result=result, archives=archives, plan=plan)


def calculate_context_optimization_score(content: str) -> int:
    """Score a document from 0 (everything could go) to 100 (fully optimized)."""
    if not content or not content.strip():
        return 100
    return analyze_context(content).optimization_score


def get_quick_stats(content: str) -> QuickStats:
    context = analyze_context(content)
    return QuickStats(
        lines=len(content.split("\n")),
        tokens=count_tokens(content),
        sections=len(context.classified),
        score=context.optimization_score,
    )


def needs_optimization(content: str, threshold: int = DEFAULT_SCORE_THRESHOLD) -> bool:
    return analyze_context(content).optimization_score < threshold


def get_recommendations(content: str) -> list[str]:
    """Plain-text recommendations: every high issue, the top three medium ones."""
    context = analyze_context(content)

    if not context.issues:
        return ["Content is well optimized. No issues detected."]

    high = [i for i in context.issues if i.severity == IssueSeverity.HIGH]
    medium = [i for i in context.issues if i.severity == IssueSeverity.MEDIUM]

    recommendations = [f"[HIGH] {i.description} → {i.suggested_action}" for i in high]
    recommendations.extend(f"[MEDIUM] {i.description} → {i.suggested_action}" for i in medium[:3])

    if context.summary.estimated_savings > 0:
        recommendations.append(
            f"Total potential savings: ~{context.summary.estimated_savings} tokens "
            f"({context.summary.savings_percent}%)"
        )

    return recommendations
