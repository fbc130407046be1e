"""Threshold-based issue detection.

This module runs six independent heuristics over classified sections:
- Oversized sections
- Verbose completed work
- Stale date clusters
- Low actionability
- Excessive code examples
- Content that likely duplicates the README

Each heuristic emits DetectedIssue records with savings-derived severity.
"""

import logging
import re
from typing import Any

from ..models import (
    HISTORICAL_SECTION_TYPES,
    SEVERITY_ORDER,
    Actionability,
    ClassifiedSection,
    DetectedIssue,
    IssueSeverity,
    IssueStats,
    IssueType,
    LineRange,
    SectionType,
    StaleDate,
)
from .core import count_tokens, round_half_up

logger = logging.getLogger(__name__)

# ============ THRESHOLDS ============

OVERSIZED_LINES = 100
OVERSIZED_TOKENS = 2500
VERBOSE_COMPLETED_WORK_LINES = 50
VERBOSE_TARGET_LINES = 10
STALE_DATES_COUNT = 3
LOW_ACTIONABILITY_STALENESS = 0.6
LOW_ACTIONABILITY_LINES = 30
EXCESSIVE_EXAMPLES = 5
KEPT_EXAMPLES = 2
DUPLICATE_KEYWORD_MATCHES = 2

HIGH_SEVERITY_SAVINGS = 5000
MEDIUM_SEVERITY_SAVINGS = 1000

CODE_BLOCK_PATTERN = re.compile(r"```.*?```", re.DOTALL)

DUPLICATE_PRONE_TYPES = frozenset({SectionType.COMMANDS, SectionType.TECHNOLOGY_STACK})

# English install/setup phrasing only
DUPLICATE_KEYWORDS = (
    "installation",
    "setup",
    "getting started",
    "quick start",
    "npm install",
    "pnpm install",
    "yarn install",
    "requirements",
    "prerequisites",
)


# ============ SAVINGS AND SEVERITY ============


def calculate_severity(estimated_savings: int) -> IssueSeverity:
    """Map estimated token savings to a severity level."""
    if estimated_savings >= HIGH_SEVERITY_SAVINGS:
        return IssueSeverity.HIGH
    if estimated_savings >= MEDIUM_SEVERITY_SAVINGS:
        return IssueSeverity.MEDIUM
    return IssueSeverity.LOW


def estimate_token_savings(issue_type: IssueType, details: dict[str, Any]) -> int:
    """Estimate tokens saved by resolving an issue.

    Args:
        issue_type: Kind of issue
        details: Evidence recorded by the heuristic that found it

    Returns:
        Estimated token savings (never negative)
    """
    tokens = details.get("current_tokens") or 0

    if issue_type == IssueType.OVERSIZED_SECTION:
        # Assume ~30% of the section survives
        savings = tokens * 0.7
    elif issue_type == IssueType.COMPLETED_WORK_VERBOSE:
        lines = details.get("current_lines") or 0
        reduction = max(0.0, (lines - VERBOSE_TARGET_LINES) / lines) if lines else 0.0
        savings = tokens * reduction
    elif issue_type == IssueType.DUPLICATE_CONTENT:
        savings = tokens * 0.9
    elif issue_type == IssueType.STALE_DATES:
        savings = (details.get("affected_lines") or 0) * 10 or 50
    elif issue_type == IssueType.LOW_ACTIONABILITY:
        savings = tokens * 0.95
    elif issue_type == IssueType.EXCESSIVE_EXAMPLES:
        count = details.get("example_count") or 0
        per_example = details.get("avg_tokens_per_example") or 100
        savings = (count - KEPT_EXAMPLES) * per_example
    elif issue_type == IssueType.OUTDATED_REFERENCE:
        savings = 50
    else:
        savings = 0

    return max(0, round_half_up(savings))


def _make_issue(
    classified: ClassifiedSection,
    issue_type: IssueType,
    description: str,
    suggested_action: str,
    confidence: float,
    details: dict[str, Any],
) -> DetectedIssue:
    section = classified.section
    savings = estimate_token_savings(issue_type, details)
    return DetectedIssue(
        type=issue_type,
        severity=calculate_severity(savings),
        section_name=section.name,
        section_type=classified.type,
        description=description,
        suggested_action=suggested_action,
        estimated_savings=savings,
        confidence=max(0.0, min(confidence, 1.0)),
        line_range=LineRange(start=section.start_line, end=section.end_line),
        details=details,
    )


# ============ HEURISTICS ============


def detect_oversized_sections(classified: list[ClassifiedSection]) -> list[DetectedIssue]:
    issues = []
    for c in classified:
        s = c.section
        if s.line_count <= OVERSIZED_LINES and s.estimated_tokens <= OVERSIZED_TOKENS:
            continue
        if c.type in HISTORICAL_SECTION_TYPES:
            suggestion = "Archive to separate file and replace with summary"
        else:
            suggestion = "Condense content or split into focused sub-sections"
        issues.append(
            _make_issue(
                c,
                IssueType.OVERSIZED_SECTION,
                f'Section "{s.name}" is {s.line_count} lines (~{s.estimated_tokens} tokens), '
                "exceeding recommended limits",
                suggestion,
                0.95,
                {
                    "current_lines": s.line_count,
                    "current_tokens": s.estimated_tokens,
                    "threshold_lines": OVERSIZED_LINES,
                    "threshold_tokens": OVERSIZED_TOKENS,
                },
            )
        )
    return issues


def detect_completed_work_verbose(classified: list[ClassifiedSection]) -> list[DetectedIssue]:
    issues = []
    for c in classified:
        s = c.section
        if c.type not in HISTORICAL_SECTION_TYPES or s.line_count <= VERBOSE_COMPLETED_WORK_LINES:
            continue
        issues.append(
            _make_issue(
                c,
                IssueType.COMPLETED_WORK_VERBOSE,
                f'Completed work section "{s.name}" has {s.line_count} lines of historical content',
                "Archive detailed history and keep only summary of key accomplishments",
                0.9,
                {
                    "current_lines": s.line_count,
                    "current_tokens": s.estimated_tokens,
                    "threshold": VERBOSE_COMPLETED_WORK_LINES,
                },
            )
        )
    return issues


def detect_stale_date_issues(
    classified: list[ClassifiedSection], stale_dates: list[StaleDate]
) -> list[DetectedIssue]:
    issues = []
    for c in classified:
        s = c.section
        in_section = [sd for sd in stale_dates if s.contains_line(sd.line_number)]
        if len(in_section) < STALE_DATES_COUNT:
            continue
        avg_days_old = round_half_up(sum(sd.days_old for sd in in_section) / len(in_section))
        issues.append(
            _make_issue(
                c,
                IssueType.STALE_DATES,
                f'Section "{s.name}" contains {len(in_section)} outdated date references '
                f"(avg {avg_days_old} days old)",
                "Update or remove stale date references; archive historical content",
                0.85,
                {
                    "stale_date_count": len(in_section),
                    "avg_days_old": avg_days_old,
                    "examples": [sd.date_string for sd in in_section[:3]],
                    "affected_lines": len(in_section),
                },
            )
        )
    return issues


def detect_low_actionability(classified: list[ClassifiedSection]) -> list[DetectedIssue]:
    issues = []
    for c in classified:
        s = c.section
        if not (
            c.actionability == Actionability.LOW
            and c.staleness > LOW_ACTIONABILITY_STALENESS
            and s.line_count > LOW_ACTIONABILITY_LINES
        ):
            continue
        issues.append(
            _make_issue(
                c,
                IssueType.LOW_ACTIONABILITY,
                f'Section "{s.name}" has low actionability '
                f"({round_half_up(c.staleness * 100)}% stale) and {s.line_count} lines",
                "Archive or remove; content unlikely to benefit active sessions",
                c.confidence * 0.9,
                {
                    "actionability": c.actionability.value,
                    "staleness": c.staleness,
                    "current_lines": s.line_count,
                    "current_tokens": s.estimated_tokens,
                },
            )
        )
    return issues


def detect_excessive_examples(classified: list[ClassifiedSection]) -> list[DetectedIssue]:
    issues = []
    for c in classified:
        s = c.section
        blocks = CODE_BLOCK_PATTERN.findall(s.content)
        if len(blocks) <= EXCESSIVE_EXAMPLES:
            continue
        total_code_tokens = sum(count_tokens(block) for block in blocks)
        issues.append(
            _make_issue(
                c,
                IssueType.EXCESSIVE_EXAMPLES,
                f'Section "{s.name}" has {len(blocks)} code examples (~{total_code_tokens} tokens)',
                "Keep 1-2 representative examples; move others to separate documentation",
                0.8,
                {
                    "example_count": len(blocks),
                    "total_code_tokens": total_code_tokens,
                    "avg_tokens_per_example": round_half_up(total_code_tokens / len(blocks)),
                    "threshold": EXCESSIVE_EXAMPLES,
                },
            )
        )
    return issues


def detect_duplicate_content(classified: list[ClassifiedSection]) -> list[DetectedIssue]:
    issues = []
    for c in classified:
        if c.type not in DUPLICATE_PRONE_TYPES:
            continue
        s = c.section
        lower_content = s.content.lower()
        matched = [kw for kw in DUPLICATE_KEYWORDS if kw in lower_content]
        if len(matched) < DUPLICATE_KEYWORD_MATCHES:
            continue
        issues.append(
            _make_issue(
                c,
                IssueType.DUPLICATE_CONTENT,
                f'Section "{s.name}" may duplicate content from README.md',
                "Replace with reference to README.md to reduce duplication",
                0.7,
                {
                    "matched_keywords": matched,
                    "current_lines": s.line_count,
                    "current_tokens": s.estimated_tokens,
                },
            )
        )
    return issues


def sort_issues(issues: list[DetectedIssue]) -> list[DetectedIssue]:
    """Order issues by severity (high first), then estimated savings descending."""
    return sorted(issues, key=lambda i: (SEVERITY_ORDER[i.severity], -i.estimated_savings))


def detect_issues(
    classified: list[ClassifiedSection],
    stale_dates: list[StaleDate] | None = None,
) -> list[DetectedIssue]:
    """Run every heuristic over classified sections.

    Args:
        classified: Classified sections
        stale_dates: Stale dates from the same analysis

    Returns:
        All detected issues sorted by severity then savings
    """
    issues = [
        *detect_oversized_sections(classified),
        *detect_completed_work_verbose(classified),
        *detect_stale_date_issues(classified, stale_dates or []),
        *detect_low_actionability(classified),
        *detect_excessive_examples(classified),
        *detect_duplicate_content(classified),
    ]
    logger.debug(f"Detector found {len(issues)} issues in {len(classified)} sections")
    return sort_issues(issues)


# ============ QUERIES ============


def get_issues_by_type(issues: list[DetectedIssue], issue_type: IssueType) -> list[DetectedIssue]:
    return [i for i in issues if i.type == issue_type]


def get_issues_by_severity(
    issues: list[DetectedIssue], severity: IssueSeverity
) -> list[DetectedIssue]:
    return [i for i in issues if i.severity == severity]


def get_total_estimated_savings(issues: list[DetectedIssue]) -> int:
    return sum(i.estimated_savings for i in issues)


def get_issue_stats(issues: list[DetectedIssue]) -> IssueStats:
    """Summarize issues by severity and type."""
    by_severity = {severity: 0 for severity in IssueSeverity}
    by_type = {issue_type: 0 for issue_type in IssueType}
    for issue in issues:
        by_severity[issue.severity] += 1
        by_type[issue.type] += 1

    return IssueStats(
        total=len(issues),
        by_severity=by_severity,
        by_type=by_type,
        total_savings=get_total_estimated_savings(issues),
        avg_confidence=sum(i.confidence for i in issues) / len(issues) if issues else 0.0,
    )
