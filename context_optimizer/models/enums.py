"""Enumeration types for the Context Optimizer."""

from enum import StrEnum


class SectionType(StrEnum):
    """Semantic category of a CLAUDE.md section."""

    PROJECT_OVERVIEW = "project_overview"  # Keep: essential context
    CURRENT_PHASE = "current_phase"  # Keep: active work
    TECHNOLOGY_STACK = "technology_stack"  # Keep: reference
    COMMANDS = "commands"  # Keep or dedupe with README
    CONVENTIONS = "conventions"  # Keep: coding standards
    COMPLETED_WORK = "completed_work"  # Archive: historical
    WORK_SESSIONS = "work_sessions"  # Archive: verbose history
    TESTING = "testing"  # Condense: keep summary
    DATA_MODEL = "data_model"  # Keep: reference
    NOTES = "notes"  # Review: may be stale
    UNKNOWN = "unknown"


# Types whose content is history rather than guidance
HISTORICAL_SECTION_TYPES = frozenset(
    {SectionType.COMPLETED_WORK, SectionType.WORK_SESSIONS}
)


class Actionability(StrEnum):
    """How useful a section is to an active coding session."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Recommendation(StrEnum):
    """What the classifier suggests doing with a section."""

    KEEP = "keep"
    ARCHIVE = "archive"
    CONDENSE = "condense"
    REVIEW = "review"
    DEDUPE = "dedupe"


class IssueType(StrEnum):
    """Types of optimization issues."""

    OVERSIZED_SECTION = "oversized_section"
    COMPLETED_WORK_VERBOSE = "completed_work_verbose"
    OUTDATED_REFERENCE = "outdated_reference"
    DUPLICATE_CONTENT = "duplicate_content"
    STALE_DATES = "stale_dates"
    LOW_ACTIONABILITY = "low_actionability"
    EXCESSIVE_EXAMPLES = "excessive_examples"


class IssueSeverity(StrEnum):
    """Severity of a detected issue."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Sort key for severity ordering (high first)
SEVERITY_ORDER: dict[IssueSeverity, int] = {
    IssueSeverity.HIGH: 0,
    IssueSeverity.MEDIUM: 1,
    IssueSeverity.LOW: 2,
}


class RuleActionType(StrEnum):
    """Action a declarative rule asks for."""

    ARCHIVE = "archive"
    CONDENSE = "condense"
    REMOVE = "remove"
    FLAG = "flag"
    DEDUPE = "dedupe"


class CondenseFormat(StrEnum):
    """Output style for condense rules."""

    BULLET_SUMMARY = "bullet_summary"
    FIRST_N_LINES = "first_n_lines"
    KEY_POINTS = "key_points"


class ActionType(StrEnum):
    """Concrete edit applied to a document."""

    ARCHIVE = "archive"
    CONDENSE = "condense"
    REMOVE = "remove"
    MOVE = "move"  # Never applied automatically
    DEDUPE = "dedupe"


class Strategy(StrEnum):
    """Optimization strategy levels."""

    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"
    CUSTOM = "custom"
