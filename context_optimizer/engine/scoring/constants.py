"""Classification constants for the section classifier.

This module contains the tables the classifier scores sections against:
- Category rules (header/content keywords, defaults, priority)
- Staleness bias per section type
- Phrases that mark content as outdated
"""

from dataclasses import dataclass

from ...models import Actionability, Recommendation, SectionType

# Weight of a keyword found in the section header vs. in its body
NAME_KEYWORD_WEIGHT = 3
CONTENT_KEYWORD_WEIGHT = 1

# Score at which classification confidence saturates at 1.0
CONFIDENCE_SCALE = 10.0


@dataclass(frozen=True)
class CategoryRule:
    """Keyword profile and defaults for one section type."""

    type: SectionType
    name_keywords: tuple[str, ...]
    content_keywords: tuple[str, ...]
    default_actionability: Actionability
    default_recommendation: Recommendation
    priority: int  # Higher = evaluated first; wins ties


# ---------------------------------------------------------------------------
# Category rules. Keywords are matched as case-insensitive substrings, so short
# keywords ("sh", "now") also match inside longer words.
# ---------------------------------------------------------------------------
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        type=SectionType.PROJECT_OVERVIEW,
        name_keywords=("overview", "project", "introduction", "about", "summary", "description"),
        content_keywords=("architecture", "purpose", "goal", "objective"),
        default_actionability=Actionability.HIGH,
        default_recommendation=Recommendation.KEEP,
        priority=90,
    ),
    CategoryRule(
        type=SectionType.CURRENT_PHASE,
        name_keywords=(
            "current",
            "phase",
            "active",
            "in progress",
            "now",
            "status",
            "wip",
            "working on",
        ),
        content_keywords=("currently", "working on", "in progress", "next steps", "todo"),
        default_actionability=Actionability.HIGH,
        default_recommendation=Recommendation.KEEP,
        priority=95,
    ),
    CategoryRule(
        type=SectionType.TECHNOLOGY_STACK,
        name_keywords=(
            "technology",
            "stack",
            "tech",
            "dependencies",
            "tools",
            "framework",
            "libraries",
        ),
        content_keywords=(
            "node",
            "react",
            "typescript",
            "python",
            "database",
            "prisma",
            "next.js",
        ),
        default_actionability=Actionability.HIGH,
        default_recommendation=Recommendation.KEEP,
        priority=80,
    ),
    CategoryRule(
        type=SectionType.COMMANDS,
        name_keywords=("command", "script", "run", "npm", "pnpm", "yarn", "usage", "cli"),
        content_keywords=("npm run", "pnpm", "yarn", "bash", "sh", "./"),
        default_actionability=Actionability.HIGH,
        default_recommendation=Recommendation.DEDUPE,
        priority=70,
    ),
    CategoryRule(
        type=SectionType.CONVENTIONS,
        name_keywords=(
            "convention",
            "style",
            "standard",
            "guideline",
            "rule",
            "pattern",
            "practice",
        ),
        content_keywords=("always", "never", "should", "must", "prefer", "avoid"),
        default_actionability=Actionability.HIGH,
        default_recommendation=Recommendation.KEEP,
        priority=85,
    ),
    CategoryRule(
        type=SectionType.COMPLETED_WORK,
        name_keywords=(
            "completed",
            "done",
            "finished",
            "historical",
            "archive",
            "past",
            "previous",
        ),
        content_keywords=("completed", "finished", "done", "implemented", "released"),
        default_actionability=Actionability.LOW,
        default_recommendation=Recommendation.ARCHIVE,
        priority=75,
    ),
    CategoryRule(
        type=SectionType.WORK_SESSIONS,
        name_keywords=("session", "log", "history", "changelog", "updates", "progress"),
        content_keywords=("session", "worked on", "updated", "fixed", "added", "removed"),
        default_actionability=Actionability.LOW,
        default_recommendation=Recommendation.ARCHIVE,
        priority=70,
    ),
    CategoryRule(
        type=SectionType.TESTING,
        name_keywords=("test", "testing", "spec", "coverage", "quality", "qa"),
        content_keywords=("jest", "vitest", "pytest", "test suite", "coverage", "assertion"),
        default_actionability=Actionability.MEDIUM,
        default_recommendation=Recommendation.CONDENSE,
        priority=65,
    ),
    CategoryRule(
        type=SectionType.DATA_MODEL,
        name_keywords=("data", "model", "schema", "database", "entity", "type", "interface"),
        content_keywords=(
            "table",
            "column",
            "field",
            "relation",
            "foreign key",
            "prisma",
            "schema",
        ),
        default_actionability=Actionability.HIGH,
        default_recommendation=Recommendation.KEEP,
        priority=75,
    ),
    CategoryRule(
        type=SectionType.NOTES,
        name_keywords=(
            "note",
            "todo",
            "reminder",
            "idea",
            "thought",
            "consideration",
            "question",
        ),
        content_keywords=("note:", "todo:", "fixme:", "reminder:", "idea:"),
        default_actionability=Actionability.MEDIUM,
        default_recommendation=Recommendation.REVIEW,
        priority=50,
    ),
)

# Evaluation order: priority descending, declared order among equals (stable sort)
RULES_BY_PRIORITY: tuple[CategoryRule, ...] = tuple(
    sorted(CATEGORY_RULES, key=lambda rule: rule.priority, reverse=True)
)

RULES_BY_TYPE: dict[SectionType, CategoryRule] = {rule.type: rule for rule in CATEGORY_RULES}

# Fallbacks for sections no rule matched
UNKNOWN_ACTIONABILITY = Actionability.MEDIUM
UNKNOWN_RECOMMENDATION = Recommendation.REVIEW

# ---------------------------------------------------------------------------
# Staleness
# ---------------------------------------------------------------------------

# Section types that are stale by nature; all other types have no bias
TYPE_STALENESS_BIAS: dict[SectionType, float] = {
    SectionType.COMPLETED_WORK: 0.4,
    SectionType.WORK_SESSIONS: 0.4,
    SectionType.NOTES: 0.2,
    SectionType.TESTING: 0.1,
}

# Days of average date age that contribute the maximum date staleness
DATE_STALENESS_HORIZON_DAYS = 730
MAX_DATE_STALENESS = 0.5

STALE_PHRASES: tuple[str, ...] = (
    "deprecated",
    "obsolete",
    "legacy",
    "old approach",
    "no longer",
    "removed",
    "was using",
    "used to",
)
STALE_PHRASE_WEIGHT = 0.1

# ---------------------------------------------------------------------------
# Actionability and recommendation thresholds
# ---------------------------------------------------------------------------

# More stale dates than this lowers actionability one level
ACTIONABILITY_STALE_DATE_LIMIT = 3

# Historical sections longer than this are never actionable
LARGE_HISTORICAL_SECTION_LINES = 100
LOW_VALUE_TYPES = frozenset(
    {SectionType.COMPLETED_WORK, SectionType.WORK_SESSIONS, SectionType.NOTES}
)

# Medium sections shorter than this are promoted to high
SMALL_SECTION_LINES = 20

ARCHIVE_STALENESS = 0.7
REVIEW_STALENESS = 0.5
CONDENSE_LINE_COUNT = 150
