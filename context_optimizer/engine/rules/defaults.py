"""Built-in optimization rules.

Section patterns are matched against the section header line
(``"## Completed Work"``), content patterns against the section body.
"""

from ...models import (
    CondenseFormat,
    IssueSeverity,
    IssueType,
    OptimizationRule,
    RuleAction,
    RuleActionType,
    SectionType,
)

DEFAULT_RULES: tuple[OptimizationRule, ...] = (
    OptimizationRule(
        id="archive-completed-work",
        name="Archive Completed Work",
        description="Archive sections containing completed or historical work",
        rule_type=RuleActionType.ARCHIVE,
        section_pattern=r"(?i)^#{1,3}\s*(Completed|Done|Finished|Historical|Past|Previous)\s",
        section_types=(SectionType.COMPLETED_WORK, SectionType.WORK_SESSIONS),
        line_threshold=50,
        action=RuleAction(
            type=RuleActionType.ARCHIVE,
            summary_template=(
                "See `.claude/archives/{filename}` for {line_count} lines of historical work."
            ),
        ),
        priority=100,
        issue_type=IssueType.COMPLETED_WORK_VERBOSE,
        severity=IssueSeverity.HIGH,
    ),
    OptimizationRule(
        id="condense-work-sessions",
        name="Condense Work Sessions",
        description="Condense verbose session logs to bullet summaries",
        rule_type=RuleActionType.CONDENSE,
        section_pattern=(
            r"(?i)^#{1,3}\s*(Work\s+Sessions?|Session\s+Log|Session\s+History|Updates?|Changelog)"
        ),
        section_types=(SectionType.WORK_SESSIONS,),
        line_threshold=100,
        action=RuleAction(
            type=RuleActionType.CONDENSE,
            keep_lines=10,
            format=CondenseFormat.BULLET_SUMMARY,
        ),
        priority=90,
        issue_type=IssueType.OVERSIZED_SECTION,
        severity=IssueSeverity.MEDIUM,
    ),
    OptimizationRule(
        id="flag-stale-dates",
        name="Flag Stale Dates",
        description="Flag content with outdated date references",
        rule_type=RuleActionType.FLAG,
        content_pattern=(
            r"(?i)\b(January|February|March|April|May|June|July|August|September|October"
            r"|November|December)\s+\d{1,2},?\s+202[0-4]\b"
        ),
        age_threshold=60,
        action=RuleAction(
            type=RuleActionType.FLAG,
            message="Contains potentially outdated date references",
        ),
        priority=50,
        issue_type=IssueType.STALE_DATES,
        severity=IssueSeverity.LOW,
    ),
    OptimizationRule(
        id="dedupe-readme-installation",
        name="Dedupe with README (Installation)",
        description="Replace installation instructions with README reference",
        rule_type=RuleActionType.DEDUPE,
        section_pattern=r"(?i)^#{1,3}\s*(Installation|Setup|Getting\s+Started|Quick\s+Start)",
        content_pattern=r"(npm|pnpm|yarn)\s+(install|i)\b",
        line_threshold=20,
        action=RuleAction(
            type=RuleActionType.DEDUPE,
            reference_file="README.md",
            replacement_template="See `README.md` for installation instructions.",
        ),
        priority=70,
        issue_type=IssueType.DUPLICATE_CONTENT,
        severity=IssueSeverity.MEDIUM,
    ),
    OptimizationRule(
        id="dedupe-readme-commands",
        name="Dedupe with README (Commands)",
        description="Replace command reference with README link if duplicated",
        rule_type=RuleActionType.DEDUPE,
        section_pattern=r"(?i)^#{1,3}\s*(Commands?|Scripts?|NPM\s+Scripts|Available\s+Commands)",
        section_types=(SectionType.COMMANDS,),
        line_threshold=30,
        action=RuleAction(
            type=RuleActionType.DEDUPE,
            reference_file="README.md",
            replacement_template="See `README.md` for available commands.",
        ),
        # Off by default: commands usually belong in CLAUDE.md
        enabled=False,
        priority=60,
        issue_type=IssueType.DUPLICATE_CONTENT,
        severity=IssueSeverity.LOW,
    ),
    OptimizationRule(
        id="archive-old-notes",
        name="Archive Old Notes",
        description="Archive notes sections that are stale",
        rule_type=RuleActionType.ARCHIVE,
        section_pattern=r"(?i)^#{1,3}\s*(Notes?|Ideas?|Thoughts?|Considerations?)",
        section_types=(SectionType.NOTES,),
        staleness_threshold=0.7,
        line_threshold=30,
        action=RuleAction(
            type=RuleActionType.ARCHIVE,
            summary_template="Historical notes archived to `.claude/archives/{filename}`",
        ),
        priority=40,
        issue_type=IssueType.LOW_ACTIONABILITY,
        severity=IssueSeverity.LOW,
    ),
    OptimizationRule(
        id="condense-testing",
        name="Condense Testing Sections",
        description="Condense verbose testing documentation",
        rule_type=RuleActionType.CONDENSE,
        section_pattern=r"(?i)^#{1,3}\s*(Test(s|ing)?|Test\s+Plan|Test\s+Coverage|QA)",
        section_types=(SectionType.TESTING,),
        line_threshold=150,
        action=RuleAction(
            type=RuleActionType.CONDENSE,
            keep_lines=40,
            format=CondenseFormat.KEY_POINTS,
        ),
        priority=55,
        issue_type=IssueType.OVERSIZED_SECTION,
        severity=IssueSeverity.MEDIUM,
    ),
    OptimizationRule(
        id="archive-implementation-details",
        name="Archive Implementation Details",
        description="Archive detailed implementation notes that are no longer current",
        rule_type=RuleActionType.ARCHIVE,
        section_pattern=r"(?i)^#{1,3}\s*(Implementation|Technical\s+Details?|Design\s+Notes?)",
        staleness_threshold=0.6,
        line_threshold=100,
        action=RuleAction(
            type=RuleActionType.ARCHIVE,
            summary_template=(
                "Implementation details archived. See `.claude/archives/{filename}` if needed."
            ),
        ),
        priority=45,
        issue_type=IssueType.LOW_ACTIONABILITY,
        severity=IssueSeverity.MEDIUM,
    ),
    OptimizationRule(
        id="condense-examples",
        name="Condense Excessive Examples",
        description="Reduce number of code examples",
        rule_type=RuleActionType.CONDENSE,
        content_pattern=r"(?s)```.*?```",
        token_threshold=3000,
        action=RuleAction(
            type=RuleActionType.CONDENSE,
            keep_lines=50,
            format=CondenseFormat.FIRST_N_LINES,
        ),
        priority=35,
        issue_type=IssueType.EXCESSIVE_EXAMPLES,
        severity=IssueSeverity.LOW,
    ),
    OptimizationRule(
        id="flag-large-sections",
        name="Flag Large Sections",
        description="Flag any section over 200 lines for review",
        rule_type=RuleActionType.FLAG,
        line_threshold=200,
        action=RuleAction(
            type=RuleActionType.FLAG,
            message="Section is over 200 lines - consider splitting or condensing",
        ),
        priority=30,
        issue_type=IssueType.OVERSIZED_SECTION,
        severity=IssueSeverity.HIGH,
    ),
)
