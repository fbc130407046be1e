"""Tests for the declarative rule engine"""

import re

import pytest

from context_optimizer.engine.rules import (
    DEFAULT_RULES,
    PatternCache,
    apply_rules,
    create_rule,
    get_enabled_rules,
    get_rule_by_id,
    get_rules_by_type,
    matches_pattern,
    merge_rules,
    rule_from_record,
    validate_rule,
)
from context_optimizer.exceptions import InvalidRuleError
from context_optimizer.models import (
    IssueSeverity,
    IssueType,
    OptimizationRule,
    RuleAction,
    RuleActionType,
    SectionType,
)


def _archive_rule(rule_id, priority, **criteria):
    return OptimizationRule(
        id=rule_id,
        name=rule_id,
        rule_type=RuleActionType.ARCHIVE,
        action=RuleAction(type=RuleActionType.ARCHIVE),
        priority=priority,
        **criteria,
    )


class TestPatternCache:
    """Tests for the caller-owned compiled pattern cache."""

    def test_compiles_once(self, cache):
        first = cache.compile(r"^##\s+Notes")
        second = cache.compile(r"^##\s+Notes")

        assert first is second
        assert len(cache) == 1
        assert r"^##\s+Notes" in cache

    def test_caches_are_isolated(self):
        one, two = PatternCache(), PatternCache()
        one.compile("abc")

        assert "abc" in one
        assert "abc" not in two

    def test_invalid_pattern_raises(self, cache):
        with pytest.raises(re.error):
            cache.compile("([")
        assert len(cache) == 0

    def test_clear(self, cache):
        cache.search("a", "abc")
        cache.clear()
        assert len(cache) == 0


class TestMatchesPattern:
    """Tests for matching one rule against one section."""

    def test_line_threshold_is_inclusive(self, make_classified, cache):
        rule = get_rule_by_id("archive-completed-work")
        at_threshold = make_classified(
            "Completed Work", SectionType.COMPLETED_WORK, line_count=50
        )
        below = make_classified("Completed Work", SectionType.COMPLETED_WORK, line_count=49)

        assert matches_pattern(at_threshold, rule, cache)
        assert not matches_pattern(below, rule, cache)

    def test_section_pattern_checks_header_line(self, make_classified, cache):
        rule = get_rule_by_id("condense-testing")
        testing = make_classified("Testing", SectionType.TESTING, line_count=150)
        renamed = make_classified("Quality", SectionType.TESTING, line_count=150)

        assert matches_pattern(testing, rule, cache)
        assert not matches_pattern(renamed, rule, cache)

    def test_section_types_filter(self, make_classified, cache):
        rule = get_rule_by_id("archive-completed-work")
        section = make_classified("Completed Work", SectionType.NOTES, line_count=80)
        assert not matches_pattern(section, rule, cache)

    def test_staleness_threshold(self, make_classified, cache):
        rule = get_rule_by_id("archive-old-notes")
        fresh = make_classified("Notes", SectionType.NOTES, line_count=40, staleness=0.5)
        stale = make_classified("Notes", SectionType.NOTES, line_count=40, staleness=0.7)

        assert not matches_pattern(fresh, rule, cache)
        assert matches_pattern(stale, rule, cache)

    def test_invalid_pattern_never_matches(self, make_classified, cache):
        rule = _archive_rule("broken", 1, section_pattern="([")
        assert not matches_pattern(make_classified("Anything"), rule, cache)


class TestApplyRules:
    """Tests for evaluating a rule set over a document."""

    def test_default_rules_on_completed_work(self, make_classified, cache):
        section = make_classified("Completed Work", SectionType.COMPLETED_WORK, line_count=60)
        issues = apply_rules([section], cache=cache)

        assert len(issues) == 1
        issue = issues[0]
        assert issue.type == IssueType.COMPLETED_WORK_VERBOSE
        assert issue.severity == IssueSeverity.HIGH
        assert issue.confidence == 0.85
        assert issue.details["rule_id"] == "archive-completed-work"
        assert issue.estimated_savings == int(section.section.estimated_tokens * 0.95 + 0.5)
        assert issue.line_range.start == 1
        assert issue.line_range.end == 60

    def test_disabled_rules_are_skipped(self, make_classified, cache):
        commands = make_classified("Commands", SectionType.COMMANDS, line_count=40)
        issues = apply_rules([commands], cache=cache)
        assert all(i.details["rule_id"] != "dedupe-readme-commands" for i in issues)

    def test_one_match_per_section_and_rule_type(self, make_classified, cache):
        low = _archive_rule("low", 10, line_threshold=1)
        high = _archive_rule("high", 20, line_threshold=1)
        section = make_classified("Scratch", line_count=5)

        issues = apply_rules([section], [low, high], cache)

        assert len(issues) == 1
        assert issues[0].details["rule_id"] == "high"

    def test_condense_savings_use_keep_lines(self, make_classified, cache):
        rule = OptimizationRule(
            id="condense-all",
            name="Condense all",
            rule_type=RuleActionType.CONDENSE,
            line_threshold=1,
            action=RuleAction(type=RuleActionType.CONDENSE, keep_lines=25),
        )
        section = make_classified("Big", line_count=100)
        issues = apply_rules([section], [rule], cache)

        tokens = section.section.estimated_tokens
        assert issues[0].estimated_savings == int(tokens * 75 / 100 + 0.5)
        assert issues[0].details["keep_lines"] == 25


class TestRuleLookup:
    """Tests for rule table helpers."""

    def test_default_table(self):
        assert len(DEFAULT_RULES) == 10
        assert len(get_enabled_rules()) == 9
        assert len(get_rules_by_type(RuleActionType.ARCHIVE)) == 3
        assert get_rule_by_id("nope") is None

    def test_create_rule_generates_id(self):
        rule = create_rule(
            name="Custom",
            rule_type=RuleActionType.FLAG,
            line_threshold=10,
            action=RuleAction(type=RuleActionType.FLAG),
        )
        assert rule.id.startswith("custom-")

    def test_merge_rules_replaces_by_id_and_sorts(self):
        replacement = get_rule_by_id("condense-testing").model_copy(update={"priority": 500})
        extra = _archive_rule("extra", 1, line_threshold=5)

        merged = merge_rules([replacement, extra])

        assert len(merged) == len(DEFAULT_RULES) + 1
        assert merged[0].id == "condense-testing"
        assert merged[-1].id == "extra"
        priorities = [r.priority for r in merged]
        assert priorities == sorted(priorities, reverse=True)


class TestValidateRule:
    """Tests for rule validation."""

    def test_default_rules_are_valid(self, cache):
        for rule in DEFAULT_RULES:
            assert validate_rule(rule, cache).valid, rule.id

    def test_empty_record_lists_every_problem(self):
        result = validate_rule({})

        assert not result.valid
        assert "Rule must have a name" in result.errors
        assert "Rule must have a rule_type" in result.errors
        assert "Rule must have an action" in result.errors
        assert any("matching criterion" in e for e in result.errors)

    def test_action_without_type(self):
        result = validate_rule(
            {"name": "x", "rule_type": "flag", "line_threshold": 1, "action": {"message": "hi"}}
        )
        assert result.errors == ["Action must have a type"]

    def test_invalid_regex(self, cache):
        result = validate_rule(
            {
                "name": "bad",
                "ruleType": "flag",
                "action": {"type": "flag"},
                "sectionPattern": "([",
            },
            cache,
        )
        assert not result.valid
        assert result.errors[0].startswith("Invalid section_pattern regex")


class TestRuleFromRecord:
    """Tests for loading stored rule records."""

    def test_camel_case_record_with_json_action(self, cache):
        record = {
            "id": "scratch",
            "name": "Archive scratch",
            "ruleType": "archive",
            "sectionPattern": r"(?i)^##\s*Scratch",
            "sectionTypes": ["notes"],
            "lineThreshold": 10,
            "action": '{"type": "archive", "summaryTemplate": "Moved to {filename}"}',
            "priority": 5,
            "projectId": "ignored",
            "ageThreshold": None,
        }

        rule = rule_from_record(record, cache)

        assert rule.rule_type == RuleActionType.ARCHIVE
        assert rule.section_types == (SectionType.NOTES,)
        assert rule.action.summary_template == "Moved to {filename}"
        assert rule.age_threshold is None
        assert r"(?i)^##\s*Scratch" in cache

    def test_invalid_regex_raises(self, cache):
        record = {
            "name": "bad",
            "rule_type": "flag",
            "action": {"type": "flag"},
            "content_pattern": "(unclosed",
        }
        with pytest.raises(InvalidRuleError) as exc_info:
            rule_from_record(record, cache)

        assert isinstance(exc_info.value, ValueError)
        assert "Invalid rule bad" in str(exc_info.value)
        assert exc_info.value.errors[0].startswith("Invalid content_pattern regex")

    def test_action_that_is_not_json(self):
        record = {"name": "x", "rule_type": "flag", "line_threshold": 1, "action": "{oops"}
        with pytest.raises(InvalidRuleError, match="not valid JSON"):
            rule_from_record(record)

    def test_unknown_enum_value(self):
        record = {"name": "x", "rule_type": "explode", "line_threshold": 1, "action": {"type": "flag"}}
        with pytest.raises(InvalidRuleError, match="rule_type"):
            rule_from_record(record)
