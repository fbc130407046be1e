"""Rule evaluation for classified sections.

Rules are plain data (see ``defaults.py``); this module holds the single
evaluator that matches them against classified sections and turns matches
into DetectedIssue records, plus helpers to look up, merge, validate and load
rules.
"""

import json
import logging
import re
import time
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from ...exceptions import InvalidRuleError
from ...models import (
    ClassifiedSection,
    DetectedIssue,
    IssueSeverity,
    IssueType,
    LineRange,
    OptimizationRule,
    RuleAction,
    RuleActionType,
    RuleValidation,
)
from ..core import round_half_up
from .cache import PatternCache
from .defaults import DEFAULT_RULES

logger = logging.getLogger(__name__)

# Share of section tokens saved per action type
ARCHIVE_SAVINGS = 0.95
DEDUPE_SAVINGS = 0.9
DEFAULT_KEEP_LINES = 10
RULE_CONFIDENCE = 0.85

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def matches_pattern(
    section: ClassifiedSection,
    rule: OptimizationRule,
    cache: PatternCache | None = None,
) -> bool:
    """Check whether a classified section satisfies every criterion of a rule.

    Criteria that the rule leaves unset always pass. Thresholds are inclusive.
    A pattern that fails to compile never matches.

    Args:
        section: Classified section to test
        rule: Rule to match against
        cache: Compiled pattern cache (a fresh one is used when omitted)

    Returns:
        Whether the section matches the rule
    """
    cache = cache if cache is not None else PatternCache()
    parsed = section.section

    if rule.section_types and section.type not in rule.section_types:
        return False

    try:
        if rule.section_pattern and not cache.search(rule.section_pattern, parsed.header_line):
            return False
        if rule.content_pattern and not cache.search(rule.content_pattern, parsed.content):
            return False
    except re.error as e:
        logger.warning(f"Rule {rule.id} has an invalid pattern: {e}")
        return False

    if rule.line_threshold is not None and parsed.line_count < rule.line_threshold:
        return False
    if rule.token_threshold is not None and parsed.estimated_tokens < rule.token_threshold:
        return False
    if rule.staleness_threshold is not None and section.staleness < rule.staleness_threshold:
        return False

    return True


def _estimate_savings(section: ClassifiedSection, action: RuleAction) -> int:
    tokens = section.section.estimated_tokens
    lines = section.section.line_count

    if action.type == RuleActionType.ARCHIVE:
        return round_half_up(tokens * ARCHIVE_SAVINGS)
    if action.type == RuleActionType.CONDENSE:
        keep_lines = action.keep_lines or DEFAULT_KEEP_LINES
        reduction = max(0, lines - keep_lines) / lines if lines else 0.0
        return round_half_up(tokens * reduction)
    if action.type == RuleActionType.DEDUPE:
        return round_half_up(tokens * DEDUPE_SAVINGS)
    if action.type == RuleActionType.REMOVE:
        return tokens
    # Flags point things out without saving anything
    return 0


def get_action_description(action: RuleAction) -> str:
    """Human-readable description of a rule action."""
    if action.type == RuleActionType.ARCHIVE:
        if action.summary_template:
            return f"Archive content: {action.summary_template}"
        return "Archive to .claude/archives/ and replace with reference"
    if action.type == RuleActionType.CONDENSE:
        fmt = action.format or "summary"
        return f"Condense to {action.keep_lines or DEFAULT_KEEP_LINES} lines using {fmt} format"
    if action.type == RuleActionType.DEDUPE:
        if action.replacement_template:
            return f"Replace with reference: {action.replacement_template}"
        return f"Dedupe with {action.reference_file or 'README.md'}"
    if action.type == RuleActionType.REMOVE:
        return "Remove section entirely"
    if action.type == RuleActionType.FLAG:
        return action.message or "Flagged for review"
    return "Unknown action"


def _issue_details(rule: OptimizationRule) -> dict[str, Any]:
    details: dict[str, Any] = {
        "rule_id": rule.id,
        "rule_name": rule.name,
        "action_type": rule.action.type.value,
        "matched_thresholds": {
            "lines": rule.line_threshold,
            "tokens": rule.token_threshold,
            "staleness": rule.staleness_threshold,
        },
    }
    if rule.action.keep_lines is not None:
        details["keep_lines"] = rule.action.keep_lines
    if rule.action.reference_file is not None:
        details["reference_file"] = rule.action.reference_file
    return details


def apply_rules(
    sections: list[ClassifiedSection],
    rules: Iterable[OptimizationRule] = DEFAULT_RULES,
    cache: PatternCache | None = None,
) -> list[DetectedIssue]:
    """Evaluate rules against classified sections.

    Enabled rules run in descending priority. Each (section, rule type) pair
    matches at most once: the highest priority rule of a given type wins and
    lower priority rules of that type are skipped for the section.

    Args:
        sections: Classified sections
        rules: Rules to evaluate (defaults to DEFAULT_RULES)
        cache: Compiled pattern cache shared across the evaluation

    Returns:
        One issue per match, in rule evaluation order
    """
    cache = cache if cache is not None else PatternCache()
    enabled = sorted((r for r in rules if r.enabled), key=lambda r: r.priority, reverse=True)

    matched: set[tuple[int, RuleActionType]] = set()
    issues: list[DetectedIssue] = []

    for rule in enabled:
        for classified in sections:
            parsed = classified.section
            key = (parsed.start_line, rule.rule_type)
            if key in matched or not matches_pattern(classified, rule, cache):
                continue
            matched.add(key)

            issues.append(
                DetectedIssue(
                    type=rule.issue_type or IssueType.LOW_ACTIONABILITY,
                    severity=rule.severity or IssueSeverity.MEDIUM,
                    section_name=parsed.name,
                    section_type=classified.type,
                    description=rule.description or f'Rule "{rule.name}" matched',
                    suggested_action=get_action_description(rule.action),
                    estimated_savings=_estimate_savings(classified, rule.action),
                    confidence=RULE_CONFIDENCE,
                    line_range=LineRange(start=parsed.start_line, end=parsed.end_line),
                    details=_issue_details(rule),
                )
            )

    logger.debug(f"Rules produced {len(issues)} issues from {len(enabled)} enabled rules")
    return issues


def get_rule_by_id(
    rule_id: str, rules: Iterable[OptimizationRule] = DEFAULT_RULES
) -> OptimizationRule | None:
    return next((r for r in rules if r.id == rule_id), None)


def get_rules_by_type(
    rule_type: RuleActionType, rules: Iterable[OptimizationRule] = DEFAULT_RULES
) -> list[OptimizationRule]:
    return [r for r in rules if r.rule_type == rule_type]


def get_enabled_rules(rules: Iterable[OptimizationRule] = DEFAULT_RULES) -> list[OptimizationRule]:
    return [r for r in rules if r.enabled]


def create_rule(**config: Any) -> OptimizationRule:
    """Build a custom rule, generating an id when none is given.

    Raises:
        pydantic.ValidationError: If the config does not describe a rule
    """
    if not config.get("id"):
        config["id"] = f"custom-{int(time.time() * 1000)}"
    return OptimizationRule(**config)


def merge_rules(
    custom_rules: Iterable[OptimizationRule],
    defaults: Iterable[OptimizationRule] = DEFAULT_RULES,
) -> list[OptimizationRule]:
    """Overlay custom rules on defaults.

    A custom rule replaces the default with the same id; others are appended.

    Returns:
        Merged rules sorted by priority (highest first)
    """
    merged = list(defaults)
    index_by_id = {rule.id: i for i, rule in enumerate(merged)}

    for custom in custom_rules:
        if custom.id in index_by_id:
            merged[index_by_id[custom.id]] = custom
        else:
            index_by_id[custom.id] = len(merged)
            merged.append(custom)

    return sorted(merged, key=lambda r: r.priority, reverse=True)


def _to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _normalize_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Snake-case keys, decode a JSON action and drop null fields."""
    normalized = {_to_snake(k): v for k, v in record.items() if v is not None}

    action = normalized.get("action")
    if isinstance(action, str):
        try:
            action = json.loads(action)
        except json.JSONDecodeError as e:
            raise InvalidRuleError(f"Rule action is not valid JSON: {e}") from e
    if isinstance(action, Mapping):
        normalized["action"] = {_to_snake(k): v for k, v in action.items() if v is not None}

    return normalized


def validate_rule(
    rule: OptimizationRule | Mapping[str, Any],
    cache: PatternCache | None = None,
) -> RuleValidation:
    """Check a rule definition for problems.

    Accepts a rule model or a partial record (snake_case or camelCase keys).

    Returns:
        Validation result listing every problem found
    """
    cache = cache if cache is not None else PatternCache()
    errors: list[str] = []

    if isinstance(rule, OptimizationRule):
        data = rule.model_dump()
    else:
        try:
            data = _normalize_record(rule)
        except InvalidRuleError as e:
            return RuleValidation(valid=False, errors=e.errors)

    if not data.get("name"):
        errors.append("Rule must have a name")
    if not data.get("rule_type"):
        errors.append("Rule must have a rule_type")

    action = data.get("action")
    if not action:
        errors.append("Rule must have an action")
    elif not isinstance(action, Mapping) or not action.get("type"):
        errors.append("Action must have a type")

    has_criterion = any(
        data.get(field) for field in ("section_pattern", "content_pattern", "section_types")
    ) or any(
        data.get(field) is not None
        for field in ("line_threshold", "token_threshold", "staleness_threshold")
    )
    if not has_criterion:
        errors.append(
            "Rule must have at least one matching criterion (pattern, section_types, or threshold)"
        )

    for field in ("section_pattern", "content_pattern"):
        pattern = data.get(field)
        if not pattern:
            continue
        try:
            cache.compile(pattern)
        except re.error as e:
            errors.append(f"Invalid {field} regex: {e}")

    return RuleValidation(valid=not errors, errors=errors)


def rule_from_record(
    record: Mapping[str, Any],
    cache: PatternCache | None = None,
) -> OptimizationRule:
    """Build a rule from a stored plain-data record.

    Records may use camelCase keys and carry the action as a JSON string, the
    way the surrounding application persists them. Patterns are compiled into
    the cache up front so evaluation never meets an invalid regex.

    Args:
        record: Stored rule data
        cache: Cache that receives the compiled patterns

    Returns:
        Immutable rule

    Raises:
        InvalidRuleError: If the record is incomplete, malformed, or has a
            pattern that does not compile
    """
    validation = validate_rule(record, cache)
    if not validation.valid:
        raise InvalidRuleError(
            f"Invalid rule {record.get('name') or record.get('id') or '<unnamed>'}: "
            + "; ".join(validation.errors),
            errors=validation.errors,
        )

    data = _normalize_record(record)
    try:
        return create_rule(**data)
    except ValidationError as e:
        messages = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise InvalidRuleError(f"Invalid rule: {'; '.join(messages)}", errors=messages) from e
