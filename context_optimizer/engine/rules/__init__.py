"""Declarative optimization rules.

Rules are immutable records evaluated by a single evaluator function against
classified sections. Compiled regexes live in a caller-owned PatternCache.
"""

from .cache import PatternCache
from .defaults import DEFAULT_RULES
from .evaluator import (
    apply_rules,
    create_rule,
    get_action_description,
    get_enabled_rules,
    get_rule_by_id,
    get_rules_by_type,
    matches_pattern,
    merge_rules,
    rule_from_record,
    validate_rule,
)

__all__ = [
    "DEFAULT_RULES",
    "PatternCache",
    # Evaluation
    "apply_rules",
    "matches_pattern",
    "get_action_description",
    # Rule management
    "create_rule",
    "get_enabled_rules",
    "get_rule_by_id",
    "get_rules_by_type",
    "merge_rules",
    "rule_from_record",
    "validate_rule",
]
