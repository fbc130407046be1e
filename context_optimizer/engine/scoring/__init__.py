"""Section classification engine.

This package assigns a type, actionability, staleness and recommendation to
each parsed section of a CLAUDE.md document.

Usage:
    from context_optimizer.engine.scoring import (
        classify_section,
        classify_sections,
        get_classification_stats,
    )
"""

from .classifier import (
    assess_actionability,
    assess_staleness,
    classify_section,
    classify_sections,
    get_classification_stats,
    get_recommendation,
    get_sections_by_actionability,
    get_sections_by_type,
    get_sections_needing_attention,
)
from .constants import (
    CATEGORY_RULES,
    RULES_BY_PRIORITY,
    STALE_PHRASES,
    TYPE_STALENESS_BIAS,
    CategoryRule,
)

__all__ = [
    # Constants
    "CATEGORY_RULES",
    "RULES_BY_PRIORITY",
    "STALE_PHRASES",
    "TYPE_STALENESS_BIAS",
    "CategoryRule",
    # Classifier
    "assess_actionability",
    "assess_staleness",
    "classify_section",
    "classify_sections",
    "get_classification_stats",
    "get_recommendation",
    "get_sections_by_actionability",
    "get_sections_by_type",
    "get_sections_needing_attention",
]
